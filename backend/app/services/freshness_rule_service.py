"""
Freshness rules: per-category reference data. Seeded with defaults; lookup is by lower-cased category.
"""
import logging

from sqlalchemy.orm import Session

from app.core.constants import DEFAULT_FRESHNESS_RULES
from app.models.freshness_rule import FreshnessRule

logger = logging.getLogger(__name__)


def normalize_category(category: str | None) -> str:
    return (category or "").strip().lower()


def get_rule(db: Session, category: str | None) -> FreshnessRule | None:
    """Rule for the category, or None (a valid state: the engine falls back to defaults)."""
    key = normalize_category(category)
    if not key:
        return None
    return db.query(FreshnessRule).filter(FreshnessRule.category == key).first()


def ensure_default_rules(db: Session) -> int:
    """Insert any missing default rules. Existing rows are left as-is. Returns number created."""
    existing = {r.category for r in db.query(FreshnessRule.category).all()}
    created = 0
    for rule in DEFAULT_FRESHNESS_RULES:
        if rule["category"] in existing:
            continue
        db.add(FreshnessRule(**rule))
        created += 1
    if created:
        db.commit()
        logger.info("Seeded %s default freshness rules", created)
    return created


def list_rules(db: Session) -> list[dict]:
    rows = db.query(FreshnessRule).order_by(FreshnessRule.category.asc()).all()
    return [
        {
            "category": r.category,
            "unopened_days": r.unopened_days,
            "opened_days": r.opened_days,
        }
        for r in rows
    ]
