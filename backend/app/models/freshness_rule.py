"""Per-category freshness policy. Reference data; looked up by lower-cased category."""
from sqlalchemy import CheckConstraint, Column, Integer, String

from app.db.base import Base


class FreshnessRule(Base):
    __tablename__ = "freshness_rules"
    __table_args__ = (
        CheckConstraint("unopened_days >= 1", name="ck_freshness_rules_unopened_days"),
        CheckConstraint("opened_days >= 1", name="ck_freshness_rules_opened_days"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    category = Column(String(40), nullable=False, unique=True, index=True)
    unopened_days = Column(Integer, nullable=False)
    opened_days = Column(Integer, nullable=False)
