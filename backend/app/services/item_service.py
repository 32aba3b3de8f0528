"""
Items: lifecycle (create, update, open, consume, delete, list) and the refresh driver.

Derived fields (expires_at, days_remaining, status, confidence) are written only here,
always through app.core.freshness.calculate_freshness. Active items are refreshed on
every list so days_remaining reflects read time, not last-write time.
"""
import logging
from datetime import date, datetime
from typing import Any

from sqlalchemy.orm import Session

from app.core.dates import as_utc, utc_now
from app.core.enums import AnalyticsEventType
from app.core.errors import EmptyUpdateError, ItemArchivedError, ItemNotFoundError
from app.core.freshness import FreshnessResult, FreshnessRuleInput, calculate_freshness
from app.models.alert import Alert
from app.models.analytics_event import AnalyticsEvent
from app.models.item import Item
from app.models.notification_log import NotificationLog
from app.services.freshness_rule_service import get_rule, normalize_category

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("name", "category", "quantity", "date_added", "opened", "custom_fresh_days")


def build_computed_fields(
    db: Session,
    category: str,
    date_added: datetime | date,
    opened: bool | None = None,
    opened_at: datetime | None = None,
    custom_fresh_days: int | None = None,
    previous_expires_at: datetime | None = None,
    now: datetime | None = None,
) -> FreshnessResult:
    """Look up the category rule and run the freshness engine."""
    row = get_rule(db, category)
    rule = FreshnessRuleInput(row.unopened_days, row.opened_days) if row is not None else None
    return calculate_freshness(
        category=category,
        date_added=date_added,
        opened=opened,
        opened_at=opened_at,
        custom_fresh_days=custom_fresh_days,
        rule=rule,
        previous_expires_at=previous_expires_at,
        now=now,
    )


def _apply_computed(item: Item, computed: FreshnessResult) -> None:
    item.expires_at = computed.expires_at
    item.days_remaining = computed.days_remaining
    item.status = computed.status.value
    item.confidence = computed.confidence


def refresh_and_persist_item(
    db: Session,
    item: Item,
    previous_expires_at: datetime | None = None,
    now: datetime | None = None,
    commit: bool = True,
) -> Item:
    """
    Recompute the four derived fields and write only those back.
    previous_expires_at defaults to the item's stored expiry (clamp bound for opened items).
    Idempotent for a fixed now. With commit=False the caller owns the transaction.
    """
    computed = build_computed_fields(
        db,
        category=item.category,
        date_added=item.date_added,
        opened=item.opened,
        opened_at=item.opened_at,
        custom_fresh_days=item.custom_fresh_days,
        previous_expires_at=previous_expires_at if previous_expires_at is not None else item.expires_at,
        now=now,
    )
    _apply_computed(item, computed)
    if commit:
        db.commit()
        db.refresh(item)
    else:
        db.flush()
    return item


def track_event(
    db: Session,
    household_id: int,
    type: AnalyticsEventType | str,
    item_id: int | None = None,
    user_id: int | None = None,
    meta: dict[str, Any] | None = None,
    created_at: datetime | None = None,
) -> AnalyticsEvent:
    """Add an analytics event to the session (flushed, not committed)."""
    event = AnalyticsEvent(
        household_id=household_id,
        item_id=item_id,
        user_id=user_id,
        type=AnalyticsEventType(type).value,
        meta=meta,
        created_at=as_utc(created_at) if created_at else utc_now(),
    )
    db.add(event)
    db.flush()
    return event


def get_item_or_raise(db: Session, household_id: int, item_id: int) -> Item:
    item = db.query(Item).filter(Item.id == item_id, Item.household_id == household_id).first()
    if not item:
        raise ItemNotFoundError()
    return item


def list_items(
    db: Session,
    household_id: int,
    archived: bool = False,
    now: datetime | None = None,
) -> list[Item]:
    """Items newest first. Active items are refreshed (and persisted) on read; archived ones are returned as stored."""
    q = db.query(Item).filter(Item.household_id == household_id)
    q = q.filter(Item.archived_at.isnot(None)) if archived else q.filter(Item.archived_at.is_(None))
    rows = q.order_by(Item.created_at.desc(), Item.id.desc()).all()
    if archived or not rows:
        return rows
    now = now or utc_now()
    for row in rows:
        refresh_and_persist_item(db, row, now=now, commit=False)
    db.commit()
    return rows


def create_item(
    db: Session,
    household_id: int,
    user_id: int | None,
    name: str,
    category: str,
    quantity: str,
    date_added: datetime | None = None,
    opened: bool | None = False,
    custom_fresh_days: int | None = None,
    now: datetime | None = None,
) -> Item:
    """Create an item with derived fields computed, and record ITEM_ADDED."""
    now = as_utc(now) if now else utc_now()
    # stored as UTC: SQLite keeps the wall-clock value and drops the offset
    date_added = as_utc(date_added or now)
    opened_at = now if opened is True else None
    category = normalize_category(category)
    computed = build_computed_fields(
        db,
        category=category,
        date_added=date_added,
        opened=opened,
        opened_at=opened_at,
        custom_fresh_days=custom_fresh_days,
        now=now,
    )
    item = Item(
        household_id=household_id,
        created_by_user_id=user_id,
        name=name.strip(),
        category=category,
        quantity=quantity.strip(),
        date_added=date_added,
        opened=opened,
        opened_at=opened_at,
        custom_fresh_days=custom_fresh_days,
    )
    _apply_computed(item, computed)
    db.add(item)
    db.flush()
    track_event(db, household_id, AnalyticsEventType.ITEM_ADDED, item_id=item.id, user_id=user_id, created_at=now)
    db.commit()
    db.refresh(item)
    logger.info("Item %s added to household %s (%s, status=%s)", item.id, household_id, category, item.status)
    return item


def update_item(
    db: Session,
    household_id: int,
    item_id: int,
    changes: dict[str, Any],
    now: datetime | None = None,
) -> Item:
    """
    Partial update. changes may hold any of UPDATABLE_FIELDS; opened may be None (unknown).
    Opening now stamps opened_at = now; staying opened keeps opened_at; not opened clears it.
    Derived fields are recomputed with the pre-update expiry as the clamp bound.
    """
    changes = {k: v for k, v in changes.items() if k in UPDATABLE_FIELDS}
    if not changes:
        raise EmptyUpdateError()
    existing = get_item_or_raise(db, household_id, item_id)
    now = as_utc(now) if now else utc_now()

    incoming_opened = changes["opened"] if "opened" in changes else existing.opened
    opening_now = existing.opened is not True and incoming_opened is True
    if incoming_opened is True:
        opened_at = now if opening_now else (existing.opened_at or now)
    else:
        opened_at = None

    previous_expires_at = existing.expires_at
    existing.name = (changes.get("name") or existing.name).strip()
    existing.category = normalize_category(changes.get("category") or existing.category)
    existing.quantity = (changes.get("quantity") or existing.quantity).strip()
    if changes.get("date_added") is not None:
        existing.date_added = as_utc(changes["date_added"])
    existing.opened = incoming_opened
    existing.opened_at = opened_at
    if "custom_fresh_days" in changes:
        existing.custom_fresh_days = changes["custom_fresh_days"]

    refresh_and_persist_item(db, existing, previous_expires_at=previous_expires_at, now=now)
    return existing


def open_item(
    db: Session,
    household_id: int,
    item_id: int,
    user_id: int | None = None,
    now: datetime | None = None,
) -> Item:
    """Mark opened (keeps an earlier opened_at), refresh with the pre-open expiry as bound, record ITEM_OPENED."""
    existing = get_item_or_raise(db, household_id, item_id)
    if existing.archived_at is not None:
        raise ItemArchivedError("Cannot open an archived item")
    now = as_utc(now) if now else utc_now()
    previous_expires_at = existing.expires_at
    existing.opened = True
    existing.opened_at = existing.opened_at or now
    refresh_and_persist_item(db, existing, previous_expires_at=previous_expires_at, now=now, commit=False)
    track_event(db, household_id, AnalyticsEventType.ITEM_OPENED, item_id=existing.id, user_id=user_id, created_at=now)
    db.commit()
    db.refresh(existing)
    return existing


def consume_item(
    db: Session,
    household_id: int,
    item_id: int,
    user_id: int | None = None,
    now: datetime | None = None,
) -> Item:
    """Archive as consumed and record ITEM_CONSUMED."""
    existing = get_item_or_raise(db, household_id, item_id)
    if existing.archived_at is not None:
        raise ItemArchivedError()
    now = as_utc(now) if now else utc_now()
    existing.archived_at = now
    existing.consumed_at = now
    track_event(db, household_id, AnalyticsEventType.ITEM_CONSUMED, item_id=existing.id, user_id=user_id, created_at=now)
    db.commit()
    db.refresh(existing)
    return existing


def delete_item(db: Session, household_id: int, item_id: int) -> None:
    """Delete the item with its alerts and their notification logs. Analytics events keep history with item_id cleared."""
    existing = get_item_or_raise(db, household_id, item_id)
    alert_ids = [a.id for a in db.query(Alert.id).filter(Alert.item_id == existing.id).all()]
    if alert_ids:
        db.query(NotificationLog).filter(NotificationLog.alert_id.in_(alert_ids)).delete(synchronize_session=False)
        db.query(Alert).filter(Alert.id.in_(alert_ids)).delete(synchronize_session=False)
    db.query(AnalyticsEvent).filter(AnalyticsEvent.item_id == existing.id).update(
        {AnalyticsEvent.item_id: None}, synchronize_session=False
    )
    db.delete(existing)
    db.commit()


def _iso(value: datetime | None) -> str | None:
    return as_utc(value).isoformat() if value is not None else None


def item_to_dict(item: Item) -> dict[str, Any]:
    return {
        "id": item.id,
        "household_id": item.household_id,
        "created_by_user_id": item.created_by_user_id,
        "name": item.name,
        "category": item.category,
        "quantity": item.quantity,
        "date_added": _iso(item.date_added),
        "opened": item.opened,
        "opened_at": _iso(item.opened_at),
        "custom_fresh_days": item.custom_fresh_days,
        "expires_at": _iso(item.expires_at),
        "days_remaining": item.days_remaining,
        "status": item.status,
        "confidence": item.confidence,
        "archived_at": _iso(item.archived_at),
        "consumed_at": _iso(item.consumed_at),
        "created_at": _iso(item.created_at),
    }
