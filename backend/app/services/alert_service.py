"""
Alert sweep: refresh every active item, record one ITEM_EXPIRED event per item, and create
USE_SOON / EXPIRED alerts with per-channel notification logs.

Dedupe: a member gets a new alert only when no unread alert of that type exists for the item.
Guards are read-then-write, not locks: two sweeps racing on the same item can both create an
alert. The scheduler runs one sweep at a time per process (see app.scheduler.alert_sweep_job).

Per-item failures are logged, rolled back and counted; the sweep continues with the next item.
"""
import logging
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any

from sqlalchemy.orm import Session

from app.core.dates import as_utc, utc_now
from app.core.enums import AlertType, AnalyticsEventType, ItemStatus, NotificationChannel, NotificationStatus
from app.core.errors import AlertNotFoundError
from app.models.alert import Alert
from app.models.analytics_event import AnalyticsEvent
from app.models.household import Household, HouseholdMember
from app.models.item import Item
from app.models.notification_log import NotificationLog
from app.models.user import User
from app.services.item_service import refresh_and_persist_item, track_event

logger = logging.getLogger(__name__)


@dataclass
class SweepStats:
    scanned_items: int = 0
    alerts_created: int = 0
    failed_items: int = 0

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


def alert_message(name: str, alert_type: AlertType) -> str:
    if alert_type == AlertType.EXPIRED:
        return f"{name} has expired."
    return f"{name} should be used soon."


def _has_expired_event(db: Session, household_id: int, item_id: int) -> bool:
    return (
        db.query(AnalyticsEvent.id)
        .filter(
            AnalyticsEvent.household_id == household_id,
            AnalyticsEvent.item_id == item_id,
            AnalyticsEvent.type == AnalyticsEventType.ITEM_EXPIRED.value,
        )
        .first()
        is not None
    )


def _has_unread_alert(db: Session, user_id: int, item_id: int, alert_type: AlertType) -> bool:
    return (
        db.query(Alert.id)
        .filter(
            Alert.user_id == user_id,
            Alert.item_id == item_id,
            Alert.type == alert_type.value,
            Alert.read_at.is_(None),
        )
        .first()
        is not None
    )


def _log_notifications(db: Session, alert: Alert, user: User, now: datetime) -> None:
    """One IN_APP and one EMAIL row. Preferences only decide SENT vs SKIPPED; email is simulated."""
    db.add(NotificationLog(
        user_id=user.id,
        alert_id=alert.id,
        channel=NotificationChannel.IN_APP.value,
        status=(NotificationStatus.SENT if user.prefs_in_app else NotificationStatus.SKIPPED).value,
        detail="In-app alert created." if user.prefs_in_app else "Skipped in-app alert because preference is disabled.",
        created_at=now,
    ))
    db.add(NotificationLog(
        user_id=user.id,
        alert_id=alert.id,
        channel=NotificationChannel.EMAIL.value,
        status=(NotificationStatus.SENT if user.prefs_email else NotificationStatus.SKIPPED).value,
        detail=(
            f"Simulated email sent for {alert.type} alert."
            if user.prefs_email
            else "Skipped email because preference is disabled."
        ),
        created_at=now,
    ))


def _sweep_item(
    db: Session,
    household_id: int,
    item: Item,
    members: list[User],
    now: datetime,
) -> int:
    """Refresh one item and create alerts as needed. Returns alerts created (uncommitted)."""
    refreshed = refresh_and_persist_item(db, item, now=now, commit=False)
    if refreshed.status == ItemStatus.FRESH.value:
        return 0

    if refreshed.status == ItemStatus.EXPIRED.value and not _has_expired_event(db, household_id, refreshed.id):
        track_event(db, household_id, AnalyticsEventType.ITEM_EXPIRED, item_id=refreshed.id, created_at=now)

    alert_type = AlertType.EXPIRED if refreshed.status == ItemStatus.EXPIRED.value else AlertType.USE_SOON
    created = 0
    for user in members:
        if _has_unread_alert(db, user.id, refreshed.id, alert_type):
            continue
        alert = Alert(
            household_id=household_id,
            user_id=user.id,
            item_id=refreshed.id,
            type=alert_type.value,
            message=alert_message(refreshed.name, alert_type),
            created_at=now,
        )
        db.add(alert)
        db.flush()
        _log_notifications(db, alert, user, now)
        db.flush()
        created += 1
    return created


def run_alert_sweep(db: Session, now: datetime | None = None) -> SweepStats:
    """
    One pass over every household's non-archived items, sequentially, committing per item.
    Failed items count toward scanned_items and failed_items; nothing is raised per item.
    """
    now = as_utc(now) if now else utc_now()
    stats = SweepStats()
    household_ids = [h.id for h in db.query(Household.id).order_by(Household.id.asc()).all()]

    for household_id in household_ids:
        try:
            members = (
                db.query(User)
                .join(HouseholdMember, HouseholdMember.user_id == User.id)
                .filter(HouseholdMember.household_id == household_id)
                .order_by(User.id.asc())
                .all()
            )
            item_ids = [
                r.id
                for r in db.query(Item.id)
                .filter(Item.household_id == household_id, Item.archived_at.is_(None))
                .order_by(Item.id.asc())
                .all()
            ]
        except Exception as e:
            db.rollback()
            logger.warning("Alert sweep: could not load household %s: %s", household_id, e, exc_info=True)
            continue

        for item_id in item_ids:
            stats.scanned_items += 1
            try:
                item = db.get(Item, item_id)
                if item is None:
                    continue
                created = _sweep_item(db, household_id, item, members, now)
                db.commit()
                stats.alerts_created += created
            except Exception:
                db.rollback()
                stats.failed_items += 1
                logger.exception("Alert sweep: item %s in household %s failed", item_id, household_id)

    logger.info(
        "Alert sweep done: scanned=%s created=%s failed=%s",
        stats.scanned_items,
        stats.alerts_created,
        stats.failed_items,
    )
    return stats


def list_alerts(db: Session, household_id: int, user: User, limit: int = 200) -> list[dict[str, Any]]:
    """The user's alerts newest first. Empty when the user has in-app alerts turned off."""
    if not user.prefs_in_app:
        return []
    rows = (
        db.query(Alert, Item)
        .join(Item, Item.id == Alert.item_id)
        .filter(Alert.household_id == household_id, Alert.user_id == user.id)
        .order_by(Alert.created_at.desc(), Alert.id.desc())
        .limit(limit)
        .all()
    )
    return [
        {
            **alert_to_dict(alert),
            "item": {"id": item.id, "name": item.name, "category": item.category, "status": item.status},
        }
        for alert, item in rows
    ]


def mark_alert_read(
    db: Session,
    household_id: int,
    user_id: int,
    alert_id: int,
    now: datetime | None = None,
) -> Alert:
    """Set read_at (first read wins). Raises AlertNotFoundError for another user's or household's alert."""
    alert = (
        db.query(Alert)
        .filter(Alert.id == alert_id, Alert.household_id == household_id, Alert.user_id == user_id)
        .first()
    )
    if not alert:
        raise AlertNotFoundError()
    if alert.read_at is None:
        alert.read_at = as_utc(now) if now else utc_now()
        db.commit()
        db.refresh(alert)
    return alert


def alert_to_dict(alert: Alert) -> dict[str, Any]:
    return {
        "id": alert.id,
        "household_id": alert.household_id,
        "user_id": alert.user_id,
        "item_id": alert.item_id,
        "type": alert.type,
        "message": alert.message,
        "read": alert.read_at is not None,
        "read_at": as_utc(alert.read_at).isoformat() if alert.read_at else None,
        "created_at": as_utc(alert.created_at).isoformat() if alert.created_at else None,
    }
