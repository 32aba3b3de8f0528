"""
Household analytics: weekly summary and per-day consumed/expired series.

Windows are whole UTC days ending today (week = 7 days, month = 30 days, today inclusive).
Estimated savings = value(consumed) - value(expired) using CATEGORY_COST per item.
"""
from collections import Counter
from datetime import datetime
from typing import Any

from sqlalchemy.orm import Session

from app.core.constants import ANALYTICS_RANGE_DAYS, CATEGORY_COST, OTHER_CATEGORY, TOP_WASTED_CATEGORIES_LIMIT
from app.core.dates import add_utc_days, start_of_utc_day, utc_now
from app.core.enums import AnalyticsEventType
from app.models.analytics_event import AnalyticsEvent
from app.models.item import Item


def range_start(range_: str, now: datetime | None = None) -> datetime:
    days = ANALYTICS_RANGE_DAYS.get(range_, ANALYTICS_RANGE_DAYS["week"])
    return add_utc_days(start_of_utc_day(now or utc_now()), -(days - 1))


def category_value(category: str | None) -> float:
    return CATEGORY_COST.get((category or OTHER_CATEGORY).lower(), CATEGORY_COST[OTHER_CATEGORY])


def _events_since(
    db: Session,
    household_id: int,
    since: datetime,
    types: tuple[AnalyticsEventType, ...],
) -> list[tuple[AnalyticsEvent, str | None]]:
    """(event, item category or None) pairs, oldest first. Category is None when the item was deleted."""
    return (
        db.query(AnalyticsEvent, Item.category)
        .outerjoin(Item, Item.id == AnalyticsEvent.item_id)
        .filter(
            AnalyticsEvent.household_id == household_id,
            AnalyticsEvent.created_at >= since,
            AnalyticsEvent.type.in_([t.value for t in types]),
        )
        .order_by(AnalyticsEvent.created_at.asc(), AnalyticsEvent.id.asc())
        .all()
    )


def _top_wasted(categories: list[str | None]) -> list[dict[str, Any]]:
    counts = Counter((c or OTHER_CATEGORY).lower() for c in categories)
    # Stable for ties: first-seen order
    ranked = sorted(counts.items(), key=lambda kv: -kv[1])
    return [{"category": c, "count": n} for c, n in ranked[:TOP_WASTED_CATEGORIES_LIMIT]]


def summary(db: Session, household_id: int, now: datetime | None = None) -> dict[str, Any]:
    since = range_start("week", now)
    rows = _events_since(
        db,
        household_id,
        since,
        (AnalyticsEventType.ITEM_ADDED, AnalyticsEventType.ITEM_CONSUMED, AnalyticsEventType.ITEM_EXPIRED),
    )
    added = [c for e, c in rows if e.type == AnalyticsEventType.ITEM_ADDED.value]
    consumed = [c for e, c in rows if e.type == AnalyticsEventType.ITEM_CONSUMED.value]
    expired = [c for e, c in rows if e.type == AnalyticsEventType.ITEM_EXPIRED.value]

    consumed_value = sum(category_value(c) for c in consumed)
    expired_value = sum(category_value(c) for c in expired)
    return {
        "items_added_this_week": len(added),
        "items_consumed_this_week": len(consumed),
        "items_expired_this_week": len(expired),
        "estimated_savings": round(consumed_value - expired_value, 2),
        "consumed_vs_expired": {"consumed": len(consumed), "expired": len(expired)},
        "top_categories_wasted": _top_wasted(expired),
    }


def event_series(db: Session, household_id: int, range_: str = "week", now: datetime | None = None) -> dict[str, Any]:
    """Per-day consumed/expired counts for days that have events, oldest first."""
    if range_ not in ANALYTICS_RANGE_DAYS:
        range_ = "week"
    since = range_start(range_, now)
    rows = _events_since(
        db,
        household_id,
        since,
        (AnalyticsEventType.ITEM_CONSUMED, AnalyticsEventType.ITEM_EXPIRED),
    )
    by_day: dict[str, dict[str, int]] = {}
    wasted: list[str | None] = []
    for event, category in rows:
        key = start_of_utc_day(event.created_at).date().isoformat()
        day = by_day.setdefault(key, {"consumed": 0, "expired": 0})
        if event.type == AnalyticsEventType.ITEM_CONSUMED.value:
            day["consumed"] += 1
        else:
            day["expired"] += 1
            wasted.append(category)
    return {
        "range": range_,
        "series": [{"date": d, **counts} for d, counts in sorted(by_day.items())],
        "top_categories_wasted": _top_wasted(wasted),
    }
