"""Tests for analytics summary and per-day event series."""

from datetime import datetime, timezone

import pytest

from app.core.enums import AnalyticsEventType
from app.services import analytics_service, item_service

UTC = timezone.utc
NOW = datetime(2026, 1, 10, 15, tzinfo=UTC)


def utc(year, month, day, hour=0):
    return datetime(year, month, day, hour, tzinfo=UTC)


@pytest.fixture
def history(db, make_household):
    household, (user,) = make_household()

    def add(name, category, when):
        return item_service.create_item(db, household.id, user.id, name, category, "1", date_added=when, now=when)

    milk = add("Milk", "dairy", utc(2026, 1, 8))
    steak = add("Steak", "meat", utc(2026, 1, 9))
    item_service.consume_item(db, household.id, milk.id, now=utc(2026, 1, 9, 8))
    item_service.consume_item(db, household.id, steak.id, now=utc(2026, 1, 10, 8))
    item_service.track_event(db, household.id, AnalyticsEventType.ITEM_EXPIRED, item_id=add("Kale", "produce", utc(2026, 1, 5)).id, created_at=utc(2026, 1, 9, 9))
    item_service.track_event(db, household.id, AnalyticsEventType.ITEM_EXPIRED, item_id=add("Chard", "produce", utc(2026, 1, 5)).id, created_at=utc(2026, 1, 10, 9))
    item_service.track_event(db, household.id, AnalyticsEventType.ITEM_EXPIRED, item_id=add("Dip", "sauces", utc(2026, 1, 5)).id, created_at=utc(2026, 1, 10, 10))
    # outside the weekly window
    item_service.track_event(db, household.id, AnalyticsEventType.ITEM_CONSUMED, created_at=utc(2025, 12, 20))
    db.commit()
    return household


def test_summary_counts_and_savings(db, history):
    result = analytics_service.summary(db, history.id, now=NOW)
    assert result["items_added_this_week"] == 5
    assert result["items_consumed_this_week"] == 2
    assert result["items_expired_this_week"] == 3
    # consumed dairy 4.5 + meat 7.5; expired produce 3.2 * 2 + other 3.0
    assert result["estimated_savings"] == 2.6
    assert result["consumed_vs_expired"] == {"consumed": 2, "expired": 3}
    assert result["top_categories_wasted"] == [
        {"category": "produce", "count": 2},
        {"category": "sauces", "count": 1},
    ]


def test_event_series_groups_by_utc_day(db, history):
    result = analytics_service.event_series(db, history.id, "week", now=NOW)
    assert result["range"] == "week"
    assert result["series"] == [
        {"date": "2026-01-09", "consumed": 1, "expired": 1},
        {"date": "2026-01-10", "consumed": 1, "expired": 2},
    ]


def test_month_range_includes_older_events(db, history):
    result = analytics_service.event_series(db, history.id, "month", now=NOW)
    assert result["series"][0] == {"date": "2025-12-20", "consumed": 1, "expired": 0}


def test_unknown_range_falls_back_to_week(db, history):
    assert analytics_service.event_series(db, history.id, "year", now=NOW)["range"] == "week"


def test_range_start_is_inclusive_of_today():
    assert analytics_service.range_start("week", NOW) == utc(2026, 1, 4)
    assert analytics_service.range_start("month", NOW) == utc(2025, 12, 12)


def test_category_value_defaults_to_other():
    assert analytics_service.category_value("Dairy") == 4.5
    assert analytics_service.category_value("sauces") == 3.0
    assert analytics_service.category_value(None) == 3.0
