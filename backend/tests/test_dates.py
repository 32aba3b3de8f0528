"""Tests for UTC calendar-day helpers."""

from datetime import date, datetime, timedelta, timezone

from app.core.dates import add_utc_days, as_utc, day_diff_utc, start_of_utc_day

UTC = timezone.utc


def test_as_utc_attaches_utc_to_naive():
    assert as_utc(datetime(2026, 1, 1, 10)) == datetime(2026, 1, 1, 10, tzinfo=UTC)


def test_as_utc_converts_offsets():
    value = datetime(2026, 1, 1, 2, tzinfo=timezone(timedelta(hours=-5)))
    assert as_utc(value) == datetime(2026, 1, 1, 7, tzinfo=UTC)
    assert as_utc(value).tzinfo == UTC


def test_as_utc_accepts_dates():
    assert as_utc(date(2026, 2, 3)) == datetime(2026, 2, 3, tzinfo=UTC)


def test_start_of_utc_day():
    assert start_of_utc_day(datetime(2026, 1, 5, 23, 59, 59, tzinfo=UTC)) == datetime(2026, 1, 5, tzinfo=UTC)


def test_add_utc_days_crosses_month_and_year():
    assert add_utc_days(datetime(2025, 12, 30, tzinfo=UTC), 3) == datetime(2026, 1, 2, tzinfo=UTC)
    assert add_utc_days(datetime(2026, 3, 1, tzinfo=UTC), -1) == datetime(2026, 2, 28, tzinfo=UTC)


def test_day_diff_ignores_time_of_day():
    assert day_diff_utc(datetime(2026, 1, 1, 23, 0, tzinfo=UTC), datetime(2026, 1, 2, 0, 30, tzinfo=UTC)) == 1
    assert day_diff_utc(datetime(2026, 1, 5, tzinfo=UTC), datetime(2026, 1, 1, 12, tzinfo=UTC)) == -4
    assert day_diff_utc(datetime(2026, 1, 1, 1, tzinfo=UTC), datetime(2026, 1, 1, 22, tzinfo=UTC)) == 0
