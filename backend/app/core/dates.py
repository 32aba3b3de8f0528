"""
UTC calendar-day helpers.

All freshness arithmetic works on UTC day boundaries, never wall-clock time, so
"2 days remaining" does not change with the time of day.
"""
from datetime import date, datetime, time, timedelta, timezone


def as_utc(value: datetime | date) -> datetime:
    """Return an aware UTC datetime. Naive values (e.g. read back from SQLite) are taken as UTC."""
    if not isinstance(value, datetime):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def start_of_utc_day(value: datetime | date) -> datetime:
    return as_utc(value).replace(hour=0, minute=0, second=0, microsecond=0)


def add_utc_days(value: datetime | date, days: int) -> datetime:
    return as_utc(value) + timedelta(days=days)


def day_diff_utc(start: datetime | date, end: datetime | date) -> int:
    """Whole UTC days from start's day to end's day (negative when end is earlier)."""
    return (start_of_utc_day(end) - start_of_utc_day(start)).days


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def now_utc_day() -> datetime:
    return start_of_utc_day(utc_now())
