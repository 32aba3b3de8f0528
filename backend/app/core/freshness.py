"""
Freshness engine: derive expiry, days remaining, status and confidence for an item.

Pure and total: no I/O, never raises for inputs of the documented types. Missing
rules fall back to DEFAULT_FRESH_DAYS and the low-confidence score.

Day-count priority: custom_fresh_days > rule (opened/unopened) > DEFAULT_FRESH_DAYS.
Opening an item never pushes expires_at past the previously computed expiry
(clamp applies only with a rule and no custom override).
"""
from dataclasses import dataclass
from datetime import date, datetime
from typing import Protocol

from app.core.constants import (
    CONFIDENCE_NO_RULE,
    CONFIDENCE_OPENED_KNOWN,
    CONFIDENCE_OPENED_UNKNOWN,
    DEFAULT_FRESH_DAYS,
    OTHER_CATEGORY,
    USE_SOON_THRESHOLD_DAYS,
)
from app.core.dates import add_utc_days, as_utc, day_diff_utc, start_of_utc_day, utc_now
from app.core.enums import ItemStatus


class RuleLike(Protocol):
    unopened_days: int
    opened_days: int


@dataclass(frozen=True)
class FreshnessRuleInput:
    """Day counts for one category; FreshnessRule rows satisfy the same shape."""
    unopened_days: int
    opened_days: int


@dataclass(frozen=True)
class FreshnessResult:
    expires_at: datetime
    days_remaining: int
    status: ItemStatus
    confidence: float


def compute_status(days_remaining: int) -> ItemStatus:
    if days_remaining < 0:
        return ItemStatus.EXPIRED
    if days_remaining <= USE_SOON_THRESHOLD_DAYS:
        return ItemStatus.USE_SOON
    return ItemStatus.FRESH


def compute_confidence(category: str, has_rule: bool, opened_known: bool) -> float:
    if not has_rule or (category or "").strip().lower() == OTHER_CATEGORY:
        return CONFIDENCE_NO_RULE
    return CONFIDENCE_OPENED_KNOWN if opened_known else CONFIDENCE_OPENED_UNKNOWN


def _has_override(custom_fresh_days: int | None) -> bool:
    return isinstance(custom_fresh_days, int) and not isinstance(custom_fresh_days, bool)


def calculate_freshness(
    category: str,
    date_added: datetime | date,
    opened: bool | None = None,
    opened_at: datetime | date | None = None,
    custom_fresh_days: int | None = None,
    rule: RuleLike | None = None,
    previous_expires_at: datetime | date | None = None,
    now: datetime | None = None,
) -> FreshnessResult:
    """
    Derive the four freshness fields. `opened` is tri-state: True, False or None (unknown).
    All arithmetic is on UTC calendar days; now defaults to the current UTC time.
    """
    now = now or utc_now()
    is_opened = opened is True
    has_override = _has_override(custom_fresh_days)

    if has_override:
        fresh_days = custom_fresh_days
    elif rule is not None:
        fresh_days = rule.opened_days if is_opened else rule.unopened_days
    else:
        fresh_days = DEFAULT_FRESH_DAYS

    base = opened_at if is_opened and opened_at is not None else date_added
    expires_at = add_utc_days(start_of_utc_day(base), fresh_days)

    if is_opened and rule is not None and not has_override and previous_expires_at is not None:
        expires_at = min(as_utc(previous_expires_at), expires_at)

    days_remaining = day_diff_utc(now, expires_at)
    return FreshnessResult(
        expires_at=expires_at,
        days_remaining=days_remaining,
        status=compute_status(days_remaining),
        confidence=compute_confidence(category, rule is not None, opened is True or opened is False),
    )
