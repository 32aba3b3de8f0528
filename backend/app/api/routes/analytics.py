"""Analytics and reference-data API: weekly summary, per-day series, freshness rules."""
from typing import Any, Literal

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.deps import CurrentMember, get_current_member
from app.db.session import get_db
from app.services import analytics_service
from app.services.freshness_rule_service import list_rules

router = APIRouter()


@router.get("/analytics/summary")
def get_summary(
    db: Session = Depends(get_db),
    member: CurrentMember = Depends(get_current_member),
) -> dict[str, Any]:
    return analytics_service.summary(db, member.household_id)


@router.get("/analytics/events")
def get_events(
    range: Literal["week", "month"] = Query("week"),
    db: Session = Depends(get_db),
    member: CurrentMember = Depends(get_current_member),
) -> dict[str, Any]:
    return analytics_service.event_series(db, member.household_id, range_=range)


@router.get("/rules")
def get_rules(db: Session = Depends(get_db)) -> dict[str, Any]:
    return {"rules": list_rules(db)}
