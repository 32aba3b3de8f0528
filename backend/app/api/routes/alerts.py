"""
Alerts API: list the caller's alerts, mark one read, run the sweep on demand.
"""
import logging
from typing import Any

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.deps import CurrentMember, get_current_member
from app.core.errors import AppError, app_error_to_http
from app.db.session import get_db
from app.scheduler.alert_sweep_job import sweep_once
from app.services.alert_service import alert_to_dict, list_alerts, mark_alert_read

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/alerts")
def get_alerts(
    limit: int = Query(200, ge=1, le=500),
    db: Session = Depends(get_db),
    member: CurrentMember = Depends(get_current_member),
) -> dict[str, Any]:
    """Newest first. Empty when the caller turned off in-app alerts."""
    return {"alerts": list_alerts(db, member.household_id, member.user, limit=limit)}


@router.post("/alerts/{alert_id}/read")
def read_alert(
    alert_id: int,
    db: Session = Depends(get_db),
    member: CurrentMember = Depends(get_current_member),
) -> dict[str, Any]:
    try:
        alert = mark_alert_read(db, member.household_id, member.user_id, alert_id)
    except AppError as e:
        raise app_error_to_http(e) from e
    return {"alert": alert_to_dict(alert)}


@router.post("/alerts/run")
def run_sweep(
    db: Session = Depends(get_db),
    member: CurrentMember = Depends(get_current_member),
) -> dict[str, Any]:
    """Run the alert sweep now (all households). Skipped when a scheduled sweep is in progress."""
    stats = sweep_once(db)
    if stats is None:
        return {"result": None, "skipped": True}
    logger.info("On-demand alert sweep by user %s: %s", member.user_id, stats.to_dict())
    return {"result": stats.to_dict(), "skipped": False}
