"""
Runs every ALERT_SWEEP_INTERVAL_SECONDS (default 60s): refresh all active items and create alerts.

At most one sweep runs per process: ticks (and on-demand runs) that find one in progress
skip instead of waiting. Failures are logged, never raised into the scheduler thread.
"""
import logging
import threading

from sqlalchemy.orm import Session

from app.db.session import SessionLocal
from app.services.alert_service import SweepStats, run_alert_sweep

logger = logging.getLogger(__name__)

_lock = threading.Lock()


def is_sweep_running() -> bool:
    return _lock.locked()


def sweep_once(db: Session) -> SweepStats | None:
    """Run one sweep on db unless another is in progress (returns None then). Errors propagate."""
    if not _lock.acquire(blocking=False):
        logger.info("Alert sweep already running; skipping")
        return None
    try:
        return run_alert_sweep(db)
    finally:
        _lock.release()


def run_alert_sweep_job() -> SweepStats | None:
    db = SessionLocal()
    try:
        return sweep_once(db)
    except Exception as e:
        logger.exception("Alert sweep job failed: %s", e)
        db.rollback()
        return None
    finally:
        db.close()
