"""
FastAPI app entrypoint.

Items, alerts, analytics, households and users under /api. The alert sweep runs on a
background scheduler started in the lifespan (one sweep at a time; see app.scheduler.alert_sweep_job).
"""
import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path

from apscheduler.schedulers.background import BackgroundScheduler
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Load .env from backend/ before any app code
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

from app.api.routes import alerts, analytics, households, items, users
from app.config import settings
from app.core.constants import ALERT_SWEEP_JOB_ID
from app.db.session import SessionLocal
from app.scheduler.alert_sweep_job import is_sweep_running, run_alert_sweep_job
from app.services.freshness_rule_service import ensure_default_rules

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def _seed_rules() -> None:
    db = SessionLocal()
    try:
        ensure_default_rules(db)
    except Exception as e:
        logger.warning("Seeding default freshness rules failed: %s", e, exc_info=True)
        db.rollback()
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.seed_default_rules:
        _seed_rules()

    scheduler = BackgroundScheduler()
    if settings.alert_sweep_enabled:
        scheduler.add_job(
            run_alert_sweep_job,
            "interval",
            seconds=settings.alert_sweep_interval_seconds,
            id=ALERT_SWEEP_JOB_ID,
            max_instances=1,
            coalesce=True,
        )
    scheduler.start()
    app.state.scheduler = scheduler
    logger.info(
        "Backend ready; alert sweep %s (every %ss)",
        "enabled" if settings.alert_sweep_enabled else "disabled",
        settings.alert_sweep_interval_seconds,
    )
    yield
    scheduler.shutdown(wait=False)


app = FastAPI(title="StillGood", version="0.1.0", lifespan=lifespan)

# CORS: dev origins + optional CORS_ORIGINS env (comma-separated) for production frontend
_cors_origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]
_cors_extra = settings.cors_origins or os.getenv("CORS_ORIGINS", "")
if _cors_extra:
    _cors_origins.extend(o.strip() for o in _cors_extra.split(",") if o.strip())
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(items.router, prefix="/api", tags=["items"])
app.include_router(alerts.router, prefix="/api", tags=["alerts"])
app.include_router(analytics.router, prefix="/api", tags=["analytics"])
app.include_router(households.router, prefix="/api", tags=["households"])
app.include_router(users.router, prefix="/api", tags=["users"])


@app.get("/", include_in_schema=False)
def root():
    """Root: point to API docs and health."""
    return {"message": "StillGood API", "docs": "/docs", "health": "/health"}


@app.get("/health")
def health() -> dict[str, object]:
    return {
        "status": "ok",
        "alert_sweep_enabled": settings.alert_sweep_enabled,
        "alert_sweep_running": is_sweep_running(),
    }
