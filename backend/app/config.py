"""
Application settings (Pydantic Settings).
"""
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings

# .env next to backend/ (parent of app/)
_env_path = Path(__file__).resolve().parent.parent / ".env"


class Settings(BaseSettings):
    database_url: str = "sqlite:///./stillgood.db"
    log_level: str = "INFO"
    # Alert sweep: ALERT_SWEEP_INTERVAL_SECONDS / ALERT_SWEEP_ENABLED in .env
    alert_sweep_interval_seconds: int = 60
    alert_sweep_enabled: bool = True
    seed_default_rules: bool = True
    cors_origins: str = ""  # comma-separated extra origins, e.g. https://your-app.vercel.app

    class Config:
        env_file = _env_path
        extra = "ignore"

    @field_validator("alert_sweep_interval_seconds", mode="after")
    @classmethod
    def clamp_interval(cls, v: int) -> int:
        return max(5, v)

    @field_validator("log_level", mode="after")
    @classmethod
    def upper_level(cls, v: str) -> str:
        return (v or "INFO").strip().upper()


settings = Settings()
