"""Household member account. Channel preferences decide SENT vs SKIPPED per notification log row."""
from sqlalchemy import Boolean, Column, DateTime, Integer, String, true
from sqlalchemy.sql import func

from app.db.base import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(256), nullable=False, unique=True, index=True)
    name = Column(String(120), nullable=False)
    prefs_email = Column(Boolean, nullable=False, default=True, server_default=true())
    prefs_in_app = Column(Boolean, nullable=False, default=True, server_default=true())
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
