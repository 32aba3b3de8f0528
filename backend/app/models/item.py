"""Perishable item in a household.

opened is tri-state: True, False or NULL (unknown). opened_at is set iff opened is True.
expires_at, days_remaining, status and confidence are derived: only the freshness engine
(via app.services.item_service) writes them, and they are recomputed on every read of
active items so "now" is read time.
archived_at: NULL = active. consumed_at is set together with archived_at on consume.
"""
from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, Integer, String
from sqlalchemy.sql import func

from app.db.base import Base


class Item(Base):
    __tablename__ = "items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    household_id = Column(Integer, ForeignKey("households.id", ondelete="CASCADE"), nullable=False, index=True)
    created_by_user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    name = Column(String(120), nullable=False)
    category = Column(String(40), nullable=False, index=True)
    quantity = Column(String(60), nullable=False)
    date_added = Column(DateTime(timezone=True), nullable=False)
    opened = Column(Boolean, nullable=True)
    opened_at = Column(DateTime(timezone=True), nullable=True)
    custom_fresh_days = Column(Integer, nullable=True)

    # derived
    expires_at = Column(DateTime(timezone=True), nullable=False)
    days_remaining = Column(Integer, nullable=False)
    status = Column(String(16), nullable=False, index=True)  # FRESH | USE_SOON | EXPIRED
    confidence = Column(Float, nullable=False)

    archived_at = Column(DateTime(timezone=True), nullable=True, index=True)
    consumed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
