"""
Database entity for the processed webhook event ledger.
"""

from sqlalchemy import Boolean, Column, DateTime, String
from sqlalchemy.sql import func

from common.db.base import Base, BigIntegerType


class ProcessedWebhookEventEntity(Base):
    """
    One row per provider event that was reconciled successfully.

    Redeliveries of a recorded event_id are acknowledged without touching
    subscribers.
    """

    __tablename__ = "processed_webhook_events"

    id = Column(BigIntegerType, primary_key=True, index=True, autoincrement=True)
    event_id = Column(String(255), nullable=False, unique=True, index=True)
    event_type = Column(String(128), nullable=False)
    state_changed = Column(Boolean, nullable=False, default=False)
    processed_at = Column(DateTime(timezone=True), server_default=func.now())
