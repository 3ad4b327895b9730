"""
Domain models for processed webhook events.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict


class ProcessedWebhookEvent(BaseModel):
    """A provider event that has already been reconciled."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    event_id: str
    event_type: str
    state_changed: bool
    processed_at: Optional[datetime] = None


class ProcessedWebhookEventCreateModel(BaseModel):
    event_id: str
    event_type: str
    state_changed: bool = False
