"""
Repository for the processed webhook event ledger.
"""

from typing import Optional
from sqlalchemy import select

from common.repositories.base import BaseRepository
from common.core.otel_exporter import trace_span
from packages.billing.models.database.processed_event import (
    ProcessedWebhookEventEntity,
)
from packages.billing.models.domain.processed_event import (
    ProcessedWebhookEvent,
    ProcessedWebhookEventCreateModel,
)


class ProcessedEventRepository(
    BaseRepository[ProcessedWebhookEventEntity, ProcessedWebhookEvent]
):
    """Repository for provider event ids that were already reconciled."""

    def __init__(self):
        super().__init__(ProcessedWebhookEventEntity, ProcessedWebhookEvent)

    @trace_span
    async def get_by_event_id(self, event_id: str) -> Optional[ProcessedWebhookEvent]:
        async with self._get_session(readonly=True) as session:
            result = await session.execute(
                select(ProcessedWebhookEventEntity).where(
                    ProcessedWebhookEventEntity.event_id == event_id
                )
            )
            db_event = result.scalar_one_or_none()
            return self._entity_to_domain(db_event) if db_event else None

    @trace_span
    async def record(
        self, event_id: str, event_type: str, state_changed: bool
    ) -> ProcessedWebhookEvent:
        """Add an event to the ledger. Raises on a duplicate event_id."""
        return await self.create(
            ProcessedWebhookEventCreateModel(
                event_id=event_id,
                event_type=event_type,
                state_changed=state_changed,
            )
        )
