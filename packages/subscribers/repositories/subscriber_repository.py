"""
Repository for subscriber persistence.
"""

from datetime import datetime, timezone
from typing import Optional
from sqlalchemy import select, update

from common.repositories.base import BaseRepository
from common.core.otel_exporter import trace_span
from packages.subscribers.models.database.subscriber import SubscriberEntity
from packages.subscribers.models.domain.subscriber import Subscriber, normalize_email


class SubscriberRepository(BaseRepository[SubscriberEntity, Subscriber]):
    """Repository for notification subscribers, keyed by email."""

    def __init__(self):
        super().__init__(SubscriberEntity, Subscriber)

    @trace_span
    async def get_by_email(self, email: str) -> Optional[Subscriber]:
        """Get subscriber by email (case-insensitive)."""
        async with self._get_session(readonly=True) as session:
            result = await session.execute(
                select(SubscriberEntity)
                .where(SubscriberEntity.email == normalize_email(email))
                .execution_options(populate_existing=True)
            )
            db_subscriber = result.scalar_one_or_none()
            return self._entity_to_domain(db_subscriber) if db_subscriber else None

    @trace_span
    async def record_payment(
        self,
        subscriber_id: int,
        paid_at: datetime,
        subscription_type: Optional[str] = None,
    ) -> bool:
        """
        Set the payment date (and optionally the plan) in a single UPDATE.

        Returns True if a row was updated.
        """
        values = {"payment_date": paid_at, "updated_at": datetime.now(timezone.utc)}
        if subscription_type is not None:
            values["subscription_type"] = subscription_type

        async with self._get_session() as session:
            result = await session.execute(
                update(SubscriberEntity)
                .where(SubscriberEntity.id == subscriber_id)
                .values(**values)
            )
            return result.rowcount > 0

    @trace_span
    async def ping(self) -> None:
        """Run a trivial query to prove the store is reachable."""
        async with self._get_session(readonly=True) as session:
            await session.execute(select(SubscriberEntity.id).limit(1))
