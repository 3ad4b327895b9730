from datetime import datetime, timezone
from typing import Callable, Optional

from common.core.exceptions import SubscriberNotFoundError
from common.core.otel_exporter import trace_span, get_logger
from common.db.scoped import transaction
from packages.subscribers.repositories.subscriber_repository import (
    SubscriberRepository,
)
from packages.subscribers.models.domain.subscriber import (
    Subscriber,
    SubscriberCreateModel,
    SubscriberUpdateModel,
    SubscriberUpsertModel,
    UpsertResult,
)

logger = get_logger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SubscriberService:
    """Service for subscriber registration and manual payment confirmation."""

    def __init__(
        self,
        subscriber_repo: Optional[SubscriberRepository] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.subscriber_repo = subscriber_repo or SubscriberRepository()
        self.clock = clock

    @trace_span
    async def upsert_subscriber(self, data: SubscriberUpsertModel) -> UpsertResult:
        """
        Create or update a subscriber by email.

        Existing subscribers get every mutable field overwritten, except the
        payment date which only changes when the request carries one. New
        subscribers always start without a payment date.
        """
        payment_updated = data.payment_date is not None
        logger.info(
            f"Creating/updating subscriber: {data.email}",
            extra={"email": data.email, "payment_updated": payment_updated},
        )

        async with transaction():
            existing = await self.subscriber_repo.get_by_email(data.email)

            if existing:
                changes = {
                    "phone": data.phone,
                    "country_from": data.country_from,
                    "city_from": data.city_from,
                    "country_to": data.country_to,
                    "city_to": data.city_to,
                    "subscription_type": data.subscription_type,
                    "updated_at": self.clock(),
                }
                if payment_updated:
                    changes["payment_date"] = data.payment_date
                    logger.info(
                        f"Payment date updated for subscriber: {data.email}",
                        extra={
                            "email": data.email,
                            "subscription_type": data.subscription_type,
                            "payment_date": data.payment_date.isoformat(),
                        },
                    )

                subscriber = await self.subscriber_repo.update(
                    existing.id, SubscriberUpdateModel(**changes)
                )
                logger.info(f"Updated subscriber {existing.id}")
                return UpsertResult(
                    subscriber=subscriber,
                    created=False,
                    payment_updated=payment_updated,
                )

            subscriber = await self.subscriber_repo.create(
                SubscriberCreateModel(
                    email=data.email,
                    phone=data.phone,
                    country_from=data.country_from,
                    city_from=data.city_from,
                    country_to=data.country_to,
                    city_to=data.city_to,
                    subscription_type=data.subscription_type,
                )
            )

        if payment_updated:
            logger.info(
                f"Payment date ignored for new subscriber: {data.email}",
                extra={"email": data.email},
            )
        logger.info(f"Created subscriber with ID: {subscriber.id}")
        return UpsertResult(
            subscriber=subscriber, created=True, payment_updated=payment_updated
        )

    @trace_span
    async def get_subscriber(self, email: str) -> Subscriber:
        """Get a subscriber by email or raise SubscriberNotFoundError."""
        subscriber = await self.subscriber_repo.get_by_email(email)
        if not subscriber:
            raise SubscriberNotFoundError(email)
        return subscriber

    @trace_span
    async def confirm_payment(
        self,
        email: str,
        subscription_type: str,
        payment_date: Optional[datetime] = None,
    ) -> Subscriber:
        """
        Record a confirmed payment for an existing subscriber.

        Sets the payment date (now when not given) and the subscription type
        unconditionally.
        """
        paid_at = payment_date or self.clock()
        logger.info(
            f"Confirming payment for subscriber: {email}",
            extra={"email": email, "subscription_type": subscription_type},
        )

        async with transaction():
            subscriber = await self.subscriber_repo.get_by_email(email)
            if not subscriber:
                logger.warning(f"Subscriber not found with email: {email}")
                raise SubscriberNotFoundError(email)

            await self.subscriber_repo.record_payment(
                subscriber.id, paid_at, subscription_type=subscription_type
            )
            updated = await self.subscriber_repo.get(subscriber.id)

        logger.info(
            "Payment confirmed and date updated",
            extra={
                "subscriber_id": subscriber.id,
                "email": subscriber.email,
                "subscription_type": subscription_type,
                "previous_payment_date": (
                    subscriber.payment_date.isoformat()
                    if subscriber.payment_date
                    else None
                ),
                "new_payment_date": paid_at.isoformat(),
            },
        )
        return updated

    @trace_span
    async def check_store(self) -> str:
        """Report store connectivity for diagnostics."""
        try:
            await self.subscriber_repo.ping()
            return "Connected"
        except Exception as e:
            logger.error(f"Database connection error: {e}")
            return f"Error: {e}"
