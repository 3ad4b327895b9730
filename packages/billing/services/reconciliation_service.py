"""
Payment reconciliation.

Turns verified payment-provider events into subscriber payment state:
verify, parse once, skip redeliveries, then update the subscriber and record
the event in one transaction.
"""

from datetime import datetime
from typing import Callable, Optional

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from common.core.exceptions import (
    InvalidPayloadError,
    MissingIdentityError,
    SubscriberNotFoundError,
)
from common.core.otel_exporter import trace_span, get_logger, log_span_event
from common.db.scoped import transaction
from packages.billing.models.domain.stripe_webhooks import (
    CheckoutCompletedEvent,
    IgnoredEvent,
    PaymentEvent,
    PaymentSucceededEvent,
    parse_payment_event,
)
from packages.billing.providers.payment.interface import WebhookVerifierInterface
from packages.billing.repositories.processed_event_repository import (
    ProcessedEventRepository,
)
from packages.subscribers.repositories.subscriber_repository import (
    SubscriberRepository,
)
from packages.subscribers.services.subscriber_service import utc_now

logger = get_logger(__name__)


class ReconciliationResult(BaseModel):
    """Outcome of one webhook delivery."""

    event_id: str
    event_type: str
    state_changed: bool
    duplicate: bool = False


class ReconciliationService:
    """Service applying payment events to subscribers."""

    def __init__(
        self,
        verifier: WebhookVerifierInterface,
        subscriber_repo: Optional[SubscriberRepository] = None,
        event_repo: Optional[ProcessedEventRepository] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.verifier = verifier
        self.subscriber_repo = subscriber_repo or SubscriberRepository()
        self.event_repo = event_repo or ProcessedEventRepository()
        self.clock = clock

    @trace_span
    async def reconcile(
        self, payload: bytes, signature: Optional[str]
    ) -> ReconciliationResult:
        """
        Verify and apply one webhook delivery.

        Raises:
            MisconfiguredError: No signing secret configured
            InvalidSignatureError: Signature missing or wrong; payload unread
            InvalidPayloadError: Verified payload is not a usable event
            MissingIdentityError: Checkout completed without a customer email
            SubscriberNotFoundError: Checkout completed for an unknown email
            StoreUnavailableError: The store failed; nothing was written
        """
        self.verifier.verify(payload, signature)

        try:
            event = parse_payment_event(payload)
        except PydanticValidationError as e:
            logger.error(
                "Unparseable webhook payload",
                extra={"error_count": e.error_count()},
            )
            raise InvalidPayloadError("Invalid payload") from e

        logger.info(
            f"Received payment event: {event.event_type}",
            extra={
                "event_id": event.event_id,
                "event_type": event.event_type,
                "kind": event.kind.value,
            },
        )

        if isinstance(event, IgnoredEvent):
            # Ignored types never enter the ledger
            logger.info(f"Unhandled event type: {event.event_type}")
            return ReconciliationResult(
                event_id=event.event_id,
                event_type=event.event_type,
                state_changed=False,
            )

        if await self.event_repo.get_by_event_id(event.event_id):
            log_span_event(
                "Duplicate webhook delivery skipped",
                {"event_id": event.event_id, "event_type": event.event_type},
            )
            return ReconciliationResult(
                event_id=event.event_id,
                event_type=event.event_type,
                state_changed=False,
                duplicate=True,
            )

        async with transaction():
            state_changed = await self._apply(event)
            await self.event_repo.record(
                event.event_id, event.event_type, state_changed
            )

        return ReconciliationResult(
            event_id=event.event_id,
            event_type=event.event_type,
            state_changed=state_changed,
        )

    async def _apply(self, event: PaymentEvent) -> bool:
        """Apply a handled event. Returns True if a subscriber was updated."""
        if isinstance(event, CheckoutCompletedEvent):
            return await self._handle_checkout_completed(event)

        if isinstance(event, PaymentSucceededEvent):
            return await self._handle_payment_succeeded(event)

        return False

    async def _handle_checkout_completed(self, event: CheckoutCompletedEvent) -> bool:
        """
        Primary confirmation path.

        The checkout must name a customer who already registered.
        """
        if not event.customer_email:
            logger.error(
                "Checkout completed without customer email",
                extra={"event_id": event.event_id, "session_id": event.session_id},
            )
            raise MissingIdentityError("No customer email in checkout session")

        subscriber = await self.subscriber_repo.get_by_email(event.customer_email)
        if not subscriber:
            logger.warning(
                f"No subscriber for checkout email: {event.customer_email}",
                extra={"event_id": event.event_id, "session_id": event.session_id},
            )
            raise SubscriberNotFoundError(event.customer_email)

        new_plan = None
        if event.plan_type and event.plan_type != subscriber.subscription_type:
            new_plan = event.plan_type

        paid_at = self.clock()
        await self.subscriber_repo.record_payment(
            subscriber.id, paid_at, subscription_type=new_plan
        )

        logger.info(
            "Payment date updated from checkout",
            extra={
                "event_id": event.event_id,
                "session_id": event.session_id,
                "email": subscriber.email,
                "customer_phone": event.customer_phone,
                "previous_subscription_type": subscriber.subscription_type,
                "subscription_type": new_plan or subscriber.subscription_type,
                "payment_date": paid_at.isoformat(),
            },
        )
        return True

    async def _handle_payment_succeeded(self, event: PaymentSucceededEvent) -> bool:
        """
        Secondary confirmation path.

        Best effort: events that cannot be matched to a subscriber are
        acknowledged without change.
        """
        if not event.customer_email:
            logger.info(
                "Payment succeeded without customer email",
                extra={
                    "event_id": event.event_id,
                    "payment_intent_id": event.payment_intent_id,
                },
            )
            return False

        subscriber = await self.subscriber_repo.get_by_email(event.customer_email)
        if not subscriber:
            logger.info(
                f"No subscriber for payment email: {event.customer_email}",
                extra={
                    "event_id": event.event_id,
                    "payment_intent_id": event.payment_intent_id,
                },
            )
            return False

        paid_at = self.clock()
        await self.subscriber_repo.record_payment(subscriber.id, paid_at)

        logger.info(
            "Payment date updated from payment intent",
            extra={
                "event_id": event.event_id,
                "payment_intent_id": event.payment_intent_id,
                "email": subscriber.email,
                "payment_date": paid_at.isoformat(),
            },
        )
        return True
