"""
Domain models for Stripe webhook payloads.

Strongly-typed Pydantic models for the Stripe objects we read, plus the
tagged payment-event variants the reconciliation service works with. A raw
payload is parsed exactly once by parse_payment_event().
"""

from typing import Any, List, Literal, Optional, Union
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field

from packages.subscribers.models.domain.subscriber import normalize_email


class StripeWebhookType(str, Enum):
    """Stripe webhook event types that can change subscriber state."""

    CHECKOUT_SESSION_COMPLETED = "checkout.session.completed"
    PAYMENT_INTENT_SUCCEEDED = "payment_intent.succeeded"


class PaymentEventKind(str, Enum):
    """Tag of a parsed payment event."""

    CHECKOUT_COMPLETED = "checkout_completed"
    PAYMENT_SUCCEEDED = "payment_succeeded"
    IGNORED = "ignored"


# ============================================================================
# Stripe objects
# ============================================================================


class StripeObject(BaseModel):
    # Stripe adds fields over time; we only name the ones we read
    model_config = ConfigDict(extra="ignore")


class StripeMetadata(StripeObject):
    """Checkout metadata set by the frontend when creating the session."""

    phone: Optional[str] = None
    plan_type: Optional[str] = None


class StripeCustomerDetails(StripeObject):
    email: Optional[str] = None
    phone: Optional[str] = None


class StripeCheckoutSessionData(StripeObject):
    """Stripe checkout session object."""

    id: str
    customer_email: Optional[str] = None
    customer_details: Optional[StripeCustomerDetails] = None
    metadata: Optional[StripeMetadata] = None


class StripeBillingDetails(StripeObject):
    email: Optional[str] = None


class StripeCharge(StripeObject):
    billing_details: StripeBillingDetails = Field(default_factory=StripeBillingDetails)


class StripeChargeList(StripeObject):
    data: List[StripeCharge] = Field(default_factory=list)


class StripePaymentIntentData(StripeObject):
    """Stripe payment intent object."""

    id: str
    receipt_email: Optional[str] = None
    charges: Optional[StripeChargeList] = None


class StripeEventData(StripeObject):
    """Stripe event data wrapper."""

    object: dict[str, Any]


class StripeWebhookPayload(StripeObject):
    """Complete Stripe webhook payload."""

    id: str
    type: str
    data: StripeEventData


# ============================================================================
# Parsed payment events
# ============================================================================


def _first_email(*candidates: Optional[str]) -> Optional[str]:
    """First non-empty candidate, normalised."""
    for candidate in candidates:
        if candidate and candidate.strip():
            return normalize_email(candidate)
    return None


class CheckoutCompletedEvent(BaseModel):
    """A completed checkout; the primary payment confirmation."""

    kind: Literal[PaymentEventKind.CHECKOUT_COMPLETED] = (
        PaymentEventKind.CHECKOUT_COMPLETED
    )
    event_id: str
    event_type: str = StripeWebhookType.CHECKOUT_SESSION_COMPLETED.value
    session_id: str
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    plan_type: Optional[str] = None

    @classmethod
    def from_session(
        cls, event_id: str, session: StripeCheckoutSessionData
    ) -> "CheckoutCompletedEvent":
        details = session.customer_details or StripeCustomerDetails()
        metadata = session.metadata or StripeMetadata()
        return cls(
            event_id=event_id,
            session_id=session.id,
            customer_email=_first_email(details.email, session.customer_email),
            customer_phone=metadata.phone or details.phone,
            plan_type=(metadata.plan_type or "").strip() or None,
        )


class PaymentSucceededEvent(BaseModel):
    """A successful payment intent; a best-effort secondary confirmation."""

    kind: Literal[PaymentEventKind.PAYMENT_SUCCEEDED] = (
        PaymentEventKind.PAYMENT_SUCCEEDED
    )
    event_id: str
    event_type: str = StripeWebhookType.PAYMENT_INTENT_SUCCEEDED.value
    payment_intent_id: str
    customer_email: Optional[str] = None

    @classmethod
    def from_payment_intent(
        cls, event_id: str, intent: StripePaymentIntentData
    ) -> "PaymentSucceededEvent":
        charges = intent.charges.data if intent.charges else []
        charge_email = charges[0].billing_details.email if charges else None
        return cls(
            event_id=event_id,
            payment_intent_id=intent.id,
            customer_email=_first_email(intent.receipt_email, charge_email),
        )


class IgnoredEvent(BaseModel):
    """Any other event type; accepted without state change."""

    kind: Literal[PaymentEventKind.IGNORED] = PaymentEventKind.IGNORED
    event_id: str
    event_type: str


PaymentEvent = Union[CheckoutCompletedEvent, PaymentSucceededEvent, IgnoredEvent]


def parse_payment_event(payload: bytes) -> PaymentEvent:
    """
    Parse a verified webhook payload into a payment event variant.

    Raises pydantic.ValidationError if the payload is not a Stripe event or
    a handled event's object is malformed.
    """
    envelope = StripeWebhookPayload.model_validate_json(payload)
    data = envelope.data.object

    if envelope.type == StripeWebhookType.CHECKOUT_SESSION_COMPLETED.value:
        session = StripeCheckoutSessionData.model_validate(data)
        return CheckoutCompletedEvent.from_session(envelope.id, session)

    if envelope.type == StripeWebhookType.PAYMENT_INTENT_SUCCEEDED.value:
        intent = StripePaymentIntentData.model_validate(data)
        return PaymentSucceededEvent.from_payment_intent(envelope.id, intent)

    return IgnoredEvent(event_id=envelope.id, event_type=envelope.type)
