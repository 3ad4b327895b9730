"""Billing domain models."""

from packages.billing.models.domain.processed_event import (
    ProcessedWebhookEvent,
    ProcessedWebhookEventCreateModel,
)
from packages.billing.models.domain.stripe_webhooks import (
    CheckoutCompletedEvent,
    IgnoredEvent,
    PaymentEvent,
    PaymentEventKind,
    PaymentSucceededEvent,
    StripeWebhookType,
    parse_payment_event,
)

__all__ = [
    "ProcessedWebhookEvent",
    "ProcessedWebhookEventCreateModel",
    "CheckoutCompletedEvent",
    "IgnoredEvent",
    "PaymentEvent",
    "PaymentEventKind",
    "PaymentSucceededEvent",
    "StripeWebhookType",
    "parse_payment_event",
]
