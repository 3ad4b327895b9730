"""Payment providers - webhook authenticity checks."""

from packages.billing.providers.payment.interface import WebhookVerifierInterface
from packages.billing.providers.payment.factory import get_webhook_verifier

__all__ = [
    "WebhookVerifierInterface",
    "get_webhook_verifier",
]
