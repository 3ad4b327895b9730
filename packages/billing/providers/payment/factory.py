"""
Factory for getting the webhook verifier instance.
"""

from common.core.config import Settings
from common.core.otel_exporter import get_logger
from packages.billing.providers.payment.interface import WebhookVerifierInterface
from packages.billing.providers.payment.stripe_webhook_verifier import (
    StripeWebhookVerifier,
)

logger = get_logger(__name__)


def get_webhook_verifier(config: Settings) -> WebhookVerifierInterface:
    """
    Build the webhook verifier from configuration.

    Only Stripe is supported.
    """
    logger.info(
        "Stripe configured",
        extra={
            "api_key_configured": bool(config.stripe_secret_key),
            "webhook_secret_configured": bool(config.stripe_webhook_secret),
        },
    )
    if not config.stripe_webhook_secret:
        logger.warning("STRIPE_WEBHOOK_SECRET is empty; webhooks will be rejected")

    return StripeWebhookVerifier(
        secret=config.stripe_webhook_secret,
        tolerance=config.stripe_webhook_tolerance,
    )
