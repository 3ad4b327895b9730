"""
Stripe implementation of the webhook verifier.
"""

from typing import Optional
import stripe

from common.core.constants import DEFAULT_WEBHOOK_TOLERANCE_SECONDS
from common.core.exceptions import InvalidSignatureError, MisconfiguredError
from common.core.otel_exporter import trace_span, get_logger
from packages.billing.providers.payment.interface import WebhookVerifierInterface

logger = get_logger(__name__)


class StripeWebhookVerifier(WebhookVerifierInterface):
    """Verifies the `t=<timestamp>,v1=<hmac>` Stripe-Signature scheme."""

    def __init__(
        self, secret: str, tolerance: int = DEFAULT_WEBHOOK_TOLERANCE_SECONDS
    ):
        self.secret = secret
        self.tolerance = tolerance

    @trace_span
    def verify(self, payload: bytes, signature: Optional[str]) -> None:
        if not self.secret:
            logger.error("Stripe webhook secret is not configured")
            raise MisconfiguredError("Webhook secret not configured")

        if not signature:
            logger.warning("Stripe webhook received without signature header")
            raise InvalidSignatureError("Missing signature header")

        try:
            stripe.WebhookSignature.verify_header(
                payload.decode("utf-8"),
                signature,
                self.secret,
                tolerance=self.tolerance,
            )
        except (stripe.SignatureVerificationError, ValueError) as e:
            logger.error(f"Stripe webhook signature verification failed: {str(e)}")
            raise InvalidSignatureError("Invalid signature") from e
