"""
Stripe webhook handler for payment events.

Handles events from Stripe payment platform:
- Checkout session completion (primary payment confirmation)
- Payment intent success (secondary, best effort)

Every other event type is acknowledged and ignored.
"""

from fastapi import Request, HTTPException, status

from common.core.exceptions import AppException
from common.core.otel_exporter import get_logger
from packages.billing.services.reconciliation_service import ReconciliationService

logger = get_logger(__name__)


async def handle_stripe_webhook(
    request: Request, reconciliation_service: ReconciliationService
) -> dict[str, bool]:
    """
    Handle incoming webhook from Stripe.

    The body is passed on as raw bytes; the signature covers them exactly.
    """
    try:
        payload_bytes = await request.body()
        header_name = request.app.state.settings.webhook_signature_header
        sig_header = request.headers.get(header_name)

        result = await reconciliation_service.reconcile(payload_bytes, sig_header)

        logger.info(
            f"Stripe webhook processed: {result.event_type}",
            extra={
                "event_id": result.event_id,
                "event_type": result.event_type,
                "state_changed": result.state_changed,
                "duplicate": result.duplicate,
            },
        )
        return {"received": True}

    except AppException as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    except Exception as e:
        logger.error(f"Error processing Stripe webhook: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Webhook processing failed",
        )
