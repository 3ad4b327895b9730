"""
Webhook endpoints for billing events.

Public endpoints (no auth required) for Stripe webhooks.
"""

from fastapi import APIRouter, Depends, Request

from packages.billing.dependencies import get_reconciliation_service
from packages.billing.services.reconciliation_service import ReconciliationService
from packages.billing.webhooks.stripe_webhook import handle_stripe_webhook

router = APIRouter()


@router.post("/webhook")
async def stripe_webhook(
    request: Request,
    reconciliation_service: ReconciliationService = Depends(
        get_reconciliation_service
    ),
) -> dict[str, bool]:
    """
    Receive webhook events from Stripe payment platform.

    No authentication required - webhook signature validated internally.
    """
    return await handle_stripe_webhook(request, reconciliation_service)
