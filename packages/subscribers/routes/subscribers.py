"""
Subscriber API routes.

Public endpoints used by the signup form and the checkout redirect page.
"""

from fastapi import APIRouter, Depends, HTTPException, Response, status

from common.core.exceptions import SubscriberNotFoundError
from common.core.otel_exporter import get_logger
from packages.subscribers.dependencies import get_subscriber_service
from packages.subscribers.services.subscriber_service import SubscriberService
from packages.subscribers.models.domain.subscriber import SubscriberUpsertModel
from packages.subscribers.models.schemas.subscriber import (
    ConfirmedPayment,
    ConfirmPaymentNowRequest,
    ConfirmPaymentNowResponse,
    ConfirmPaymentRequest,
    ConfirmPaymentResponse,
    SubscriberStatusResponse,
    SubscriberUpsertRequest,
    SubscriberUpsertResponse,
)

logger = get_logger(__name__)

router = APIRouter()


@router.post("/users", response_model=SubscriberUpsertResponse)
async def upsert_subscriber(
    request: SubscriberUpsertRequest,
    response: Response,
    subscriber_service: SubscriberService = Depends(get_subscriber_service),
):
    """
    Create or update a subscriber.

    Returns 201 when the subscriber was created and 200 when it was updated.
    """
    result = await subscriber_service.upsert_subscriber(
        SubscriberUpsertModel(**request.model_dump())
    )

    if result.created:
        response.status_code = status.HTTP_201_CREATED
        message = "User created successfully"
    else:
        response.status_code = status.HTTP_200_OK
        message = "User updated successfully"

    return SubscriberUpsertResponse(
        message=message,
        email=result.subscriber.email,
        payment_updated=result.payment_updated,
    )


@router.post("/users/confirm-payment", response_model=ConfirmPaymentResponse)
async def confirm_payment(
    request: ConfirmPaymentRequest,
    subscriber_service: SubscriberService = Depends(get_subscriber_service),
):
    """Confirm a payment with an explicit payment date."""
    try:
        await subscriber_service.confirm_payment(
            email=request.email,
            subscription_type=request.subscription_type,
            payment_date=request.payment_date,
        )
    except SubscriberNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="User not found"
        )

    return ConfirmPaymentResponse(
        message="Payment confirmed successfully",
        email=request.email,
        subscription_type=request.subscription_type,
    )


@router.get("/users/{email}", response_model=SubscriberStatusResponse)
async def get_subscriber_status(
    email: str,
    subscriber_service: SubscriberService = Depends(get_subscriber_service),
):
    """Get the payment status of a subscriber."""
    try:
        subscriber = await subscriber_service.get_subscriber(email)
    except SubscriberNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="User not found"
        )

    return SubscriberStatusResponse(
        email=subscriber.email,
        subscription_type=subscriber.subscription_type,
        payment_date=subscriber.payment_date,
        has_active_subscription=subscriber.has_active_subscription(),
    )


@router.post("/confirm-payment", response_model=ConfirmPaymentNowResponse)
async def confirm_payment_now(
    request: ConfirmPaymentNowRequest,
    subscriber_service: SubscriberService = Depends(get_subscriber_service),
):
    """
    Confirm a payment after the checkout redirect.

    The payment date is the time of this call.
    """
    try:
        subscriber = await subscriber_service.confirm_payment(
            email=request.email, subscription_type=request.subscription_type
        )
    except SubscriberNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="User not found"
        )

    return ConfirmPaymentNowResponse(
        user=ConfirmedPayment(
            email=subscriber.email,
            subscription_type=subscriber.subscription_type,
            payment_date=subscriber.payment_date,
        )
    )
