"""
API schemas for subscriber operations.

Request and response models for subscriber endpoints. The wire format uses
camelCase field names.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

from packages.subscribers.models.domain.subscriber import (
    RequiredText,
    blank_to_none,
    normalize_email,
)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @field_validator("email", mode="after", check_fields=False)
    @classmethod
    def lowercase_email(cls, v: str) -> str:
        return normalize_email(v)


# ============================================================================
# Registration
# ============================================================================


class SubscriberUpsertRequest(CamelModel):
    """Create or update a subscriber by email."""

    email: EmailStr
    phone: RequiredText
    country_from: RequiredText
    city_from: RequiredText
    country_to: Optional[str] = None
    city_to: Optional[str] = None
    subscription_type: RequiredText
    payment_date: Optional[datetime] = Field(
        default=None,
        description="Only applied to existing subscribers; omitted keeps the stored date.",
    )

    @field_validator("country_to", "city_to", mode="after")
    @classmethod
    def optional_text(cls, v: Optional[str]) -> Optional[str]:
        return blank_to_none(v)


class SubscriberUpsertResponse(CamelModel):
    message: str
    email: str
    payment_updated: bool = Field(
        ..., description="Whether the request carried a payment date"
    )


class SubscriberStatusResponse(CamelModel):
    """Payment state of a subscriber."""

    email: str
    subscription_type: str
    payment_date: Optional[datetime] = None
    has_active_subscription: bool


# ============================================================================
# Payment confirmation
# ============================================================================


class ConfirmPaymentRequest(CamelModel):
    """Manual payment confirmation with an explicit payment date."""

    email: EmailStr
    subscription_type: RequiredText
    payment_date: datetime


class ConfirmPaymentResponse(CamelModel):
    message: str
    email: str
    subscription_type: str


class ConfirmPaymentNowRequest(CamelModel):
    """Payment confirmation after the checkout redirect; paid now."""

    email: EmailStr
    subscription_type: RequiredText


class ConfirmedPayment(CamelModel):
    email: str
    subscription_type: str
    payment_date: Optional[datetime] = None


class ConfirmPaymentNowResponse(CamelModel):
    status: str = "success"
    user: ConfirmedPayment


# ============================================================================
# Diagnostics
# ============================================================================


class DiagnosticEnvironment(CamelModel):
    environment: str
    port: int
    database_connected: str


class DiagnosticResponse(CamelModel):
    status: str
    time: datetime
    env: DiagnosticEnvironment
