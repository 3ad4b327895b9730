"""
Domain models for subscribers.
"""

from datetime import datetime
from typing import Annotated, Optional
from pydantic import BaseModel, ConfigDict, EmailStr, StringConstraints, field_validator

RequiredText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


def normalize_email(email: str) -> str:
    """Emails are case-insensitive keys: compare and store them lower-cased."""
    return email.strip().lower()


def blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class Subscriber(BaseModel):
    """
    Notification subscriber domain model.

    A subscriber is registered as soon as it exists; it has an active
    subscription once a payment date has been recorded.
    """

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    phone: str
    country_from: str
    city_from: str
    country_to: Optional[str] = None
    city_to: Optional[str] = None
    subscription_type: str
    payment_date: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def has_active_subscription(self) -> bool:
        """Check if a payment has been confirmed for this subscriber."""
        return self.payment_date is not None


class SubscriberUpsertModel(BaseModel):
    """Registration data for creating or updating a subscriber by email."""

    email: EmailStr
    phone: RequiredText
    country_from: RequiredText
    city_from: RequiredText
    country_to: Optional[str] = None
    city_to: Optional[str] = None
    subscription_type: RequiredText
    payment_date: Optional[datetime] = None

    @field_validator("email", mode="after")
    @classmethod
    def lowercase_email(cls, v: str) -> str:
        return normalize_email(v)

    @field_validator("country_to", "city_to", mode="after")
    @classmethod
    def optional_text(cls, v: Optional[str]) -> Optional[str]:
        return blank_to_none(v)


class SubscriberCreateModel(BaseModel):
    """Model for creating a new subscriber. Payment date is never set on creation."""

    email: str
    phone: str
    country_from: str
    city_from: str
    country_to: Optional[str] = None
    city_to: Optional[str] = None
    subscription_type: str

    @field_validator("email", mode="after")
    @classmethod
    def lowercase_email(cls, v: str) -> str:
        return normalize_email(v)


class SubscriberUpdateModel(BaseModel):
    """Model for updating a subscriber.

    Only fields that are explicitly set are written.
    """

    phone: Optional[str] = None
    country_from: Optional[str] = None
    city_from: Optional[str] = None
    country_to: Optional[str] = None
    city_to: Optional[str] = None
    subscription_type: Optional[str] = None
    payment_date: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class UpsertResult(BaseModel):
    """Outcome of a subscriber upsert."""

    subscriber: Subscriber
    created: bool
    payment_updated: bool
