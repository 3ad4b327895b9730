"""Domain models for subscribers."""

from packages.subscribers.models.domain.subscriber import (
    Subscriber,
    SubscriberCreateModel,
    SubscriberUpdateModel,
    SubscriberUpsertModel,
    UpsertResult,
)

__all__ = [
    "Subscriber",
    "SubscriberCreateModel",
    "SubscriberUpdateModel",
    "SubscriberUpsertModel",
    "UpsertResult",
]
