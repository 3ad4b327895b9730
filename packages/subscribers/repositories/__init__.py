"""Subscriber repositories."""

from packages.subscribers.repositories.subscriber_repository import (
    SubscriberRepository,
)

__all__ = ["SubscriberRepository"]
