"""Subscriber services."""

from packages.subscribers.services.subscriber_service import SubscriberService

__all__ = ["SubscriberService"]
