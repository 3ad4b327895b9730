"""Database entities for subscribers."""

from packages.subscribers.models.database.subscriber import SubscriberEntity

__all__ = ["SubscriberEntity"]
