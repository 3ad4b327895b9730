"""Billing repositories."""

from packages.billing.repositories.processed_event_repository import (
    ProcessedEventRepository,
)

__all__ = [
    "ProcessedEventRepository",
]
