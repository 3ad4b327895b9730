"""Billing services."""

from packages.billing.services.reconciliation_service import (
    ReconciliationResult,
    ReconciliationService,
)

__all__ = [
    "ReconciliationResult",
    "ReconciliationService",
]
