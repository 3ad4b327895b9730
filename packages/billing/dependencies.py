from fastapi import Request

from packages.billing.services.reconciliation_service import ReconciliationService


def get_reconciliation_service(request: Request) -> ReconciliationService:
    """Reconciliation service built once at startup (see api.main.create_app)."""
    return request.app.state.reconciliation_service
