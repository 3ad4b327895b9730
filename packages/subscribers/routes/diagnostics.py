"""
Diagnostic endpoints for the frontend debug page.

Registered before the subscriber routes so /users/test is not captured by
/users/{email}.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request

from common.core.otel_exporter import get_logger
from common.providers.rate_limiter.limiter import limiter
from packages.subscribers.dependencies import get_subscriber_service
from packages.subscribers.services.subscriber_service import SubscriberService
from packages.subscribers.models.schemas.subscriber import (
    DiagnosticEnvironment,
    DiagnosticResponse,
)

logger = get_logger(__name__)

router = APIRouter()


@router.get("/users/test", response_model=DiagnosticResponse)
@limiter.limit("100/minute")
async def store_diagnostic(
    request: Request,
    subscriber_service: SubscriberService = Depends(get_subscriber_service),
):
    """Report API status and subscriber store connectivity."""
    logger.info("Diagnostic endpoint called")
    settings = request.app.state.settings
    database_status = await subscriber_service.check_store()

    return DiagnosticResponse(
        status="API is working",
        time=datetime.now(timezone.utc),
        env=DiagnosticEnvironment(
            environment=settings.environment.value,
            port=settings.port,
            database_connected=database_status,
        ),
    )


@router.get("/test")
@limiter.limit("100/minute")
async def api_test(request: Request):
    return {"status": "ok", "message": "API is working"}


@router.get("/cors-test")
@limiter.limit("100/minute")
async def cors_test(request: Request):
    """Echo the CORS-relevant request headers and the configured origins."""
    settings = request.app.state.settings
    return {
        "status": "ok",
        "message": "CORS diagnostic information",
        "request": {
            "method": request.method,
            "path": request.url.path,
            "headers": {
                "origin": request.headers.get("origin"),
                "access-control-request-method": request.headers.get(
                    "access-control-request-method"
                ),
                "access-control-request-headers": request.headers.get(
                    "access-control-request-headers"
                ),
            },
        },
        "environment": {
            "allowedOrigins": settings.cors_allowed_origins,
            "environment": settings.environment.value,
        },
    }
