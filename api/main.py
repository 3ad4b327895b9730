from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.middleware import SlowAPIMiddleware
from slowapi.errors import RateLimitExceeded

# Telemetry must be initialized before anything else logs
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.asgi import OpenTelemetryMiddleware
from common.core.otel_exporter import (
    _initialize_telemetry,
    get_logger,
)  # noqa

from common.core.config import Settings, settings
from common.core.exceptions import AppException
from common.db.session import init_db, close_db
from common.providers.rate_limiter.limiter import limiter
from api.routes import health
from api.routes.router import api_router
from packages.billing.providers.payment.factory import get_webhook_verifier
from packages.billing.repositories.processed_event_repository import (
    ProcessedEventRepository,
)
from packages.billing.services.reconciliation_service import ReconciliationService
from packages.subscribers.repositories.subscriber_repository import (
    SubscriberRepository,
)
from packages.subscribers.services.subscriber_service import SubscriberService

_initialize_telemetry()

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup - an unreachable store is fatal
    logger.info("Starting application...")
    await init_db()
    logger.info("Database initialized")
    yield
    # Shutdown
    logger.info("Shutting down application...")
    await close_db()


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.info(
        "Request validation failed",
        extra={"path": request.url.path, "error_count": len(exc.errors())},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "detail": "Validation failed",
            "errors": jsonable_encoder(exc.errors()),
        },
    )


async def app_exception_handler(request: Request, exc: AppException):
    logger.warning(
        f"{exc.__class__.__name__}: {exc.message}",
        extra={"path": request.url.path, "status_code": exc.status_code},
    )
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(
        f"Unhandled error on {request.url.path}: {exc}",
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


def create_app(config: Optional[Settings] = None) -> FastAPI:
    """Build the application and its services from configuration."""
    config = config or settings

    # Only expose OpenAPI docs in local development
    docs_url = "/docs" if config.docs_enabled else None
    redoc_url = "/redoc" if config.docs_enabled else None
    openapi_url = "/openapi.json" if config.docs_enabled else None

    app = FastAPI(
        title=config.app_name,
        version=config.api_version,
        lifespan=lifespan,
        docs_url=docs_url,
        redoc_url=redoc_url,
        openapi_url=openapi_url,
    )

    app.state.settings = config

    # Services are built once and shared by every request
    subscriber_repo = SubscriberRepository()
    app.state.subscriber_service = SubscriberService(subscriber_repo=subscriber_repo)
    app.state.reconciliation_service = ReconciliationService(
        verifier=get_webhook_verifier(config),
        subscriber_repo=subscriber_repo,
        event_repo=ProcessedEventRepository(),
    )

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
    app.add_middleware(SlowAPIMiddleware)

    # Instrument FastAPI with OpenTelemetry
    FastAPIInstrumentor.instrument_app(app)
    # Add ASGI middleware for context propagation
    app.add_middleware(OpenTelemetryMiddleware)

    # Add gzip compression middleware
    app.add_middleware(GZipMiddleware, minimum_size=1000)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_allowed_origins,
        allow_credentials="*" not in config.cors_allowed_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # /health sits outside /api for uptime checks
    app.include_router(health.router, tags=["health"])
    app.include_router(api_router, prefix="/api")

    return app


app = create_app(settings)


def main():
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
