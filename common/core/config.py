from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict

from common.core.constants import (
    DEFAULT_WEBHOOK_SIGNATURE_HEADER,
    DEFAULT_WEBHOOK_TOLERANCE_SECONDS,
    Environment,
)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # Environment Profile
    environment: Environment = Environment.LOCAL

    # API Settings
    app_name: str = "Visaslot Notify API"
    api_version: str = "1.0.0"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000

    # Database - required, the service has no degraded mode without it
    database_url: str
    db_use_nullpool: bool = False
    db_pool_size: int = 10
    db_pool_overflow: int = 5

    @property
    def async_database_url(self) -> str:
        """Database URL with an async driver selected."""
        if self.database_url.startswith("postgresql://"):
            return self.database_url.replace("postgresql://", "postgresql+asyncpg://", 1)
        if self.database_url.startswith("postgres://"):
            return self.database_url.replace("postgres://", "postgresql+asyncpg://", 1)
        return self.database_url

    @property
    def is_postgres(self) -> bool:
        return self.async_database_url.startswith("postgresql+asyncpg://")

    # Billing - Stripe (payments)
    stripe_secret_key: str = ""
    stripe_webhook_secret: str = ""
    stripe_webhook_tolerance: int = DEFAULT_WEBHOOK_TOLERANCE_SECONDS
    webhook_signature_header: str = DEFAULT_WEBHOOK_SIGNATURE_HEADER

    # CORS - comma separated list, "*" allows every origin
    allowed_origins: str = "*"

    @property
    def cors_allowed_origins(self) -> List[str]:
        """Parse ALLOWED_ORIGINS into a list for CORSMiddleware."""
        origins = [o.strip() for o in self.allowed_origins.split(",") if o.strip()]
        return origins or ["*"]

    # Rate limiting
    rate_limit_storage_uri: str = "memory://"

    # OpenTelemetry
    otel_service_name: str = "visaslot-notify"
    otel_service_version: str = "1.0.0"
    otel_exporter_endpoint: Optional[str] = None  # e.g. https://otlp.example.com
    otel_exporter_token: Optional[str] = None

    @property
    def docs_enabled(self) -> bool:
        """Only expose OpenAPI docs in local development."""
        return self.environment == Environment.LOCAL


settings = Settings()
