from typing import Any, Dict
from uuid import uuid4

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy import pool, text

from common.core.config import Settings, settings
from common.core.otel_exporter import get_logger

logger = get_logger(__name__)


def build_engine_kwargs(config: Settings) -> Dict[str, Any]:
    """
    Engine options for the configured backend.

    NullPool (db_use_nullpool=True): No pooling, new connection per operation
    Default pool: Connection pooling (for API servers with concurrent requests)
    Pool sizing and asyncpg statement naming only apply to PostgreSQL.
    """
    engine_kwargs: Dict[str, Any] = {
        "echo": config.debug,
        "pool_pre_ping": True,
    }

    if not config.is_postgres:
        return engine_kwargs

    engine_kwargs["pool_recycle"] = 3600
    engine_kwargs["connect_args"] = {
        "prepared_statement_name_func": lambda: f"__asyncpg_{uuid4()}__",
    }

    if config.db_use_nullpool:
        logger.info("Using NullPool - no connection pooling")
        engine_kwargs["poolclass"] = pool.NullPool
    else:
        logger.info(
            f"Using connection pooling - pool_size={config.db_pool_size}, max_overflow={config.db_pool_overflow}"
        )
        engine_kwargs["pool_size"] = config.db_pool_size
        engine_kwargs["max_overflow"] = config.db_pool_overflow

    return engine_kwargs


engine = create_async_engine(settings.async_database_url, **build_engine_kwargs(settings))
AsyncSessionLocal = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)

# Point this at a read replica's engine when one exists
AsyncSessionLocalReadonly = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)


async def init_db():
    """
    Verify the store is reachable.

    Schema is owned by Alembic migrations. A connection failure here is fatal:
    the exception propagates out of the application lifespan.
    """
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        logger.error(f"Database connection error: {e}")
        raise
    logger.info(f"Database connected ({engine.url.get_backend_name()})")


async def close_db():
    await engine.dispose()
    logger.info("Database disconnected")
