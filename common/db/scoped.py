"""
Operation-scoped database sessions.

Provides lazy session acquisition that releases connections immediately
after each operation.

Usage:
    # Single operation - acquires and releases immediately
    async with get_session() as session:
        result = await session.get(Model, id)

    # Multiple operations in a transaction - share one session
    async with transaction():
        await repo.save(thing1)
        await repo.save(thing2)
    # Commits together, then releases

Store failures (any SQLAlchemyError) are rolled back and re-raised as
StoreUnavailableError so callers deal with one error kind.
"""

import time
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from common.core.exceptions import StoreUnavailableError
from common.core.otel_exporter import get_logger
from common.db.session import AsyncSessionLocal, AsyncSessionLocalReadonly
from common.db.context import (
    get_current_session,
    set_current_session,
    reset_current_session,
)

logger = get_logger(__name__)


@asynccontextmanager
async def transaction(readonly: bool = False) -> AsyncGenerator[AsyncSession, None]:
    """
    Explicit transaction boundary.

    All DB operations inside share one session/connection.
    Commits on success (unless readonly), rolls back on exception.
    """
    session_factory = AsyncSessionLocalReadonly if readonly else AsyncSessionLocal

    start = time.perf_counter()
    async with session_factory() as session:
        acquire_time = time.perf_counter() - start
        logger.debug(
            f"Transaction session acquire: {acquire_time * 1000:.2f}ms, readonly={readonly}"
        )

        token = set_current_session(session, readonly=readonly)
        try:
            yield session
            if not readonly:
                commit_start = time.perf_counter()
                await session.commit()
                commit_time = time.perf_counter() - commit_start
                logger.debug(f"Transaction commit: {commit_time * 1000:.2f}ms")
        except SQLAlchemyError as e:
            logger.error(f"Transaction rollback due to store error: {e}")
            await session.rollback()
            raise StoreUnavailableError("Subscriber store unavailable") from e
        except Exception as e:
            logger.info(f"Transaction rollback due to: {e}")
            await session.rollback()
            raise
        finally:
            reset_current_session(token, readonly=readonly)


@asynccontextmanager
async def get_session(readonly: bool = False) -> AsyncGenerator[AsyncSession, None]:
    """
    Get a session for a single DB operation.

    - Reuses session if inside a transaction() block
    - Otherwise acquires a new session, auto-commits, and releases immediately
    """
    existing = get_current_session(readonly=readonly)

    if existing:
        # Inside a transaction - reuse session, don't commit (transaction handles it)
        yield existing
        return

    session_factory = AsyncSessionLocalReadonly if readonly else AsyncSessionLocal

    start = time.perf_counter()
    async with session_factory() as session:
        acquire_time = time.perf_counter() - start
        logger.debug(
            f"Operation session acquire: {acquire_time * 1000:.2f}ms, readonly={readonly}"
        )

        try:
            yield session
            if not readonly:
                await session.commit()
        except SQLAlchemyError as e:
            logger.error(f"Operation rollback due to store error: {e}")
            await session.rollback()
            raise StoreUnavailableError("Subscriber store unavailable") from e
        except Exception as e:
            logger.info(f"Operation rollback due to: {e}")
            await session.rollback()
            raise
