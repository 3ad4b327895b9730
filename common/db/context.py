"""
Database session context management.

Provides lazy session acquisition that:
- Reuses sessions within explicit transactions
- Auto-acquires/releases for one-off operations
- Supports reader/writer separation

Usage:
    # In repositories - auto-manages sessions
    async with get_session() as session:
        result = await session.execute(query)

    # Explicit transaction - multiple ops share one session
    async with transaction():
        await repo.save(thing1)
        await repo.save(thing2)  # Same session, commits together
"""

from contextvars import ContextVar, Token
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession


# Holds the current write session (if inside a write transaction)
_write_session: ContextVar[Optional[AsyncSession]] = ContextVar(
    "db_write_session", default=None
)

# Holds the current read session (if inside a read transaction)
_read_session: ContextVar[Optional[AsyncSession]] = ContextVar(
    "db_read_session", default=None
)


def get_current_session(readonly: bool = False) -> Optional[AsyncSession]:
    """
    Get the current session from context, if any.

    A write transaction's session also serves reads, so lookups made inside
    a transaction() see that transaction's uncommitted writes.
    """
    if readonly:
        return _read_session.get() or _write_session.get()
    return _write_session.get()


def set_current_session(session: AsyncSession, readonly: bool = False) -> Token:
    if readonly:
        return _read_session.set(session)
    return _write_session.set(session)


def reset_current_session(token: Token, readonly: bool = False) -> None:
    if readonly:
        _read_session.reset(token)
    else:
        _write_session.reset(token)
