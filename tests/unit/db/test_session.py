"""
Unit tests for store startup checks.
"""

import pytest
import pytest_asyncio
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import create_async_engine

from api.main import app, lifespan
from common.db import session as db_session

# The parent directory does not exist, so sqlite cannot open the file
UNREACHABLE_DATABASE_URL = "sqlite+aiosqlite:////nonexistent-dir/visaslot.db"


@pytest_asyncio.fixture
async def unreachable_engine(monkeypatch):
    engine = create_async_engine(UNREACHABLE_DATABASE_URL)
    monkeypatch.setattr(db_session, "engine", engine)
    yield engine
    await engine.dispose()


@pytest.mark.asyncio
class TestInitDb:
    async def test_reachable_store(self, monkeypatch):
        engine = create_async_engine("sqlite+aiosqlite:///:memory:")
        monkeypatch.setattr(db_session, "engine", engine)

        try:
            await db_session.init_db()
        finally:
            await engine.dispose()

    async def test_unreachable_store_raises(self, unreachable_engine):
        with pytest.raises(OperationalError):
            await db_session.init_db()


@pytest.mark.asyncio
class TestLifespan:
    async def test_unreachable_store_aborts_startup(self, unreachable_engine):
        with pytest.raises(OperationalError):
            async with lifespan(app):
                pytest.fail("application started without a store")
