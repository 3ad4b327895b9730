# Shared pytest configuration and fixtures for all test types
import os

# Settings are read at import time; point them at the test store first
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["STRIPE_WEBHOOK_SECRET"] = "whsec_test_secret"
os.environ.setdefault("ENVIRONMENT", "local")

import pytest_asyncio  # noqa: E402
from httpx import AsyncClient, ASGITransport  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    create_async_engine,
    async_sessionmaker,
)
from sqlalchemy.pool import StaticPool  # noqa: E402
from slowapi import Limiter  # noqa: E402
from slowapi.util import get_remote_address  # noqa: E402
from unittest.mock import patch  # noqa: E402
from datetime import datetime, timezone  # noqa: E402

# Create test limiter with no limits and in-memory storage
test_limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[],
    storage_uri="memory://",
)

# Patch the limiter before importing the app so decorators use test limiter
with patch("common.providers.rate_limiter.limiter.limiter", test_limiter):
    from api.main import app

from common.db.base import Base  # noqa: E402
from packages.subscribers.models.database.subscriber import (  # noqa: E402
    SubscriberEntity,
)
from packages.billing.models.database.processed_event import (  # noqa: E402, F401
    ProcessedWebhookEventEntity,
)

# Test database URL
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Create test database engine and initialize schema."""
    engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def test_connection(test_engine):
    """Create test connection with outer transaction for rollback isolation."""
    async with test_engine.connect() as connection:
        trans = await connection.begin()
        yield connection
        await trans.rollback()


@pytest_asyncio.fixture(scope="function")
async def test_session_factory(test_connection):
    """Create session factory bound to test connection.

    Using join_transaction_mode="create_savepoint" so nested transaction()
    calls create savepoints instead of real nested transactions.
    """
    return async_sessionmaker(
        bind=test_connection,
        class_=AsyncSession,
        expire_on_commit=False,
        join_transaction_mode="create_savepoint",
    )


@pytest_asyncio.fixture(scope="function")
async def test_db(test_session_factory):
    """Create a test database session."""
    async with test_session_factory() as session:
        yield session


@pytest_asyncio.fixture(scope="function", autouse=True)
async def patch_lazy_sessions(test_session_factory, monkeypatch):
    """
    Patch session factories to use test database.

    This allows real transaction() and get_session() to run with proper
    commit/rollback/ContextVar semantics while using the test database.
    """
    monkeypatch.setattr("common.db.scoped.AsyncSessionLocal", test_session_factory)
    monkeypatch.setattr(
        "common.db.scoped.AsyncSessionLocalReadonly", test_session_factory
    )


@pytest_asyncio.fixture(scope="function")
async def client():
    """Create a test client."""
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac


@pytest_asyncio.fixture(scope="function")
async def sample_subscriber(test_db: AsyncSession):
    """A registered subscriber without a confirmed payment."""
    subscriber = SubscriberEntity(
        email="user@example.com",
        phone="+15550001111",
        country_from="Germany",
        city_from="Berlin",
        country_to="France",
        city_to="Paris",
        subscription_type="basic",
    )
    test_db.add(subscriber)
    await test_db.commit()
    await test_db.refresh(subscriber)
    return subscriber


@pytest_asyncio.fixture(scope="function")
async def paid_subscriber(test_db: AsyncSession):
    """A subscriber whose payment was confirmed earlier."""
    subscriber = SubscriberEntity(
        email="paid@example.com",
        phone="+15550002222",
        country_from="Spain",
        city_from="Madrid",
        subscription_type="pro",
        payment_date=datetime(2024, 1, 15, 10, 0, tzinfo=timezone.utc),
    )
    test_db.add(subscriber)
    await test_db.commit()
    await test_db.refresh(subscriber)
    return subscriber
