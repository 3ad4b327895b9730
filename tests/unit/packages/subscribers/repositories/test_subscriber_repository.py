"""
Unit tests for SubscriberRepository.

Tests database operations for subscribers without mocking the database.
"""

import pytest
from datetime import datetime, timezone

from common.db.scoped import transaction
from packages.subscribers.repositories.subscriber_repository import (
    SubscriberRepository,
)
from packages.subscribers.models.domain.subscriber import (
    SubscriberCreateModel,
    SubscriberUpdateModel,
)


@pytest.mark.asyncio
class TestSubscriberRepository:
    """Tests for SubscriberRepository."""

    async def test_create_subscriber(self):
        """Test creating a subscriber stores a lower-cased email and no payment."""
        repo = SubscriberRepository()

        subscriber = await repo.create(
            SubscriberCreateModel(
                email="New.User@Example.com",
                phone="+15550003333",
                country_from="Italy",
                city_from="Rome",
                subscription_type="basic",
            )
        )

        assert subscriber.id is not None
        assert subscriber.email == "new.user@example.com"
        assert subscriber.country_to is None
        assert subscriber.payment_date is None
        assert subscriber.has_active_subscription() is False

    async def test_get_by_email_is_case_insensitive(self, sample_subscriber):
        """Test lookup ignores case and surrounding whitespace."""
        repo = SubscriberRepository()

        subscriber = await repo.get_by_email("  USER@Example.COM ")

        assert subscriber is not None
        assert subscriber.id == sample_subscriber.id

    async def test_get_by_email_not_found(self):
        """Test lookup of an unknown email returns None."""
        repo = SubscriberRepository()

        assert await repo.get_by_email("nobody@example.com") is None

    async def test_update_only_writes_set_fields(self, sample_subscriber):
        """Test fields left out of the update model are untouched."""
        repo = SubscriberRepository()

        updated = await repo.update(
            sample_subscriber.id, SubscriberUpdateModel(phone="+15559999999")
        )

        assert updated.phone == "+15559999999"
        assert updated.city_from == "Berlin"
        assert updated.subscription_type == "basic"

    async def test_record_payment_sets_date(self, sample_subscriber):
        """Test recording a payment keeps the plan when none is given."""
        repo = SubscriberRepository()
        paid_at = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)

        assert await repo.record_payment(sample_subscriber.id, paid_at) is True

        subscriber = await repo.get(sample_subscriber.id)
        assert subscriber.payment_date.replace(tzinfo=None) == datetime(2024, 3, 1, 12, 0)
        assert subscriber.subscription_type == "basic"
        assert subscriber.has_active_subscription() is True

    async def test_record_payment_overwrites_plan(self, sample_subscriber):
        """Test recording a payment with a plan overwrites subscription_type."""
        repo = SubscriberRepository()

        async with transaction():
            await repo.record_payment(
                sample_subscriber.id,
                datetime.now(timezone.utc),
                subscription_type="pro",
            )

        subscriber = await repo.get_by_email("user@example.com")
        assert subscriber.subscription_type == "pro"

    async def test_record_payment_unknown_id(self):
        """Test recording a payment for a missing row reports no update."""
        repo = SubscriberRepository()

        assert await repo.record_payment(9999, datetime.now(timezone.utc)) is False

    async def test_ping(self):
        """Test ping succeeds against a reachable store."""
        repo = SubscriberRepository()

        await repo.ping()
