"""
Unit tests for the Stripe webhook endpoint.
"""

import pytest
from httpx import AsyncClient, ASGITransport
from unittest.mock import AsyncMock, patch

from api.main import create_app
from common.core.config import settings
from packages.subscribers.repositories.subscriber_repository import (
    SubscriberRepository,
)
from tests.fixtures.stripe_events import (
    checkout_completed_event,
    other_event,
    payment_succeeded_event,
    sign_payload,
)


async def _post_webhook(
    client, payload: bytes, signature=None, header="stripe-signature"
):
    headers = {"Content-Type": "application/json"}
    if signature is not None:
        headers[header] = signature
    return await client.post("/api/webhook", content=payload, headers=headers)


async def _client_for(**overrides):
    app = create_app(settings.model_copy(update=overrides))
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


@pytest.mark.asyncio
class TestStripeWebhookRoute:
    """Tests for POST /api/webhook."""

    async def test_checkout_completed_activates_subscriber(self, client):
        """Register as pro, pay with plan_type=pro, lookup shows an active pro plan."""
        registration = await client.post(
            "/api/users",
            json={
                "email": "user@example.com",
                "phone": "+15550001111",
                "countryFrom": "Germany",
                "cityFrom": "Berlin",
                "subscriptionType": "pro",
            },
        )
        assert registration.status_code == 201

        payload = checkout_completed_event(email="user@example.com", plan_type="pro")
        response = await _post_webhook(client, payload, sign_payload(payload))

        assert response.status_code == 200
        assert response.json() == {"received": True}

        status = await client.get("/api/users/user@example.com")
        assert status.status_code == 200
        assert status.json()["hasActiveSubscription"] is True
        assert status.json()["subscriptionType"] == "pro"

    async def test_replay_answers_the_same(self, client, sample_subscriber):
        payload = checkout_completed_event(plan_type="premium")
        signature = sign_payload(payload)

        first = await _post_webhook(client, payload, signature)
        second = await _post_webhook(client, payload, signature)

        assert first.status_code == second.status_code == 200
        assert first.json() == second.json() == {"received": True}

        subscribers = await SubscriberRepository().get_multi()
        assert len(subscribers) == 1
        assert subscribers[0].subscription_type == "premium"

    async def test_invalid_signature_returns_400_without_write(
        self, client, sample_subscriber
    ):
        payload = checkout_completed_event(plan_type="pro")

        response = await _post_webhook(
            client, payload, sign_payload(payload, secret="whsec_wrong")
        )

        assert response.status_code == 400
        assert response.json() == {"detail": "Invalid signature"}
        subscriber = await SubscriberRepository().get_by_email("user@example.com")
        assert subscriber.payment_date is None
        assert subscriber.subscription_type == "basic"

    async def test_missing_signature_returns_400(self, client, sample_subscriber):
        response = await _post_webhook(client, checkout_completed_event())

        assert response.status_code == 400

    async def test_missing_email_returns_400(self, client, sample_subscriber):
        payload = checkout_completed_event(email=None)

        response = await _post_webhook(client, payload, sign_payload(payload))

        assert response.status_code == 400
        subscriber = await SubscriberRepository().get_by_email("user@example.com")
        assert subscriber.payment_date is None

    async def test_unknown_subscriber_returns_404(self, client):
        payload = checkout_completed_event(email="ghost@example.com")

        response = await _post_webhook(client, payload, sign_payload(payload))

        assert response.status_code == 404
        assert await SubscriberRepository().get_by_email("ghost@example.com") is None

    async def test_unparseable_payload_returns_400(self, client):
        payload = b"definitely not json"

        response = await _post_webhook(client, payload, sign_payload(payload))

        assert response.status_code == 400
        assert response.json() == {"detail": "Invalid payload"}

    async def test_payment_succeeded_for_unknown_email_is_acknowledged(self, client):
        payload = payment_succeeded_event(receipt_email="ghost@example.com")

        response = await _post_webhook(client, payload, sign_payload(payload))

        assert response.status_code == 200
        assert response.json() == {"received": True}

    async def test_ignored_event_is_acknowledged(self, client):
        payload = other_event()

        response = await _post_webhook(client, payload, sign_payload(payload))

        assert response.status_code == 200

    async def test_unexpected_error_returns_500(self, client, sample_subscriber):
        payload = checkout_completed_event()

        with patch(
            "packages.subscribers.repositories.subscriber_repository.SubscriberRepository.record_payment",
            new=AsyncMock(side_effect=RuntimeError("boom")),
        ):
            response = await _post_webhook(client, payload, sign_payload(payload))

        assert response.status_code == 500
        assert response.json() == {"detail": "Webhook processing failed"}


@pytest.mark.asyncio
class TestStripeWebhookConfiguration:
    async def test_missing_secret_returns_400(self):
        payload = checkout_completed_event()

        async with await _client_for(stripe_webhook_secret="") as client:
            response = await _post_webhook(client, payload, sign_payload(payload))

        assert response.status_code == 400
        assert response.json() == {"detail": "Webhook secret not configured"}

    async def test_custom_signature_header(self, sample_subscriber):
        payload = checkout_completed_event()

        async with await _client_for(
            webhook_signature_header="x-provider-signature"
        ) as client:
            response = await _post_webhook(
                client,
                payload,
                sign_payload(payload),
                header="x-provider-signature",
            )

        assert response.status_code == 200
