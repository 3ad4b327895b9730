"""
Unit tests for StripeWebhookVerifier.
"""

import time

import pytest
import stripe

from common.core.config import Settings
from common.core.exceptions import InvalidSignatureError, MisconfiguredError
from packages.billing.providers.payment.factory import get_webhook_verifier
from packages.billing.providers.payment.stripe_webhook_verifier import (
    StripeWebhookVerifier,
)
from tests.fixtures.stripe_events import (
    TEST_WEBHOOK_SECRET,
    checkout_completed_event,
    sign_payload,
)


@pytest.fixture
def verifier():
    return StripeWebhookVerifier(secret=TEST_WEBHOOK_SECRET, tolerance=300)


class TestStripeWebhookVerifier:
    def test_valid_signature(self, verifier):
        payload = checkout_completed_event()

        verifier.verify(payload, sign_payload(payload))

    def test_missing_secret(self):
        payload = checkout_completed_event()

        with pytest.raises(MisconfiguredError):
            StripeWebhookVerifier(secret="").verify(payload, sign_payload(payload))

    @pytest.mark.parametrize("signature", [None, ""])
    def test_missing_signature(self, verifier, signature):
        with pytest.raises(InvalidSignatureError):
            verifier.verify(checkout_completed_event(), signature)

    def test_wrong_secret(self, verifier):
        payload = checkout_completed_event()

        with pytest.raises(InvalidSignatureError):
            verifier.verify(payload, sign_payload(payload, secret="whsec_other"))

    def test_tampered_payload(self, verifier):
        payload = checkout_completed_event(plan_type="basic")
        signature = sign_payload(payload)

        with pytest.raises(InvalidSignatureError):
            verifier.verify(checkout_completed_event(plan_type="pro"), signature)

    def test_expired_timestamp(self, verifier):
        payload = checkout_completed_event()
        signature = sign_payload(payload, timestamp=int(time.time()) - 3600)

        with pytest.raises(InvalidSignatureError):
            verifier.verify(payload, signature)

    @pytest.mark.parametrize("signature", ["garbage", "t=abc,v1=deadbeef", "v1=abc"])
    def test_malformed_header(self, verifier, signature):
        with pytest.raises(InvalidSignatureError):
            verifier.verify(checkout_completed_event(), signature)


class TestGetWebhookVerifier:
    def test_builds_verifier_from_settings(self):
        config = Settings(
            _env_file=None,
            stripe_webhook_secret=TEST_WEBHOOK_SECRET,
            stripe_webhook_tolerance=60,
        )

        verifier = get_webhook_verifier(config)

        assert isinstance(verifier, StripeWebhookVerifier)
        assert verifier.tolerance == 60

    def test_secret_key_does_not_touch_sdk_globals(self, monkeypatch):
        monkeypatch.setattr(stripe, "api_key", None)
        config = Settings(
            _env_file=None,
            stripe_secret_key="sk_test_unused",
            stripe_webhook_secret=TEST_WEBHOOK_SECRET,
        )

        get_webhook_verifier(config)

        assert stripe.api_key is None
