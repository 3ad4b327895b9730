"""
Interface for webhook verifiers.

Abstracts the signing scheme away from a specific payment platform.
"""

from abc import ABC, abstractmethod
from typing import Optional


class WebhookVerifierInterface(ABC):
    """Abstract interface for payment webhook verifiers."""

    @abstractmethod
    def verify(self, payload: bytes, signature: Optional[str]) -> None:
        """
        Check that a webhook payload was signed by the payment provider.

        Args:
            payload: Raw request body, exactly as received
            signature: Value of the signature header, None if absent

        Raises:
            MisconfiguredError: No signing secret is configured
            InvalidSignatureError: The signature is missing or does not match
        """
        pass
