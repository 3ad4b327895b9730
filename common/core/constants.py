from enum import Enum


class Environment(str, Enum):
    """Environment profiles."""

    LOCAL = "local"
    DEV = "dev"
    STAGING = "staging"
    PRODUCTION = "production"


# Header Stripe uses for webhook signatures
DEFAULT_WEBHOOK_SIGNATURE_HEADER = "stripe-signature"

# Seconds a signed webhook timestamp stays valid
DEFAULT_WEBHOOK_TOLERANCE_SECONDS = 300
