"""Global rate limiter instance for SlowAPI."""

from slowapi import Limiter
from slowapi.util import get_remote_address
from common.core.config import settings

# Only diagnostic endpoints are decorated; the webhook and subscriber routes
# are left unlimited so provider redeliveries are never throttled.
# Point RATE_LIMIT_STORAGE_URI at Redis when running more than one instance.
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[],
    storage_uri=settings.rate_limit_storage_uri,
)
