"""Rate limiting configuration."""

from slowapi import Limiter
from slowapi.util import get_remote_address

from tumbi.core.config import settings

# In-memory counters by default; point RATE_LIMIT_STORAGE_URI at redis:// in production
limiter = Limiter(
    key_func=get_remote_address,
    storage_uri=settings.RATE_LIMIT_STORAGE_URI,
    enabled=settings.RATE_LIMIT_ENABLED,
    default_limits=[],
)
