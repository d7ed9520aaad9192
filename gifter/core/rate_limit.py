"""Rate limiting configuration for the Gifter API."""

from slowapi import Limiter
from slowapi.util import get_remote_address

from gifter.core.config import settings

DEFAULT_LIMITS = (
    []
    if settings.TESTING or settings.RATE_LIMIT_API <= 0
    else [f"{settings.RATE_LIMIT_API}/minute"]
)
AUTH_LIMIT = f"{settings.RATE_LIMIT_AUTH}/minute"

limiter = Limiter(
    key_func=get_remote_address,
    # Tests always use process-local storage
    storage_uri="memory://" if settings.TESTING else settings.RATE_LIMIT_STORAGE_URI,
    default_limits=DEFAULT_LIMITS,
)
