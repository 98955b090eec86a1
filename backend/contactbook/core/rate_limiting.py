"""
Rate limiting for API endpoints.

Uses SlowAPI with an in-memory backend. A single default limit applies to
every route through SlowAPIMiddleware.
"""

import logging
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address
from fastapi import FastAPI, Request
from contactbook.core.config import settings

logger = logging.getLogger(__name__)


def get_identifier(request: Request) -> str:
    """
    Get unique identifier for rate limiting.

    There is no authentication, so clients are told apart by address.
    """
    return get_remote_address(request)


# For multiple instances, pass storage_uri="redis://..."
limiter = Limiter(
    key_func=get_identifier,
    default_limits=[settings.rate_limit_default],
    enabled=settings.rate_limit_enabled,
)


def setup_rate_limiting(app: FastAPI) -> None:
    """
    Configure rate limiting for FastAPI app.

    Args:
        app: FastAPI application instance
    """
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)  # type: ignore[arg-type]
    app.add_middleware(SlowAPIMiddleware)
    logger.info(
        "Rate limiting configured with SlowAPI (%s, enabled=%s)",
        settings.rate_limit_default,
        limiter.enabled,
    )
