"""Request rate limiting for the front desk service using SlowAPI."""
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from .config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.default_rate_limit],
    enabled=settings.rate_limiting_enabled,
)


def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    logger.warning("Rate limit hit for %s %s: %s", request.method, request.url.path, exc.detail)
    return JSONResponse(status_code=429, content={"detail": f"Rate limit exceeded: {exc.detail}"})


def apply_rate_limiter(app: FastAPI) -> None:
    """Attach the limiter middleware and its 429 handler to an app."""

    app.state.limiter = limiter
    app.add_middleware(SlowAPIMiddleware)
    app.add_exception_handler(RateLimitExceeded, rate_limit_handler)  # type: ignore[arg-type]
