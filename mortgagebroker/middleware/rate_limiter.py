from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from mortgagebroker.config import settings


def create_rate_limiter() -> Limiter:
    """Create and configure rate limiter (a no-op when rate limiting is disabled)"""
    return Limiter(
        key_func=get_remote_address,
        default_limits=[f"{settings.max_requests_per_minute}/minute"],
        enabled=settings.enable_rate_limiting,
    )


def apply_rate_limiting(app) -> Limiter:
    """Apply rate limiting to FastAPI app"""
    limiter = create_rate_limiter()
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    return limiter
