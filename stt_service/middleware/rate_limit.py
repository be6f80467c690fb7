"""Rate limiting middleware using SlowAPI."""

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from stt_service.config import get_settings

settings = get_settings()


def get_api_key_or_ip(request: Request) -> str:
    """
    Get rate limit key from API key or IP address.

    Uses API key if authenticated, falls back to IP address.
    """
    # Set by the authentication dependency
    api_key = getattr(request.state, "api_key", None)
    if api_key is not None:
        return f"key:{api_key.id}"

    return f"ip:{get_remote_address(request)}"


limiter = Limiter(
    key_func=get_api_key_or_ip,
    storage_uri=settings.rate_limit_storage_uri,
    strategy="fixed-window",
)


def get_write_limit() -> str:
    """Per-key limit applied to endpoints that insert rows."""
    return f"{get_settings().rate_limit_per_minute}/minute"


def rate_limit_writes():
    """Rate limit for job creation and segment uploads."""
    return limiter.limit(get_write_limit, key_func=get_api_key_or_ip)
