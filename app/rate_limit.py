"""Shared rate limiter instance.

Lives outside main.py so route modules can apply per-endpoint limits via
``@limiter.limit()`` without importing the application.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.requests import Request


def _get_client_ip(request: Request) -> str:
    """Client IP, honouring the first X-Forwarded-For hop behind the proxy."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return get_remote_address(request)


limiter = Limiter(key_func=_get_client_ip, default_limits=["120/minute"])
