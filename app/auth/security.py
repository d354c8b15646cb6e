"""JWT token utilities.

Token issuance (sign-up / sign-in / refresh) is owned by the identity
provider. This module only handles token *decoding* for stateless
validation. Token creation helpers live in ``tests/helpers/token_factory.py``
and must never be imported from production code.

Revocation
~~~~~~~~~~
Validation itself is stateless. Logout adds the token's ``jti`` to the
Redis deny-list in :mod:`app.auth.session_cache`, which
:func:`app.auth.dependencies.get_current_user` consults on every request.
"""

from datetime import UTC, datetime
from typing import Any

from jose import jwt

from app.config import get_settings


def decode_token(token: str) -> dict[str, Any]:
    """Decode and validate a JWT token. Raises JWTError on failure."""
    settings = get_settings()
    return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])


def seconds_until_expiry(payload: dict[str, Any]) -> int:
    """Remaining lifetime of a decoded token, never negative."""
    exp = payload.get("exp")
    if exp is None:
        return 0
    remaining = int(exp - datetime.now(UTC).timestamp())
    return max(remaining, 0)
