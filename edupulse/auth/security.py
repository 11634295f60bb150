"""Bearer token utilities.

Tokens are issued by the external identity provider with the shared signing
key. This service only verifies them; :func:`create_access_token` exists for
local tooling and tests.
"""

from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt

from edupulse.config.settings import get_settings


def create_access_token(
    data: dict[str, Any],
    expires_delta: timedelta | None = None,
) -> str:
    """Create a JWT access token.

    Args:
        data: Claims, typically {"sub": user_id, "role": role, "email": ..., "name": ...}
        expires_delta: Token lifetime (default from settings)

    Returns:
        Encoded JWT string with exp, iat and type="access" added
    """
    settings = get_settings()

    to_encode = data.copy()
    now = datetime.now(UTC)
    to_encode.update(
        {
            "exp": now
            + (
                expires_delta
                or timedelta(minutes=settings.auth_access_token_expire_minutes)
            ),
            "iat": now,
            "type": "access",
        }
    )

    return jwt.encode(
        to_encode,
        settings.auth_secret_key,
        algorithm=settings.auth_algorithm,
    )


def decode_access_token(token: str) -> dict[str, Any]:
    """Decode and validate an access token.

    Validates the signature, expiration, token type and the presence of the
    ``sub`` and ``role`` claims.

    Raises:
        JWTError: If the token is invalid, expired or incomplete
    """
    settings = get_settings()

    payload = jwt.decode(
        token,
        settings.auth_secret_key,
        algorithms=[settings.auth_algorithm],
    )

    if payload.get("type", "access") != "access":
        msg = "Invalid token type: expected 'access'"
        raise JWTError(msg)

    if not payload.get("sub") or not payload.get("role"):
        msg = "Token missing sub or role claim"
        raise JWTError(msg)

    return payload
