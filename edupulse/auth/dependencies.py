"""FastAPI dependencies for authentication.

Provides dependency injection for:
- Current user extraction from the bearer JWT
- Optional authentication for public endpoints
"""

from typing import Annotated, Any

from fastapi import Depends, HTTPException, Request, status
from jose import JWTError
from pydantic import ValidationError

from edupulse.auth.schemas import AuthenticatedUser
from edupulse.auth.security import decode_access_token
from edupulse.core.context import set_user_id


def get_token_from_header(request: Request) -> str | None:
    """Extract Bearer token from Authorization header.

    Returns:
        Token string or None if not present
    """
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        return None

    expected_parts = 2
    parts = auth_header.split()
    if len(parts) != expected_parts or parts[0].lower() != "bearer":
        return None

    return parts[1]


def _user_from_payload(payload: dict[str, Any]) -> AuthenticatedUser:
    user = AuthenticatedUser(
        id=payload["sub"],
        role=payload["role"],
        email=payload.get("email"),
        name=payload.get("name"),
    )
    # Set user_id in context for logging
    set_user_id(user.id)
    return user


async def get_current_user(
    token: Annotated[str | None, Depends(get_token_from_header)],
) -> AuthenticatedUser:
    """Get the current authenticated user from the JWT.

    Raises:
        HTTPException(401): If the token is missing, invalid, expired or
            carries an unknown role
    """
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Access token not provided",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        return _user_from_payload(decode_access_token(token))
    except (JWTError, ValidationError) as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        ) from e


async def get_current_user_optional(
    token: Annotated[str | None, Depends(get_token_from_header)],
) -> AuthenticatedUser | None:
    """Get current user if authenticated, None otherwise."""
    if not token:
        return None

    try:
        return _user_from_payload(decode_access_token(token))
    except (JWTError, ValidationError):
        return None


CurrentUser = Annotated[AuthenticatedUser, Depends(get_current_user)]

OptionalUser = Annotated[AuthenticatedUser | None, Depends(get_current_user_optional)]
