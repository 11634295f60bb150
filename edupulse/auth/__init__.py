"""Bearer token verification and access policy."""

from edupulse.auth.dependencies import CurrentUser, OptionalUser
from edupulse.auth.permissions import UserRole
from edupulse.auth.schemas import AuthenticatedUser


__all__ = ["AuthenticatedUser", "CurrentUser", "OptionalUser", "UserRole"]
