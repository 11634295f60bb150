"""Authenticated caller representation."""

from uuid import UUID

from pydantic import BaseModel, ConfigDict

from edupulse.auth.permissions import UserRole


class AuthenticatedUser(BaseModel):
    """Identity extracted from a verified bearer token."""

    model_config = ConfigDict(frozen=True)

    id: UUID
    role: UserRole
    email: str | None = None
    name: str | None = None
