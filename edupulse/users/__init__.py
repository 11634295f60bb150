"""User directory module.

Provides:
- Profiles mirrored from the identity provider
- Admin listing and deletion with cascades
- Role specific dashboard statistics
"""

from .models import USERS_TABLES_CQL, User


__all__ = [
    "USERS_TABLES_CQL",
    "User",
]
