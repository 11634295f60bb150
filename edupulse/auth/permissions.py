"""Role and ownership based access control for EduPulse.

Roles are flat, there is no hierarchy:
- STUDENT: enrolls in courses and tracks own progress
- INSTRUCTOR: authors and manages own courses
- ADMIN: manages users and any course

Every ``can_*`` predicate is pure. The ``ensure_*`` wrappers raise
:class:`AccessDeniedError` and are called by services before any write.
"""

from enum import Enum
from uuid import UUID

from edupulse.core.exceptions import AccessDeniedError


class UserRole(str, Enum):
    """Caller role as asserted by the identity provider."""

    STUDENT = "student"
    INSTRUCTOR = "instructor"
    ADMIN = "admin"


def _as_role(role: UserRole | str | None) -> UserRole | None:
    if role is None or isinstance(role, UserRole):
        return role
    try:
        return UserRole(role)
    except ValueError:
        return None


def is_admin(role: UserRole | str | None) -> bool:
    """Check if role is ADMIN."""
    return _as_role(role) == UserRole.ADMIN


def is_instructor(role: UserRole | str | None) -> bool:
    """Check if role is INSTRUCTOR."""
    return _as_role(role) == UserRole.INSTRUCTOR


def is_student(role: UserRole | str | None) -> bool:
    """Check if role is STUDENT."""
    return _as_role(role) == UserRole.STUDENT


def can_enroll(role: UserRole | str | None) -> bool:
    """Only students enroll or unenroll."""
    return is_student(role)


def can_manage_enrollment(
    role: UserRole | str | None, caller_id: UUID | None, owner_id: UUID
) -> bool:
    """A student may read or update only their own enrollments."""
    return is_student(role) and caller_id is not None and caller_id == owner_id


def can_create_course(role: UserRole | str | None) -> bool:
    """Instructors and admins may author courses."""
    return is_instructor(role) or is_admin(role)


def can_modify_course(
    role: UserRole | str | None, caller_id: UUID | None, owner_id: UUID
) -> bool:
    """The owning instructor or any admin may update, publish or delete."""
    if is_admin(role):
        return True
    return is_instructor(role) and caller_id is not None and caller_id == owner_id


def can_view_course(
    role: UserRole | str | None,
    caller_id: UUID | None,
    owner_id: UUID,
    is_published: bool,
) -> bool:
    """Published courses are public, drafts only reach owner and admins."""
    return is_published or can_modify_course(role, caller_id, owner_id)


def can_manage_users(role: UserRole | str | None) -> bool:
    """Listing or deleting users and listing every course is admin only."""
    return is_admin(role)


# ==============================================================================
# Raising wrappers
# ==============================================================================


def ensure_student(role: UserRole | str | None) -> None:
    if not can_enroll(role):
        raise AccessDeniedError("Only students can perform this action")


def ensure_enrollment_owner(
    role: UserRole | str | None, caller_id: UUID | None, owner_id: UUID
) -> None:
    if not can_manage_enrollment(role, caller_id, owner_id):
        raise AccessDeniedError("Not authorized to access this enrollment")


def ensure_can_create_course(role: UserRole | str | None) -> None:
    if not can_create_course(role):
        raise AccessDeniedError("Only instructors and admins can create courses")


def ensure_course_owner_or_admin(
    role: UserRole | str | None, caller_id: UUID | None, owner_id: UUID
) -> None:
    if not can_modify_course(role, caller_id, owner_id):
        raise AccessDeniedError("Not authorized to modify this course")


def ensure_admin(role: UserRole | str | None) -> None:
    if not can_manage_users(role):
        raise AccessDeniedError("Admin access required")
