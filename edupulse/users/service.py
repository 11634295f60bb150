"""User directory service layer.

Business logic for:
- Mirroring caller profiles from token identity
- Admin listing and deletion with cascades
- Role specific dashboard statistics
"""

from datetime import UTC, datetime
from uuid import UUID

import structlog

from edupulse.auth.permissions import UserRole, ensure_admin
from edupulse.auth.schemas import AuthenticatedUser
from edupulse.core.exceptions import NotFoundError, ValidationFailedError
from edupulse.courses.schemas import CourseResponse
from edupulse.courses.service import CourseService
from edupulse.progress.engine import is_complete
from edupulse.progress.schemas import EnrollmentWithCourseResponse
from edupulse.progress.service import ProgressService
from edupulse.users.models import User
from edupulse.users.repository import UserRepository
from edupulse.users.schemas import (
    AdminStatsResponse,
    InstructorStatsResponse,
    StudentStatsResponse,
    SyncProfileRequest,
)


logger = structlog.get_logger(__name__)


# ==============================================================================
# Custom Exceptions
# ==============================================================================


class UserNotFoundError(NotFoundError):
    """User not found."""

    def __init__(self, message: str = "User not found"):
        super().__init__(message, "user_not_found")


class AdminDeletionError(ValidationFailedError):
    """Admin accounts cannot be deleted."""

    def __init__(self, message: str = "Cannot delete admin users"):
        super().__init__(message, "admin_deletion_forbidden")


# ==============================================================================
# User Service
# ==============================================================================


class UserService:
    """Service for user profiles and dashboards."""

    def __init__(
        self,
        users: UserRepository,
        courses: CourseService,
        progress: ProgressService,
    ):
        self.users = users
        self.courses = courses
        self.progress = progress

    def sync_profile(
        self, caller: AuthenticatedUser, data: SyncProfileRequest | None = None
    ) -> User:
        """Create or refresh the caller's profile from their token."""
        data = data or SyncProfileRequest()
        user = self.users.get(caller.id)
        now = datetime.now(UTC)

        if user is None:
            user = User(id=caller.id, created_at=now)
        else:
            user.updated_at = now

        user.role = caller.role.value
        user.email = data.email or caller.email or user.email
        user.name = data.name or caller.name or user.name

        self.users.save(user)
        logger.info("user_profile_synced", user_id=str(user.id), role=user.role)
        return user

    def ensure_profile(
        self, user_id: UUID, email: str, name: str, role: UserRole
    ) -> User:
        """Create a profile if missing, used for the bootstrap admin."""
        existing = self.users.get(user_id)
        if existing is not None:
            return existing

        user = User(id=user_id, email=email, name=name, role=role.value)
        self.users.save(user)
        logger.info("user_profile_seeded", user_id=str(user_id), role=role.value)
        return user

    def list_users(self, caller: AuthenticatedUser) -> list[User]:
        """All users, newest first (admin only)."""
        ensure_admin(caller.role)
        return sorted(self.users.list_all(), key=lambda u: u.created_at, reverse=True)

    def delete_user(self, caller: AuthenticatedUser, user_id: UUID) -> None:
        """Delete a user and everything they own (admin only).

        Raises:
            AccessDeniedError: If the caller is not an admin
            UserNotFoundError: If the user does not exist
            AdminDeletionError: If the target is an admin
        """
        ensure_admin(caller.role)

        user = self.users.get(user_id)
        if user is None:
            raise UserNotFoundError

        if user.role == UserRole.ADMIN.value:
            raise AdminDeletionError

        removed_courses = 0
        removed_enrollments = 0
        if user.role == UserRole.INSTRUCTOR.value:
            removed_courses = self.courses.delete_courses_by_instructor(user_id)
        elif user.role == UserRole.STUDENT.value:
            removed_enrollments = self.progress.delete_student_cascade(user_id)

        self.users.delete(user_id)
        logger.info(
            "user_deleted",
            user_id=str(user_id),
            role=user.role,
            courses_removed=removed_courses,
            enrollments_removed=removed_enrollments,
        )

    def dashboard_stats(
        self, caller: AuthenticatedUser
    ) -> StudentStatsResponse | InstructorStatsResponse | AdminStatsResponse:
        """Role specific dashboard numbers for the caller."""
        if caller.role == UserRole.STUDENT:
            pairs = self.progress.enrollments_with_courses(caller.id)
            completed = sum(1 for enrollment, _ in pairs if is_complete(enrollment))
            return StudentStatsResponse(
                total_courses=len(pairs),
                completed_courses=completed,
                in_progress_courses=len(pairs) - completed,
                enrollments=[
                    EnrollmentWithCourseResponse.from_pair(enrollment, course)
                    for enrollment, course in pairs
                ],
            )

        if caller.role == UserRole.INSTRUCTOR:
            courses = self.courses.courses_for_instructor(caller.id)
            return InstructorStatsResponse(
                total_courses=len(courses),
                total_students=sum(course.enrolled_count for course in courses),
                published_courses=sum(1 for course in courses if course.is_published),
                courses=[CourseResponse.from_entity(course) for course in courses],
            )

        ensure_admin(caller.role)
        users = self.users.list_all()
        return AdminStatsResponse(
            total_users=len(users),
            total_courses=self.courses.count_courses(),
            total_enrollments=self.progress.count_enrollments(),
            total_students=sum(1 for u in users if u.role == UserRole.STUDENT.value),
            total_instructors=sum(
                1 for u in users if u.role == UserRole.INSTRUCTOR.value
            ),
        )
