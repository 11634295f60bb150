"""Enrollment and progress tracking service layer.

Business logic for:
- Enrollment lifecycle (enroll, unenroll, listing)
- Module completion toggles with versioned writes
- Cascading removal when a course or a student account goes away
"""

from datetime import UTC, datetime
from uuid import UUID

import structlog

from edupulse.auth.permissions import (
    can_view_course,
    ensure_enrollment_owner,
    ensure_student,
)
from edupulse.auth.schemas import AuthenticatedUser
from edupulse.courses.exceptions import CourseNotFoundError
from edupulse.courses.models import Course
from edupulse.courses.repository import CourseRepository
from edupulse.progress.engine import apply_completion, seed_progress
from edupulse.progress.exceptions import (
    AlreadyEnrolledError,
    ConcurrentUpdateError,
    EnrollmentNotFoundError,
)
from edupulse.progress.models import Enrollment
from edupulse.progress.repository import EnrollmentRepository


logger = structlog.get_logger(__name__)


class ProgressService:
    """Service for enrollments and module progress."""

    def __init__(
        self,
        enrollments: EnrollmentRepository,
        courses: CourseRepository,
        max_update_attempts: int = 5,
    ):
        self.enrollments = enrollments
        self.courses = courses
        self.max_update_attempts = max_update_attempts

    # ==========================================================================
    # Enrollment lifecycle
    # ==========================================================================

    def enroll(self, caller: AuthenticatedUser, course_id: UUID) -> Enrollment:
        """Enroll the calling student in a course.

        Raises:
            AccessDeniedError: If the caller is not a student
            CourseNotFoundError: If the course is missing or still a draft
            AlreadyEnrolledError: If the pair is already enrolled
        """
        ensure_student(caller.role)

        course = self.courses.get(course_id)
        if course is None or not can_view_course(
            caller.role, caller.id, course.instructor_id, course.is_published
        ):
            raise CourseNotFoundError

        enrollment = Enrollment(
            student_id=caller.id,
            course_id=course.id,
            enrolled_at=datetime.now(UTC),
            progress=seed_progress(course.module_ids),
        )

        if not self.enrollments.reserve(
            caller.id, course.id, enrollment.id, enrollment.enrolled_at
        ):
            raise AlreadyEnrolledError

        try:
            self.enrollments.create(enrollment)
            if not self.courses.add_enrolled_student(course.id, caller.id):
                raise CourseNotFoundError
        except Exception:
            # Undo the partial enrollment so the pair can be retried
            self.enrollments.delete(enrollment)
            raise

        logger.info(
            "student_enrolled",
            student_id=str(caller.id),
            course_id=str(course.id),
            enrollment_id=str(enrollment.id),
            modules=len(enrollment.progress),
        )
        return enrollment

    def unenroll(self, caller: AuthenticatedUser, course_id: UUID) -> None:
        """Remove the caller's enrollment in a course.

        Raises:
            AccessDeniedError: If the caller is not a student
            EnrollmentNotFoundError: If the caller is not enrolled
        """
        ensure_student(caller.role)

        enrollment = self.enrollments.get_for_student_course(caller.id, course_id)
        if enrollment is None:
            raise EnrollmentNotFoundError

        self.enrollments.delete(enrollment)
        self.courses.remove_enrolled_student(course_id, caller.id)

        logger.info(
            "student_unenrolled",
            student_id=str(caller.id),
            course_id=str(course_id),
            enrollment_id=str(enrollment.id),
        )

    def list_enrollments(
        self, caller: AuthenticatedUser
    ) -> list[tuple[Enrollment, Course | None]]:
        """The caller's enrollments with their course, newest first."""
        ensure_student(caller.role)
        return self.enrollments_with_courses(caller.id)

    def enrollments_with_courses(
        self, student_id: UUID
    ) -> list[tuple[Enrollment, Course | None]]:
        enrollments = sorted(
            self.enrollments.list_for_student(student_id),
            key=lambda enrollment: enrollment.enrolled_at,
            reverse=True,
        )
        courses: dict[UUID, Course | None] = {}
        for enrollment in enrollments:
            if enrollment.course_id not in courses:
                courses[enrollment.course_id] = self.courses.get(enrollment.course_id)
        return [(e, courses[e.course_id]) for e in enrollments]

    def get_enrollment(
        self, caller: AuthenticatedUser, enrollment_id: UUID
    ) -> tuple[Enrollment, Course | None]:
        """Read one of the caller's enrollments with its course."""
        enrollment = self.enrollments.get(enrollment_id)
        if enrollment is None:
            raise EnrollmentNotFoundError

        ensure_enrollment_owner(caller.role, caller.id, enrollment.student_id)
        return enrollment, self.courses.get(enrollment.course_id)

    def count_enrollments(self) -> int:
        return self.enrollments.count()

    # ==========================================================================
    # Progress
    # ==========================================================================

    def set_module_completion(
        self,
        caller: AuthenticatedUser,
        enrollment_id: UUID,
        module_id: UUID,
        completed: bool,
    ) -> Enrollment:
        """Set a module's completion flag and recompute the percentage.

        The write only lands if nobody changed the enrollment since it was
        read; otherwise the toggle is re-applied on a fresh read.

        Raises:
            EnrollmentNotFoundError: If the enrollment does not exist
            AccessDeniedError: If the caller does not own the enrollment
            ModuleProgressNotFoundError: If the module is not tracked
            ConcurrentUpdateError: If every attempt lost the race
        """
        for attempt in range(1, self.max_update_attempts + 1):
            current = self.enrollments.get(enrollment_id)
            if current is None:
                raise EnrollmentNotFoundError

            ensure_enrollment_owner(caller.role, caller.id, current.student_id)

            updated = apply_completion(current, module_id, completed)
            updated.version = current.version + 1

            saved = self.enrollments.save_progress(
                updated, expected_version=current.version
            )
            if saved:
                logger.info(
                    "module_completion_set",
                    enrollment_id=str(enrollment_id),
                    module_id=str(module_id),
                    completed=completed,
                    progress_percentage=updated.progress_percentage,
                    attempt=attempt,
                )
                return updated

            logger.warning(
                "progress_update_conflict",
                enrollment_id=str(enrollment_id),
                attempt=attempt,
            )

        raise ConcurrentUpdateError

    # ==========================================================================
    # Cascades
    # ==========================================================================

    def delete_course_cascade(self, course_id: UUID) -> int:
        """Remove every enrollment referencing a course.

        Returns:
            Number of enrollments removed
        """
        enrollments = self.enrollments.list_for_course(course_id)
        for enrollment in enrollments:
            self.enrollments.delete(enrollment)

        if enrollments:
            logger.info(
                "course_enrollments_removed",
                course_id=str(course_id),
                count=len(enrollments),
            )
        return len(enrollments)

    def delete_student_cascade(self, student_id: UUID) -> int:
        """Remove every enrollment of a student and unlink them from courses.

        Returns:
            Number of enrollments removed
        """
        enrollments = self.enrollments.list_for_student(student_id)
        for enrollment in enrollments:
            self.enrollments.delete(enrollment)
            self.courses.remove_enrolled_student(enrollment.course_id, student_id)

        if enrollments:
            logger.info(
                "student_enrollments_removed",
                student_id=str(student_id),
                count=len(enrollments),
            )
        return len(enrollments)
