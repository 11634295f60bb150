"""Course catalog service layer.

Business logic for:
- Course CRUD and publication
- Module list assignment (ids, replacement on update)
- Cascading enrollment removal on course deletion
"""

from datetime import UTC, datetime
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

import structlog

from edupulse.auth.permissions import (
    can_view_course,
    ensure_admin,
    ensure_can_create_course,
    ensure_course_owner_or_admin,
)
from edupulse.auth.schemas import AuthenticatedUser
from edupulse.courses.exceptions import CourseNotFoundError
from edupulse.courses.models import Course, Module
from edupulse.courses.repository import CourseRepository
from edupulse.courses.schemas import (
    CreateCourseRequest,
    ModuleInput,
    UpdateCourseRequest,
)


if TYPE_CHECKING:
    from edupulse.progress.service import ProgressService


logger = structlog.get_logger(__name__)


def _newest_first(courses: list[Course]) -> list[Course]:
    return sorted(courses, key=lambda course: course.created_at, reverse=True)


def build_modules(
    inputs: list[ModuleInput], existing_ids: set[UUID] | None = None
) -> list[Module]:
    """Turn submitted modules into entities.

    Submitted ids are kept only when they belong to ``existing_ids``; every
    other module gets a fresh id.
    """
    existing_ids = existing_ids or set()
    modules = []
    for item in inputs:
        module_id = item.id if item.id in existing_ids else uuid4()
        # Ids may repeat in a careless payload; never reuse one twice
        existing_ids = existing_ids - {module_id}
        modules.append(
            Module(
                id=module_id,
                title=item.title,
                description=item.description,
                content=item.content,
                video_url=item.video_url,
                duration_minutes=item.duration_minutes,
                order=item.order,
            )
        )
    return modules


class CourseService:
    """Service for course catalog management."""

    def __init__(self, courses: CourseRepository, progress: "ProgressService"):
        self.courses = courses
        self.progress = progress

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_course(
        self, course_id: UUID, caller: AuthenticatedUser | None = None
    ) -> Course:
        """Get a course visible to the caller.

        Drafts are reported as not found to anyone but the owner or an admin.
        """
        course = self.courses.get(course_id)
        if course is None:
            raise CourseNotFoundError

        role = caller.role if caller else None
        caller_id = caller.id if caller else None
        if not can_view_course(
            role, caller_id, course.instructor_id, course.is_published
        ):
            raise CourseNotFoundError

        return course

    def list_published_courses(self) -> list[Course]:
        return _newest_first([c for c in self.courses.list_all() if c.is_published])

    def courses_for_instructor(self, instructor_id: UUID) -> list[Course]:
        return _newest_first(
            [c for c in self.courses.list_all() if c.instructor_id == instructor_id]
        )

    def list_instructor_courses(self, caller: AuthenticatedUser) -> list[Course]:
        ensure_can_create_course(caller.role)
        return self.courses_for_instructor(caller.id)

    def list_all_courses(self, caller: AuthenticatedUser) -> list[Course]:
        ensure_admin(caller.role)
        return _newest_first(self.courses.list_all())

    def count_courses(self) -> int:
        return len(self.courses.list_all())

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create_course(
        self, caller: AuthenticatedUser, data: CreateCourseRequest
    ) -> Course:
        ensure_can_create_course(caller.role)

        course = Course(
            title=data.title,
            description=data.description,
            category=data.category,
            level=data.level.value,
            thumbnail_url=data.thumbnail_url,
            instructor_id=caller.id,
            modules=build_modules(data.modules),
            is_published=data.is_published,
        )
        self.courses.create(course)

        logger.info(
            "course_created",
            course_id=str(course.id),
            instructor_id=str(caller.id),
            module_count=len(course.modules),
        )
        return course

    def _get_for_update(self, caller: AuthenticatedUser, course_id: UUID) -> Course:
        course = self.courses.get(course_id)
        if course is None:
            raise CourseNotFoundError
        ensure_course_owner_or_admin(caller.role, caller.id, course.instructor_id)
        return course

    def update_course(
        self, caller: AuthenticatedUser, course_id: UUID, data: UpdateCourseRequest
    ) -> Course:
        """Apply a partial update.

        Existing enrollments keep their module snapshot.
        """
        course = self._get_for_update(caller, course_id)

        if data.title is not None:
            course.title = data.title
        if data.description is not None:
            course.description = data.description
        if data.category is not None:
            course.category = data.category
        if data.level is not None:
            course.level = data.level.value
        if data.thumbnail_url is not None:
            course.thumbnail_url = data.thumbnail_url
        if data.is_published is not None:
            course.is_published = data.is_published
        if data.modules is not None:
            course.modules = build_modules(
                data.modules, {module.id for module in course.modules}
            )

        course.updated_at = datetime.now(UTC)
        self.courses.update(course)

        logger.info("course_updated", course_id=str(course.id))
        return course

    def set_published(
        self, caller: AuthenticatedUser, course_id: UUID, is_published: bool
    ) -> Course:
        course = self._get_for_update(caller, course_id)
        course.is_published = is_published
        course.updated_at = datetime.now(UTC)
        self.courses.update(course)

        logger.info(
            "course_publication_set",
            course_id=str(course.id),
            is_published=is_published,
        )
        return course

    def delete_course(self, caller: AuthenticatedUser, course_id: UUID) -> int:
        """Delete a course and every enrollment referencing it.

        Returns:
            Number of enrollments removed
        """
        course = self._get_for_update(caller, course_id)
        return self._delete(course)

    def delete_courses_by_instructor(self, instructor_id: UUID) -> int:
        """Delete all of an instructor's courses (account removal).

        Returns:
            Number of courses removed
        """
        courses = self.courses_for_instructor(instructor_id)
        for course in courses:
            self._delete(course)
        return len(courses)

    def _delete(self, course: Course) -> int:
        self.courses.delete(course.id)
        removed = self.progress.delete_course_cascade(course.id)
        logger.info(
            "course_deleted",
            course_id=str(course.id),
            enrollments_removed=removed,
        )
        return removed
