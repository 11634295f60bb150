"""Tests for CourseService."""

from uuid import uuid4

import pytest

from edupulse.auth.schemas import AuthenticatedUser
from edupulse.core.exceptions import AccessDeniedError
from edupulse.courses.exceptions import CourseNotFoundError
from edupulse.courses.schemas import (
    CreateCourseRequest,
    ModuleInput,
    UpdateCourseRequest,
)
from edupulse.courses.service import CourseService, build_modules
from edupulse.progress.service import ProgressService
from tests.fakes import (
    FakeCourseRepository,
    FakeEnrollmentRepository,
    days_ago,
    seed_course,
)


def _create_request(**overrides) -> CreateCourseRequest:
    data = {
        "title": "Clinical Pharmacology",
        "description": "Drug interactions in practice",
        "category": "pharmacy",
        "modules": [
            {"title": "Basics", "duration_minutes": 30, "order": 1},
            {"title": "Interactions", "duration_minutes": 45, "order": 2},
        ],
    }
    data.update(overrides)
    return CreateCourseRequest.model_validate(data)


class TestBuildModules:
    """Tests for build_modules."""

    def test_new_modules_get_fresh_ids(self) -> None:
        """Submitted ids are ignored when nothing exists yet."""
        submitted = uuid4()
        modules = build_modules([ModuleInput(id=submitted, title="A")])

        assert modules[0].id != submitted

    def test_existing_ids_are_kept(self) -> None:
        existing = uuid4()
        modules = build_modules(
            [ModuleInput(id=existing, title="A"), ModuleInput(title="B")],
            {existing},
        )

        assert modules[0].id == existing
        assert modules[1].id != existing

    def test_duplicate_id_used_once(self) -> None:
        """A repeated id in one payload should only be honoured once."""
        existing = uuid4()
        modules = build_modules(
            [ModuleInput(id=existing, title="A"), ModuleInput(id=existing, title="B")],
            {existing},
        )

        assert modules[0].id == existing
        assert modules[1].id != existing


class TestCreateCourse:
    """Tests for CourseService.create_course."""

    def test_instructor_creates_draft(
        self, course_service: CourseService, instructor: AuthenticatedUser
    ) -> None:
        """Courses are drafts owned by the caller unless published explicitly."""
        course = course_service.create_course(instructor, _create_request())

        assert course.instructor_id == instructor.id
        assert course.is_published is False
        assert course.total_duration_minutes == 75
        assert course.duration_label == "1h 15m"
        assert len({m.id for m in course.modules}) == 2

    def test_admin_can_create(
        self, course_service: CourseService, admin: AuthenticatedUser
    ) -> None:
        course = course_service.create_course(
            admin, _create_request(is_published=True)
        )

        assert course.instructor_id == admin.id
        assert course.is_published is True

    def test_student_cannot_create(
        self, course_service: CourseService, student: AuthenticatedUser
    ) -> None:
        with pytest.raises(AccessDeniedError):
            course_service.create_course(student, _create_request())


class TestVisibility:
    """Tests for course reads."""

    def test_draft_hidden_from_public_and_students(
        self,
        course_service: CourseService,
        course_repo: FakeCourseRepository,
        instructor: AuthenticatedUser,
        student: AuthenticatedUser,
    ) -> None:
        """Drafts should look missing to anyone but owner and admins."""
        draft = seed_course(course_repo, instructor.id, published=False)

        with pytest.raises(CourseNotFoundError):
            course_service.get_course(draft.id)
        with pytest.raises(CourseNotFoundError):
            course_service.get_course(draft.id, student)

    def test_draft_visible_to_owner_and_admin(
        self,
        course_service: CourseService,
        course_repo: FakeCourseRepository,
        instructor: AuthenticatedUser,
        admin: AuthenticatedUser,
    ) -> None:
        draft = seed_course(course_repo, instructor.id, published=False)

        assert course_service.get_course(draft.id, instructor).id == draft.id
        assert course_service.get_course(draft.id, admin).id == draft.id

    def test_list_published_newest_first(
        self,
        course_service: CourseService,
        course_repo: FakeCourseRepository,
        instructor: AuthenticatedUser,
    ) -> None:
        seed_course(course_repo, instructor.id, title="Old", created_at=days_ago(5))
        seed_course(course_repo, instructor.id, title="New", created_at=days_ago(1))
        seed_course(course_repo, instructor.id, title="Draft", published=False)

        titles = [c.title for c in course_service.list_published_courses()]

        assert titles == ["New", "Old"]

    def test_instructor_lists_own_courses(
        self,
        course_service: CourseService,
        course_repo: FakeCourseRepository,
        instructor: AuthenticatedUser,
    ) -> None:
        mine = seed_course(course_repo, instructor.id, published=False)
        seed_course(course_repo, uuid4())

        assert [c.id for c in course_service.list_instructor_courses(instructor)] == [
            mine.id
        ]

    def test_list_all_is_admin_only(
        self,
        course_service: CourseService,
        course_repo: FakeCourseRepository,
        instructor: AuthenticatedUser,
        admin: AuthenticatedUser,
    ) -> None:
        seed_course(course_repo, instructor.id, published=False)
        seed_course(course_repo, instructor.id)

        assert len(course_service.list_all_courses(admin)) == 2
        with pytest.raises(AccessDeniedError):
            course_service.list_all_courses(instructor)


class TestUpdateCourse:
    """Tests for course updates and publication."""

    def test_update_keeps_known_module_ids(
        self,
        course_service: CourseService,
        instructor: AuthenticatedUser,
    ) -> None:
        """Resubmitted module ids survive, new entries get new ids."""
        course = course_service.create_course(instructor, _create_request())
        kept = course.module_ids[0]

        updated = course_service.update_course(
            instructor,
            course.id,
            UpdateCourseRequest(
                modules=[
                    ModuleInput(id=kept, title="Basics v2", order=1),
                    ModuleInput(title="Case studies", order=2),
                ]
            ),
        )

        assert updated.module_ids[0] == kept
        assert updated.module_ids[1] not in course.module_ids
        assert updated.updated_at is not None

    def test_update_leaves_existing_enrollments_alone(
        self,
        course_service: CourseService,
        progress_service: ProgressService,
        enrollment_repo: FakeEnrollmentRepository,
        instructor: AuthenticatedUser,
        student: AuthenticatedUser,
    ) -> None:
        """Enrollments keep the module list they were created with."""
        course = course_service.create_course(
            instructor, _create_request(is_published=True)
        )
        enrollment = progress_service.enroll(student, course.id)

        course_service.update_course(
            instructor,
            course.id,
            UpdateCourseRequest(modules=[ModuleInput(title="Only one")]),
        )

        stored = enrollment_repo.get(enrollment.id)
        assert [e.module_id for e in stored.progress] == course.module_ids

    def test_update_preserves_enrolled_students(
        self,
        course_service: CourseService,
        progress_service: ProgressService,
        course_repo: FakeCourseRepository,
        instructor: AuthenticatedUser,
        student: AuthenticatedUser,
    ) -> None:
        course = seed_course(course_repo, instructor.id)
        progress_service.enroll(student, course.id)

        updated = course_service.update_course(
            instructor, course.id, UpdateCourseRequest(title="Renamed")
        )

        assert updated.title == "Renamed"
        assert course_repo.get(course.id).enrolled_count == 1

    def test_other_instructor_cannot_update(
        self,
        course_service: CourseService,
        course_repo: FakeCourseRepository,
        instructor: AuthenticatedUser,
    ) -> None:
        course = seed_course(course_repo, uuid4())

        with pytest.raises(AccessDeniedError):
            course_service.update_course(
                instructor, course.id, UpdateCourseRequest(title="Mine now")
            )
        with pytest.raises(AccessDeniedError):
            course_service.set_published(instructor, course.id, False)

    def test_admin_can_publish_any_course(
        self,
        course_service: CourseService,
        course_repo: FakeCourseRepository,
        instructor: AuthenticatedUser,
        admin: AuthenticatedUser,
    ) -> None:
        course = seed_course(course_repo, instructor.id, published=False)

        assert course_service.set_published(admin, course.id, True).is_published
        assert course_repo.get(course.id).is_published is True

    def test_update_unknown_course(
        self, course_service: CourseService, admin: AuthenticatedUser
    ) -> None:
        with pytest.raises(CourseNotFoundError):
            course_service.update_course(admin, uuid4(), UpdateCourseRequest())


class TestDeleteCourse:
    """Tests for course deletion."""

    def test_delete_cascades_enrollments(
        self,
        course_service: CourseService,
        progress_service: ProgressService,
        course_repo: FakeCourseRepository,
        enrollment_repo: FakeEnrollmentRepository,
        instructor: AuthenticatedUser,
        student: AuthenticatedUser,
        other_student: AuthenticatedUser,
    ) -> None:
        """Deleting a course should remove every enrollment in it."""
        course = seed_course(course_repo, instructor.id)
        progress_service.enroll(student, course.id)
        progress_service.enroll(other_student, course.id)

        assert course_service.delete_course(instructor, course.id) == 2
        assert course_repo.get(course.id) is None
        assert enrollment_repo.count() == 0
        assert progress_service.list_enrollments(student) == []

    def test_student_cannot_delete(
        self,
        course_service: CourseService,
        course_repo: FakeCourseRepository,
        instructor: AuthenticatedUser,
        student: AuthenticatedUser,
    ) -> None:
        course = seed_course(course_repo, instructor.id)

        with pytest.raises(AccessDeniedError):
            course_service.delete_course(student, course.id)
        assert course_repo.get(course.id) is not None

    def test_delete_courses_by_instructor(
        self,
        course_service: CourseService,
        course_repo: FakeCourseRepository,
        instructor: AuthenticatedUser,
    ) -> None:
        seed_course(course_repo, instructor.id)
        seed_course(course_repo, instructor.id, published=False)
        other = seed_course(course_repo, uuid4())

        assert course_service.delete_courses_by_instructor(instructor.id) == 2
        assert list(course_repo.rows) == [other.id]
