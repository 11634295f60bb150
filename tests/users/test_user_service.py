"""Tests for UserService."""

from uuid import uuid4

import pytest

from edupulse.auth.permissions import UserRole
from edupulse.auth.schemas import AuthenticatedUser
from edupulse.core.exceptions import AccessDeniedError
from edupulse.progress.service import ProgressService
from edupulse.users.schemas import (
    AdminStatsResponse,
    InstructorStatsResponse,
    StudentStatsResponse,
    SyncProfileRequest,
)
from edupulse.users.service import AdminDeletionError, UserNotFoundError, UserService
from tests.fakes import (
    FakeCourseRepository,
    FakeEnrollmentRepository,
    FakeUserRepository,
    days_ago,
    seed_course,
    seed_user,
)


class TestSyncProfile:
    """Tests for UserService.sync_profile."""

    def test_creates_profile_from_token(
        self,
        user_service: UserService,
        user_repo: FakeUserRepository,
        student: AuthenticatedUser,
    ) -> None:
        user = user_service.sync_profile(student)

        assert user.id == student.id
        assert user.role == "student"
        assert user.email == student.email
        assert user_repo.get(student.id) is not None

    def test_body_overrides_token_fields(
        self, user_service: UserService, student: AuthenticatedUser
    ) -> None:
        user = user_service.sync_profile(
            student, SyncProfileRequest(name="Maria", email="maria@example.com")
        )

        assert user.name == "Maria"
        assert user.email == "maria@example.com"

    def test_role_follows_latest_token(
        self,
        user_service: UserService,
        user_repo: FakeUserRepository,
        student: AuthenticatedUser,
    ) -> None:
        """A role change at the identity provider should be mirrored."""
        user_service.sync_profile(student)
        promoted = AuthenticatedUser(id=student.id, role=UserRole.INSTRUCTOR)

        user = user_service.sync_profile(promoted)

        assert user.role == "instructor"
        assert user.email == student.email
        assert user.updated_at is not None


class TestListUsers:
    """Tests for UserService.list_users."""

    def test_admin_lists_newest_first(
        self,
        user_service: UserService,
        user_repo: FakeUserRepository,
        admin: AuthenticatedUser,
    ) -> None:
        old = seed_user(user_repo, UserRole.STUDENT, created_at=days_ago(10))
        new = seed_user(user_repo, UserRole.INSTRUCTOR, created_at=days_ago(1))

        assert [u.id for u in user_service.list_users(admin)] == [new.id, old.id]

    @pytest.mark.parametrize("role", [UserRole.STUDENT, UserRole.INSTRUCTOR])
    def test_non_admin_denied(self, user_service: UserService, role: UserRole) -> None:
        caller = AuthenticatedUser(id=uuid4(), role=role)

        with pytest.raises(AccessDeniedError):
            user_service.list_users(caller)


class TestDeleteUser:
    """Tests for UserService.delete_user."""

    def test_cannot_delete_admin(
        self,
        user_service: UserService,
        user_repo: FakeUserRepository,
        admin: AuthenticatedUser,
    ) -> None:
        target = seed_user(user_repo, UserRole.ADMIN)

        with pytest.raises(AdminDeletionError) as exc_info:
            user_service.delete_user(admin, target.id)

        assert exc_info.value.status_code == 400
        assert user_repo.get(target.id) is not None

    def test_unknown_user(
        self, user_service: UserService, admin: AuthenticatedUser
    ) -> None:
        with pytest.raises(UserNotFoundError):
            user_service.delete_user(admin, uuid4())

    def test_non_admin_denied(
        self,
        user_service: UserService,
        user_repo: FakeUserRepository,
        instructor: AuthenticatedUser,
    ) -> None:
        target = seed_user(user_repo, UserRole.STUDENT)

        with pytest.raises(AccessDeniedError):
            user_service.delete_user(instructor, target.id)

    def test_instructor_deletion_cascades_courses(
        self,
        user_service: UserService,
        progress_service: ProgressService,
        user_repo: FakeUserRepository,
        course_repo: FakeCourseRepository,
        enrollment_repo: FakeEnrollmentRepository,
        admin: AuthenticatedUser,
        student: AuthenticatedUser,
    ) -> None:
        """Courses of a removed instructor and their enrollments should go."""
        teacher = seed_user(user_repo, UserRole.INSTRUCTOR)
        course = seed_course(course_repo, teacher.id)
        other = seed_course(course_repo, uuid4())
        progress_service.enroll(student, course.id)
        progress_service.enroll(student, other.id)

        user_service.delete_user(admin, teacher.id)

        assert user_repo.get(teacher.id) is None
        assert list(course_repo.rows) == [other.id]
        assert [e.course_id for e in enrollment_repo.list_for_student(student.id)] == [
            other.id
        ]

    def test_student_deletion_cascades_enrollments(
        self,
        user_service: UserService,
        progress_service: ProgressService,
        user_repo: FakeUserRepository,
        course_repo: FakeCourseRepository,
        enrollment_repo: FakeEnrollmentRepository,
        admin: AuthenticatedUser,
        instructor: AuthenticatedUser,
        student: AuthenticatedUser,
    ) -> None:
        seed_user(user_repo, UserRole.STUDENT, user_id=student.id)
        course = seed_course(course_repo, instructor.id)
        progress_service.enroll(student, course.id)

        user_service.delete_user(admin, student.id)

        assert enrollment_repo.count() == 0
        assert course_repo.get(course.id).enrolled_count == 0


class TestDashboardStats:
    """Tests for UserService.dashboard_stats."""

    def test_student_stats(
        self,
        user_service: UserService,
        progress_service: ProgressService,
        course_repo: FakeCourseRepository,
        instructor: AuthenticatedUser,
        student: AuthenticatedUser,
    ) -> None:
        """Finished courses count as completed, the rest as in progress."""
        done = seed_course(course_repo, instructor.id, [10])
        ongoing = seed_course(course_repo, instructor.id, [10, 10])
        finished = progress_service.enroll(student, done.id)
        progress_service.enroll(student, ongoing.id)
        progress_service.set_module_completion(
            student, finished.id, done.module_ids[0], True
        )

        stats = user_service.dashboard_stats(student)

        assert isinstance(stats, StudentStatsResponse)
        assert stats.total_courses == 2
        assert stats.completed_courses == 1
        assert stats.in_progress_courses == 1
        assert len(stats.enrollments) == 2

    def test_instructor_stats(
        self,
        user_service: UserService,
        progress_service: ProgressService,
        course_repo: FakeCourseRepository,
        instructor: AuthenticatedUser,
        student: AuthenticatedUser,
        other_student: AuthenticatedUser,
    ) -> None:
        course = seed_course(course_repo, instructor.id)
        seed_course(course_repo, instructor.id, published=False)
        progress_service.enroll(student, course.id)
        progress_service.enroll(other_student, course.id)

        stats = user_service.dashboard_stats(instructor)

        assert isinstance(stats, InstructorStatsResponse)
        assert stats.total_courses == 2
        assert stats.published_courses == 1
        assert stats.total_students == 2

    def test_admin_stats(
        self,
        user_service: UserService,
        progress_service: ProgressService,
        user_repo: FakeUserRepository,
        course_repo: FakeCourseRepository,
        admin: AuthenticatedUser,
        instructor: AuthenticatedUser,
        student: AuthenticatedUser,
    ) -> None:
        seed_user(user_repo, UserRole.ADMIN, user_id=admin.id)
        seed_user(user_repo, UserRole.INSTRUCTOR, user_id=instructor.id)
        seed_user(user_repo, UserRole.STUDENT, user_id=student.id)
        course = seed_course(course_repo, instructor.id)
        progress_service.enroll(student, course.id)

        stats = user_service.dashboard_stats(admin)

        assert isinstance(stats, AdminStatsResponse)
        assert stats.total_users == 3
        assert stats.total_courses == 1
        assert stats.total_enrollments == 1
        assert stats.total_students == 1
        assert stats.total_instructors == 1
