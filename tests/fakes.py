"""In-memory stand-ins for the Cassandra repositories.

They keep the same method names and return contracts as the real
repositories, including the ``was_applied`` style booleans of the
conditional writes, and store copies so callers never share state with the
"database".
"""

import copy
import time
from datetime import UTC, datetime, timedelta
from uuid import UUID, uuid4

from edupulse.auth.permissions import UserRole
from edupulse.auth.schemas import AuthenticatedUser
from edupulse.courses.models import Course, Module
from edupulse.progress.models import Enrollment
from edupulse.users.models import User


class FakeCourseRepository:
    """Dict backed ``CourseRepository``."""

    def __init__(self) -> None:
        self.rows: dict[UUID, Course] = {}

    def get(self, course_id: UUID) -> Course | None:
        course = self.rows.get(course_id)
        return copy.deepcopy(course) if course else None

    def list_all(self) -> list[Course]:
        return [copy.deepcopy(course) for course in self.rows.values()]

    def create(self, course: Course) -> None:
        self.rows[course.id] = copy.deepcopy(course)

    def update(self, course: Course) -> None:
        stored = self.rows.get(course.id)
        updated = copy.deepcopy(course)
        # The real UPDATE never touches the enrolled set
        updated.enrolled_student_ids = (
            set(stored.enrolled_student_ids) if stored else set()
        )
        self.rows[course.id] = updated

    def delete(self, course_id: UUID) -> None:
        self.rows.pop(course_id, None)

    def add_enrolled_student(self, course_id: UUID, student_id: UUID) -> bool:
        course = self.rows.get(course_id)
        if course is None:
            return False
        course.enrolled_student_ids.add(student_id)
        return True

    def remove_enrolled_student(self, course_id: UUID, student_id: UUID) -> None:
        course = self.rows.get(course_id)
        if course is not None:
            course.enrolled_student_ids.discard(student_id)


class SlowCourseRepository(FakeCourseRepository):
    """Course reads block the calling thread, like a slow Cassandra node."""

    def __init__(self, delay: float) -> None:
        super().__init__()
        self.delay = delay

    def get(self, course_id: UUID) -> Course | None:
        time.sleep(self.delay)
        return super().get(course_id)


class FakeEnrollmentRepository:
    """Dict backed ``EnrollmentRepository``."""

    def __init__(self) -> None:
        self.rows: dict[UUID, Enrollment] = {}
        self.by_student: dict[tuple[UUID, UUID], UUID] = {}
        self.save_calls = 0

    def reserve(
        self,
        student_id: UUID,
        course_id: UUID,
        enrollment_id: UUID,
        enrolled_at: datetime,
    ) -> bool:
        key = (student_id, course_id)
        if key in self.by_student:
            return False
        self.by_student[key] = enrollment_id
        return True

    def release(self, student_id: UUID, course_id: UUID) -> None:
        self.by_student.pop((student_id, course_id), None)

    def create(self, enrollment: Enrollment) -> None:
        self.rows[enrollment.id] = enrollment.copy()

    def save_progress(self, enrollment: Enrollment, expected_version: int) -> bool:
        self.save_calls += 1
        stored = self.rows.get(enrollment.id)
        if stored is None or stored.version != expected_version:
            return False
        self.rows[enrollment.id] = enrollment.copy()
        return True

    def delete(self, enrollment: Enrollment) -> None:
        self.rows.pop(enrollment.id, None)
        self.release(enrollment.student_id, enrollment.course_id)

    def get(self, enrollment_id: UUID) -> Enrollment | None:
        enrollment = self.rows.get(enrollment_id)
        return enrollment.copy() if enrollment else None

    def get_for_student_course(
        self, student_id: UUID, course_id: UUID
    ) -> Enrollment | None:
        enrollment_id = self.by_student.get((student_id, course_id))
        return self.get(enrollment_id) if enrollment_id else None

    def list_for_student(self, student_id: UUID) -> list[Enrollment]:
        return [e.copy() for e in self.rows.values() if e.student_id == student_id]

    def list_for_course(self, course_id: UUID) -> list[Enrollment]:
        return [e.copy() for e in self.rows.values() if e.course_id == course_id]

    def count(self) -> int:
        return len(self.rows)


class RacingEnrollmentRepository(FakeEnrollmentRepository):
    """Lets a competing writer land right before each of the first N saves.

    ``competitor`` receives the stored enrollment and mutates it in place;
    the stored version is then bumped, so the caller's conditional write
    fails exactly as a lost LWT would.
    """

    def __init__(self, races: int, competitor=None) -> None:
        super().__init__()
        self.races = races
        self.competitor = competitor

    def save_progress(self, enrollment: Enrollment, expected_version: int) -> bool:
        if self.races > 0:
            self.races -= 1
            stored = self.rows[enrollment.id]
            if self.competitor is not None:
                self.competitor(stored)
            stored.version += 1
        return super().save_progress(enrollment, expected_version)


class FakeUserRepository:
    """Dict backed ``UserRepository``."""

    def __init__(self) -> None:
        self.rows: dict[UUID, User] = {}

    def get(self, user_id: UUID) -> User | None:
        user = self.rows.get(user_id)
        return copy.deepcopy(user) if user else None

    def list_all(self) -> list[User]:
        return [copy.deepcopy(user) for user in self.rows.values()]

    def save(self, user: User) -> None:
        self.rows[user.id] = copy.deepcopy(user)

    def delete(self, user_id: UUID) -> None:
        self.rows.pop(user_id, None)


# ==============================================================================
# Factories
# ==============================================================================


def make_caller(role: UserRole, user_id: UUID | None = None) -> AuthenticatedUser:
    """Build an authenticated caller for service level tests."""
    user_id = user_id or uuid4()
    return AuthenticatedUser(
        id=user_id,
        role=role,
        email=f"{role.value}_{user_id.hex[:8]}@test.com",
        name=f"Test {role.value.title()}",
    )


def seed_course(
    repo: FakeCourseRepository,
    instructor_id: UUID,
    durations: list[int] | None = None,
    published: bool = True,
    created_at: datetime | None = None,
    title: str = "Course",
) -> Course:
    """Store a course with one module per duration, ordered as given."""
    durations = durations if durations is not None else [10, 20]
    course = Course(
        title=title,
        instructor_id=instructor_id,
        modules=[
            Module(title=f"Module {i + 1}", duration_minutes=minutes, order=i + 1)
            for i, minutes in enumerate(durations)
        ],
        is_published=published,
        created_at=created_at,
    )
    repo.create(course)
    return course


def seed_user(
    repo: FakeUserRepository,
    role: UserRole,
    user_id: UUID | None = None,
    created_at: datetime | None = None,
) -> User:
    user_id = user_id or uuid4()
    user = User(
        id=user_id,
        email=f"{role.value}_{user_id.hex[:8]}@test.com",
        name=f"Test {role.value.title()}",
        role=role.value,
        created_at=created_at,
    )
    repo.save(user)
    return user


def days_ago(days: int) -> datetime:
    return datetime.now(UTC) - timedelta(days=days)
