"""Shared fixtures.

The application is built with in-memory repositories wired through
``install_services``; the lifespan (and its Cassandra connection) never runs
because the client is not used as a context manager.
"""

import os
from collections.abc import Callable

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient


os.environ.setdefault("ENVIRONMENT", "testing")

from edupulse.auth.permissions import UserRole  # noqa: E402
from edupulse.auth.schemas import AuthenticatedUser  # noqa: E402
from edupulse.auth.security import create_access_token  # noqa: E402
from edupulse.config import get_settings  # noqa: E402
from edupulse.courses.service import CourseService  # noqa: E402
from edupulse.main import create_app, install_services  # noqa: E402
from edupulse.progress.service import ProgressService  # noqa: E402
from edupulse.users.service import UserService  # noqa: E402
from tests.fakes import (  # noqa: E402
    FakeCourseRepository,
    FakeEnrollmentRepository,
    FakeUserRepository,
    make_caller,
)


# ==============================================================================
# Repositories and services
# ==============================================================================


@pytest.fixture
def course_repo() -> FakeCourseRepository:
    return FakeCourseRepository()


@pytest.fixture
def enrollment_repo() -> FakeEnrollmentRepository:
    return FakeEnrollmentRepository()


@pytest.fixture
def user_repo() -> FakeUserRepository:
    return FakeUserRepository()


@pytest.fixture
def progress_service(
    enrollment_repo: FakeEnrollmentRepository, course_repo: FakeCourseRepository
) -> ProgressService:
    return ProgressService(enrollment_repo, course_repo, max_update_attempts=5)


@pytest.fixture
def course_service(
    course_repo: FakeCourseRepository, progress_service: ProgressService
) -> CourseService:
    return CourseService(course_repo, progress_service)


@pytest.fixture
def user_service(
    user_repo: FakeUserRepository,
    course_service: CourseService,
    progress_service: ProgressService,
) -> UserService:
    return UserService(user_repo, course_service, progress_service)


# ==============================================================================
# Callers
# ==============================================================================


@pytest.fixture
def student() -> AuthenticatedUser:
    return make_caller(UserRole.STUDENT)


@pytest.fixture
def other_student() -> AuthenticatedUser:
    return make_caller(UserRole.STUDENT)


@pytest.fixture
def instructor() -> AuthenticatedUser:
    return make_caller(UserRole.INSTRUCTOR)


@pytest.fixture
def admin() -> AuthenticatedUser:
    return make_caller(UserRole.ADMIN)


# ==============================================================================
# HTTP
# ==============================================================================


@pytest.fixture
def app(
    course_repo: FakeCourseRepository,
    enrollment_repo: FakeEnrollmentRepository,
    user_repo: FakeUserRepository,
) -> FastAPI:
    application = create_app()
    install_services(
        application,
        courses=course_repo,
        enrollments=enrollment_repo,
        users=user_repo,
        settings=get_settings(),
    )
    return application


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def auth_headers() -> Callable[[AuthenticatedUser], dict[str, str]]:
    """Factory turning a caller into an Authorization header."""

    def _headers(user: AuthenticatedUser) -> dict[str, str]:
        claims = {"sub": str(user.id), "role": user.role.value}
        if user.email:
            claims["email"] = user.email
        if user.name:
            claims["name"] = user.name
        token = create_access_token(claims)
        return {"Authorization": f"Bearer {token}"}

    return _headers
