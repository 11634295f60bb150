"""Course catalog API endpoints."""

from uuid import UUID

from fastapi import APIRouter, status

from edupulse.auth.dependencies import CurrentUser, OptionalUser
from edupulse.courses.dependencies import CourseServiceDep
from edupulse.courses.models import Course
from edupulse.courses.schemas import (
    CourseListResponse,
    CourseResponse,
    CreateCourseRequest,
    MessageResponse,
    PublishCourseRequest,
    UpdateCourseRequest,
)


router = APIRouter(prefix="/courses", tags=["courses"])


def _list_response(courses: list[Course]) -> CourseListResponse:
    items = [CourseResponse.from_entity(course) for course in courses]
    return CourseListResponse(items=items, total=len(items))


@router.get(
    "",
    response_model=CourseListResponse,
    summary="List published courses",
)
def list_published_courses(
    course_service: CourseServiceDep,
) -> CourseListResponse:
    """List published courses, newest first (public)."""
    return _list_response(course_service.list_published_courses())


@router.get(
    "/all",
    response_model=CourseListResponse,
    summary="List all courses (admin)",
)
def list_all_courses(
    course_service: CourseServiceDep,
    user: CurrentUser,
) -> CourseListResponse:
    """List every course including drafts (ADMIN only)."""
    return _list_response(course_service.list_all_courses(user))


@router.get(
    "/mine",
    response_model=CourseListResponse,
    summary="List my courses",
)
def list_my_courses(
    course_service: CourseServiceDep,
    user: CurrentUser,
) -> CourseListResponse:
    """List courses authored by the current instructor."""
    return _list_response(course_service.list_instructor_courses(user))


@router.get(
    "/{course_id}",
    response_model=CourseResponse,
    summary="Get course details",
)
def get_course(
    course_id: UUID,
    course_service: CourseServiceDep,
    user: OptionalUser,
) -> CourseResponse:
    """Get a course with its ordered modules.

    Drafts are only visible to their owner and admins.
    """
    return CourseResponse.from_entity(course_service.get_course(course_id, user))


@router.post(
    "",
    response_model=CourseResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create new course",
)
def create_course(
    data: CreateCourseRequest,
    course_service: CourseServiceDep,
    user: CurrentUser,
) -> CourseResponse:
    """Create a new course (INSTRUCTOR or ADMIN only)."""
    return CourseResponse.from_entity(course_service.create_course(user, data))


@router.put(
    "/{course_id}",
    response_model=CourseResponse,
    summary="Update course",
)
def update_course(
    course_id: UUID,
    data: UpdateCourseRequest,
    course_service: CourseServiceDep,
    user: CurrentUser,
) -> CourseResponse:
    """Update course (owner or ADMIN only)."""
    return CourseResponse.from_entity(
        course_service.update_course(user, course_id, data)
    )


@router.patch(
    "/{course_id}/publish",
    response_model=CourseResponse,
    summary="Publish or unpublish course",
)
def set_course_published(
    course_id: UUID,
    data: PublishCourseRequest,
    course_service: CourseServiceDep,
    user: CurrentUser,
) -> CourseResponse:
    """Toggle publication (owner or ADMIN only)."""
    return CourseResponse.from_entity(
        course_service.set_published(user, course_id, data.is_published)
    )


@router.delete(
    "/{course_id}",
    response_model=MessageResponse,
    summary="Delete course",
)
def delete_course(
    course_id: UUID,
    course_service: CourseServiceDep,
    user: CurrentUser,
) -> MessageResponse:
    """Delete course and its enrollments (owner or ADMIN only)."""
    course_service.delete_course(user, course_id)
    return MessageResponse(message="Course deleted successfully")
