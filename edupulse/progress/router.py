"""Enrollment and progress API endpoints."""

from uuid import UUID

from fastapi import APIRouter, status

from edupulse.auth.dependencies import CurrentUser
from edupulse.progress.dependencies import ProgressServiceDep
from edupulse.progress.schemas import (
    EnrollmentResponse,
    EnrollmentWithCourseResponse,
    MessageResponse,
    SetModuleCompletionRequest,
)


router = APIRouter(prefix="/enrollments", tags=["enrollments"])


@router.get(
    "/mine",
    response_model=list[EnrollmentWithCourseResponse],
    summary="Get my enrollments",
)
def list_my_enrollments(
    progress_service: ProgressServiceDep,
    user: CurrentUser,
) -> list[EnrollmentWithCourseResponse]:
    """List the current student's enrollments with course data, newest first."""
    return [
        EnrollmentWithCourseResponse.from_pair(enrollment, course)
        for enrollment, course in progress_service.list_enrollments(user)
    ]


@router.post(
    "/{course_id}",
    response_model=EnrollmentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Enroll in course",
)
def enroll_in_course(
    course_id: UUID,
    progress_service: ProgressServiceDep,
    user: CurrentUser,
) -> EnrollmentResponse:
    """Enroll the current student in a course with all modules incomplete."""
    enrollment = progress_service.enroll(user, course_id)
    return EnrollmentResponse.from_entity(enrollment)


@router.delete(
    "/{course_id}",
    response_model=MessageResponse,
    summary="Unenroll from course",
)
def unenroll_from_course(
    course_id: UUID,
    progress_service: ProgressServiceDep,
    user: CurrentUser,
) -> MessageResponse:
    """Remove the current student's enrollment and its progress."""
    progress_service.unenroll(user, course_id)
    return MessageResponse(message="Unenrolled successfully")


@router.get(
    "/{enrollment_id}",
    response_model=EnrollmentWithCourseResponse,
    summary="Get enrollment",
)
def get_enrollment(
    enrollment_id: UUID,
    progress_service: ProgressServiceDep,
    user: CurrentUser,
) -> EnrollmentWithCourseResponse:
    """Get one of the current student's enrollments."""
    enrollment, course = progress_service.get_enrollment(user, enrollment_id)
    return EnrollmentWithCourseResponse.from_pair(enrollment, course)


@router.put(
    "/{enrollment_id}/modules/{module_id}",
    response_model=EnrollmentResponse,
    summary="Set module completion",
)
def set_module_completion(
    enrollment_id: UUID,
    module_id: UUID,
    data: SetModuleCompletionRequest,
    progress_service: ProgressServiceDep,
    user: CurrentUser,
) -> EnrollmentResponse:
    """Mark a module complete or incomplete and return the updated enrollment."""
    enrollment = progress_service.set_module_completion(
        user, enrollment_id, module_id, data.completed
    )
    return EnrollmentResponse.from_entity(enrollment)
