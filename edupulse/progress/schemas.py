"""Pydantic schemas for enrollments and progress.

Request and response models for:
- Enrollment lifecycle
- Module completion toggles
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from edupulse.courses.models import Course
from edupulse.courses.schemas import CourseResponse
from edupulse.progress.engine import is_complete
from edupulse.progress.models import Enrollment, ModuleProgress


class SetModuleCompletionRequest(BaseModel):
    """Body of a module completion toggle."""

    completed: bool = Field(..., strict=True, description="New completion flag")


class ModuleProgressResponse(BaseModel):
    """Progress of one module."""

    module_id: UUID
    completed: bool
    completed_at: datetime | None = None

    @classmethod
    def from_entity(cls, entity: ModuleProgress) -> "ModuleProgressResponse":
        return cls(
            module_id=entity.module_id,
            completed=entity.completed,
            completed_at=entity.completed_at,
        )


class EnrollmentResponse(BaseModel):
    """Enrollment with its progress list."""

    id: UUID
    student_id: UUID
    course_id: UUID
    enrolled_at: datetime
    completed_at: datetime | None = None
    progress: list[ModuleProgressResponse]
    progress_percentage: int = Field(description="0-100 percentage")
    is_complete: bool
    version: int

    @classmethod
    def from_entity(cls, entity: Enrollment) -> "EnrollmentResponse":
        """Create response from entity."""
        return cls(
            id=entity.id,
            student_id=entity.student_id,
            course_id=entity.course_id,
            enrolled_at=entity.enrolled_at,
            completed_at=entity.completed_at,
            progress=[ModuleProgressResponse.from_entity(p) for p in entity.progress],
            progress_percentage=entity.progress_percentage,
            is_complete=is_complete(entity),
            version=entity.version,
        )


class EnrollmentWithCourseResponse(EnrollmentResponse):
    """Enrollment joined with its course (None if the course vanished)."""

    course: CourseResponse | None = None

    @classmethod
    def from_pair(
        cls, enrollment: Enrollment, course: Course | None
    ) -> "EnrollmentWithCourseResponse":
        base = EnrollmentResponse.from_entity(enrollment)
        return cls(
            **base.model_dump(),
            course=CourseResponse.from_entity(course) if course else None,
        )


class MessageResponse(BaseModel):
    """Simple message response."""

    message: str
