"""Pydantic schemas for the course catalog.

Request and response models for course CRUD, publication and the embedded
module list.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from edupulse.courses.models import Course, CourseLevel


# ==============================================================================
# Module Schemas
# ==============================================================================


class ModuleInput(BaseModel):
    """Module as submitted on course create or update.

    ``id`` is only honoured on update, where it keeps the identity of an
    existing module.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    id: UUID | None = Field(None, description="Existing module id (update only)")
    title: str = Field(..., min_length=1, max_length=200, description="Module title")
    description: str = Field("", max_length=5000, description="Module summary")
    content: str = Field("", description="Text content")
    video_url: str | None = Field(None, max_length=500, description="Video reference")
    duration_minutes: int = Field(0, ge=0, description="Duration in minutes")
    order: int = Field(0, description="Sort key")


class ModuleResponse(BaseModel):
    """Module response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    description: str = ""
    content: str = ""
    video_url: str | None = None
    duration_minutes: int
    order: int


# ==============================================================================
# Course Schemas
# ==============================================================================


class CreateCourseRequest(BaseModel):
    """Course creation request."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., min_length=1, max_length=200, description="Course title")
    description: str = Field("", max_length=5000, description="Course description")
    category: str = Field("", max_length=100, description="Course category")
    level: CourseLevel = Field(CourseLevel.BEGINNER, description="Difficulty level")
    thumbnail_url: str | None = Field(
        None, max_length=500, description="Opaque thumbnail reference"
    )
    modules: list[ModuleInput] = Field(..., min_length=1, description="Modules")
    is_published: bool = Field(False, description="Publish immediately")


class UpdateCourseRequest(BaseModel):
    """Partial course update. Supplied modules replace the whole list."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str | None = Field(
        None, min_length=1, max_length=200, description="Course title"
    )
    description: str | None = Field(
        None, max_length=5000, description="Course description"
    )
    category: str | None = Field(None, max_length=100, description="Course category")
    level: CourseLevel | None = Field(None, description="Difficulty level")
    thumbnail_url: str | None = Field(
        None, max_length=500, description="Opaque thumbnail reference"
    )
    modules: list[ModuleInput] | None = Field(
        None, min_length=1, description="Replacement module list"
    )
    is_published: bool | None = Field(None, description="Publication flag")


class PublishCourseRequest(BaseModel):
    """Publication toggle."""

    is_published: bool


class CourseResponse(BaseModel):
    """Course response."""

    id: UUID
    title: str
    description: str = ""
    category: str = ""
    level: CourseLevel
    thumbnail_url: str | None = None
    instructor_id: UUID
    modules: list[ModuleResponse]
    enrolled_count: int = 0
    is_published: bool
    total_duration_minutes: int
    duration_label: str
    created_at: datetime
    updated_at: datetime | None = None

    @classmethod
    def from_entity(cls, course: Course) -> "CourseResponse":
        return cls.model_validate(course.to_dict())


class CourseListResponse(BaseModel):
    """Course list response."""

    items: list[CourseResponse]
    total: int


class MessageResponse(BaseModel):
    """Simple message response."""

    message: str
