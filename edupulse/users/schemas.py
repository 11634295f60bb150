"""Pydantic schemas for the user directory."""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from edupulse.auth.permissions import UserRole
from edupulse.courses.schemas import CourseResponse
from edupulse.progress.schemas import EnrollmentWithCourseResponse


class SyncProfileRequest(BaseModel):
    """Profile fields the caller may set. The role always comes from the token."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str | None = Field(None, min_length=1, max_length=200)
    email: EmailStr | None = None


class UserResponse(BaseModel):
    """User profile response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str | None = None
    name: str = ""
    role: UserRole
    created_at: datetime
    updated_at: datetime | None = None


class UserListResponse(BaseModel):
    """User list response."""

    items: list[UserResponse]
    total: int


class StudentStatsResponse(BaseModel):
    """Dashboard numbers for a student."""

    role: Literal["student"] = "student"
    total_courses: int
    completed_courses: int
    in_progress_courses: int
    enrollments: list[EnrollmentWithCourseResponse]


class InstructorStatsResponse(BaseModel):
    """Dashboard numbers for an instructor."""

    role: Literal["instructor"] = "instructor"
    total_courses: int
    total_students: int
    published_courses: int
    courses: list[CourseResponse]


class AdminStatsResponse(BaseModel):
    """Platform-wide dashboard numbers."""

    role: Literal["admin"] = "admin"
    total_users: int
    total_courses: int
    total_enrollments: int
    total_students: int
    total_instructors: int


class MessageResponse(BaseModel):
    """Simple message response."""

    message: str
