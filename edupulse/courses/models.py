"""Database models for the course catalog.

A course is stored as a single row. Its ordered module list is kept as an
embedded JSON document, and the enrolled students as a set column that is
updated incrementally on enroll/unenroll.
"""

from datetime import UTC, datetime
from enum import Enum
from typing import Any
from uuid import UUID, uuid4

import orjson


class CourseLevel(str, Enum):
    """Course difficulty level."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


# ==============================================================================
# CQL Table Definitions
# ==============================================================================

COURSE_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.courses (
    id UUID PRIMARY KEY,
    title TEXT,
    description TEXT,
    category TEXT,
    level TEXT,
    thumbnail_url TEXT,
    instructor_id UUID,
    modules TEXT,
    enrolled_student_ids SET<UUID>,
    is_published BOOLEAN,
    created_at TIMESTAMP,
    updated_at TIMESTAMP
)
"""

COURSES_TABLES_CQL = [
    COURSE_TABLE_CQL,
]


# ==============================================================================
# Helper Functions
# ==============================================================================


def ensure_utc_aware(dt: datetime | None) -> datetime | None:
    """Ensure datetime is UTC-aware (Cassandra returns naive datetimes)."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt


def format_duration(total_minutes: int) -> str:
    """Render minutes as ``"{h}h {m}m"``, ``"{h}h"`` or ``"{m}m"``."""
    hours, minutes = divmod(total_minutes, 60)
    if hours > 0 and minutes > 0:
        return f"{hours}h {minutes}m"
    if hours > 0:
        return f"{hours}h"
    return f"{minutes}m"


def sort_modules(modules: list["Module"]) -> list["Module"]:
    """Order modules by their ``order`` key; ties keep submission order."""
    return sorted(modules, key=lambda module: module.order)


# ==============================================================================
# Entity Classes
# ==============================================================================


class Module:
    """A unit of course content.

    Attributes:
        id: Module identifier, assigned when the course is saved
        title: Module title
        description: Short summary
        content: Text body
        video_url: Optional video reference
        duration_minutes: Non-negative duration
        order: Sort key, not necessarily unique or contiguous
    """

    def __init__(
        self,
        id: UUID | None = None,
        title: str = "",
        description: str = "",
        content: str = "",
        video_url: str | None = None,
        duration_minutes: int = 0,
        order: int = 0,
    ):
        self.id = id or uuid4()
        self.title = title
        self.description = description
        self.content = content
        self.video_url = video_url
        self.duration_minutes = duration_minutes
        self.order = order

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Module":
        """Build a module from its embedded JSON form."""
        return cls(
            id=UUID(data["id"]),
            title=data.get("title", ""),
            description=data.get("description", ""),
            content=data.get("content", ""),
            video_url=data.get("video_url"),
            duration_minutes=data.get("duration_minutes", 0),
            order=data.get("order", 0),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "content": self.content,
            "video_url": self.video_url,
            "duration_minutes": self.duration_minutes,
            "order": self.order,
        }

    def __repr__(self) -> str:
        return f"<Module {self.title} (order={self.order})>"


class Course:
    """Course entity: metadata plus an ordered module list.

    ``modules`` holds submission order. Use :attr:`ordered_modules` whenever
    the display or enrollment order matters.
    """

    def __init__(
        self,
        id: UUID | None = None,
        title: str = "",
        description: str = "",
        category: str = "",
        level: str = CourseLevel.BEGINNER.value,
        thumbnail_url: str | None = None,
        instructor_id: UUID | None = None,
        modules: list[Module] | None = None,
        enrolled_student_ids: set[UUID] | None = None,
        is_published: bool = False,
        created_at: datetime | None = None,
        updated_at: datetime | None = None,
    ):
        self.id = id or uuid4()
        self.title = title.strip()
        self.description = description
        self.category = category
        self.level = level
        self.thumbnail_url = thumbnail_url
        self.instructor_id = instructor_id
        self.modules = list(modules or [])
        self.enrolled_student_ids = set(enrolled_student_ids or ())
        self.is_published = is_published
        self.created_at = ensure_utc_aware(created_at) or datetime.now(UTC)
        self.updated_at = ensure_utc_aware(updated_at)

    @classmethod
    def from_row(cls, row: Any) -> "Course":
        """Create Course instance from Cassandra row."""
        raw_modules = orjson.loads(row.modules) if row.modules else []
        return cls(
            id=row.id,
            title=row.title or "",
            description=row.description or "",
            category=row.category or "",
            level=row.level or CourseLevel.BEGINNER.value,
            thumbnail_url=row.thumbnail_url,
            instructor_id=row.instructor_id,
            modules=[Module.from_dict(item) for item in raw_modules],
            enrolled_student_ids=set(row.enrolled_student_ids or ()),
            is_published=bool(row.is_published),
            created_at=row.created_at,
            updated_at=row.updated_at,
        )

    def modules_json(self) -> str:
        """Serialize the module list for the ``modules`` column."""
        return orjson.dumps([module.to_dict() for module in self.modules]).decode()

    @property
    def ordered_modules(self) -> list[Module]:
        return sort_modules(self.modules)

    @property
    def module_ids(self) -> list[UUID]:
        """Module ids in display order."""
        return [module.id for module in self.ordered_modules]

    @property
    def total_duration_minutes(self) -> int:
        return sum(module.duration_minutes for module in self.modules)

    @property
    def duration_label(self) -> str:
        return format_duration(self.total_duration_minutes)

    @property
    def enrolled_count(self) -> int:
        return len(self.enrolled_student_ids)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "category": self.category,
            "level": self.level,
            "thumbnail_url": self.thumbnail_url,
            "instructor_id": self.instructor_id,
            "modules": [module.to_dict() for module in self.ordered_modules],
            "enrolled_count": self.enrolled_count,
            "is_published": self.is_published,
            "total_duration_minutes": self.total_duration_minutes,
            "duration_label": self.duration_label,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    def __repr__(self) -> str:
        state = "published" if self.is_published else "draft"
        return f"<Course {self.title} ({state})>"
