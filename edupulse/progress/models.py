"""Database models for enrollments and module progress.

Cassandra table definitions for:
- Enrollments: one row per enrollment holding the progress list
- Lookup tables: per-student (uniqueness guard) and per-course (cascades)

Architecture: the per-student table is written with ``IF NOT EXISTS`` to
guarantee a single enrollment per (student, course); the enrollment row is
written with ``IF version = ?`` so concurrent progress updates never overwrite
each other.
"""

from datetime import UTC, datetime
from typing import Any
from uuid import UUID, uuid4

import orjson


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


# ==============================================================================
# CQL Table Definitions
# ==============================================================================

# Progress is an embedded JSON list, in course module order at enrollment time
ENROLLMENTS_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.enrollments (
    id UUID PRIMARY KEY,
    student_id UUID,
    course_id UUID,
    enrolled_at TIMESTAMP,
    completed_at TIMESTAMP,
    progress TEXT,
    progress_percentage INT,
    version INT
)
"""

# Lookup: enrollment by student - also the uniqueness guard for the pair
ENROLLMENTS_BY_STUDENT_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.enrollments_by_student (
    student_id UUID,
    course_id UUID,
    enrollment_id UUID,
    enrolled_at TIMESTAMP,
    PRIMARY KEY (student_id, course_id)
)
"""

# Lookup: enrollments by course - for course deletion cascades
ENROLLMENTS_BY_COURSE_TABLE_CQL = """
CREATE TABLE IF NOT EXISTS {keyspace}.enrollments_by_course (
    course_id UUID,
    student_id UUID,
    enrollment_id UUID,
    PRIMARY KEY (course_id, student_id)
)
"""

PROGRESS_TABLES_CQL = [
    ENROLLMENTS_TABLE_CQL,
    ENROLLMENTS_BY_STUDENT_TABLE_CQL,
    ENROLLMENTS_BY_COURSE_TABLE_CQL,
]


# ==============================================================================
# Entity Classes
# ==============================================================================


class ModuleProgress:
    """Completion state of one module inside an enrollment.

    Attributes:
        module_id: Course module this entry tracks
        completed: Completion flag
        completed_at: Set on a false to true transition, cleared on the reverse
    """

    def __init__(
        self,
        module_id: UUID,
        completed: bool = False,
        completed_at: datetime | None = None,
    ):
        self.module_id = module_id
        self.completed = completed
        self.completed_at = ensure_utc_aware(completed_at)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ModuleProgress":
        completed_at = data.get("completed_at")
        return cls(
            module_id=UUID(data["module_id"]),
            completed=bool(data.get("completed", False)),
            completed_at=datetime.fromisoformat(completed_at) if completed_at else None,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "module_id": self.module_id,
            "completed": self.completed,
            "completed_at": self.completed_at,
        }

    def copy(self) -> "ModuleProgress":
        return ModuleProgress(self.module_id, self.completed, self.completed_at)

    def __repr__(self) -> str:
        return f"<ModuleProgress {self.module_id} completed={self.completed}>"


class Enrollment:
    """A student's enrollment in a course.

    Attributes:
        id: Enrollment identifier
        student_id: Enrolled student
        course_id: Course enrolled in
        enrolled_at: Enrollment timestamp
        completed_at: Set while progress_percentage is 100
        progress: One entry per course module, snapshotted at enrollment
        progress_percentage: Rounded share of completed modules (0-100)
        version: Incremented on every progress write
    """

    def __init__(
        self,
        id: UUID | None = None,
        student_id: UUID | None = None,
        course_id: UUID | None = None,
        enrolled_at: datetime | None = None,
        completed_at: datetime | None = None,
        progress: list[ModuleProgress] | None = None,
        progress_percentage: int = 0,
        version: int = 0,
    ):
        self.id = id or uuid4()
        self.student_id = student_id
        self.course_id = course_id
        self.enrolled_at = ensure_utc_aware(enrolled_at) or datetime.now(UTC)
        self.completed_at = ensure_utc_aware(completed_at)
        self.progress = list(progress or [])
        self.progress_percentage = progress_percentage
        self.version = version

    @classmethod
    def from_row(cls, row: Any) -> "Enrollment":
        """Create Enrollment instance from Cassandra row."""
        raw_progress = orjson.loads(row.progress) if row.progress else []
        return cls(
            id=row.id,
            student_id=row.student_id,
            course_id=row.course_id,
            enrolled_at=row.enrolled_at,
            completed_at=row.completed_at,
            progress=[ModuleProgress.from_dict(item) for item in raw_progress],
            progress_percentage=row.progress_percentage or 0,
            version=row.version or 0,
        )

    def progress_json(self) -> str:
        """Serialize the progress list for the ``progress`` column."""
        return orjson.dumps([entry.to_dict() for entry in self.progress]).decode()

    @property
    def completed_modules(self) -> int:
        return sum(1 for entry in self.progress if entry.completed)

    def copy(self) -> "Enrollment":
        """Deep copy, so a mutation never leaks into the stored snapshot."""
        return Enrollment(
            id=self.id,
            student_id=self.student_id,
            course_id=self.course_id,
            enrolled_at=self.enrolled_at,
            completed_at=self.completed_at,
            progress=[entry.copy() for entry in self.progress],
            progress_percentage=self.progress_percentage,
            version=self.version,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "student_id": self.student_id,
            "course_id": self.course_id,
            "enrolled_at": self.enrolled_at,
            "completed_at": self.completed_at,
            "progress": [entry.to_dict() for entry in self.progress],
            "progress_percentage": self.progress_percentage,
            "version": self.version,
        }

    def __repr__(self) -> str:
        return (
            f"<Enrollment {self.student_id} -> {self.course_id} "
            f"({self.progress_percentage}%)>"
        )
