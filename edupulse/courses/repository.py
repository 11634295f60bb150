"""Cassandra persistence for courses."""

from typing import TYPE_CHECKING
from uuid import UUID

from edupulse.courses.models import Course


if TYPE_CHECKING:
    from cassandra.cluster import Session


class CourseRepository:
    """Reads and writes the ``courses`` table."""

    def __init__(self, session: "Session", keyspace: str):
        self.session = session
        self.keyspace = keyspace
        self._prepare_statements()

    def _prepare_statements(self) -> None:
        """Prepare CQL statements."""
        self._get_by_id = self.session.prepare(
            f"SELECT * FROM {self.keyspace}.courses WHERE id = ?"
        )
        self._select_all = self.session.prepare(
            f"SELECT * FROM {self.keyspace}.courses"
        )
        self._insert = self.session.prepare(f"""
            INSERT INTO {self.keyspace}.courses
            (id, title, description, category, level, thumbnail_url, instructor_id,
             modules, enrolled_student_ids, is_published, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """)
        # Leaves enrolled_student_ids alone so concurrent enrollments survive edits
        self._update = self.session.prepare(f"""
            UPDATE {self.keyspace}.courses
            SET title = ?, description = ?, category = ?, level = ?,
                thumbnail_url = ?, modules = ?, is_published = ?, updated_at = ?
            WHERE id = ?
        """)
        self._delete = self.session.prepare(
            f"DELETE FROM {self.keyspace}.courses WHERE id = ?"
        )
        self._add_student = self.session.prepare(f"""
            UPDATE {self.keyspace}.courses
            SET enrolled_student_ids = enrolled_student_ids + ?
            WHERE id = ?
            IF EXISTS
        """)
        self._remove_student = self.session.prepare(f"""
            UPDATE {self.keyspace}.courses
            SET enrolled_student_ids = enrolled_student_ids - ?
            WHERE id = ?
        """)

    def get(self, course_id: UUID) -> Course | None:
        """Get a course by id."""
        row = self.session.execute(self._get_by_id, [course_id]).one()
        return Course.from_row(row) if row else None

    def list_all(self) -> list[Course]:
        """Fetch every course. Callers filter and sort in memory."""
        return [Course.from_row(row) for row in self.session.execute(self._select_all)]

    def create(self, course: Course) -> None:
        self.session.execute(
            self._insert,
            [
                course.id,
                course.title,
                course.description,
                course.category,
                course.level,
                course.thumbnail_url,
                course.instructor_id,
                course.modules_json(),
                course.enrolled_student_ids or None,
                course.is_published,
                course.created_at,
                course.updated_at,
            ],
        )

    def update(self, course: Course) -> None:
        self.session.execute(
            self._update,
            [
                course.title,
                course.description,
                course.category,
                course.level,
                course.thumbnail_url,
                course.modules_json(),
                course.is_published,
                course.updated_at,
                course.id,
            ],
        )

    def delete(self, course_id: UUID) -> None:
        self.session.execute(self._delete, [course_id])

    def add_enrolled_student(self, course_id: UUID, student_id: UUID) -> bool:
        """Add a student to the enrolled set.

        Returns:
            False if the course row no longer exists
        """
        result = self.session.execute(self._add_student, [{student_id}, course_id])
        return result.was_applied

    def remove_enrolled_student(self, course_id: UUID, student_id: UUID) -> None:
        self.session.execute(self._remove_student, [{student_id}, course_id])
