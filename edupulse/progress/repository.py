"""Cassandra persistence for enrollments.

Uniqueness of the (student, course) pair is enforced by a lightweight
transaction on ``enrollments_by_student``; progress writes are conditional on
the ``version`` column.
"""

from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID

from edupulse.progress.models import Enrollment


if TYPE_CHECKING:
    from cassandra.cluster import Session


class EnrollmentRepository:
    """Reads and writes the enrollment tables."""

    def __init__(self, session: "Session", keyspace: str):
        self.session = session
        self.keyspace = keyspace
        self._prepare_statements()

    def _prepare_statements(self) -> None:
        """Prepare CQL statements."""
        ks = self.keyspace

        # Uniqueness guard
        self._reserve = self.session.prepare(f"""
            INSERT INTO {ks}.enrollments_by_student
            (student_id, course_id, enrollment_id, enrolled_at)
            VALUES (?, ?, ?, ?)
            IF NOT EXISTS
        """)
        self._release = self.session.prepare(
            f"DELETE FROM {ks}.enrollments_by_student "
            "WHERE student_id = ? AND course_id = ? IF EXISTS"
        )

        # Enrollment rows
        self._insert = self.session.prepare(f"""
            INSERT INTO {ks}.enrollments
            (id, student_id, course_id, enrolled_at, completed_at, progress,
             progress_percentage, version)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
        """)
        self._get_by_id = self.session.prepare(
            f"SELECT * FROM {ks}.enrollments WHERE id = ?"
        )
        self._update_progress = self.session.prepare(f"""
            UPDATE {ks}.enrollments
            SET progress = ?, progress_percentage = ?, completed_at = ?, version = ?
            WHERE id = ?
            IF version = ?
        """)
        self._delete = self.session.prepare(
            f"DELETE FROM {ks}.enrollments WHERE id = ?"
        )
        self._count = self.session.prepare(f"SELECT COUNT(*) FROM {ks}.enrollments")

        # Lookups
        self._get_by_student_course = self.session.prepare(
            f"SELECT enrollment_id FROM {ks}.enrollments_by_student "
            "WHERE student_id = ? AND course_id = ?"
        )
        self._list_by_student = self.session.prepare(
            f"SELECT enrollment_id FROM {ks}.enrollments_by_student "
            "WHERE student_id = ?"
        )
        self._insert_by_course = self.session.prepare(f"""
            INSERT INTO {ks}.enrollments_by_course
            (course_id, student_id, enrollment_id)
            VALUES (?, ?, ?)
        """)
        self._list_by_course = self.session.prepare(
            f"SELECT enrollment_id FROM {ks}.enrollments_by_course WHERE course_id = ?"
        )
        self._delete_by_course = self.session.prepare(
            f"DELETE FROM {ks}.enrollments_by_course "
            "WHERE course_id = ? AND student_id = ?"
        )

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def reserve(
        self,
        student_id: UUID,
        course_id: UUID,
        enrollment_id: UUID,
        enrolled_at: datetime,
    ) -> bool:
        """Claim the (student, course) pair.

        Returns:
            False if the pair is already taken
        """
        result = self.session.execute(
            self._reserve, [student_id, course_id, enrollment_id, enrolled_at]
        )
        return result.was_applied

    def release(self, student_id: UUID, course_id: UUID) -> None:
        """Free the (student, course) pair.

        Conditional like ``reserve``: the partition is only written through LWTs.
        """
        self.session.execute(self._release, [student_id, course_id])

    def create(self, enrollment: Enrollment) -> None:
        """Write the enrollment row and its per-course lookup.

        The pair must already be reserved.
        """
        self.session.execute(
            self._insert,
            [
                enrollment.id,
                enrollment.student_id,
                enrollment.course_id,
                enrollment.enrolled_at,
                enrollment.completed_at,
                enrollment.progress_json(),
                enrollment.progress_percentage,
                enrollment.version,
            ],
        )
        self.session.execute(
            self._insert_by_course,
            [enrollment.course_id, enrollment.student_id, enrollment.id],
        )

    def save_progress(self, enrollment: Enrollment, expected_version: int) -> bool:
        """Persist progress if the stored version still equals ``expected_version``.

        Returns:
            False when another writer got there first or the row is gone
        """
        result = self.session.execute(
            self._update_progress,
            [
                enrollment.progress_json(),
                enrollment.progress_percentage,
                enrollment.completed_at,
                enrollment.version,
                enrollment.id,
                expected_version,
            ],
        )
        return result.was_applied

    def delete(self, enrollment: Enrollment) -> None:
        """Remove the enrollment and both lookup rows."""
        self.session.execute(self._delete, [enrollment.id])
        self.session.execute(
            self._delete_by_course, [enrollment.course_id, enrollment.student_id]
        )
        self.release(enrollment.student_id, enrollment.course_id)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get(self, enrollment_id: UUID) -> Enrollment | None:
        row = self.session.execute(self._get_by_id, [enrollment_id]).one()
        return Enrollment.from_row(row) if row else None

    def get_for_student_course(
        self, student_id: UUID, course_id: UUID
    ) -> Enrollment | None:
        row = self.session.execute(
            self._get_by_student_course, [student_id, course_id]
        ).one()
        return self.get(row.enrollment_id) if row else None

    def list_for_student(self, student_id: UUID) -> list[Enrollment]:
        rows = self.session.execute(self._list_by_student, [student_id])
        return self._load([row.enrollment_id for row in rows])

    def list_for_course(self, course_id: UUID) -> list[Enrollment]:
        rows = self.session.execute(self._list_by_course, [course_id])
        return self._load([row.enrollment_id for row in rows])

    def count(self) -> int:
        row = self.session.execute(self._count).one()
        return row.count if row else 0

    def _load(self, enrollment_ids: list[UUID]) -> list[Enrollment]:
        # Lookup rows can outlive an enrollment deleted mid-cascade
        enrollments = (self.get(enrollment_id) for enrollment_id in enrollment_ids)
        return [enrollment for enrollment in enrollments if enrollment is not None]
