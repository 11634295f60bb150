"""Cassandra persistence for user profiles."""

from typing import TYPE_CHECKING
from uuid import UUID

from edupulse.users.models import User


if TYPE_CHECKING:
    from cassandra.cluster import Session


class UserRepository:
    """Reads and writes the ``users`` table."""

    def __init__(self, session: "Session", keyspace: str):
        self.session = session
        self.keyspace = keyspace
        self._prepare_statements()

    def _prepare_statements(self) -> None:
        """Prepare CQL statements."""
        self._get_by_id = self.session.prepare(
            f"SELECT * FROM {self.keyspace}.users WHERE id = ?"
        )
        self._select_all = self.session.prepare(f"SELECT * FROM {self.keyspace}.users")
        self._upsert = self.session.prepare(f"""
            INSERT INTO {self.keyspace}.users
            (id, email, name, role, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?)
        """)
        self._delete = self.session.prepare(
            f"DELETE FROM {self.keyspace}.users WHERE id = ?"
        )

    def get(self, user_id: UUID) -> User | None:
        row = self.session.execute(self._get_by_id, [user_id]).one()
        return User.from_row(row) if row else None

    def list_all(self) -> list[User]:
        return [User.from_row(row) for row in self.session.execute(self._select_all)]

    def save(self, user: User) -> None:
        self.session.execute(
            self._upsert,
            [
                user.id,
                user.email,
                user.name,
                user.role,
                user.created_at,
                user.updated_at,
            ],
        )

    def delete(self, user_id: UUID) -> None:
        self.session.execute(self._delete, [user_id])
