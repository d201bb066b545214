"""User data access. Lookups only; nothing in the API writes users yet."""
from __future__ import annotations

from uuid import UUID

from psycopg2.extensions import connection as Connection

from ..models.user import User, UserRole
from .base_repository import BaseRepository
from .query_builder import QueryBuilder

TABLE = "users"

COLUMNS = (
    "id, username, email, password_hash, first_name, last_name, "
    "role, is_active, created_at, updated_at"
)


class UserRepository(BaseRepository):
    """Queries against the users table."""

    def find_by_id(self, conn: Connection, user_id: UUID) -> User | None:
        return self._find_one(conn, QueryBuilder(TABLE).filter_equals("id", str(user_id)))

    def find_by_username(self, conn: Connection, username: str) -> User | None:
        return self._find_one(conn, QueryBuilder(TABLE).filter_equals("username", username))

    def find_by_email(self, conn: Connection, email: str) -> User | None:
        return self._find_one(conn, QueryBuilder(TABLE).filter_equals("email", email))

    def find_active_by_username(self, conn: Connection, username: str) -> User | None:
        qb = QueryBuilder(TABLE).filter_equals("username", username).where("is_active = TRUE")
        return self._find_one(conn, qb)

    def find_active_by_email(self, conn: Connection, email: str) -> User | None:
        qb = QueryBuilder(TABLE).filter_equals("email", email).where("is_active = TRUE")
        return self._find_one(conn, qb)

    def exists_by_username(self, conn: Connection, username: str) -> bool:
        sql, params = QueryBuilder(TABLE).filter_equals("username", username).build_exists()
        return bool(self._execute_scalar(conn, sql, params))

    def exists_by_email(self, conn: Connection, email: str) -> bool:
        sql, params = QueryBuilder(TABLE).filter_equals("email", email).build_exists()
        return bool(self._execute_scalar(conn, sql, params))

    def _find_one(self, conn: Connection, qb: QueryBuilder) -> User | None:
        sql, params = qb.limit(1).build_select(COLUMNS)
        row = self._execute_one(conn, sql, params)
        if row is None:
            return None
        return self._map_user_row(row)

    @staticmethod
    def _map_user_row(row: dict) -> User:
        return User(
            id=row["id"] if isinstance(row["id"], UUID) else UUID(str(row["id"])),
            username=row["username"],
            email=row["email"],
            password_hash=row["password_hash"],
            first_name=row["first_name"],
            last_name=row["last_name"],
            role=UserRole(row["role"]) if row["role"] else None,
            is_active=bool(row["is_active"]),
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )


user_repository = UserRepository()
