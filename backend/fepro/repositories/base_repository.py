"""
BaseRepository - common patterns for data access classes.

Repositories never open, commit or close connections: the caller hands
them an open psycopg2 connection and owns the transaction.
"""
from __future__ import annotations

from typing import Any

from psycopg2.extensions import connection as Connection
from psycopg2.extras import RealDictCursor


class BaseRepository:
    """Base class for table repositories."""

    def _execute_one(
        self,
        conn: Connection,
        sql: str,
        params: list[Any] | tuple = (),
    ) -> dict | None:
        """Execute a query expecting a single row."""
        with conn.cursor(cursor_factory=RealDictCursor) as cursor:
            cursor.execute(sql, params)
            return cursor.fetchone()

    def _execute_many(
        self,
        conn: Connection,
        sql: str,
        params: list[Any] | tuple = (),
    ) -> list[dict]:
        """Execute a query expecting multiple rows."""
        with conn.cursor(cursor_factory=RealDictCursor) as cursor:
            cursor.execute(sql, params)
            return cursor.fetchall()

    def _execute_scalar(
        self,
        conn: Connection,
        sql: str,
        params: list[Any] | tuple = (),
    ) -> Any:
        """Execute a query and return the first column of the first row."""
        with conn.cursor() as cursor:
            cursor.execute(sql, params)
            row = cursor.fetchone()
            return row[0] if row else None

    def _execute_write(
        self,
        conn: Connection,
        sql: str,
        params: list[Any] | tuple = (),
    ) -> int:
        """Execute a statement and return the affected row count."""
        with conn.cursor() as cursor:
            cursor.execute(sql, params)
            return cursor.rowcount
