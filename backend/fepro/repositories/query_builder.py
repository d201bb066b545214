"""
QueryBuilder - fluent SQL query construction with parameterized queries.

All user inputs go through %s placeholders (psycopg2 paramstyle).
Identifiers such as sort columns only ever come from a whitelist.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Mapping

from ..config.constants import MAX_PAGE_SIZE


def page_bounds(limit: int, offset: int = 0) -> tuple[int, int]:
    """Clamp LIMIT to 1..MAX_PAGE_SIZE and OFFSET to >= 0."""
    return max(1, min(int(limit), MAX_PAGE_SIZE)), max(0, int(offset))


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so the term matches literally."""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class QueryBuilder:
    """Fluent SQL query builder with safe parameterization."""

    def __init__(self, base_table: str):
        """
        Args:
            base_table: Table name with optional alias, e.g. "contractors c"
        """
        self.base_table = base_table
        self._conditions: list[str] = []
        self._params: list[Any] = []
        self._order_by: str | None = None
        self._limit: int | None = None
        self._offset: int | None = None

    # --- Generic where ---

    def where(self, condition: str, *params: Any) -> QueryBuilder:
        """Add a WHERE condition with parameters."""
        self._conditions.append(condition)
        self._params.extend(params)
        return self

    # --- Filters ---

    def filter_equals(self, column: str, value: Any) -> QueryBuilder:
        """Exact match. Enum members are bound by value."""
        if isinstance(value, Enum):
            value = value.value
        self._conditions.append(f"{column} = %s")
        self._params.append(value)
        return self

    def filter_search(self, search: str | None, columns: list[str]) -> QueryBuilder:
        """Add case-insensitive substring search across columns (OR).

        The term is matched literally: % and _ inside it are escaped.
        Empty or None search is a no-op.
        """
        if search and columns:
            pattern = f"%{escape_like(search)}%"
            clauses = [f"{col} ILIKE %s ESCAPE '\\'" for col in columns]
            self._conditions.append(f"({' OR '.join(clauses)})")
            self._params.extend([pattern] * len(columns))
        return self

    # --- Sorting ---

    def sort(
        self,
        field: Enum | str | None,
        direction: Enum | str = "desc",
        whitelist: Mapping[Any, str] | None = None,
        default: str | None = None,
        tiebreaker: str | None = None,
    ) -> QueryBuilder:
        """
        Set ORDER BY with SQL injection protection via whitelist.

        Args:
            field: Sort field key, looked up in the whitelist
            direction: 'asc' or 'desc' (anything else sorts descending)
            whitelist: Maps safe field keys to actual SQL column expressions
            default: ORDER BY used if field is None or not in whitelist
            tiebreaker: Column appended to keep ordering total, e.g. "id"
        """
        if isinstance(direction, Enum):
            direction = direction.value
        safe_order = "ASC" if direction and direction.lower() == "asc" else "DESC"

        if field is not None and whitelist and field in whitelist:
            self._order_by = f"{whitelist[field]} {safe_order}"
        elif default:
            self._order_by = default
        if self._order_by and tiebreaker:
            self._order_by = f"{self._order_by}, {tiebreaker} {safe_order}"
        return self

    def order_by(self, clause: str) -> QueryBuilder:
        """Set ORDER BY directly (use only with trusted input)."""
        self._order_by = clause
        return self

    # --- Pagination ---

    def paginate(self, limit: int, offset: int = 0) -> QueryBuilder:
        """Set LIMIT/OFFSET, clamped by page_bounds()."""
        self._limit, self._offset = page_bounds(limit, offset)
        return self

    def limit(self, n: int) -> QueryBuilder:
        """Set LIMIT directly."""
        self._limit = int(n)
        return self

    # --- Build methods ---

    def _build_where(self) -> str:
        if not self._conditions:
            return ""
        return "WHERE " + " AND ".join(self._conditions)

    def _build_tail(self) -> str:
        """Build ORDER BY + LIMIT + OFFSET."""
        parts = []
        if self._order_by:
            parts.append(f"ORDER BY {self._order_by}")
        if self._limit is not None:
            parts.append(f"LIMIT {self._limit}")
        if self._offset is not None:
            parts.append(f"OFFSET {self._offset}")
        return " ".join(parts)

    def build_count(self) -> tuple[str, list[Any]]:
        """Build a COUNT(*) query."""
        parts = [f"SELECT COUNT(*) FROM {self.base_table}", self._build_where()]
        return " ".join(p for p in parts if p), list(self._params)

    def build_exists(self) -> tuple[str, list[Any]]:
        """Build a SELECT EXISTS(...) query returning one boolean."""
        parts = [f"SELECT 1 FROM {self.base_table}", self._build_where()]
        inner = " ".join(p for p in parts if p)
        return f"SELECT EXISTS ({inner})", list(self._params)

    def build_select(self, columns: str) -> tuple[str, list[Any]]:
        """Build a full SELECT query."""
        parts = [
            f"SELECT {columns}",
            f"FROM {self.base_table}",
            self._build_where(),
            self._build_tail(),
        ]
        return " ".join(p for p in parts if p), list(self._params)

    def build_delete(self) -> tuple[str, list[Any]]:
        """Build a DELETE with the current conditions. Refuses to delete everything."""
        if not self._conditions:
            raise ValueError("Refusing to build DELETE without conditions")
        return f"DELETE FROM {self.base_table} {self._build_where()}", list(self._params)
