"""
Contractor data access - every query against the contractors table.

Rows are mapped to Contractor records here. Coordinates are decoded from
their EWKT storage form; the column text is kept alongside, untouched.
"""
from __future__ import annotations

from uuid import UUID

import structlog
from psycopg2.extensions import connection as Connection

from ..config.constants import SRID
from ..models.contractor import (
    Contractor,
    ContractorSortField,
    ContractorStatus,
    SortDirection,
)
from .base_repository import BaseRepository
from .geometry import from_ewkt, to_ewkt
from .query_builder import QueryBuilder

logger = structlog.get_logger("fepro.repositories.contractor")

TABLE = "contractors"

COLUMNS = (
    "id, name, legal_name, inn, kpp, email, phone, address, "
    "coordinates, status, created_at, updated_at"
)

# Sort field whitelist for paginated listing
CONTRACTOR_SORT_WHITELIST = {
    ContractorSortField.NAME: "name",
    ContractorSortField.LEGAL_NAME: "legal_name",
    ContractorSortField.INN: "inn",
    ContractorSortField.STATUS: "status",
    ContractorSortField.CREATED_AT: "created_at",
    ContractorSortField.UPDATED_AT: "updated_at",
}


class ContractorRepository(BaseRepository):
    """Queries and writes for contractor rows."""

    def find_all(self, conn: Connection) -> list[Contractor]:
        sql, params = QueryBuilder(TABLE).build_select(COLUMNS)
        return self._map_rows(self._execute_many(conn, sql, params))

    def find_by_id(self, conn: Connection, contractor_id: UUID) -> Contractor | None:
        sql, params = QueryBuilder(TABLE).filter_equals("id", str(contractor_id)).build_select(COLUMNS)
        return self._map_optional(self._execute_one(conn, sql, params))

    def find_by_name_containing(self, conn: Connection, term: str) -> list[Contractor]:
        """Case-insensitive substring match on name, newest first."""
        qb = QueryBuilder(TABLE).filter_search(term, ["name"]).order_by("created_at DESC")
        sql, params = qb.build_select(COLUMNS)
        return self._map_rows(self._execute_many(conn, sql, params))

    def find_by_status(self, conn: Connection, status: ContractorStatus) -> list[Contractor]:
        sql, params = QueryBuilder(TABLE).filter_equals("status", status).build_select(COLUMNS)
        return self._map_rows(self._execute_many(conn, sql, params))

    def find_by_inn(self, conn: Connection, inn: str) -> Contractor | None:
        return self._find_first_by(conn, "inn", inn)

    def find_by_email(self, conn: Connection, email: str) -> Contractor | None:
        return self._find_first_by(conn, "email", email)

    def exists_by_inn(self, conn: Connection, inn: str) -> bool:
        sql, params = QueryBuilder(TABLE).filter_equals("inn", inn).build_exists()
        return bool(self._execute_scalar(conn, sql, params))

    def exists_by_email(self, conn: Connection, email: str) -> bool:
        sql, params = QueryBuilder(TABLE).filter_equals("email", email).build_exists()
        return bool(self._execute_scalar(conn, sql, params))

    def find_active(self, conn: Connection) -> list[Contractor]:
        """Active contractors in name order."""
        qb = (
            QueryBuilder(TABLE)
            .filter_equals("status", ContractorStatus.ACTIVE)
            .order_by("name ASC")
        )
        sql, params = qb.build_select(COLUMNS)
        return self._map_rows(self._execute_many(conn, sql, params))

    def find_page(
        self,
        conn: Connection,
        sort_by: ContractorSortField,
        direction: SortDirection,
        limit: int,
        offset: int,
    ) -> list[Contractor]:
        """One page of contractors ordered by a whitelisted column."""
        qb = QueryBuilder(TABLE)
        qb.sort(
            sort_by,
            direction,
            whitelist=CONTRACTOR_SORT_WHITELIST,
            default="created_at DESC",
            tiebreaker="id",
        )
        qb.paginate(limit, offset)
        sql, params = qb.build_select(COLUMNS)
        return self._map_rows(self._execute_many(conn, sql, params))

    def count_all(self, conn: Connection) -> int:
        sql, params = QueryBuilder(TABLE).build_count()
        return int(self._execute_scalar(conn, sql, params) or 0)

    def find_nearby(
        self,
        conn: Connection,
        lat: float,
        lng: float,
        radius: float,
    ) -> list[Contractor]:
        """Contractors whose point lies within radius (SRID units) of (lat, lng).

        Stored plain WKT carries no SRID, so the column is labelled 4326 too.
        """
        qb = QueryBuilder(TABLE).where(
            "ST_DWithin(ST_SetSRID(coordinates::geometry, %s), ST_SetSRID(ST_MakePoint(%s, %s), %s), %s)",
            SRID, lng, lat, SRID, radius,
        )
        sql, params = qb.build_select(COLUMNS)
        return self._map_rows(self._execute_many(conn, sql, params))

    def insert(self, conn: Connection, contractor: Contractor) -> Contractor:
        sql = f"""
            INSERT INTO {TABLE} ({COLUMNS})
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
            RETURNING {COLUMNS}
        """
        params = (
            str(contractor.id),
            *self._editable_params(contractor),
            contractor.created_at,
            contractor.updated_at,
        )
        return self._map_contractor_row(self._execute_one(conn, sql, params))

    def update(self, conn: Connection, contractor: Contractor) -> Contractor | None:
        """Overwrite editable fields and updated_at. None if the row is gone."""
        sql = f"""
            UPDATE {TABLE}
            SET name = %s, legal_name = %s, inn = %s, kpp = %s, email = %s,
                phone = %s, address = %s, coordinates = %s, status = %s,
                updated_at = %s
            WHERE id = %s
            RETURNING {COLUMNS}
        """
        params = (
            *self._editable_params(contractor),
            contractor.updated_at,
            str(contractor.id),
        )
        return self._map_optional(self._execute_one(conn, sql, params))

    def delete_by_id(self, conn: Connection, contractor_id: UUID) -> int:
        sql, params = QueryBuilder(TABLE).filter_equals("id", str(contractor_id)).build_delete()
        return self._execute_write(conn, sql, params)

    def _find_first_by(self, conn: Connection, column: str, value: str) -> Contractor | None:
        # Uniqueness is enforced by the schema; oldest row wins if it is not.
        qb = QueryBuilder(TABLE).filter_equals(column, value).order_by("created_at ASC").limit(1)
        sql, params = qb.build_select(COLUMNS)
        return self._map_optional(self._execute_one(conn, sql, params))

    @staticmethod
    def _editable_params(contractor: Contractor) -> tuple:
        return (
            contractor.name,
            contractor.legal_name,
            contractor.inn,
            contractor.kpp,
            contractor.email,
            contractor.phone,
            contractor.address,
            to_ewkt(contractor.coordinates),
            contractor.status.value if contractor.status is not None else None,
        )

    def _map_rows(self, rows: list[dict]) -> list[Contractor]:
        return [self._map_contractor_row(row) for row in rows]

    def _map_optional(self, row: dict | None) -> Contractor | None:
        return self._map_contractor_row(row) if row is not None else None

    @staticmethod
    def _map_contractor_row(row: dict) -> Contractor:
        """Map a contractors row to a Contractor record."""
        try:
            coordinates = from_ewkt(row["coordinates"])
        except ValueError as e:
            logger.warning("contractor_coordinates_unreadable", contractor_id=str(row["id"]), error=str(e))
            coordinates = None
        return Contractor(
            id=row["id"] if isinstance(row["id"], UUID) else UUID(str(row["id"])),
            name=row["name"],
            legal_name=row["legal_name"],
            inn=row["inn"],
            kpp=row["kpp"],
            email=row["email"],
            phone=row["phone"],
            address=row["address"],
            coordinates=coordinates,
            status=ContractorStatus(row["status"]) if row["status"] else None,
            coordinates_text=row["coordinates"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )


contractor_repository = ContractorRepository()
