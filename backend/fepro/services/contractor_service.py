"""
Contractor domain service.

Assigns identifiers and timestamps, merges updates and defaults the
status; everything else passes straight through to the repository.
Each call runs in its own transaction on one pooled connection.
"""
from __future__ import annotations

import uuid
from contextlib import AbstractContextManager
from datetime import datetime, timedelta, timezone
from typing import Callable
from uuid import UUID

import structlog

from ..config.constants import DEFAULT_PAGE_SIZE
from ..dependencies import get_db
from ..models.contractor import (
    Contractor,
    ContractorDraft,
    ContractorSortField,
    ContractorStatus,
    Page,
    SortDirection,
)
from ..repositories.contractor_repository import ContractorRepository, contractor_repository
from ..repositories.query_builder import page_bounds

logger = structlog.get_logger("fepro.services.contractor")

ConnectionFactory = Callable[[], AbstractContextManager]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _next_timestamp(previous: datetime | None) -> datetime:
    """Current time, nudged forward so it is strictly after previous."""
    now = utcnow()
    if previous is not None and previous.tzinfo is None:
        previous = previous.replace(tzinfo=timezone.utc)
    if previous is not None and now <= previous:
        return previous + timedelta(microseconds=1)
    return now


class ContractorService:
    """Business logic for contractor records."""

    def __init__(
        self,
        repository: ContractorRepository,
        connect: ConnectionFactory = get_db,
    ):
        self.repository = repository
        self._connect = connect

    # --- Writes ---

    def create(self, draft: ContractorDraft) -> Contractor:
        """Insert a new contractor with a fresh id and matching timestamps."""
        now = utcnow()
        contractor = Contractor(
            id=uuid.uuid4(),
            name=draft.name,
            legal_name=draft.legal_name,
            inn=draft.inn,
            kpp=draft.kpp,
            email=draft.email,
            phone=draft.phone,
            address=draft.address,
            coordinates=draft.coordinates,
            status=draft.status or ContractorStatus.ACTIVE,
            created_at=now,
            updated_at=now,
        )
        logger.debug("contractor_create", contractor_id=str(contractor.id), name=contractor.name)
        with self._connect() as conn:
            return self.repository.insert(conn, contractor)

    def update(self, contractor_id: UUID, draft: ContractorDraft) -> Contractor | None:
        """Replace every editable field of an existing contractor.

        Values are copied as given, so None clears a field. Returns None,
        without writing anything, when no contractor has this id.
        """
        with self._connect() as conn:
            existing = self.repository.find_by_id(conn, contractor_id)
            if existing is None:
                logger.info("contractor_update_missing", contractor_id=str(contractor_id))
                return None
            merged = existing.merged_with(draft, updated_at=_next_timestamp(existing.updated_at))
            logger.debug("contractor_update", contractor_id=str(contractor_id))
            return self.repository.update(conn, merged)

    def delete(self, contractor_id: UUID) -> int:
        """Delete by id. Returns the number of rows removed (0 or 1)."""
        with self._connect() as conn:
            deleted = self.repository.delete_by_id(conn, contractor_id)
        logger.debug("contractor_delete", contractor_id=str(contractor_id), deleted=deleted)
        return deleted

    # --- Reads ---

    def list_all(self) -> list[Contractor]:
        with self._connect() as conn:
            return self.repository.find_all(conn)

    def get_by_id(self, contractor_id: UUID) -> Contractor | None:
        with self._connect() as conn:
            return self.repository.find_by_id(conn, contractor_id)

    def get_by_inn(self, inn: str) -> Contractor | None:
        with self._connect() as conn:
            return self.repository.find_by_inn(conn, inn)

    def get_by_email(self, email: str) -> Contractor | None:
        with self._connect() as conn:
            return self.repository.find_by_email(conn, email)

    def search_by_name(self, name: str) -> list[Contractor]:
        with self._connect() as conn:
            return self.repository.find_by_name_containing(conn, name)

    def list_by_status(self, status: ContractorStatus) -> list[Contractor]:
        with self._connect() as conn:
            return self.repository.find_by_status(conn, status)

    def list_active(self) -> list[Contractor]:
        with self._connect() as conn:
            return self.repository.find_active(conn)

    def exists_by_inn(self, inn: str) -> bool:
        with self._connect() as conn:
            return self.repository.exists_by_inn(conn, inn)

    def exists_by_email(self, email: str) -> bool:
        with self._connect() as conn:
            return self.repository.exists_by_email(conn, email)

    def nearby(self, lat: float, lng: float, radius: float) -> list[Contractor]:
        logger.debug("contractor_nearby", lat=lat, lng=lng, radius=radius)
        with self._connect() as conn:
            return self.repository.find_nearby(conn, lat, lng, radius)

    def count(self) -> int:
        with self._connect() as conn:
            return self.repository.count_all(conn)

    def list_page(
        self,
        sort_by: ContractorSortField = ContractorSortField.CREATED_AT,
        direction: SortDirection = SortDirection.DESC,
        limit: int = DEFAULT_PAGE_SIZE,
        offset: int = 0,
    ) -> Page:
        """One page of contractors plus the total count, read in one transaction."""
        limit, offset = page_bounds(limit, offset)
        with self._connect() as conn:
            items = self.repository.find_page(conn, sort_by, direction, limit, offset)
            total = self.repository.count_all(conn)
        return Page(items=items, total=total, limit=limit, offset=offset)


contractor_service = ContractorService(contractor_repository)
