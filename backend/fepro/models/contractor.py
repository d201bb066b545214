"""Contractor (counterparty) domain records."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID


class ContractorStatus(str, Enum):
    """Lifecycle status of a contractor, stored by name."""

    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    PENDING = "PENDING"
    BLOCKED = "BLOCKED"

    @property
    def description(self) -> str:
        return _STATUS_DESCRIPTIONS[self]


_STATUS_DESCRIPTIONS = {
    ContractorStatus.ACTIVE: "Активный",
    ContractorStatus.INACTIVE: "Неактивный",
    ContractorStatus.PENDING: "Ожидает",
    ContractorStatus.BLOCKED: "Заблокирован",
}


class ContractorSortField(str, Enum):
    """Columns a contractor page may be ordered by."""

    NAME = "name"
    LEGAL_NAME = "legal_name"
    INN = "inn"
    STATUS = "status"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class Coordinates:
    """A WGS 84 point. Latitude first, as people say it."""

    lat: float
    lng: float


@dataclass
class ContractorDraft:
    """Caller-supplied editable fields, used for both create and update."""

    name: Optional[str] = None
    legal_name: Optional[str] = None
    inn: Optional[str] = None
    kpp: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    coordinates: Optional[Coordinates] = None
    status: Optional[ContractorStatus] = None


# Fields overwritten by an update; id and created_at are never touched.
EDITABLE_FIELDS = (
    "name",
    "legal_name",
    "inn",
    "kpp",
    "email",
    "phone",
    "address",
    "coordinates",
    "status",
)


@dataclass
class Contractor:
    """A persisted contractor row."""

    id: UUID
    name: Optional[str]
    created_at: datetime
    updated_at: datetime
    legal_name: Optional[str] = None
    inn: Optional[str] = None
    kpp: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    coordinates: Optional[Coordinates] = None
    status: Optional[ContractorStatus] = ContractorStatus.ACTIVE
    # Column text as read back from storage; None until the row is written
    coordinates_text: Optional[str] = None

    def merged_with(self, draft: ContractorDraft, updated_at: datetime) -> Contractor:
        """Return a copy with every editable field replaced by the draft's value.

        The stored coordinate text is dropped; the write re-encodes it.
        """
        values = {name: getattr(draft, name) for name in EDITABLE_FIELDS}
        return replace(self, updated_at=updated_at, coordinates_text=None, **values)


@dataclass
class Page:
    """One slice of an ordered contractor listing."""

    items: list[Contractor] = field(default_factory=list)
    total: int = 0
    limit: int = 0
    offset: int = 0

    @property
    def has_next_page(self) -> bool:
        return self.offset + len(self.items) < self.total
