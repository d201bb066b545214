"""GraphQL object and input types for contractors."""
from datetime import datetime
from typing import List, Optional

import strawberry

from ..models.contractor import (
    Contractor,
    ContractorDraft,
    ContractorSortField,
    ContractorStatus,
    Coordinates,
    Page,
    SortDirection,
)

# Domain enums double as GraphQL enums (values are the member names)
strawberry.enum(ContractorStatus, name="ContractorStatus")
strawberry.enum(ContractorSortField, name="ContractorSortField")
strawberry.enum(SortDirection, name="SortDirection")


@strawberry.type(name="Coordinates")
class CoordinatesType:
    lat: float
    lng: float


@strawberry.type(name="Contractor")
class ContractorType:
    id: strawberry.ID
    name: Optional[str]
    legal_name: Optional[str]
    inn: Optional[str]
    kpp: Optional[str]
    email: Optional[str]
    phone: Optional[str]
    address: Optional[str]
    coordinates: Optional[str] = strawberry.field(
        description="Stored EWKT point, e.g. SRID=4326;POINT(lng lat)"
    )
    location: Optional[CoordinatesType]
    status: Optional[ContractorStatus]
    created_at: datetime
    updated_at: datetime

    @strawberry.field(description="Human-readable status name")
    def status_description(self) -> Optional[str]:
        return self.status.description if self.status is not None else None

    @classmethod
    def from_record(cls, record: Contractor) -> "ContractorType":
        location = None
        if record.coordinates is not None:
            location = CoordinatesType(lat=record.coordinates.lat, lng=record.coordinates.lng)
        return cls(
            id=strawberry.ID(str(record.id)),
            name=record.name,
            legal_name=record.legal_name,
            inn=record.inn,
            kpp=record.kpp,
            email=record.email,
            phone=record.phone,
            address=record.address,
            coordinates=record.coordinates_text,
            location=location,
            status=record.status,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )


@strawberry.type(name="ContractorPage")
class ContractorPageType:
    contractors: List[ContractorType]
    total_count: int
    has_next_page: bool

    @classmethod
    def from_page(cls, page: Page) -> "ContractorPageType":
        return cls(
            contractors=[ContractorType.from_record(c) for c in page.items],
            total_count=page.total,
            has_next_page=page.has_next_page,
        )


@strawberry.input
class CoordinatesInput:
    lat: float
    lng: float

    def to_value(self) -> Coordinates:
        return Coordinates(lat=self.lat, lng=self.lng)


@strawberry.input
class CreateContractorInput:
    name: str
    legal_name: Optional[str] = None
    inn: Optional[str] = None
    kpp: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    coordinates: Optional[CoordinatesInput] = None
    status: Optional[ContractorStatus] = None

    def to_draft(self) -> ContractorDraft:
        return _draft_from(self)


@strawberry.input
class UpdateContractorInput:
    """Full replacement: omitted fields are cleared."""

    id: strawberry.ID
    name: Optional[str] = None
    legal_name: Optional[str] = None
    inn: Optional[str] = None
    kpp: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    coordinates: Optional[CoordinatesInput] = None
    status: Optional[ContractorStatus] = None

    def to_draft(self) -> ContractorDraft:
        return _draft_from(self)


def _draft_from(data) -> ContractorDraft:
    return ContractorDraft(
        name=data.name,
        legal_name=data.legal_name,
        inn=data.inn,
        kpp=data.kpp,
        email=data.email,
        phone=data.phone,
        address=data.address,
        coordinates=data.coordinates.to_value() if data.coordinates is not None else None,
        status=data.status,
    )
