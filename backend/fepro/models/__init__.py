# Domain records and API response models
from .contractor import (
    Contractor,
    ContractorDraft,
    ContractorSortField,
    ContractorStatus,
    Coordinates,
    Page,
    SortDirection,
)
from .user import User, UserRole
from .common import ApiInfoResponse, DatabaseStatus, HealthResponse

__all__ = [
    "Contractor",
    "ContractorDraft",
    "ContractorSortField",
    "ContractorStatus",
    "Coordinates",
    "Page",
    "SortDirection",
    "User",
    "UserRole",
    "ApiInfoResponse",
    "DatabaseStatus",
    "HealthResponse",
]
