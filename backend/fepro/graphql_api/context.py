"""Per-request GraphQL context."""
from fastapi import Depends
from strawberry.fastapi import BaseContext

from ..dependencies import get_contractor_service
from ..services.contractor_service import ContractorService


class FeproContext(BaseContext):
    def __init__(self, contractor_service: ContractorService):
        super().__init__()
        self.contractor_service = contractor_service


async def get_context(
    contractor_service: ContractorService = Depends(get_contractor_service),
) -> FeproContext:
    return FeproContext(contractor_service)
