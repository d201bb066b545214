"""
GraphQL schema for contractors.

Thin resolvers: parse arguments -> call ContractorService -> shape result.
Service calls block on the database, so they run in the threadpool.
"""
from typing import List, Optional
from uuid import UUID

import psycopg2
import strawberry
import structlog
from starlette.concurrency import run_in_threadpool
from strawberry.fastapi import GraphQLRouter
from strawberry.types import Info

from ..config import settings
from ..config.constants import DEFAULT_PAGE_SIZE
from ..middleware.error_handler import InvalidIdentifierError
from ..models.contractor import ContractorSortField, ContractorStatus, SortDirection
from ..services.contractor_service import ContractorService
from .context import get_context
from .types import (
    ContractorPageType,
    ContractorType,
    CreateContractorInput,
    UpdateContractorInput,
)

logger = structlog.get_logger("fepro.graphql")


def parse_id(value: str) -> UUID:
    """Parse a contractor id argument, failing before any service call."""
    try:
        return UUID(str(value))
    except ValueError:
        raise InvalidIdentifierError(f"Invalid contractor id: {value!r}", details={"id": value})


def _service(info: Info) -> ContractorService:
    return info.context.contractor_service


def _many(records) -> List[ContractorType]:
    return [ContractorType.from_record(r) for r in records]


def _one(record) -> Optional[ContractorType]:
    return ContractorType.from_record(record) if record is not None else None


@strawberry.type
class Query:
    @strawberry.field(description="All contractors")
    async def contractors(self, info: Info) -> List[ContractorType]:
        logger.debug("graphql_contractors")
        return _many(await run_in_threadpool(_service(info).list_all))

    @strawberry.field(description="Contractor by id, null if absent")
    async def contractor(self, info: Info, id: strawberry.ID) -> Optional[ContractorType]:
        contractor_id = parse_id(id)
        return _one(await run_in_threadpool(_service(info).get_by_id, contractor_id))

    @strawberry.field(description="Contractors with the given status")
    async def contractors_by_status(
        self, info: Info, status: ContractorStatus
    ) -> List[ContractorType]:
        return _many(await run_in_threadpool(_service(info).list_by_status, status))

    @strawberry.field(description="Case-insensitive name search, newest first")
    async def search_contractors(self, info: Info, name: str) -> List[ContractorType]:
        logger.debug("graphql_search_contractors", name=name)
        return _many(await run_in_threadpool(_service(info).search_by_name, name))

    @strawberry.field(description="Contractors within radius (SRID 4326 degrees) of a point")
    async def nearby_contractors(
        self, info: Info, lat: float, lng: float, radius: float
    ) -> List[ContractorType]:
        return _many(await run_in_threadpool(_service(info).nearby, lat, lng, radius))

    @strawberry.field(description="Active contractors in name order")
    async def active_contractors(self, info: Info) -> List[ContractorType]:
        return _many(await run_in_threadpool(_service(info).list_active))

    @strawberry.field
    async def contractor_by_inn(self, info: Info, inn: str) -> Optional[ContractorType]:
        return _one(await run_in_threadpool(_service(info).get_by_inn, inn))

    @strawberry.field
    async def contractor_by_email(self, info: Info, email: str) -> Optional[ContractorType]:
        return _one(await run_in_threadpool(_service(info).get_by_email, email))

    @strawberry.field
    async def contractor_exists_by_inn(self, info: Info, inn: str) -> bool:
        return await run_in_threadpool(_service(info).exists_by_inn, inn)

    @strawberry.field
    async def contractor_exists_by_email(self, info: Info, email: str) -> bool:
        return await run_in_threadpool(_service(info).exists_by_email, email)

    @strawberry.field(description="Ordered page of contractors with total count")
    async def contractors_page(
        self,
        info: Info,
        sort_by: ContractorSortField = ContractorSortField.CREATED_AT,
        direction: SortDirection = SortDirection.DESC,
        limit: int = DEFAULT_PAGE_SIZE,
        offset: int = 0,
    ) -> ContractorPageType:
        page = await run_in_threadpool(
            _service(info).list_page, sort_by, direction, limit, offset
        )
        return ContractorPageType.from_page(page)


@strawberry.type
class Mutation:
    @strawberry.mutation
    async def create_contractor(
        self, info: Info, input: CreateContractorInput
    ) -> ContractorType:
        logger.debug("graphql_create_contractor", name=input.name)
        record = await run_in_threadpool(_service(info).create, input.to_draft())
        return ContractorType.from_record(record)

    @strawberry.mutation(description="Replace all editable fields; null if the id is unknown")
    async def update_contractor(
        self, info: Info, input: UpdateContractorInput
    ) -> Optional[ContractorType]:
        contractor_id = parse_id(input.id)
        logger.debug("graphql_update_contractor", contractor_id=str(contractor_id))
        record = await run_in_threadpool(_service(info).update, contractor_id, input.to_draft())
        return _one(record)

    @strawberry.mutation(description="False only when the database reports an error")
    async def delete_contractor(self, info: Info, id: strawberry.ID) -> bool:
        contractor_id = parse_id(id)
        try:
            await run_in_threadpool(_service(info).delete, contractor_id)
        except psycopg2.Error as e:
            logger.warning(
                "contractor_delete_failed",
                contractor_id=str(contractor_id),
                error_type=type(e).__name__,
                error=str(e),
            )
            return False
        return True


schema = strawberry.Schema(query=Query, mutation=Mutation)


def create_graphql_router() -> GraphQLRouter:
    return GraphQLRouter(
        schema,
        context_getter=get_context,
        graphql_ide="graphiql" if settings.ENABLE_GRAPHIQL else None,
    )
