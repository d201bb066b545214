"""Pydantic models for the REST endpoints that sit beside /graphql."""
from typing import Optional

from pydantic import BaseModel, Field


class ApiInfoResponse(BaseModel):
    """API root payload."""

    name: str = Field(..., description="API title")
    version: str = Field(..., description="API version")
    docs: Optional[str] = Field(None, description="OpenAPI docs path, if enabled")
    graphql: str = Field(..., description="GraphQL endpoint path")


class DatabaseStatus(BaseModel):
    status: str = Field(..., description="connected or unavailable")
    contractor_count: Optional[int] = Field(None, description="Rows in contractors")


class HealthResponse(BaseModel):
    """Health check payload."""

    status: str = Field(..., description="healthy or unavailable")
    version: str = Field(..., description="API version")
    database: DatabaseStatus
    uptime_seconds: int = Field(..., description="Seconds since process start")
