"""GraphQL facade over the contractor service."""
from .schema import create_graphql_router, schema

__all__ = ["create_graphql_router", "schema"]
