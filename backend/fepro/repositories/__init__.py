"""
Data access layer for the FEPRO API.

Repositories translate typed lookups into parameterized SQL and map rows
to domain records. They take an open connection and never commit.
"""
from .query_builder import QueryBuilder
from .contractor_repository import ContractorRepository, contractor_repository
from .user_repository import UserRepository, user_repository

__all__ = [
    "QueryBuilder",
    "ContractorRepository",
    "contractor_repository",
    "UserRepository",
    "user_repository",
]
