"""
Service layer for the FEPRO API.

Domain services own the transaction boundary and the few business rules;
resolvers stay thin: parse arguments -> call service -> shape the result.
"""
from .contractor_service import ContractorService

__all__ = ["ContractorService"]
