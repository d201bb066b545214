"""
Pytest fixtures for API tests.

No database is needed: the contractor service runs over an in-memory
repository and the GraphQL endpoint is pointed at it via a dependency
override.
"""
import os

os.environ.setdefault("STARTUP_DB_CHECK", "false")

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from fakes import FakeTransactions, InMemoryContractorRepository
from fepro.dependencies import get_contractor_service
from fepro.main import app
from fepro.services import contractor_service
from fepro.services.contractor_service import ContractorService


@pytest.fixture
def repository():
    return InMemoryContractorRepository()


@pytest.fixture
def transactions():
    return FakeTransactions()


@pytest.fixture
def service(repository, transactions):
    return ContractorService(repository, connect=transactions)


@pytest.fixture
def clock(monkeypatch):
    """Freeze service time; advance it with clock.tick(seconds)."""

    class Clock:
        def __init__(self):
            self.now = datetime(2025, 1, 15, 9, 0, tzinfo=timezone.utc)

        def tick(self, seconds: float = 1.0):
            self.now += timedelta(seconds=seconds)

        def __call__(self):
            return self.now

    frozen = Clock()
    monkeypatch.setattr(contractor_service, "utcnow", frozen)
    return frozen


@pytest.fixture
def client(service):
    """Test client whose GraphQL context uses the in-memory service."""
    app.dependency_overrides[get_contractor_service] = lambda: service
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def graphql(client):
    """POST a GraphQL document and return the decoded JSON body."""

    def execute(query: str, variables: dict | None = None) -> dict:
        response = client.post("/graphql", json={"query": query, "variables": variables or {}})
        assert response.status_code == 200, response.text
        return response.json()

    return execute
