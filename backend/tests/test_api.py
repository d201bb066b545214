"""
Tests for the REST endpoints around /graphql: root, health, middleware.
"""
import psycopg2
from fastapi.testclient import TestClient

from fepro import dependencies
from fepro.main import app


class TestRoot:

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        data = response.json()
        assert data["graphql"] == "/graphql"
        assert data["version"] == "1.0.0"


class TestHealth:

    def test_healthy(self, client, monkeypatch):
        monkeypatch.setattr(dependencies, "ping_database", lambda: 7)
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["database"] == {"status": "connected", "contractor_count": 7}

    def test_database_down(self, client, monkeypatch):
        def refuse():
            raise psycopg2.OperationalError("connection refused")

        monkeypatch.setattr(dependencies, "ping_database", refuse)
        response = client.get("/health")
        assert response.status_code == 503
        assert response.json()["status"] == "unavailable"
        assert response.json()["database"]["status"] == "unavailable"


class TestMiddleware:

    def test_request_id_header(self, client):
        response = client.get("/")
        assert len(response.headers["X-Request-ID"]) == 8

    def test_security_headers(self, client):
        response = client.get("/")
        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"

    def test_unknown_route(self, client):
        assert client.get("/api/v1/vendors").status_code == 404


class TestErrorEnvelope:

    def test_unexpected_error_is_a_500_envelope(self, monkeypatch):
        def explode():
            raise RuntimeError("pool state corrupted at 0x7f")

        monkeypatch.setattr(dependencies, "ping_database", explode)
        with TestClient(app, raise_server_exceptions=False) as test_client:
            response = test_client.get("/health")
        assert response.status_code == 500
        error = response.json()["error"]
        assert error["code"] == "INTERNAL_ERROR"
        assert "0x7f" not in error["message"]
