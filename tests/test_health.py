"""Tests for health check endpoints."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from catalogfeed.infrastructure import database
from catalogfeed.main import app


@pytest.fixture
def client() -> TestClient:
    """Create test client."""
    return TestClient(app)


def test_health_check(client: TestClient) -> None:
    """Test health endpoint returns healthy status."""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["service"] == "catalogfeed"
    assert "version" in data


def test_readiness_check(client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
    """Test readiness endpoint returns ready when the database answers."""

    async def ping() -> bool:
        return True

    monkeypatch.setattr(database, "ping", ping)
    response = client.get("/ready")
    assert response.status_code == 200
    assert response.json()["status"] == "ready"


def test_readiness_check_database_down(
    client: TestClient, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Test readiness endpoint returns 503 when the database is unreachable."""

    async def ping() -> bool:
        raise OperationalError("SELECT 1", {}, Exception("connection refused"))

    monkeypatch.setattr(database, "ping", ping)
    response = client.get("/ready")
    assert response.status_code == 503
    assert response.json()["status"] == "unavailable"
