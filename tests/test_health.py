"""Tests for health check endpoints."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from repairbeam.application.list_service import ListGenerationService, get_list_service
from repairbeam.catalog.models import CatalogList
from repairbeam.main import app


@pytest.fixture
def client(service: ListGenerationService):
    """Create test client backed by the in-memory service."""
    app.dependency_overrides[get_list_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health_check(client: TestClient) -> None:
    """Test health endpoint returns healthy status."""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["service"] == "repairbeam-lists-api"
    assert "version" in data


@pytest.mark.asyncio
async def test_readiness_counts_stored_lists(client: TestClient, store, now) -> None:
    """Readiness reads the catalog store."""
    assert client.get("/ready").json() == {"status": "ready", "stored_lists": 0}

    await store.create(
        CatalogList.create(
            list_kind="brands:Phone",
            category="Phone",
            items=["Apple"],
            generated_at=now,
        )
    )

    response = client.get("/ready")
    assert response.status_code == 200
    assert response.json() == {"status": "ready", "stored_lists": 1}


def test_readiness_fails_when_store_unavailable() -> None:
    """An unreachable store makes the service not ready."""
    service = MagicMock()
    service.list_all = AsyncMock(side_effect=ConnectionRefusedError("database down"))
    app.dependency_overrides[get_list_service] = lambda: service
    try:
        response = TestClient(app).get("/ready")
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 503
    data = response.json()
    assert data["error_code"] == "NOT_READY"
    assert data["request_id"] == response.headers["X-Request-ID"]


def test_health_does_not_touch_store() -> None:
    """Liveness answers even when the store is down."""
    service = MagicMock()
    service.list_all = AsyncMock(side_effect=ConnectionRefusedError("database down"))
    app.dependency_overrides[get_list_service] = lambda: service
    try:
        response = TestClient(app).get("/health")
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 200
    service.list_all.assert_not_awaited()


def test_request_id_is_echoed(client: TestClient) -> None:
    """A caller-supplied request ID is returned."""
    response = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"
