"""Shared fixtures for API tests."""

import pytest
from fastapi.testclient import TestClient

from repairbeam.application.list_service import ListGenerationService, get_list_service
from repairbeam.infrastructure.config import settings
from repairbeam.main import app


@pytest.fixture(autouse=True)
def override_list_service(service: ListGenerationService):
    """Route every request to the in-memory service."""
    app.dependency_overrides[get_list_service] = lambda: service
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def client() -> TestClient:
    """Create test client without authentication."""
    return TestClient(app)


@pytest.fixture
def auth_client() -> TestClient:
    """Create test client with valid API key authentication."""
    return TestClient(
        app,
        headers={"Authorization": f"Bearer {settings.repairbeam_api_key}"},
    )
