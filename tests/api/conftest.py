"""Shared fixtures for API tests."""

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from catalogfeed.api.deps import get_catalog_provider
from catalogfeed.main import app


@pytest.fixture
def client(catalog_provider) -> Iterator[TestClient]:
    """Create test client reading from the in-memory catalog."""
    app.dependency_overrides[get_catalog_provider] = lambda: catalog_provider
    yield TestClient(app)
    app.dependency_overrides.clear()
