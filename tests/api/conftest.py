"""Shared fixtures for API tests."""

import json
from typing import Generator
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from catalogfeed.api.products import get_store, get_validator
from catalogfeed.catalog.store import InMemoryCatalogStore
from catalogfeed.infrastructure.auth_client import TokenValidator
from catalogfeed.main import app


@pytest.fixture
def oracle() -> MagicMock:
    """Mock HTTP client for the token oracle; accepts every token by default."""
    response = MagicMock()
    response.text = json.dumps({"success": True, "message": "the token is valid"})
    response.status_code = 200

    http = MagicMock()
    http.post = AsyncMock(return_value=response)
    return http


@pytest.fixture
def validator(oracle: MagicMock) -> Generator[TokenValidator, None, None]:
    """Token validator wired to the mock oracle."""
    validator = TokenValidator(
        endpoint_url="https://oracle.test/validate_token/",
        service_version="1.3.2",
    )
    with patch.object(validator, "_get_client", new_callable=AsyncMock) as mock_get:
        mock_get.return_value = oracle
        yield validator


@pytest.fixture
def client(
    store: InMemoryCatalogStore, validator: TokenValidator
) -> Generator[TestClient, None, None]:
    """Create test client serving the sample catalog."""
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_validator] = lambda: validator
    yield TestClient(app)
    app.dependency_overrides.clear()
