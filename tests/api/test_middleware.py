"""Tests for API middleware."""

from unittest.mock import patch

import pytest
import structlog
from fastapi import FastAPI
from fastapi.testclient import TestClient

from catalogfeed.api.middleware import setup_middleware
from catalogfeed.main import app


@pytest.fixture
def client() -> TestClient:
    """Create test client."""
    return TestClient(app)


@pytest.fixture
def failing_client() -> TestClient:
    """Create test client for a bare app with failing and context routes."""
    failing_app = FastAPI()
    setup_middleware(failing_app)

    @failing_app.get("/boom")
    async def boom() -> None:
        raise RuntimeError("boom")

    @failing_app.post("/wcpe/v1/products")
    async def broken_feed() -> None:
        raise RuntimeError("catalog unavailable")

    @failing_app.get("/context")
    @failing_app.get("/wcpe/v1/context")
    async def context() -> dict:
        return structlog.contextvars.get_contextvars()

    return TestClient(failing_app)


class TestRequestContextMiddleware:
    """Tests for request correlation and log context."""

    def test_generates_request_id_if_not_provided(self, client: TestClient) -> None:
        """Should generate request ID if not in request headers."""
        response = client.get("/health")
        assert response.status_code == 200
        assert "X-Request-ID" in response.headers
        # UUID format
        assert len(response.headers["X-Request-ID"]) == 36

    def test_uses_provided_request_id(self, client: TestClient) -> None:
        """Should use request ID from request headers."""
        custom_id = "custom-request-id-12345"
        response = client.get("/health", headers={"X-Request-ID": custom_id})
        assert response.status_code == 200
        assert response.headers["X-Request-ID"] == custom_id

    def test_binds_log_context(self, failing_client: TestClient) -> None:
        """Handlers see the request id and path in the log context."""
        response = failing_client.get("/context", headers={"X-Request-ID": "req-7"})

        assert response.json() == {"request_id": "req-7", "path": "/context", "feed": False}

    def test_logs_completion(self, failing_client: TestClient) -> None:
        """Each request ends with a completion log line."""
        with patch("catalogfeed.api.middleware.logger") as logger:
            failing_client.get("/context")

        logger.info.assert_called_once()
        assert logger.info.call_args.args == ("Request completed",)
        assert logger.info.call_args.kwargs["status_code"] == 200

    def test_feed_requests_are_flagged(self, failing_client: TestClient) -> None:
        """Feed requests are marked in the log context."""
        response = failing_client.get("/wcpe/v1/context")
        assert response.json()["feed"] is True


class TestErrorHandlerMiddleware:
    """Tests for unhandled exception handling."""

    def test_unhandled_exception_returns_envelope(self, failing_client: TestClient) -> None:
        """Unhandled errors outside the feed use the standard error envelope."""
        response = failing_client.get("/boom", headers={"X-Request-ID": "req-1"})

        assert response.status_code == 500
        data = response.json()
        assert data["error_code"] == "INTERNAL_ERROR"
        assert data["details"] == []
        assert data["request_id"] == "req-1"
        assert response.headers["X-Request-ID"] == "req-1"

    def test_feed_failure_uses_feed_shape(self, failing_client: TestClient) -> None:
        """Unhandled errors on the feed endpoint keep the aggregator's error shape."""
        response = failing_client.post("/wcpe/v1/products", headers={"X-Request-ID": "req-2"})

        assert response.status_code == 500
        assert response.json() == {"response": "", "error": "An internal error occurred"}
        assert response.headers["X-Request-ID"] == "req-2"

    def test_feed_extraction_failure(self, client: TestClient) -> None:
        """A failing catalog on the real endpoint yields the feed error shape."""
        with patch(
            "catalogfeed.api.products.get_catalog_store", side_effect=RuntimeError("no catalog")
        ):
            response = client.get("/wcpe/v1/products", params={"token": "t"})

        assert response.status_code == 500
        assert response.json() == {"response": "", "error": "An internal error occurred"}


class TestHttpExceptionHandler:
    """Tests for the HTTP exception envelope."""

    def test_not_found(self, client: TestClient) -> None:
        """Unknown routes use the standard error envelope."""
        response = client.get("/nope", headers={"X-Request-ID": "req-3"})

        assert response.status_code == 404
        data = response.json()
        assert data["error_code"] == "ERROR"
        assert data["message"] == "Not Found"
        assert data["details"] == []
        assert data["request_id"] == "req-3"
