"""API middleware for the catalog feed.

Every request gets a correlation id that is echoed back to the caller and
bound into the structlog context, so the extractor's and the oracle
client's log lines can be tied to one aggregator call. Unhandled failures
are reported in the error shape the caller expects: the aggregator reads
``{response, error}`` from the feed endpoint, everything else gets the
generic error envelope.

Authorization is not a middleware here: the feed endpoint consults the
remote oracle itself, since the verdict depends on request parameters.
"""

import time
from typing import Callable
from uuid import uuid4

import structlog
from fastapi import FastAPI, Request, Response, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from catalogfeed.api.schemas import AuthFailureResponse, ErrorResponse

logger = structlog.get_logger()

REQUEST_ID_HEADER = "X-Request-ID"
FEED_PATH_PREFIX = "/wcpe/v1/"
INTERNAL_ERROR_MESSAGE = "An internal error occurred"


def is_feed_path(path: str) -> bool:
    return path.startswith(FEED_PATH_PREFIX)


# ============================================================================
# Request Context
# ============================================================================


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Bind per-request log context and report the request outcome.

    The request id comes from the ``X-Request-ID`` header when the caller
    sends one. Feed requests additionally carry ``feed=True`` so their log
    lines can be told apart from health checks and docs traffic.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid4())
        request.state.request_id = request_id

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            path=request.url.path,
            feed=is_feed_path(request.url.path),
        )

        started = time.perf_counter()
        response = None
        try:
            response = await call_next(request)
        finally:
            logger.info(
                "Request completed",
                method=request.method,
                status_code=response.status_code if response is not None else 500,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
            structlog.contextvars.clear_contextvars()

        response.headers[REQUEST_ID_HEADER] = request_id
        return response


# ============================================================================
# Unhandled Errors
# ============================================================================


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Turn unhandled exceptions into a 500 in the caller's error shape."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            logger.exception("Unhandled exception", method=request.method, error=str(exc))
            return internal_error_response(request)


def internal_error_response(request: Request) -> JSONResponse:
    """Build the 500 body for a failed request."""
    if is_feed_path(request.url.path):
        body = AuthFailureResponse(response="", error=INTERNAL_ERROR_MESSAGE)
    else:
        body = ErrorResponse(
            error_code="INTERNAL_ERROR",
            message=INTERNAL_ERROR_MESSAGE,
            request_id=getattr(request.state, "request_id", None),
        )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=body.model_dump(mode="json"),
    )


def setup_middleware(app: FastAPI) -> None:
    """Install the feed middleware stack.

    The error handler is added first so it runs inside the request
    context and its log line carries the request id.
    """
    app.add_middleware(ErrorHandlerMiddleware)
    app.add_middleware(RequestContextMiddleware)
