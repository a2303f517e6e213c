"""Catalog Feed API main application module.

This module initializes the FastAPI application and configures
core middleware, routers, and startup/shutdown events.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from catalogfeed.api.health import router as health_router
from catalogfeed.api.middleware import setup_middleware
from catalogfeed.api.products import router as products_router
from catalogfeed.api.schemas import ErrorResponse
from catalogfeed.catalog.loader import get_catalog_store
from catalogfeed.domain.exceptions import AuthorizationError
from catalogfeed.infrastructure.auth_client import get_token_validator
from catalogfeed.infrastructure.config import settings
from catalogfeed.infrastructure.log_config import configure_logging

configure_logging(settings.log_level)
logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup and shutdown events.

    Args:
        app: The FastAPI application instance.

    Yields:
        None after startup, cleanup happens after yield.
    """
    # Startup
    logger.info(
        "Starting Catalog Feed API",
        version=settings.service_version,
        debug=settings.debug,
    )

    store = get_catalog_store()
    logger.info("Catalog ready", product_count=len(store))

    yield

    # Shutdown
    await get_token_validator().close()
    logger.info("Shutting down Catalog Feed API")


app = FastAPI(
    title="Catalog Feed API",
    description="Flat product feed for price-comparison aggregators",
    version=settings.service_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# Setup custom middleware (request ID, error handling)
setup_middleware(app)

# Include routers
app.include_router(health_router, tags=["Health"])
app.include_router(products_router)


# ============================================================================
# Custom Exception Handlers
# ============================================================================


@app.exception_handler(AuthorizationError)
async def authorization_exception_handler(
    request: Request, exc: AuthorizationError
) -> JSONResponse:
    """Report access gate failures in the feed's own error shape."""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "response": exc.response_body,
            "error": exc.error,
        },
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handle HTTP exceptions with consistent format."""
    detail = exc.detail if isinstance(exc.detail, dict) else {"message": str(exc.detail)}
    body = ErrorResponse(
        error_code=detail.get("error_code", "ERROR"),
        message=detail.get("message", str(detail)),
        details=detail.get("details", []),
        request_id=getattr(request.state, "request_id", None),
    )

    return JSONResponse(status_code=exc.status_code, content=body.model_dump(mode="json"))
