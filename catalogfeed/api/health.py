"""Health check endpoints.

Provides endpoints for monitoring service health and readiness.
"""

from fastapi import APIRouter
from pydantic import BaseModel

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: str
    service: str
    version: str


class ReadinessResponse(BaseModel):
    """Readiness check response schema."""

    status: str
    product_count: int


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Check service health.

    Returns:
        Health status with service name and version.
    """
    from catalogfeed.infrastructure.config import settings

    return HealthResponse(
        status="healthy",
        service="catalog-feed-api",
        version=settings.service_version,
    )


@router.get("/ready", response_model=ReadinessResponse)
async def readiness_check() -> ReadinessResponse:
    """Check if the catalog is loaded and the service can serve feeds.

    Returns:
        Readiness status with the number of catalog nodes.
    """
    from catalogfeed.catalog.loader import get_catalog_store

    return ReadinessResponse(status="ready", product_count=len(get_catalog_store()))
