"""API schemas for the catalog feed.

Pydantic models for request parsing and response serialization. Field
names follow the aggregator's wire contract.
"""

import math
import re
from datetime import datetime
from decimal import Decimal
from typing import Any
from urllib.parse import unquote_plus

from pydantic import BaseModel, Field, field_validator

from catalogfeed.feed.extractor import ExtractionRequest

FALSE_STRINGS = {"false", "0", ""}
LEADING_INT = re.compile(r"\s*([+-]?\d+)", re.ASCII)


def parse_int(value: Any) -> int:
    """Lenient integer parsing.

    Floats are truncated and strings keep their leading integer, so
    ``"12abc"`` is 12. Anything without one is 0.
    """
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else 0
    if value is None:
        return 0
    match = LEADING_INT.match(str(value))
    return int(match.group(1)) if match else 0


# ============================================================================
# Common Schemas
# ============================================================================


class ErrorDetail(BaseModel):
    """Detailed error information."""

    field: str | None = Field(default=None, description="Field that caused the error")
    message: str = Field(..., description="Error message")


class ErrorResponse(BaseModel):
    """Standard error response for non-feed errors."""

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: list[ErrorDetail] = Field(
        default_factory=list, description="Additional error details"
    )
    request_id: str | None = Field(
        default=None, description="Request ID for correlation"
    )


class AuthFailureResponse(BaseModel):
    """Error body of the feed endpoint (access gate or internal failure)."""

    response: str = Field(default="", description="Raw body returned by the oracle")
    error: Any = Field(default=None, description="Error reported by the oracle or transport")


# ============================================================================
# Request Schemas
# ============================================================================


class ExtractionParams(BaseModel):
    """Feed request parameters, as sent by the aggregator."""

    token: str = Field(default="", description="Access token checked by the oracle")
    variation: bool = Field(default=False, description="List variations instead of variable parents")
    limit: int = Field(default=0, description="Page size")
    page: int = Field(default=0, description="Page number (1-based)")
    products: list[int] = Field(default_factory=list, description="Comma-separated product ids")
    slugs: list[str] = Field(default_factory=list, description="Comma-separated URL-encoded slugs")

    @field_validator("token", mode="before")
    @classmethod
    def strip_token(cls, value: Any) -> str:
        return "" if value is None else str(value).strip()

    @field_validator("variation", mode="before")
    @classmethod
    def sanitize_boolean(cls, value: Any) -> bool:
        if isinstance(value, str):
            return value.strip().lower() not in FALSE_STRINGS
        return bool(value)

    @field_validator("limit", "page", mode="before")
    @classmethod
    def sanitize_int(cls, value: Any) -> int:
        return parse_int(value)

    @field_validator("products", mode="before")
    @classmethod
    def split_products(cls, value: Any) -> list[int]:
        if isinstance(value, list):
            return [parse_int(v) for v in value]
        text = "" if value is None else str(value).strip()
        if not text:
            return []
        return [parse_int(v) for v in text.split(",")]

    @field_validator("slugs", mode="before")
    @classmethod
    def split_slugs(cls, value: Any) -> list[str]:
        if isinstance(value, list):
            return [str(v).strip() for v in value]
        text = "" if value is None else unquote_plus(str(value)).strip()
        if not text:
            return []
        return [s.strip() for s in text.split(",")]

    def to_request(self) -> ExtractionRequest:
        """Convert to the pipeline's request type."""
        return ExtractionRequest(
            show_variations=self.variation,
            limit=self.limit,
            page=self.page,
            product_ids=list(self.products),
            slugs=list(self.slugs),
        )


# ============================================================================
# Response Schemas
# ============================================================================


class CatalogItemSchema(BaseModel):
    """One flat catalog record."""

    title: str
    subtitle: str = ""
    page_unique: int
    parent_id: int = 0
    current_price: Decimal | None = None
    old_price: Decimal | None = None
    availability: str
    category_name: str | None = None
    image_link: str | None = None
    image_links: list[str] = Field(default_factory=list)
    page_url: str = ""
    short_desc: str = ""
    spec: list[dict[str, str]] = Field(
        default_factory=list, description="At most one label/value mapping"
    )
    date: datetime | None = None
    guarantee: str = ""


class MetadataSchema(BaseModel):
    """Versions reported with every feed page."""

    wordpress_version: str | None = None
    php_version: str | None = None
    plugin_version: str
    woocommerce_version: str | None = None


class ProductsResponse(BaseModel):
    """Feed page envelope.

    ``count`` and ``max_pages`` are only present for the paged scan.
    """

    products: list[CatalogItemSchema] = Field(default_factory=list)
    count: int | None = Field(default=None, description="Total matching products")
    max_pages: int | None = Field(default=None, description="Total number of pages")
    metadata: MetadataSchema
