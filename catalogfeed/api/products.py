"""Product feed endpoint.

The aggregator pulls the shop's catalog through a single endpoint. Each
call is authorized by the remote oracle first; only then is the catalog
read and flattened.
"""

from typing import Annotated, Any
from urllib.parse import urlparse

import structlog
from fastapi import APIRouter, Depends, Header, Request, status
from fastapi.responses import JSONResponse

from catalogfeed.api.schemas import (
    AuthFailureResponse,
    CatalogItemSchema,
    ExtractionParams,
    MetadataSchema,
    ProductsResponse,
)
from catalogfeed.catalog.loader import get_catalog_store
from catalogfeed.catalog.store import CatalogStore
from catalogfeed.feed.extractor import ExtractionMode, ExtractionResult, ExtractionService, FeedMetadata
from catalogfeed.feed.records import CatalogItem
from catalogfeed.infrastructure.auth_client import (
    TokenValidator,
    derive_shop_domain,
    get_token_validator,
)
from catalogfeed.infrastructure.config import settings

logger = structlog.get_logger()

router = APIRouter(prefix="/wcpe/v1", tags=["Products"])

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


# ============================================================================
# Dependencies
# ============================================================================


def get_store() -> CatalogStore:
    """Get catalog store dependency."""
    return get_catalog_store()


def get_service(store: Annotated[CatalogStore, Depends(get_store)]) -> ExtractionService:
    """Get extraction service bound to the catalog store."""
    return ExtractionService(
        store,
        service_version=settings.service_version,
        platform_version=settings.platform_version,
        commerce_engine_version=settings.commerce_engine_version,
        default_page_size=settings.default_page_size,
    )


def get_validator() -> TokenValidator:
    """Get token validator dependency."""
    return get_token_validator()


async def get_params(request: Request) -> ExtractionParams:
    """Collect feed parameters from the query string and the request body.

    The body may be a JSON object or form fields. Body values take
    precedence over query string values.
    """
    params: dict[str, Any] = dict(request.query_params)
    if request.method != "POST":
        return ExtractionParams.model_validate(params)

    content_type = request.headers.get("content-type", "")
    if "json" in content_type:
        try:
            body = await request.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            params.update(body)
    elif content_type.startswith(FORM_CONTENT_TYPES):
        form = await request.form()
        params.update({key: value for key, value in form.items() if isinstance(value, str)})
    return ExtractionParams.model_validate(params)


def get_shop_domain(request: Request) -> str:
    """Shop domain sent to the oracle: configured site host, else request host."""
    host = urlparse(settings.site_url).hostname if settings.site_url else None
    return derive_shop_domain(host or request.url.hostname)


# ============================================================================
# Converters
# ============================================================================


def item_to_schema(item: CatalogItem) -> CatalogItemSchema:
    """Convert a CatalogItem to its wire schema."""
    return CatalogItemSchema(
        title=item.title,
        subtitle=item.subtitle,
        page_unique=item.page_unique,
        parent_id=item.parent_id,
        current_price=item.current_price,
        old_price=item.old_price,
        availability=item.availability.value,
        category_name=item.category_name,
        image_link=item.image_link,
        image_links=list(item.image_links),
        page_url=item.page_url,
        short_desc=item.short_desc,
        spec=item.spec_blocks,
        date=item.date,
        guarantee=item.guarantee,
    )


def result_to_response(result: ExtractionResult, metadata: FeedMetadata) -> ProductsResponse:
    """Convert an extraction result to the response envelope."""
    fields: dict[str, Any] = {
        "products": [item_to_schema(item) for item in result.items],
        "metadata": MetadataSchema(
            wordpress_version=metadata.wordpress_version,
            php_version=metadata.php_version,
            plugin_version=metadata.plugin_version,
            woocommerce_version=metadata.woocommerce_version,
        ),
    }
    if result.mode is ExtractionMode.PAGE:
        fields["count"] = result.count
        fields["max_pages"] = result.max_pages
    return ProductsResponse(**fields)


# ============================================================================
# Endpoints
# ============================================================================


@router.api_route(
    "/products",
    methods=["GET", "POST"],
    response_model=ProductsResponse,
    responses={
        401: {"model": AuthFailureResponse},
        500: {"model": AuthFailureResponse},
    },
    summary="Extract product feed",
    description="Validate the caller's token, then return a page of flattened catalog records.",
)
async def get_products(
    request: Request,
    params: Annotated[ExtractionParams, Depends(get_params)],
    service: Annotated[ExtractionService, Depends(get_service)],
    validator: Annotated[TokenValidator, Depends(get_validator)],
    x_authorization: Annotated[str | None, Header()] = None,
    authorization: Annotated[str | None, Header()] = None,
) -> JSONResponse:
    """Extract catalog records for the aggregator.

    Products are selected by explicit ids, else by slugs, else by a paged
    scan of the whole catalog.

    Returns:
        Feed page with metadata.

    Raises:
        AuthTransportError: The oracle could not be consulted (500).
        AuthRejectedError: The oracle rejected the token (401).
    """
    auth = await validator.authorize(
        token=params.token,
        shop_domain=get_shop_domain(request),
        authorization_header=x_authorization or authorization,
    )
    structlog.contextvars.bind_contextvars(shop_domain=auth.shop_domain)

    result = service.extract(params.to_request())
    response = result_to_response(result, service.metadata)

    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content=response.model_dump(mode="json", exclude_unset=True),
    )
