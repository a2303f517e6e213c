"""Feed extraction.

Selects catalog products for one feed request and flattens them. Three
mutually exclusive modes, checked in this order: explicit product ids,
explicit slugs, paged scan of the whole catalog.
"""

import platform
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum

import structlog

from catalogfeed.catalog.models import ProductType, RawProduct
from catalogfeed.catalog.store import CatalogStore
from catalogfeed.feed.flattener import RecordFlattener
from catalogfeed.feed.records import CatalogItem

logger = structlog.get_logger()


class SkipReason(str, Enum):
    """Why a catalog node was left out of the feed."""

    MISSING = "missing"
    UNPUBLISHED = "unpublished"
    UNPRICED_VARIATION = "unpriced_variation"
    VARIABLE_PARENT = "variable_parent"


class ExtractionMode(str, Enum):
    """How products were selected."""

    IDS = "ids"
    SLUGS = "slugs"
    PAGE = "page"


@dataclass
class ExtractionRequest:
    """Parsed feed request parameters.

    Attributes:
        show_variations: List variations as items in place of variable parents.
        limit: Page size for the paged scan.
        page: Page number (1-based) for the paged scan.
        product_ids: Explicit product ids; takes precedence over everything.
        slugs: Explicit product slugs; used when no ids are given.
    """

    show_variations: bool = False
    limit: int = 0
    page: int = 1
    product_ids: list[int] = field(default_factory=list)
    slugs: list[str] = field(default_factory=list)

    @property
    def mode(self) -> ExtractionMode:
        if self.product_ids:
            return ExtractionMode.IDS
        if self.slugs:
            return ExtractionMode.SLUGS
        return ExtractionMode.PAGE


@dataclass(frozen=True)
class FeedMetadata:
    """Versions reported alongside every feed page."""

    wordpress_version: str | None
    php_version: str | None
    plugin_version: str
    woocommerce_version: str | None


@dataclass
class ExtractionResult:
    """Items of one feed request plus paging info for the paged scan."""

    mode: ExtractionMode
    items: list[CatalogItem] = field(default_factory=list)
    count: int | None = None
    max_pages: int | None = None
    skipped: Counter = field(default_factory=Counter)


class ExtractionService:
    """Runs feed extraction against a catalog store.

    Example usage:
        service = ExtractionService(store, service_version="1.3.2")
        result = service.extract(ExtractionRequest(show_variations=True, limit=50))
    """

    def __init__(
        self,
        store: CatalogStore,
        service_version: str,
        platform_version: str | None = None,
        commerce_engine_version: str | None = None,
        default_page_size: int = 10,
        flattener: RecordFlattener | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            store: Catalog store to read from.
            service_version: Version of this service, reported in metadata.
            platform_version: Hosting platform version, reported in metadata.
            commerce_engine_version: Shop engine version, reported in metadata.
            default_page_size: Page size used when the request gives none.
            flattener: Record flattener; built from ``store`` if omitted.
        """
        self.store = store
        self.default_page_size = default_page_size
        self.flattener = flattener or RecordFlattener(store)
        self._metadata = FeedMetadata(
            wordpress_version=platform_version,
            php_version=platform.python_version(),
            plugin_version=service_version,
            woocommerce_version=commerce_engine_version,
        )

    @property
    def metadata(self) -> FeedMetadata:
        return self._metadata

    def extract(self, request: ExtractionRequest) -> ExtractionResult:
        """Extract the items a request asks for.

        Args:
            request: Parsed request parameters.

        Returns:
            Extraction result; skipped nodes are only counted.
        """
        mode = request.mode
        if mode is ExtractionMode.IDS:
            result = self.extract_by_ids(request.product_ids)
        elif mode is ExtractionMode.SLUGS:
            result = self.extract_by_slugs(request.slugs)
        else:
            result = self.extract_page(request.show_variations, request.limit, request.page)

        logger.info(
            "Feed extracted",
            mode=mode.value,
            item_count=len(result.items),
            skipped={reason.value: n for reason, n in result.skipped.items()},
        )
        return result

    def extract_by_ids(self, product_ids: list[int]) -> ExtractionResult:
        """Flatten explicitly requested products and variations.

        Missing and unpublished ids are skipped, as are variations
        without a price.
        """
        result = ExtractionResult(mode=ExtractionMode.IDS)
        for product_id in product_ids:
            product = self.store.get_product(product_id)
            if product is None:
                self._skip(result, SkipReason.MISSING, product_id)
                continue
            if not product.is_published:
                self._skip(result, SkipReason.UNPUBLISHED, product_id)
                continue
            self._add_node(result, product, show_variations=False)
        return result

    def extract_by_slugs(self, slugs: list[str]) -> ExtractionResult:
        """Flatten published top-level products looked up by slug."""
        result = ExtractionResult(mode=ExtractionMode.SLUGS)
        for slug in slugs:
            product = self.store.get_by_path(slug) if slug else None
            if product is None:
                self._skip(result, SkipReason.MISSING, slug)
                continue
            if not product.is_published:
                self._skip(result, SkipReason.UNPUBLISHED, slug)
                continue
            result.items.append(self.flattener.flatten(product))
        return result

    def extract_page(self, show_variations: bool, limit: int, page: int) -> ExtractionResult:
        """Flatten one page of the published catalog, newest first.

        Args:
            show_variations: Scan variations too and report them in place
                of their variable parents.
            limit: Page size; -1 for everything, <= 0 for the default.
            page: Page number (1-based); values below 1 mean 1.

        Returns:
            Page items with total match count and page count.
        """
        if limit == 0 or limit < -1:
            limit = self.default_page_size
        page = max(page, 1)

        post_types = [ProductType.SIMPLE.post_type]
        if show_variations:
            post_types.append(ProductType.VARIATION.post_type)

        page_result = self.store.query(post_types, page=page, limit=limit)
        result = ExtractionResult(
            mode=ExtractionMode.PAGE,
            count=page_result.total,
            max_pages=page_result.max_pages,
        )
        for product in page_result.items:
            self._add_node(result, product, show_variations=show_variations)
        return result

    def _add_node(
        self,
        result: ExtractionResult,
        product: RawProduct,
        show_variations: bool,
    ) -> None:
        if not product.is_variation:
            # A variable parent is represented by its variations.
            if show_variations and product.is_variable:
                self._skip(result, SkipReason.VARIABLE_PARENT, product.id)
                return
            result.items.append(self.flattener.flatten(product))
            return

        if not product.has_price:
            self._skip(result, SkipReason.UNPRICED_VARIATION, product.id)
            return
        result.items.append(self.flattener.flatten(product, is_variation_child=True))

    def _skip(self, result: ExtractionResult, reason: SkipReason, ref: int | str) -> None:
        result.skipped[reason] += 1
        logger.debug("Skipped catalog node", reason=reason.value, ref=ref)
