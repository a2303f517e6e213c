"""Catalog store.

Read-only query interface over the product/variation hierarchy, its
taxonomies and media, plus an in-memory implementation used by the service.
"""

import math
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Protocol
from urllib.parse import urlencode

from catalogfeed.catalog.models import PostStatus, ProductType, RawProduct
from catalogfeed.catalog.taxonomy import TaxonomyIndex, Term

ATTRIBUTE_SELECTION_PREFIX = "attribute_"


@dataclass
class PageResult:
    """One page of a catalog query.

    Attributes:
        items: Products on the requested page.
        total: Number of products matching the query on all pages.
        max_pages: Number of pages at the requested page size.
    """

    items: list[RawProduct]
    total: int
    max_pages: int


class CatalogStore(Protocol):
    """Read interface consumed by the feed pipeline."""

    def query(
        self,
        post_types: Iterable[str],
        status: PostStatus = PostStatus.PUBLISH,
        page: int = 1,
        limit: int = 10,
    ) -> PageResult: ...

    def get_product(self, product_id: int) -> RawProduct | None: ...

    def get_by_path(self, slug: str) -> RawProduct | None: ...

    def get_term_by_id(self, taxonomy: str, term_id: int) -> Term | None: ...

    def get_term_by_slug(self, taxonomy: str, slug: str) -> Term | None: ...

    def attribute_label(self, key: str) -> str: ...

    def find_matching_variation(
        self, product: RawProduct, selection: dict[str, str]
    ) -> int: ...

    def variation_price_max(self, product: RawProduct) -> Decimal: ...

    def variation_regular_price_max(self, product: RawProduct) -> Decimal: ...

    def attachment_url(self, attachment_id: int | None) -> str | None: ...

    def permalink(self, product: RawProduct) -> str: ...


class InMemoryCatalogStore:
    """Catalog store backed by dictionaries.

    Example usage:
        store = InMemoryCatalogStore(site_url="https://shop.example")
        store.add_product(RawProduct(id=5, name="Phone", slug="phone"))
        page = store.query(["product"], page=1, limit=20)
    """

    def __init__(
        self,
        site_url: str = "http://localhost",
        taxonomy: TaxonomyIndex | None = None,
    ) -> None:
        """Initialize an empty store.

        Args:
            site_url: Base URL used to build permalinks.
            taxonomy: Term index; a new empty one is created if omitted.
        """
        self.site_url = site_url.rstrip("/")
        self.taxonomy = taxonomy or TaxonomyIndex()
        self._products: dict[int, RawProduct] = {}
        self._attachments: dict[int, str] = {}

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def add_product(self, product: RawProduct) -> RawProduct:
        self._products[product.id] = product
        return product

    def add_attachment(self, attachment_id: int, url: str) -> None:
        self._attachments[attachment_id] = url

    def __len__(self) -> int:
        return len(self._products)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def query(
        self,
        post_types: Iterable[str],
        status: PostStatus = PostStatus.PUBLISH,
        page: int = 1,
        limit: int = 10,
    ) -> PageResult:
        """List products by post type and status, newest id first.

        Args:
            post_types: Post types to include ("product", "product_variation").
            status: Required publication status.
            page: Page number (1-based).
            limit: Items per page; -1 returns everything on one page.

        Returns:
            Requested page with total count and page count.
        """
        types = set(post_types)
        filtered = [
            p
            for p in self._products.values()
            if p.type.post_type in types and p.status is status
        ]
        filtered.sort(key=lambda p: p.id, reverse=True)

        total = len(filtered)
        if limit < 0:
            return PageResult(items=filtered, total=total, max_pages=1 if total else 0)

        start = (page - 1) * limit
        end = start + limit
        return PageResult(
            items=filtered[start:end],
            total=total,
            max_pages=math.ceil(total / limit) if limit else 0,
        )

    def get_product(self, product_id: int) -> RawProduct | None:
        """Get a product or variation by ID."""
        return self._products.get(product_id)

    def get_by_path(self, slug: str) -> RawProduct | None:
        """Get a top-level product by its slug, whatever its status."""
        for product in self._products.values():
            if product.type is not ProductType.VARIATION and product.slug == slug:
                return product
        return None

    def get_children(self, product: RawProduct) -> list[RawProduct]:
        """Variations of a variable product, lowest id first."""
        children = [p for p in self._products.values() if p.parent_id == product.id]
        return sorted(children, key=lambda p: p.id)

    def get_term_by_id(self, taxonomy: str, term_id: int) -> Term | None:
        return self.taxonomy.get_by_id(taxonomy, term_id)

    def get_term_by_slug(self, taxonomy: str, slug: str) -> Term | None:
        return self.taxonomy.get_by_slug(taxonomy, slug)

    def attribute_label(self, key: str) -> str:
        return self.taxonomy.attribute_label(key)

    # ------------------------------------------------------------------
    # Variations
    # ------------------------------------------------------------------

    def find_matching_variation(
        self, product: RawProduct, selection: dict[str, str]
    ) -> int:
        """Find the published variation matching an attribute selection.

        A variation matches when every attribute it defines is either "any"
        (empty) or equal to the selected value for the same
        ``attribute_``-prefixed key.

        Args:
            product: Variable product.
            selection: Attribute selection with prefixed keys.

        Returns:
            ID of the first matching variation, or 0 if none matches.
        """
        if not selection:
            return 0

        for variation in self.get_children(product):
            if not variation.is_published:
                continue
            matched = True
            for attribute in variation.attributes:
                value = attribute.raw_values[0] if attribute.raw_values else ""
                if not value:
                    continue
                selected = selection.get(f"{ATTRIBUTE_SELECTION_PREFIX}{attribute.key}")
                if selected != value:
                    matched = False
                    break
            if matched:
                return variation.id
        return 0

    def variation_price_max(self, product: RawProduct) -> Decimal:
        """Highest price across published variations (0 if none)."""
        prices = [
            v.price
            for v in self.get_children(product)
            if v.is_published and v.price is not None
        ]
        return max(prices, default=Decimal(0))

    def variation_regular_price_max(self, product: RawProduct) -> Decimal:
        """Highest regular price across published variations (0 if none)."""
        prices = [
            v.regular_price
            for v in self.get_children(product)
            if v.is_published and v.regular_price is not None
        ]
        return max(prices, default=Decimal(0))

    # ------------------------------------------------------------------
    # Media and links
    # ------------------------------------------------------------------

    def attachment_url(self, attachment_id: int | None) -> str | None:
        """Full-size URL of an image attachment, None if unknown."""
        if attachment_id is None:
            return None
        return self._attachments.get(attachment_id)

    def permalink(self, product: RawProduct) -> str:
        """Canonical product URL.

        A variation links to its parent page with its own attribute
        selection appended as query parameters.
        """
        if product.is_variation:
            parent = self.get_product(product.parent_id)
            base = self.permalink(parent) if parent else f"{self.site_url}/?p={product.id}"
            query = {
                f"{ATTRIBUTE_SELECTION_PREFIX}{a.key}": a.raw_values[0]
                for a in product.attributes
                if a.raw_values and a.raw_values[0]
            }
            if not query:
                return base
            separator = "&" if "?" in base else "?"
            return f"{base}{separator}{urlencode(query)}"

        if product.slug:
            return f"{self.site_url}/product/{product.slug}/"
        return f"{self.site_url}/?p={product.id}"
