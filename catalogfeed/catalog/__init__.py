"""Catalog store.

Read-only view of products, variations, taxonomies and media that the
feed is extracted from.
"""

from catalogfeed.catalog.loader import (
    CatalogDocument,
    build_store,
    get_catalog_store,
    load_catalog,
)
from catalogfeed.catalog.models import (
    Attribute,
    PlainAttribute,
    PostStatus,
    ProductType,
    RawProduct,
    StockStatus,
    TaxonomyAttribute,
)
from catalogfeed.catalog.store import CatalogStore, InMemoryCatalogStore, PageResult
from catalogfeed.catalog.taxonomy import CATEGORY_TAXONOMY, TaxonomyIndex, Term

__all__ = [
    # Models
    "Attribute",
    "PlainAttribute",
    "PostStatus",
    "ProductType",
    "RawProduct",
    "StockStatus",
    "TaxonomyAttribute",
    # Taxonomy
    "CATEGORY_TAXONOMY",
    "TaxonomyIndex",
    "Term",
    # Store
    "CatalogStore",
    "InMemoryCatalogStore",
    "PageResult",
    # Loader
    "CatalogDocument",
    "build_store",
    "get_catalog_store",
    "load_catalog",
]
