"""Catalog document loader.

Builds an InMemoryCatalogStore from a JSON catalog export. The document
mirrors the shape of the shop's own data:

    {
      "site_url": "https://shop.example",
      "attribute_taxonomies": {"pa_color": "رنگ"},
      "terms": [{"id": 7, "taxonomy": "product_cat", "slug": "phones", "name": "گوشی"}],
      "attachments": {"100": "https://shop.example/uploads/a.jpg"},
      "products": [
        {"id": 5, "type": "variable", "name": "...", "slug": "...",
         "attributes": [{"name": "pa_color", "options": ["red", "blue"], "visible": true}],
         "default_attributes": {"pa_color": "red"}},
        {"id": 6, "type": "variation", "parent_id": 5, "price": "120000",
         "attributes": {"pa_color": "red"}}
      ]
    }

Attribute keys starting with ``pa_`` name an attribute taxonomy; every
other key is a free-text attribute local to the product.
"""

import json
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Any

import structlog
from pydantic import BaseModel, Field, field_validator

from catalogfeed.catalog.models import (
    Attribute,
    PlainAttribute,
    PostStatus,
    ProductType,
    RawProduct,
    StockStatus,
    TaxonomyAttribute,
)
from catalogfeed.catalog.store import InMemoryCatalogStore
from catalogfeed.catalog.taxonomy import TaxonomyIndex, Term
from catalogfeed.infrastructure.config import settings

logger = structlog.get_logger()

TAXONOMY_ATTRIBUTE_PREFIX = "pa_"


# ============================================================================
# Document Schemas
# ============================================================================


class TermDocument(BaseModel):
    """A taxonomy term."""

    id: int
    taxonomy: str
    slug: str
    name: str
    parent_id: int | None = None


class AttributeDocument(BaseModel):
    """A product-level attribute with its options."""

    name: str
    options: list[str] = Field(default_factory=list)
    visible: bool = True


class ProductDocument(BaseModel):
    """A product, variable product or variation."""

    id: int
    name: str = ""
    type: ProductType = ProductType.SIMPLE
    slug: str = ""
    sku: str = ""
    status: PostStatus = PostStatus.PUBLISH
    parent_id: int = 0
    short_description: str = ""
    price: Decimal | None = None
    regular_price: Decimal | None = None
    stock_status: StockStatus = StockStatus.IN_STOCK
    category_ids: list[int] = Field(default_factory=list)
    gallery_image_ids: list[int] = Field(default_factory=list)
    image_id: int | None = None
    attributes: list[AttributeDocument] | dict[str, str] = Field(default_factory=list)
    default_attributes: dict[str, str] = Field(default_factory=dict)
    date_created: datetime | None = None
    meta: dict[str, str] = Field(default_factory=dict)

    @field_validator("price", "regular_price", mode="before")
    @classmethod
    def blank_price_is_none(cls, value: Any) -> Any:
        if value == "":
            return None
        return value

    @field_validator("image_id", mode="before")
    @classmethod
    def zero_image_is_none(cls, value: Any) -> Any:
        if value in (0, "0", ""):
            return None
        return value


class CatalogDocument(BaseModel):
    """Root of a catalog export."""

    site_url: str | None = None
    attribute_taxonomies: dict[str, str] = Field(default_factory=dict)
    terms: list[TermDocument] = Field(default_factory=list)
    attachments: dict[int, str] = Field(default_factory=dict)
    products: list[ProductDocument] = Field(default_factory=list)


# ============================================================================
# Conversion
# ============================================================================


def build_attribute(key: str, values: list[str], visible: bool = True) -> Attribute:
    """Classify a raw attribute as taxonomy or free-text.

    Args:
        key: Raw attribute key.
        values: Term slugs or option values.
        visible: Visibility flag.

    Returns:
        Tagged attribute.
    """
    if key.startswith(TAXONOMY_ATTRIBUTE_PREFIX):
        return TaxonomyAttribute(key=key, term_slugs=tuple(values), visible=visible)
    return PlainAttribute(key=key, values=tuple(values), visible=visible)


def to_raw_product(doc: ProductDocument) -> RawProduct:
    """Convert a validated product document to a store entity."""
    if isinstance(doc.attributes, dict):
        attributes = tuple(
            build_attribute(key, [value]) for key, value in doc.attributes.items()
        )
    else:
        attributes = tuple(
            build_attribute(a.name, a.options, a.visible) for a in doc.attributes
        )
    defaults = tuple(
        build_attribute(key, [value]) for key, value in doc.default_attributes.items()
    )

    return RawProduct(
        id=doc.id,
        name=doc.name,
        type=doc.type,
        slug=doc.slug,
        sku=doc.sku,
        status=doc.status,
        parent_id=doc.parent_id,
        short_description=doc.short_description,
        price=doc.price,
        regular_price=doc.regular_price,
        stock_status=doc.stock_status,
        category_ids=tuple(doc.category_ids),
        gallery_image_ids=tuple(doc.gallery_image_ids),
        image_id=doc.image_id,
        attributes=attributes,
        default_attributes=defaults,
        date_created=doc.date_created,
        meta=dict(doc.meta),
    )


def build_store(
    document: CatalogDocument,
    site_url: str | None = None,
) -> InMemoryCatalogStore:
    """Build a store from a validated catalog document.

    Args:
        document: Parsed catalog document.
        site_url: Overrides the document's site URL when given.

    Returns:
        Populated in-memory store.
    """
    taxonomy = TaxonomyIndex()
    for name, label in document.attribute_taxonomies.items():
        taxonomy.register_attribute(name, label)
    for term in document.terms:
        taxonomy.add_term(Term(**term.model_dump()))

    store = InMemoryCatalogStore(
        site_url=site_url or document.site_url or "http://localhost",
        taxonomy=taxonomy,
    )
    for attachment_id, url in document.attachments.items():
        store.add_attachment(attachment_id, url)
    for product in document.products:
        store.add_product(to_raw_product(product))
    return store


def load_catalog(
    path: str | Path,
    site_url: str | None = None,
) -> InMemoryCatalogStore:
    """Load a catalog document from a JSON file.

    Args:
        path: Path to the JSON document.
        site_url: Overrides the document's site URL when given.

    Returns:
        Populated in-memory store.
    """
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    store = build_store(CatalogDocument.model_validate(data), site_url=site_url)
    logger.info("Catalog loaded", path=str(path), product_count=len(store))
    return store


# Global store instance
_catalog_store: InMemoryCatalogStore | None = None


def get_catalog_store() -> InMemoryCatalogStore:
    """Get or create the catalog store.

    Loads the document at ``settings.catalog_path`` on first use; without
    one the store starts empty.

    Returns:
        InMemoryCatalogStore instance.
    """
    global _catalog_store
    if _catalog_store is None:
        if settings.catalog_path:
            _catalog_store = load_catalog(settings.catalog_path, site_url=settings.site_url)
        else:
            logger.warning("No catalog document configured, serving an empty catalog")
            _catalog_store = InMemoryCatalogStore(site_url=settings.site_url or "http://localhost")
    return _catalog_store
