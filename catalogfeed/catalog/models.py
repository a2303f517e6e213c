"""Catalog store entities.

Read-only snapshots of the product/variation hierarchy as the catalog store
hands them out. Nothing here is persisted by this service.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum


class ProductType(str, Enum):
    """Kind of catalog node."""

    SIMPLE = "simple"
    VARIABLE = "variable"
    VARIATION = "variation"

    @property
    def post_type(self) -> str:
        """Storage post type the node is listed under."""
        if self is ProductType.VARIATION:
            return "product_variation"
        return "product"


class PostStatus(str, Enum):
    """Publication status."""

    PUBLISH = "publish"
    DRAFT = "draft"
    PENDING = "pending"
    PRIVATE = "private"
    TRASH = "trash"


class StockStatus(str, Enum):
    """Stock status reported as availability."""

    IN_STOCK = "instock"
    OUT_OF_STOCK = "outofstock"
    ON_BACKORDER = "onbackorder"
    OTHER = "other"

    @classmethod
    def _missing_(cls, value: object) -> "StockStatus":
        return cls.OTHER


# ============================================================================
# Attributes
# ============================================================================


@dataclass(frozen=True)
class TaxonomyAttribute:
    """Attribute whose values are terms of an attribute taxonomy.

    Attributes:
        key: Taxonomy name (e.g. "pa_color").
        term_slugs: Selected term slugs, in product order.
        visible: Whether the attribute is shown on the product page.
    """

    key: str
    term_slugs: tuple[str, ...] = ()
    visible: bool = True

    @property
    def raw_values(self) -> tuple[str, ...]:
        return self.term_slugs


@dataclass(frozen=True)
class PlainAttribute:
    """Free-text attribute local to one product.

    Attributes:
        key: Attribute name, possibly URL-encoded.
        values: Option values, possibly URL-encoded.
        visible: Whether the attribute is shown on the product page.
    """

    key: str
    values: tuple[str, ...] = ()
    visible: bool = True

    @property
    def raw_values(self) -> tuple[str, ...]:
        return self.values


Attribute = TaxonomyAttribute | PlainAttribute


# ============================================================================
# Products
# ============================================================================


@dataclass(frozen=True)
class RawProduct:
    """A product, variable product or variation as stored in the catalog.

    Prices are ``None`` when the store holds no value for them. For a
    variation, ``attributes`` holds one single-valued entry per attribute
    it is defined by; an empty value means "any".
    """

    id: int
    name: str
    type: ProductType = ProductType.SIMPLE
    slug: str = ""
    sku: str = ""
    status: PostStatus = PostStatus.PUBLISH
    parent_id: int = 0
    short_description: str = ""
    price: Decimal | None = None
    regular_price: Decimal | None = None
    stock_status: StockStatus = StockStatus.IN_STOCK
    category_ids: tuple[int, ...] = ()
    gallery_image_ids: tuple[int, ...] = ()
    image_id: int | None = None
    attributes: tuple[Attribute, ...] = ()
    default_attributes: tuple[Attribute, ...] = ()
    date_created: datetime | None = None
    meta: dict[str, str] = field(default_factory=dict, hash=False, compare=False)

    @property
    def is_published(self) -> bool:
        return self.status is PostStatus.PUBLISH

    @property
    def is_variable(self) -> bool:
        return self.type is ProductType.VARIABLE

    @property
    def is_variation(self) -> bool:
        return self.parent_id != 0

    @property
    def has_price(self) -> bool:
        """True when the node carries a non-zero price."""
        return bool(self.price)

    def get_meta(self, key: str) -> str:
        return self.meta.get(key, "")
