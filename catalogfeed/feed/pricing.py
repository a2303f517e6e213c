"""Variation price resolution.

A variable product has no price of its own. Its feed price is the price of
the variation selected by the product's default attributes or, when no
variation matches, the highest price among its variations.
"""

from dataclasses import dataclass, field
from decimal import Decimal

import structlog

from catalogfeed.catalog.models import RawProduct, StockStatus
from catalogfeed.catalog.store import ATTRIBUTE_SELECTION_PREFIX, CatalogStore
from catalogfeed.feed.attributes import AttributeResolver

logger = structlog.get_logger()


@dataclass
class VariationPricing:
    """Resolved price, availability and default attributes of a variable product.

    Attributes:
        current_price: Effective selling price.
        old_price: Regular (pre-discount) price.
        availability: Stock status of the matched variation, or the parent's.
        matched_variation_id: Variation used for pricing, 0 on fallback.
        defaults: Resolved default attributes, in selection order.
    """

    current_price: Decimal | None
    old_price: Decimal | None
    availability: StockStatus
    matched_variation_id: int = 0
    defaults: list[tuple[str, str]] = field(default_factory=list)


def normalize_selection(product: RawProduct) -> dict[str, str]:
    """Key a product's default attributes the way variation matching expects.

    Args:
        product: Variable product.

    Returns:
        Mapping of ``attribute_``-prefixed keys to selected values.
    """
    selection = {}
    for attribute in product.default_attributes:
        key = attribute.key
        if not key.startswith(ATTRIBUTE_SELECTION_PREFIX):
            key = f"{ATTRIBUTE_SELECTION_PREFIX}{key}"
        selection[key] = attribute.raw_values[0] if attribute.raw_values else ""
    return selection


class VariationPriceResolver:
    """Derives price and availability for variable products."""

    def __init__(self, store: CatalogStore, attributes: AttributeResolver) -> None:
        self.store = store
        self.attributes = attributes

    def resolve(self, product: RawProduct) -> VariationPricing:
        """Resolve the feed price of a variable product.

        Never raises: an unmatched selection falls back to the maximum
        variation prices, which are 0 for a product without variations.

        Args:
            product: Variable product.

        Returns:
            Pricing together with the resolved default attributes.
        """
        pricing = VariationPricing(
            current_price=Decimal(0),
            old_price=Decimal(0),
            availability=product.stock_status,
        )

        variation_id = self.store.find_matching_variation(
            product, normalize_selection(product)
        )
        variation = self.store.get_product(variation_id) if variation_id else None

        if variation is not None:
            pricing.current_price = variation.price
            pricing.old_price = variation.regular_price
            pricing.availability = variation.stock_status
            pricing.matched_variation_id = variation.id
        else:
            pricing.current_price = self.store.variation_price_max(product)
            pricing.old_price = self.store.variation_regular_price_max(product)
            logger.debug(
                "No default variation, using maximum price",
                product_id=product.id,
                current_price=str(pricing.current_price),
            )

        for attribute in product.default_attributes:
            if not any(attribute.raw_values):
                continue
            pricing.defaults.append(self.attributes.resolve(attribute))

        return pricing
