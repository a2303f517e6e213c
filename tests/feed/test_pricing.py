"""Tests for variable product pricing."""

from decimal import Decimal

import pytest

from catalogfeed.catalog.loader import build_attribute
from catalogfeed.catalog.models import ProductType, RawProduct, StockStatus
from catalogfeed.catalog.store import InMemoryCatalogStore
from catalogfeed.feed.attributes import AttributeResolver
from catalogfeed.feed.pricing import VariationPriceResolver, normalize_selection


@pytest.fixture
def pricing(store: InMemoryCatalogStore) -> VariationPriceResolver:
    """Create a price resolver over the sample catalog."""
    return VariationPriceResolver(store, AttributeResolver(store))


class TestNormalizeSelection:
    """Tests for default attribute keying."""

    def test_prefixes_keys(self) -> None:
        """Keys gain the attribute_ prefix."""
        product = RawProduct(
            id=1,
            name="P",
            type=ProductType.VARIABLE,
            default_attributes=(build_attribute("pa_color", ["red"]),),
        )
        assert normalize_selection(product) == {"attribute_pa_color": "red"}

    def test_keeps_existing_prefix(self) -> None:
        """Already prefixed keys are left alone."""
        product = RawProduct(
            id=1,
            name="P",
            type=ProductType.VARIABLE,
            default_attributes=(build_attribute("attribute_size", ["m"]),),
        )
        assert normalize_selection(product) == {"attribute_size": "m"}


class TestVariationPriceResolver:
    """Tests for VariationPriceResolver."""

    def test_matched_default_variation(
        self, store: InMemoryCatalogStore, pricing: VariationPriceResolver
    ) -> None:
        """The default selection's variation supplies price and stock."""
        result = pricing.resolve(store.get_product(20))

        assert result.matched_variation_id == 22
        assert result.current_price == Decimal("150")
        assert result.old_price == Decimal("150")
        assert result.availability is StockStatus.OUT_OF_STOCK
        assert result.defaults == [("رنگ", "آبی")]

    def test_no_variations_falls_back_to_zero(
        self, store: InMemoryCatalogStore, pricing: VariationPriceResolver
    ) -> None:
        """Without variations or defaults the price is 0 and stock is the parent's."""
        result = pricing.resolve(store.get_product(30))

        assert result.matched_variation_id == 0
        assert result.current_price == Decimal(0)
        assert result.old_price == Decimal(0)
        assert result.availability is StockStatus.OUT_OF_STOCK
        assert result.defaults == []

    def test_unmatched_selection_uses_maximum(self) -> None:
        """An unmatched selection reports the highest variation prices."""
        store = InMemoryCatalogStore()
        parent = store.add_product(
            RawProduct(
                id=1,
                name="Shoe",
                type=ProductType.VARIABLE,
                stock_status=StockStatus.ON_BACKORDER,
                default_attributes=(build_attribute("size", ["44"]),),
            )
        )
        for variation_id, size, price, regular in [(2, "42", "80", "90"), (3, "43", "95", "85")]:
            store.add_product(
                RawProduct(
                    id=variation_id,
                    name="",
                    type=ProductType.VARIATION,
                    parent_id=1,
                    price=Decimal(price),
                    regular_price=Decimal(regular),
                    attributes=(build_attribute("size", [size]),),
                )
            )

        result = VariationPriceResolver(store, AttributeResolver(store)).resolve(parent)

        assert result.matched_variation_id == 0
        assert result.current_price == Decimal("95")
        assert result.old_price == Decimal("90")
        assert result.availability is StockStatus.ON_BACKORDER
        assert result.defaults == [("size", "44")]

    def test_empty_default_is_not_reported(self) -> None:
        """Defaults with an empty value do not appear in the result."""
        store = InMemoryCatalogStore()
        parent = store.add_product(
            RawProduct(
                id=1,
                name="P",
                type=ProductType.VARIABLE,
                default_attributes=(build_attribute("size", [""]),),
            )
        )
        result = VariationPriceResolver(store, AttributeResolver(store)).resolve(parent)
        assert result.defaults == []
