"""Tests for the term and attribute-taxonomy index."""

import pytest

from catalogfeed.catalog.taxonomy import CATEGORY_TAXONOMY, TaxonomyIndex, Term


class TestTaxonomyIndex:
    """Tests for TaxonomyIndex."""

    @pytest.fixture
    def index(self) -> TaxonomyIndex:
        """Create an index with a small category tree and one attribute."""
        index = TaxonomyIndex()
        index.add_term(Term(id=10, taxonomy=CATEGORY_TAXONOMY, slug="digital", name="Digital"))
        index.add_term(
            Term(id=42, taxonomy=CATEGORY_TAXONOMY, slug="mobile", name="Mobile", parent_id=10)
        )
        index.register_attribute("pa_color", "Colour")
        index.add_term(Term(id=31, taxonomy="pa_color", slug="red", name="Red"))
        return index

    def test_get_by_id(self, index: TaxonomyIndex) -> None:
        """Terms can be found by taxonomy and ID."""
        term = index.get_by_id(CATEGORY_TAXONOMY, 42)
        assert term is not None
        assert term.name == "Mobile"

    def test_get_by_id_wrong_taxonomy(self, index: TaxonomyIndex) -> None:
        """IDs are looked up within one taxonomy only."""
        assert index.get_by_id("pa_color", 42) is None

    def test_get_by_slug(self, index: TaxonomyIndex) -> None:
        """Terms can be found by slug."""
        term = index.get_by_slug("pa_color", "red")
        assert term is not None
        assert term.name == "Red"

    def test_get_by_slug_not_found(self, index: TaxonomyIndex) -> None:
        """Unknown slug returns None."""
        assert index.get_by_slug("pa_color", "green") is None

    def test_attribute_label(self, index: TaxonomyIndex) -> None:
        """Registered attribute taxonomies use their label."""
        assert index.attribute_label("pa_color") == "Colour"

    def test_attribute_label_fallback(self, index: TaxonomyIndex) -> None:
        """Unregistered attribute taxonomies fall back to their bare name."""
        assert index.attribute_label("pa_size") == "size"
