"""Term and attribute-taxonomy index.

The catalog organises products with terms grouped into taxonomies:
``product_cat`` for categories, and one ``pa_*`` taxonomy per global
attribute (colour, size, guarantee...). Each attribute taxonomy has a
human-readable label.

Example:
    index = TaxonomyIndex()
    index.register_attribute("pa_color", "رنگ")
    index.add_term(Term(id=31, taxonomy="pa_color", slug="red", name="قرمز"))
    index.get_by_slug("pa_color", "red").name  # "قرمز"
"""

from dataclasses import dataclass

CATEGORY_TAXONOMY = "product_cat"


@dataclass
class Term:
    """A term of a taxonomy.

    Attributes:
        id: Term ID, unique across taxonomies.
        taxonomy: Taxonomy the term belongs to.
        slug: URL-safe identifier, unique within the taxonomy.
        name: Display name.
        parent_id: ID of the parent term (None for root).
    """

    id: int
    taxonomy: str
    slug: str
    name: str
    parent_id: int | None = None


class TaxonomyIndex:
    """In-memory index of terms and attribute taxonomy labels."""

    def __init__(self) -> None:
        """Initialize with empty storage."""
        self._by_id: dict[tuple[str, int], Term] = {}
        self._by_slug: dict[tuple[str, str], Term] = {}
        self._attribute_labels: dict[str, str] = {}

    def add_term(self, term: Term) -> Term:
        """Index a term by ID and by slug.

        Args:
            term: Term to add.

        Returns:
            The indexed term.
        """
        self._by_id[(term.taxonomy, term.id)] = term
        self._by_slug[(term.taxonomy, term.slug)] = term
        return term

    def register_attribute(self, taxonomy: str, label: str) -> None:
        """Set the display label of an attribute taxonomy."""
        self._attribute_labels[taxonomy] = label

    def get_by_id(self, taxonomy: str, term_id: int) -> Term | None:
        """Get a term by ID.

        Args:
            taxonomy: Taxonomy name.
            term_id: Term ID.

        Returns:
            Term if found, None otherwise.
        """
        return self._by_id.get((taxonomy, term_id))

    def get_by_slug(self, taxonomy: str, slug: str) -> Term | None:
        """Get a term by slug.

        Args:
            taxonomy: Taxonomy name.
            slug: Term slug.

        Returns:
            Term if found, None otherwise.
        """
        return self._by_slug.get((taxonomy, slug))

    def attribute_label(self, taxonomy: str) -> str:
        """Display label of an attribute taxonomy.

        Unregistered taxonomies fall back to their name without the
        ``pa_`` prefix.
        """
        label = self._attribute_labels.get(taxonomy)
        if label:
            return label
        return taxonomy.removeprefix("pa_")
