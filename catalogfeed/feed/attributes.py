"""Attribute resolution.

Turns a raw attribute into the label/value pair shown in a feed record.
"""

from urllib.parse import unquote, unquote_plus

from catalogfeed.catalog.models import Attribute, PlainAttribute, TaxonomyAttribute
from catalogfeed.catalog.store import CatalogStore

VALUE_SEPARATOR = ", "


class AttributeResolver:
    """Resolves attributes against the catalog store's taxonomy index."""

    def __init__(self, store: CatalogStore) -> None:
        self.store = store

    def resolve(self, attribute: Attribute, decode: bool = True) -> tuple[str, str]:
        """Resolve an attribute to a ``(label, value)`` pair.

        Taxonomy attributes are labelled with the taxonomy's display label
        and valued with the names of the terms matching their slugs; slugs
        with no term are dropped, so a single unknown slug resolves to "".
        Plain attributes keep their key and values, URL-decoded when
        ``decode`` is set. Attributes listed on the product page are shown
        as stored, so callers resolving them pass ``decode=False``.

        Args:
            attribute: Attribute to resolve.
            decode: URL-decode labels and plain values.

        Returns:
            Label and comma-joined value.
        """
        if isinstance(attribute, TaxonomyAttribute):
            return self._resolve_taxonomy(attribute, decode)
        return self._resolve_plain(attribute, decode)

    def _resolve_taxonomy(self, attribute: TaxonomyAttribute, decode: bool) -> tuple[str, str]:
        names = []
        for slug in attribute.term_slugs:
            term = self.store.get_term_by_slug(attribute.key, slug)
            if term is not None:
                names.append(term.name)
        label = self.store.attribute_label(attribute.key)
        if decode:
            label = unquote_plus(label)
        return label, VALUE_SEPARATOR.join(names)

    def _resolve_plain(self, attribute: PlainAttribute, decode: bool) -> tuple[str, str]:
        if not decode:
            return attribute.key, VALUE_SEPARATOR.join(attribute.values)
        return unquote_plus(attribute.key), VALUE_SEPARATOR.join(unquote(v) for v in attribute.values)
