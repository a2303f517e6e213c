"""Record flattening.

Projects a catalog product, or one variation of it, onto a single flat
CatalogItem: identity, price, availability, category, images and a
label/value spec block.
"""

from catalogfeed.catalog.models import RawProduct
from catalogfeed.catalog.store import CatalogStore
from catalogfeed.catalog.taxonomy import CATEGORY_TAXONOMY
from catalogfeed.feed.attributes import AttributeResolver
from catalogfeed.feed.pricing import VariationPriceResolver
from catalogfeed.feed.records import CatalogItem

ENGLISH_NAME_META = "product_english_name"

# Scanned in order; the first non-empty value wins.
GUARANTEE_KEYS = (
    "گارانتی",
    "guarantee",
    "warranty",
    "garanty",
    "گارانتی:",
    "گارانتی محصول",
    "گارانتی محصول:",
    "ضمانت",
    "ضمانت:",
)

SKU_LABEL = "شناسه کالا"


def find_guarantee(spec: dict[str, str]) -> str:
    """Value of the first recognized guarantee label present in ``spec``."""
    for key in GUARANTEE_KEYS:
        value = spec.get(key)
        if value:
            return value
    return ""


class RecordFlattener:
    """Builds CatalogItems from catalog products."""

    def __init__(
        self,
        store: CatalogStore,
        attributes: AttributeResolver | None = None,
        pricing: VariationPriceResolver | None = None,
    ) -> None:
        self.store = store
        self.attributes = attributes or AttributeResolver(store)
        self.pricing = pricing or VariationPriceResolver(store, self.attributes)

    def flatten(self, product: RawProduct, is_variation_child: bool = False) -> CatalogItem:
        """Flatten one product into a catalog record.

        Args:
            product: Simple or variable product, or a variation.
            is_variation_child: Report ``product`` as a variation of its
                parent: title, subtitle, category and parent id are the
                parent's; price and stock are the variation's own.

        Returns:
            A fresh CatalogItem.
        """
        owner = product
        parent_id = 0
        if is_variation_child:
            parent = self.store.get_product(product.parent_id)
            if parent is not None:
                owner = parent
                parent_id = parent.id
            else:
                parent_id = product.parent_id

        image_link, image_links = self._images(product)

        item = CatalogItem(
            title=owner.name,
            subtitle=owner.get_meta(ENGLISH_NAME_META),
            page_unique=product.id,
            parent_id=parent_id,
            current_price=product.price,
            old_price=product.regular_price,
            availability=product.stock_status,
            category_name=self._category_name(owner),
            image_link=image_link,
            image_links=image_links,
            page_url=self.store.permalink(product),
            short_desc=product.short_description,
            date=product.date_created,
        )

        spec: dict[str, str] = {}
        if is_variation_child:
            self._add_own_attributes(product, spec)
        else:
            if product.is_variable:
                pricing = self.pricing.resolve(product)
                item.current_price = pricing.current_price
                item.old_price = pricing.old_price
                item.availability = pricing.availability
                for label, value in pricing.defaults:
                    spec.setdefault(label, value)
            self._add_visible_attributes(product, spec)

        item.guarantee = find_guarantee(spec)

        if SKU_LABEL not in spec and product.sku:
            spec[SKU_LABEL] = product.sku

        item.spec = spec or None
        return item

    def _category_name(self, product: RawProduct) -> str | None:
        # Last assigned category is the most specific one.
        if not product.category_ids:
            return None
        term = self.store.get_term_by_id(CATEGORY_TAXONOMY, product.category_ids[-1])
        return term.name if term else None

    def _images(self, product: RawProduct) -> tuple[str | None, list[str]]:
        links = []
        for attachment_id in product.gallery_image_ids:
            url = self.store.attachment_url(attachment_id)
            if url:
                links.append(url)

        image_link = self.store.attachment_url(product.image_id)
        if image_link and image_link not in links:
            links.append(image_link)
        return image_link, links

    def _add_visible_attributes(self, product: RawProduct, spec: dict[str, str]) -> None:
        for attribute in product.attributes:
            if not attribute.visible or not any(attribute.raw_values):
                continue
            label, value = self.attributes.resolve(attribute, decode=False)
            spec.setdefault(label, value)

    def _add_own_attributes(self, product: RawProduct, spec: dict[str, str]) -> None:
        for attribute in product.attributes:
            if not any(attribute.raw_values):
                continue
            label, value = self.attributes.resolve(attribute)
            spec[label] = value
