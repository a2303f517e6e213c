"""Flat catalog record."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from catalogfeed.catalog.models import StockStatus


@dataclass
class CatalogItem:
    """One sellable unit as reported to the aggregator.

    ``spec`` is None when no attribute resolved; it is wrapped in a
    one-element list only when serialized.
    """

    title: str
    subtitle: str
    page_unique: int
    parent_id: int
    current_price: Decimal | None
    old_price: Decimal | None
    availability: StockStatus
    category_name: str | None
    image_link: str | None
    image_links: list[str] = field(default_factory=list)
    page_url: str = ""
    short_desc: str = ""
    spec: dict[str, str] | None = None
    date: datetime | None = None
    guarantee: str = ""

    @property
    def spec_blocks(self) -> list[dict[str, str]]:
        """Spec in wire shape: at most one mapping."""
        return [self.spec] if self.spec else []
