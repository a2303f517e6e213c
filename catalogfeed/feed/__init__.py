"""Feed pipeline.

Attribute resolution, variation pricing, record flattening and extraction.
"""

from catalogfeed.feed.attributes import AttributeResolver
from catalogfeed.feed.extractor import (
    ExtractionMode,
    ExtractionRequest,
    ExtractionResult,
    ExtractionService,
    FeedMetadata,
    SkipReason,
)
from catalogfeed.feed.flattener import GUARANTEE_KEYS, SKU_LABEL, RecordFlattener
from catalogfeed.feed.pricing import VariationPriceResolver, VariationPricing
from catalogfeed.feed.records import CatalogItem

__all__ = [
    "AttributeResolver",
    "CatalogItem",
    "ExtractionMode",
    "ExtractionRequest",
    "ExtractionResult",
    "ExtractionService",
    "FeedMetadata",
    "GUARANTEE_KEYS",
    "RecordFlattener",
    "SKU_LABEL",
    "SkipReason",
    "VariationPriceResolver",
    "VariationPricing",
]
