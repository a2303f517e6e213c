#!/usr/bin/env python3
"""Export feed script.

Flattens a catalog document into the feed the aggregator would receive,
without the token check. Useful for inspecting a catalog export.

Usage:
    python scripts/export_feed.py catalog.json
    python scripts/export_feed.py catalog.json --variations --limit 50 --page 2
    python scripts/export_feed.py catalog.json --products 5,9
    python scripts/export_feed.py catalog.json --slugs phone-x,case-y
"""

import argparse
import json
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from catalogfeed.api.products import result_to_response
from catalogfeed.api.schemas import ExtractionParams
from catalogfeed.catalog.loader import load_catalog
from catalogfeed.feed.extractor import ExtractionService
from catalogfeed.infrastructure.config import settings
from catalogfeed.infrastructure.log_config import configure_logging


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Print the product feed for a catalog document",
    )
    parser.add_argument("catalog", help="Path to the catalog JSON document")
    parser.add_argument(
        "--variations",
        action="store_true",
        help="List variations instead of variable parents",
    )
    parser.add_argument("--limit", type=int, default=0, help="Page size")
    parser.add_argument("--page", type=int, default=1, help="Page number (1-based)")
    parser.add_argument("--products", default="", help="Comma-separated product ids")
    parser.add_argument("--slugs", default="", help="Comma-separated product slugs")
    parser.add_argument("--site-url", default=None, help="Override the document's site URL")

    args = parser.parse_args()

    configure_logging("WARNING")

    store = load_catalog(args.catalog, site_url=args.site_url or settings.site_url)
    service = ExtractionService(
        store,
        service_version=settings.service_version,
        platform_version=settings.platform_version,
        commerce_engine_version=settings.commerce_engine_version,
        default_page_size=settings.default_page_size,
    )

    params = ExtractionParams(
        variation=args.variations,
        limit=args.limit,
        page=args.page,
        products=args.products,
        slugs=args.slugs,
    )
    result = service.extract(params.to_request())
    response = result_to_response(result, service.metadata)

    json.dump(
        response.model_dump(mode="json", exclude_unset=True),
        sys.stdout,
        ensure_ascii=False,
        indent=2,
    )
    print()


if __name__ == "__main__":
    main()
