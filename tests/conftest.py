"""Shared fixtures: a small catalog with simple, variable and draft products."""

import copy
from typing import Any

import pytest

from catalogfeed.catalog.loader import CatalogDocument, build_store
from catalogfeed.catalog.store import InMemoryCatalogStore
from catalogfeed.feed.flattener import RecordFlattener

CATALOG: dict[str, Any] = {
    "site_url": "https://shop.example",
    "attribute_taxonomies": {
        "pa_color": "رنگ",
        "pa_guarantee": "گارانتی",
    },
    "terms": [
        {"id": 10, "taxonomy": "product_cat", "slug": "digital", "name": "کالای دیجیتال"},
        {"id": 42, "taxonomy": "product_cat", "slug": "mobile", "name": "موبایل", "parent_id": 10},
        {"id": 7, "taxonomy": "product_cat", "slug": "smartphone", "name": "گوشی هوشمند", "parent_id": 42},
        {"id": 50, "taxonomy": "product_cat", "slug": "clothing", "name": "پوشاک"},
        {"id": 31, "taxonomy": "pa_color", "slug": "red", "name": "قرمز"},
        {"id": 32, "taxonomy": "pa_color", "slug": "blue", "name": "آبی"},
        {"id": 60, "taxonomy": "pa_guarantee", "slug": "18m", "name": "۱۸ ماهه"},
    ],
    "attachments": {
        "100": "https://shop.example/img/case-a.jpg",
        "101": "https://shop.example/img/case-b.jpg",
        "102": "https://shop.example/img/case-main.jpg",
        "200": "https://shop.example/img/shirt.jpg",
        "210": "https://shop.example/img/shirt-red.jpg",
    },
    "products": [
        {
            "id": 5,
            "name": "قاب گوشی",
            "slug": "phone-case",
            "sku": "X1",
            "price": "10",
            "regular_price": "12",
            "category_ids": [10, 42, 7],
            "gallery_image_ids": [100, 101],
            "image_id": 102,
            "short_description": "قاب سیلیکونی",
            "date_created": "2024-03-01T10:00:00+00:00",
        },
        {
            "id": 9,
            "name": "Draft product",
            "slug": "draft",
            "status": "draft",
            "price": "50",
        },
        {
            "id": 20,
            "type": "variable",
            "name": "تیشرت",
            "slug": "t-shirt",
            "sku": "TS",
            "category_ids": [50],
            "gallery_image_ids": [200],
            "image_id": 200,
            "meta": {"product_english_name": "T-Shirt"},
            "attributes": [
                {"name": "pa_color", "options": ["red", "blue"], "visible": True},
                {"name": "Material", "options": ["Cotton", "Polyester"], "visible": True},
                {"name": "Internal", "options": ["x"], "visible": False},
            ],
            "default_attributes": {"pa_color": "blue"},
        },
        {
            "id": 21,
            "type": "variation",
            "parent_id": 20,
            "price": "100",
            "regular_price": "120",
            "stock_status": "instock",
            "image_id": 210,
            "attributes": {"pa_color": "red"},
        },
        {
            "id": 22,
            "type": "variation",
            "parent_id": 20,
            "sku": "TS-BLUE",
            "price": "150",
            "regular_price": "150",
            "stock_status": "outofstock",
            "attributes": {"pa_color": "blue"},
        },
        {
            "id": 23,
            "type": "variation",
            "parent_id": 20,
            "price": "",
            "attributes": {"pa_color": ""},
        },
        {
            "id": 30,
            "type": "variable",
            "name": "Empty variable",
            "slug": "empty-variable",
            "stock_status": "outofstock",
        },
    ],
}


@pytest.fixture
def catalog_data() -> dict[str, Any]:
    """Raw catalog document (a fresh copy per test)."""
    return copy.deepcopy(CATALOG)


@pytest.fixture
def store(catalog_data: dict[str, Any]) -> InMemoryCatalogStore:
    """In-memory store loaded from the sample catalog."""
    return build_store(CatalogDocument.model_validate(catalog_data))


@pytest.fixture
def flattener(store: InMemoryCatalogStore) -> RecordFlattener:
    """Record flattener bound to the sample store."""
    return RecordFlattener(store)
