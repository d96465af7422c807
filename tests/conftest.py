"""Shared pytest fixtures and configuration for all tests."""

import os
from typing import Any

import pytest

# Keep src/main.py from building a real application at import time
os.environ.setdefault("ENVIRONMENT", "test")

from menu_catalog_service.adapters.base_adapter import CatalogAdapter  # noqa: E402


class FakeClock:
    """Manually advanced monotonic clock for cache expiry tests."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeCatalogAdapter(CatalogAdapter):
    """In-memory stand-in for the Square API that counts calls."""

    def __init__(
        self,
        locations_payload: dict[str, Any] | None = None,
        catalog_pages: list[dict[str, Any]] | None = None,
    ) -> None:
        super().__init__("fake")
        self.locations_payload = locations_payload or {"locations": []}
        self.catalog_pages = catalog_pages or [{"objects": [], "related_objects": []}]
        self.location_calls = 0
        self.search_cursors: list[str | None] = []

    async def list_locations(self) -> dict[str, Any]:
        self.location_calls += 1
        return self.locations_payload

    async def search_catalog_objects(self, cursor: str | None = None) -> dict[str, Any]:
        self.search_cursors.append(cursor)
        index = 0 if cursor is None else int(cursor.removeprefix("page-"))
        return self.catalog_pages[index]


@pytest.fixture
def mock_location_id() -> str:
    """Fixture providing a standard test location ID."""
    return "L1"


@pytest.fixture
def fake_clock() -> FakeClock:
    """Fixture providing a controllable clock."""
    return FakeClock()


@pytest.fixture
def make_adapter() -> type[FakeCatalogAdapter]:
    """Fixture providing the fake upstream adapter class."""
    return FakeCatalogAdapter


@pytest.fixture
def raw_locations_payload() -> dict[str, Any]:
    """Fixture providing a Square ListLocations payload with one inactive location."""
    return {
        "locations": [
            {
                "id": "L1",
                "name": "Downtown",
                "address": {
                    "address_line_1": "123 Main St",
                    "locality": "Springfield",
                    "administrative_district_level_1": "IL",
                    "postal_code": "62701",
                },
                "timezone": "America/Chicago",
                "status": "ACTIVE",
            },
            {
                "id": "L2",
                "name": "Closed Kiosk",
                "timezone": "America/Chicago",
                "status": "INACTIVE",
            },
        ]
    }


@pytest.fixture
def burger_catalog_page() -> dict[str, Any]:
    """Fixture providing a one-item catalog page: a Burger in Mains at every location."""
    return {
        "objects": [
            {
                "type": "ITEM",
                "id": "ITEM_BURGER",
                "present_at_all_locations": True,
                "item_data": {
                    "name": "Burger",
                    "reporting_category": {"id": "C1"},
                    "variations": [
                        {
                            "type": "ITEM_VARIATION",
                            "id": "VAR_BURGER",
                            "item_variation_data": {
                                "price_money": {"amount": 999, "currency": "USD"},
                            },
                        }
                    ],
                },
            }
        ],
        "related_objects": [
            {"type": "CATEGORY", "id": "C1", "category_data": {"name": "Mains"}},
        ],
    }


@pytest.fixture
def mixed_catalog_pages() -> list[dict[str, Any]]:
    """Fixture providing two catalog pages with images, categories and location filters."""
    return [
        {
            "objects": [
                {
                    "type": "ITEM",
                    "id": "ITEM_SOUP",
                    "present_at_all_locations": True,
                    "item_data": {
                        "name": "Tomato Soup",
                        "description": "Roasted tomato",
                        "reporting_category": {"id": "C_SOUP"},
                        "image_ids": ["IMG_SOUP"],
                        "variations": [
                            {
                                "id": "V1",
                                "item_variation_data": {
                                    "name": "Cup",
                                    "price_money": {"amount": 450},
                                },
                            },
                            {
                                "id": "V2",
                                "item_variation_data": {
                                    "name": "Bowl",
                                    "price_money": {"amount": 650},
                                },
                            },
                        ],
                    },
                },
                {
                    "type": "ITEM",
                    "id": "ITEM_LEMONADE",
                    "present_at_all_locations": False,
                    "present_at_location_ids": ["L1"],
                    "item_data": {
                        "name": "Lemonade",
                        "reporting_category": {"id": "C_DRINKS"},
                        "variations": [{"id": "V3", "item_variation_data": {"name": "Large"}}],
                    },
                },
            ],
            "related_objects": [
                {"type": "CATEGORY", "id": "C_SOUP", "category_data": {"name": "Soup"}},
                {"type": "IMAGE", "id": "IMG_SOUP", "image_data": {"url": "https://img/soup.jpg"}},
            ],
            "cursor": "page-1",
        },
        {
            "objects": [
                {
                    "type": "ITEM",
                    "id": "ITEM_ICED_TEA",
                    "present_at_all_locations": False,
                    "present_at_location_ids": ["L2"],
                    "item_data": {
                        "name": "Iced Tea",
                        "reporting_category": {"id": "C_DRINKS"},
                        "variations": [{"id": "V4", "item_variation_data": {"name": "Regular"}}],
                    },
                },
                {
                    "type": "ITEM",
                    "id": "ITEM_MYSTERY",
                    "present_at_all_locations": True,
                    "item_data": {"name": "Mystery Box", "variations": []},
                },
            ],
            "related_objects": [
                {"type": "CATEGORY", "id": "C_DRINKS", "category_data": {"name": "Cold Drinks"}},
            ],
        },
    ]
