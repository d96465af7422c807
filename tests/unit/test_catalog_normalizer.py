"""Unit tests for the catalog normalizer."""

from typing import Any

import pytest

from menu_catalog_service.models.menu_models import ItemVariation, MenuItem
from menu_catalog_service.services.catalog_normalizer import (
    build_lookup_maps,
    derive_categories,
    group_by_category,
    is_item_available_at_location,
    normalize_catalog,
    slugify,
    transform_item,
)


@pytest.mark.unit
class TestSlugify:
    """Test suite for slugify."""

    def test_multi_word_name(self) -> None:
        """Test that spaces become hyphens and case is lowered."""
        assert slugify("Cold Drinks") == "cold-drinks"

    def test_single_word_name(self) -> None:
        """Test a single word is only lowercased."""
        assert slugify("Soup") == "soup"

    def test_whitespace_runs_collapse(self) -> None:
        """Test that tabs and repeated spaces collapse to a single hyphen."""
        assert slugify("Hot \t  Sandwiches") == "hot-sandwiches"

    def test_is_deterministic(self) -> None:
        """Test repeated calls give the same slug."""
        assert slugify("Kids Menu") == slugify("Kids Menu")


@pytest.mark.unit
class TestBuildLookupMaps:
    """Test suite for build_lookup_maps."""

    def test_indexes_categories_and_images(self) -> None:
        """Test category names and image URLs are keyed by object id."""
        related = [
            {"type": "CATEGORY", "id": "C1", "category_data": {"name": "Mains"}},
            {"type": "IMAGE", "id": "I1", "image_data": {"url": "https://img/1.jpg"}},
            {"type": "TAX", "id": "T1"},
        ]

        category_map, image_map = build_lookup_maps(related)

        assert category_map == {"C1": "Mains"}
        assert image_map == {"I1": "https://img/1.jpg"}

    def test_skips_objects_without_data(self) -> None:
        """Test categories without names and images without URLs are ignored."""
        related = [
            {"type": "CATEGORY", "id": "C1", "category_data": {}},
            {"type": "IMAGE", "id": "I1"},
        ]

        category_map, image_map = build_lookup_maps(related)

        assert category_map == {}
        assert image_map == {}


@pytest.mark.unit
class TestAvailability:
    """Test suite for is_item_available_at_location."""

    def test_present_at_all_locations(self) -> None:
        """Test items flagged for all locations are available anywhere."""
        assert is_item_available_at_location({"present_at_all_locations": True}, "L9")

    def test_present_at_listed_location(self) -> None:
        """Test an explicit location id list includes the location."""
        item = {"present_at_all_locations": False, "present_at_location_ids": ["L1", "L2"]}
        assert is_item_available_at_location(item, "L2")

    def test_not_present_at_location(self) -> None:
        """Test an item listed only elsewhere is unavailable."""
        item = {"present_at_all_locations": False, "present_at_location_ids": ["L2"]}
        assert not is_item_available_at_location(item, "L1")

    def test_no_location_fields(self) -> None:
        """Test an item with neither field is unavailable."""
        assert not is_item_available_at_location({}, "L1")


@pytest.mark.unit
class TestTransformItem:
    """Test suite for transform_item."""

    def test_resolves_category_image_and_variations(self) -> None:
        """Test a fully populated item converts to a MenuItem."""
        item: dict[str, Any] = {
            "id": "ITEM_1",
            "item_data": {
                "name": "Tomato Soup",
                "description": "Roasted tomato",
                "reporting_category": {"id": "C1"},
                "image_ids": ["I1", "I2"],
                "variations": [
                    {"item_variation_data": {"name": "Cup", "price_money": {"amount": 450}}},
                    {"item_variation_data": {"name": "Bowl", "price_money": {"amount": 650}}},
                ],
            },
        }

        menu_item = transform_item(
            item, {"C1": "Soup"}, {"I1": "https://img/1.jpg", "I2": "https://img/2.jpg"}
        )

        assert menu_item == MenuItem(
            id="ITEM_1",
            name="Tomato Soup",
            description="Roasted tomato",
            category="Soup",
            image_url="https://img/1.jpg",
            variations=[
                ItemVariation(name="Cup", price=450),
                ItemVariation(name="Bowl", price=650),
            ],
        )

    def test_missing_name_is_skipped(self) -> None:
        """Test that an item without a name yields None."""
        assert transform_item({"id": "X", "item_data": {"variations": []}}, {}, {}) is None
        assert transform_item({"id": "X"}, {}, {}) is None

    def test_unresolved_category_defaults_to_uncategorized(self) -> None:
        """Test both a missing and an unknown reporting category fall back."""
        no_category = {"id": "A", "item_data": {"name": "A"}}
        unknown_category = {"id": "B", "item_data": {"name": "B", "reporting_category": {"id": "C?"}}}

        assert transform_item(no_category, {}, {}).category == "Uncategorized"
        assert transform_item(unknown_category, {"C1": "Mains"}, {}).category == "Uncategorized"

    def test_unresolved_image_gives_no_url(self) -> None:
        """Test an image id without a mapping is not an error."""
        item = {"id": "A", "item_data": {"name": "A", "image_ids": ["MISSING"]}}

        assert transform_item(item, {}, {}).image_url is None

    def test_variation_defaults(self) -> None:
        """Test missing variation name and price default to 'Default' and 0."""
        item = {
            "id": "A",
            "item_data": {
                "name": "A",
                "variations": [
                    {"item_variation_data": {}},
                    {"id": "no-data"},
                ],
            },
        }

        menu_item = transform_item(item, {}, {})

        assert menu_item.variations == [ItemVariation(name="Default", price=0)]

    def test_price_stays_integer(self) -> None:
        """Test prices are kept as integer minor units."""
        item = {
            "id": "A",
            "item_data": {
                "name": "A",
                "variations": [{"item_variation_data": {"price_money": {"amount": 1299}}}],
            },
        }

        price = transform_item(item, {}, {}).variations[0].price

        assert price == 1299
        assert isinstance(price, int)


@pytest.mark.unit
class TestNormalizeCatalog:
    """Test suite for normalize_catalog and grouping."""

    def test_groups_in_first_seen_order_and_filters_location(
        self, mixed_catalog_pages: list[dict[str, Any]]
    ) -> None:
        """Test items are filtered for the location and grouped by category."""
        items = [obj for page in mixed_catalog_pages for obj in page["objects"]]
        related = [obj for page in mixed_catalog_pages for obj in page["related_objects"]]

        catalog = normalize_catalog(items, related, "L1")

        assert list(catalog) == ["Soup", "Cold Drinks", "Uncategorized"]
        assert [item.name for item in catalog["Cold Drinks"]] == ["Lemonade"]
        assert catalog["Soup"][0].image_url == "https://img/soup.jpg"
        assert catalog["Uncategorized"][0].variations == []

    def test_unavailable_item_excluded(self) -> None:
        """Test an item not sold at the location is absent from every bucket."""
        items = [
            {
                "id": "ELSEWHERE",
                "present_at_all_locations": False,
                "present_at_location_ids": ["L2"],
                "item_data": {"name": "Elsewhere"},
            }
        ]

        assert normalize_catalog(items, [], "L1") == {}

    def test_each_item_in_exactly_one_bucket(
        self, mixed_catalog_pages: list[dict[str, Any]]
    ) -> None:
        """Test no item id appears under two categories."""
        items = [obj for page in mixed_catalog_pages for obj in page["objects"]]
        related = [obj for page in mixed_catalog_pages for obj in page["related_objects"]]

        catalog = normalize_catalog(items, related, "L1")
        ids = [item.id for bucket in catalog.values() for item in bucket]

        assert len(ids) == len(set(ids))

    def test_group_by_category_keeps_insertion_order(self) -> None:
        """Test grouping preserves both category and item order."""
        items = [
            MenuItem(id="1", name="Fries", category="Sides"),
            MenuItem(id="2", name="Burger", category="Mains"),
            MenuItem(id="3", name="Salad", category="Sides"),
        ]

        grouped = group_by_category(items)

        assert list(grouped) == ["Sides", "Mains"]
        assert [item.id for item in grouped["Sides"]] == ["1", "3"]


@pytest.mark.unit
class TestDeriveCategories:
    """Test suite for derive_categories."""

    def test_counts_match_buckets_and_sorted_case_insensitively(self) -> None:
        """Test item counts equal bucket sizes and ordering ignores case."""
        catalog = {
            "soup": [MenuItem(id="1", name="Soup", category="soup")],
            "Cold Drinks": [
                MenuItem(id="2", name="Lemonade", category="Cold Drinks"),
                MenuItem(id="3", name="Iced Tea", category="Cold Drinks"),
            ],
            "Appetizers": [MenuItem(id="4", name="Wings", category="Appetizers")],
        }

        categories = derive_categories(catalog)

        assert [c.name for c in categories] == ["Appetizers", "Cold Drinks", "soup"]
        for category in categories:
            assert category.item_count == len(catalog[category.name])
        assert categories[1].id == "cold-drinks"

    def test_empty_catalog(self) -> None:
        """Test an empty catalog has no categories."""
        assert derive_categories({}) == []
