"""Transform raw upstream catalog objects into the menu data model.

Pure functions, no I/O. Input is the raw ITEM objects and related objects
(CATEGORY, IMAGE) of one catalog listing, in upstream JSON shape.
"""

import re
from typing import Any

from menu_catalog_service.models.menu_models import (
    CatalogResponse,
    Category,
    ItemVariation,
    MenuItem,
)

UNCATEGORIZED = "Uncategorized"
DEFAULT_VARIATION_NAME = "Default"

_WHITESPACE = re.compile(r"\s+")


def slugify(name: str) -> str:
    """Lowercase ``name`` and replace each whitespace run with one hyphen.

    >>> slugify("Cold Drinks")
    'cold-drinks'
    """
    return _WHITESPACE.sub("-", name.lower())


def build_lookup_maps(
    related_objects: list[dict[str, Any]],
) -> tuple[dict[str, str], dict[str, str]]:
    """Index related objects in a single pass.

    Args:
        related_objects: Raw related objects from the catalog search

    Returns:
        Tuple of (category id -> category name, image id -> image url)
    """
    category_map: dict[str, str] = {}
    image_map: dict[str, str] = {}

    for obj in related_objects:
        obj_type = obj.get("type")
        if obj_type == "CATEGORY":
            name = (obj.get("category_data") or {}).get("name")
            if name:
                category_map[obj["id"]] = name
        elif obj_type == "IMAGE":
            url = (obj.get("image_data") or {}).get("url")
            if url:
                image_map[obj["id"]] = url

    return category_map, image_map


def is_item_available_at_location(item: dict[str, Any], location_id: str) -> bool:
    """Whether ``item`` is sold at ``location_id``."""
    if item.get("present_at_all_locations") is True:
        return True
    return location_id in (item.get("present_at_location_ids") or [])


def transform_item(
    item: dict[str, Any],
    category_map: dict[str, str],
    image_map: dict[str, str],
) -> MenuItem | None:
    """Convert one raw ITEM object to a MenuItem.

    Args:
        item: Raw catalog object of type ITEM
        category_map: Category id -> name lookup
        image_map: Image id -> url lookup

    Returns:
        MenuItem, or None if the item has no name
    """
    item_data = item.get("item_data")
    if not item_data or not item_data.get("name"):
        return None

    category_id = (item_data.get("reporting_category") or {}).get("id")
    category_name = category_map.get(category_id, UNCATEGORIZED) if category_id else UNCATEGORIZED

    image_ids = item_data.get("image_ids") or []
    image_url = image_map.get(image_ids[0]) if image_ids else None

    variations = []
    for variation in item_data.get("variations") or []:
        variation_data = variation.get("item_variation_data")
        if variation_data is None:
            continue
        amount = (variation_data.get("price_money") or {}).get("amount") or 0
        variations.append(
            ItemVariation(
                name=variation_data.get("name") or DEFAULT_VARIATION_NAME,
                price=max(int(amount), 0),
            )
        )

    return MenuItem(
        id=item["id"],
        name=item_data["name"],
        description=item_data.get("description") or None,
        category=category_name,
        image_url=image_url,
        variations=variations,
    )


def group_by_category(items: list[MenuItem]) -> CatalogResponse:
    """Bucket items by category name, keeping first-seen category order."""
    grouped: CatalogResponse = {}
    for item in items:
        grouped.setdefault(item.category, []).append(item)
    return grouped


def normalize_catalog(
    items: list[dict[str, Any]],
    related_objects: list[dict[str, Any]],
    location_id: str,
) -> CatalogResponse:
    """Build the catalog response for one location.

    Args:
        items: Raw ITEM objects from every catalog page
        related_objects: Raw related objects from every catalog page
        location_id: Location whose availability filter applies

    Returns:
        Items available at the location, grouped by category name
    """
    category_map, image_map = build_lookup_maps(related_objects)

    menu_items = []
    for item in items:
        if not is_item_available_at_location(item, location_id):
            continue
        menu_item = transform_item(item, category_map, image_map)
        if menu_item is not None:
            menu_items.append(menu_item)

    return group_by_category(menu_items)


def derive_categories(catalog: CatalogResponse) -> list[Category]:
    """Summarize a catalog response as categories sorted by name, case-insensitively."""
    categories = [
        Category(id=slugify(name), name=name, item_count=len(menu_items))
        for name, menu_items in catalog.items()
    ]
    categories.sort(key=lambda category: category.name.casefold())
    return categories
