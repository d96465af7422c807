"""Menu data models.

These models are read-only projections of upstream Square location and
catalog data, rebuilt on every cache miss.
"""

from enum import Enum

from pydantic import BaseModel, Field


class LocationStatus(str, Enum):
    """Enumeration of upstream location statuses."""

    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class Location(BaseModel):
    """Restaurant location model."""

    id: str = Field(..., description="Unique identifier for the location")
    name: str = Field(..., description="Location display name")
    address: str = Field(..., description="Formatted single-line address")
    timezone: str = Field(..., description="IANA timezone identifier")
    status: LocationStatus = Field(..., description="Location status")


class ItemVariation(BaseModel):
    """Priced variation of a menu item."""

    name: str = Field(..., description="Variation name")
    price: int = Field(..., description="Price in minor currency units (cents)", ge=0)


class MenuItem(BaseModel):
    """Menu item model."""

    id: str = Field(..., description="Unique identifier for the menu item")
    name: str = Field(..., description="Item name")
    description: str | None = Field(None, description="Item description")
    category: str = Field(..., description="Display name of the category this item is grouped under")
    image_url: str | None = Field(None, description="URL to item image")
    variations: list[ItemVariation] = Field(default_factory=list, description="Item variations")


class Category(BaseModel):
    """Menu category derived from a catalog response."""

    id: str = Field(..., description="Slug derived from the category name")
    name: str = Field(..., description="Category name")
    item_count: int = Field(..., description="Number of items in the category", ge=0)


# Category display name -> items, in first-seen order
CatalogResponse = dict[str, list[MenuItem]]
