"""Client for fetching locations and catalog objects from the upstream API."""

import logging
from typing import Any

from menu_catalog_service.adapters.base_adapter import CatalogAdapter
from menu_catalog_service.errors import UpstreamError
from menu_catalog_service.models.menu_models import Location, LocationStatus

logger = logging.getLogger(__name__)

ADDRESS_FIELDS = (
    "address_line_1",
    "address_line_2",
    "locality",
    "administrative_district_level_1",
    "postal_code",
)


def format_address(address: dict[str, Any] | None) -> str:
    """Join the present address parts into one comma-separated line.

    Args:
        address: Raw upstream address object, may be None

    Returns:
        Formatted address, or "No address available" when there is none
    """
    if not address:
        return "No address available"

    parts = [str(address[field]) for field in ADDRESS_FIELDS if address.get(field)]
    return ", ".join(parts)


class CatalogClient:
    """Fetches raw location and catalog data through a CatalogAdapter.

    Locations are filtered and shaped here; catalog objects are returned raw
    for the normalizer. Nothing is retried: any failure is raised as
    UpstreamError to the caller.
    """

    def __init__(self, adapter: CatalogAdapter, max_pages: int = 100) -> None:
        """Initialize the catalog client.

        Args:
            adapter: Upstream adapter performing the actual API calls
            max_pages: Ceiling on catalog pages fetched in one listing
        """
        self.adapter = adapter
        self.max_pages = max_pages

    async def list_active_locations(self) -> list[Location]:
        """Fetch all ACTIVE locations.

        Returns:
            List of Location objects, empty if upstream reports none

        Raises:
            UpstreamError: If the upstream call fails or the payload is malformed
        """
        payload = await self.adapter.list_locations()

        raw_locations = payload.get("locations")
        if raw_locations is None:
            logger.warning("No locations found in upstream response")
            return []
        if not isinstance(raw_locations, list):
            raise UpstreamError("Malformed locations payload")

        locations = []
        for raw in raw_locations:
            if not isinstance(raw, dict):
                raise UpstreamError("Malformed location record")
            if raw.get("status") != LocationStatus.ACTIVE.value:
                continue

            locations.append(
                Location(
                    id=raw.get("id") or "",
                    name=raw.get("name") or "Unknown Location",
                    address=format_address(raw.get("address")),
                    timezone=raw.get("timezone") or "UTC",
                    status=LocationStatus.ACTIVE,
                )
            )

        logger.info(f"Retrieved {len(locations)} active locations")
        return locations

    async def list_catalog_items(
        self, location_id: str
    ) -> tuple[list[dict[str, Any]], list[dict[str, Any]]]:
        """Fetch every ITEM catalog object with its related objects.

        All pages are accumulated before returning.

        Args:
            location_id: Location the catalog is being fetched for (used for logging)

        Returns:
            Tuple of (item objects, related objects)

        Raises:
            UpstreamError: If any page fails, is malformed, or the page ceiling is hit
        """
        logger.info(f"Fetching catalog for location {location_id}")

        items: list[dict[str, Any]] = []
        related: list[dict[str, Any]] = []
        cursor: str | None = None

        for page in range(1, self.max_pages + 1):
            result = await self.adapter.search_catalog_objects(cursor=cursor)

            objects = result.get("objects") or []
            related_objects = result.get("related_objects") or []
            if not isinstance(objects, list) or not isinstance(related_objects, list):
                raise UpstreamError(f"Malformed catalog page {page}")
            for obj in (*objects, *related_objects):
                if not isinstance(obj, dict) or not obj.get("id"):
                    raise UpstreamError(f"Malformed catalog object on page {page}")

            items.extend(objects)
            related.extend(related_objects)

            cursor = result.get("cursor")
            if not cursor:
                break
        else:
            logger.error(
                f"Catalog pagination for location {location_id} exceeded {self.max_pages} pages"
            )
            raise UpstreamError("Catalog pagination exceeded page limit")

        logger.info(f"Upstream returned {len(items)} items and {len(related)} related objects")
        return items, related
