"""Catalog service orchestrating cache lookups, upstream fetches and normalization."""

import logging

from menu_catalog_service.adapters.square_adapter import SquareAdapter
from menu_catalog_service.config import ServiceConfig
from menu_catalog_service.errors import ServiceError, UpstreamError
from menu_catalog_service.models.menu_models import CatalogResponse, Category, Location
from menu_catalog_service.observability import traced
from menu_catalog_service.services.cache_service import CacheStats, MemoryCache
from menu_catalog_service.services.catalog_client import CatalogClient
from menu_catalog_service.services.catalog_normalizer import derive_categories, normalize_catalog

logger = logging.getLogger(__name__)

LOCATIONS_CACHE_KEY = "square:locations"
LOCATIONS_TTL_SECONDS = 600
CATALOG_TTL_SECONDS = 300
CATEGORIES_TTL_SECONDS = 300


def catalog_cache_key(location_id: str) -> str:
    return f"square:catalog:{location_id}"


def categories_cache_key(location_id: str) -> str:
    return f"square:categories:{location_id}"


class CatalogService:
    """Service for serving locations, catalogs and categories.

    Each operation checks the cache first and, on a miss, fetches from the
    upstream client, normalizes the result and stores it. Failures are
    logged with full detail and re-raised as ServiceError carrying only a
    generic message: 502 when the upstream was at fault, 500 otherwise.

    Concurrent misses for the same key are not de-duplicated; each request
    fetches independently and the last write wins.
    """

    def __init__(self, catalog_client: CatalogClient, cache: MemoryCache) -> None:
        """Initialize the CatalogService.

        Args:
            catalog_client: Client for the upstream catalog API
            cache: Shared memoization cache
        """
        self.catalog_client = catalog_client
        self.cache = cache

    @classmethod
    def from_config(cls, config: ServiceConfig) -> "CatalogService":
        """Wire a Square-backed service from configuration.

        Args:
            config: Loaded service configuration

        Returns:
            CatalogService with its own cache instance
        """
        adapter = SquareAdapter(
            access_token=config.square_access_token,
            environment=config.square_environment,
            api_version=config.square_api_version,
        )
        client = CatalogClient(adapter=adapter, max_pages=config.upstream_max_pages)
        cache = MemoryCache(
            default_ttl=config.cache_ttl,
            max_entries=config.cache_max_size,
            check_period=config.cache_check_period,
        )
        return cls(catalog_client=client, cache=cache)

    @traced("catalog.get_locations")
    async def get_locations(self) -> list[Location]:
        """Get all active locations.

        Returns:
            List of active locations

        Raises:
            ServiceError: If the locations could not be fetched
        """
        cached: list[Location] | None = self.cache.get(LOCATIONS_CACHE_KEY)
        if cached is not None:
            return cached

        logger.info("Fetching locations from upstream API")
        try:
            locations = await self.catalog_client.list_active_locations()
        except Exception as e:
            raise self._wrap_failure(e, "Failed to fetch locations") from e

        self.cache.set(LOCATIONS_CACHE_KEY, locations, LOCATIONS_TTL_SECONDS)
        return locations

    @traced("catalog.get_catalog_items", record_args=("location_id",))
    async def get_catalog_items(self, location_id: str) -> CatalogResponse:
        """Get the menu for a location grouped by category name.

        Args:
            location_id: The location to fetch the catalog for

        Returns:
            Mapping of category name to menu items

        Raises:
            ServiceError: If the catalog could not be fetched
        """
        cache_key = catalog_cache_key(location_id)
        cached: CatalogResponse | None = self.cache.get(cache_key)
        if cached is not None:
            return cached

        try:
            items, related = await self.catalog_client.list_catalog_items(location_id)
            try:
                catalog = normalize_catalog(items, related, location_id)
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                raise UpstreamError(f"Malformed catalog data for location {location_id}: {e}") from e
        except Exception as e:
            raise self._wrap_failure(e, "Failed to fetch catalog items") from e

        self.cache.set(cache_key, catalog, CATALOG_TTL_SECONDS)
        # Categories summarize a catalog; drop any built from an older one
        self.cache.delete(categories_cache_key(location_id))

        total_items = sum(len(menu_items) for menu_items in catalog.values())
        logger.info(f"Retrieved {total_items} items for location {location_id}")
        return catalog

    @traced("catalog.get_categories", record_args=("location_id",))
    async def get_categories(self, location_id: str) -> list[Category]:
        """Get categories with item counts for a location.

        Args:
            location_id: The location to summarize

        Returns:
            Categories sorted by name, case-insensitively

        Raises:
            ServiceError: If the underlying catalog could not be fetched
        """
        cache_key = categories_cache_key(location_id)
        cached: list[Category] | None = self.cache.get(cache_key)
        if cached is not None:
            return cached

        try:
            catalog = await self.get_catalog_items(location_id)
        except ServiceError as e:
            logger.error(f"Error fetching categories for location {location_id}: {e.message}")
            raise ServiceError("Failed to fetch categories", status_code=e.status_code) from e

        categories = derive_categories(catalog)
        self.cache.set(cache_key, categories, CATEGORIES_TTL_SECONDS)

        logger.info(f"Retrieved {len(categories)} categories for location {location_id}")
        return categories

    def clear_cache(self) -> None:
        """Drop every cached location, catalog and category entry."""
        self.cache.clear()

    def cache_stats(self) -> CacheStats:
        """Current cache counters."""
        return self.cache.get_stats()

    @staticmethod
    def _wrap_failure(error: Exception, message: str) -> ServiceError:
        logger.exception(f"{message}: {error}")
        status_code = 502 if isinstance(error, UpstreamError) else 500
        return ServiceError(message, status_code=status_code)
