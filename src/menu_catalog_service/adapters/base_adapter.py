"""Base adapter for upstream point-of-sale catalog integrations.

This module defines the abstract base class the catalog client talks to.
Unlike the rest of the service, adapters raise UpstreamError on any failure;
the query service decides how that failure is presented to callers.
"""

from abc import ABC, abstractmethod
from typing import Any


class CatalogAdapter(ABC):
    """Abstract base class for upstream catalog/location APIs.

    Implementations return raw JSON payloads. Interpreting them (status
    filtering, pagination, normalization) is left to the catalog client and
    normalizer so that a test double only has to hand back dictionaries.
    """

    def __init__(self, provider_name: str) -> None:
        """Initialize the catalog adapter.

        Args:
            provider_name: Name of the upstream provider (e.g., 'square')
        """
        self.provider_name = provider_name

    @abstractmethod
    async def list_locations(self) -> dict[str, Any]:
        """Fetch every location known to the upstream account.

        Returns:
            dict: Raw payload, expected shape ``{"locations": [...]}``

        Raises:
            UpstreamError: If the call fails or the body is not a JSON object
        """

    @abstractmethod
    async def search_catalog_objects(self, cursor: str | None = None) -> dict[str, Any]:
        """Fetch one page of ITEM catalog objects with their related objects.

        Args:
            cursor: Pagination cursor from the previous page, None for the first page

        Returns:
            dict: Raw page, expected shape
            ``{"objects": [...], "related_objects": [...], "cursor": "..."}``

        Raises:
            UpstreamError: If the call fails or the body is not a JSON object
        """
