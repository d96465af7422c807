"""Square platform adapter implementation.

This adapter talks to the Square REST API v2 (Locations and Catalog) with
httpx and returns the raw JSON payloads.
"""

import logging
import time
from typing import Any

import httpx

from menu_catalog_service.adapters.base_adapter import CatalogAdapter
from menu_catalog_service.errors import UpstreamError
from menu_catalog_service.observability.metrics import record_upstream_api_call

logger = logging.getLogger(__name__)


class SquareAdapter(CatalogAdapter):
    """Adapter for the Square Locations and Catalog APIs.

    Uses a bearer access token. No retries are attempted; failures surface as
    UpstreamError with the underlying httpx error chained.
    """

    def __init__(
        self,
        access_token: str,
        environment: str = "sandbox",
        api_version: str = "2024-01-18",
        timeout: float = 10.0,
    ) -> None:
        """Initialize Square adapter.

        Args:
            access_token: Square API access token
            environment: API environment ('sandbox' or 'production')
            api_version: Value sent in the Square-Version header
            timeout: Transport timeout in seconds for each request
        """
        super().__init__("square")
        self.access_token = access_token
        self.environment = environment
        self.api_version = api_version
        self.timeout = timeout

        if environment == "production":
            self.base_url = "https://connect.squareup.com"
        else:
            self.base_url = "https://connect.squareupsandbox.com"

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.access_token}",
            "Square-Version": self.api_version,
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    async def list_locations(self) -> dict[str, Any]:
        """Fetch all locations via ``GET /v2/locations``.

        Returns:
            dict: Raw ListLocations payload
        """
        return await self._request("list_locations", "GET", "/v2/locations")

    async def search_catalog_objects(self, cursor: str | None = None) -> dict[str, Any]:
        """Fetch one page of items via ``POST /v2/catalog/search``.

        Args:
            cursor: Pagination cursor from the previous page

        Returns:
            dict: Raw SearchCatalogObjects page
        """
        body: dict[str, Any] = {
            "object_types": ["ITEM"],
            "include_related_objects": True,
        }
        if cursor:
            body["cursor"] = cursor

        return await self._request("search_catalog_objects", "POST", "/v2/catalog/search", body)

    async def _request(
        self,
        operation: str,
        method: str,
        path: str,
        body: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        url = f"{self.base_url}{path}"
        started = time.perf_counter()
        success = False

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                if method == "GET":
                    response = await client.get(url, headers=self._headers())
                else:
                    response = await client.post(url, headers=self._headers(), json=body)
                response.raise_for_status()
                payload = response.json()

            if not isinstance(payload, dict):
                raise UpstreamError(f"Square {operation} returned a non-object payload")

            success = True
            return payload

        except httpx.HTTPStatusError as e:
            logger.error(
                f"Square {operation} failed with status {e.response.status_code}: {e.response.text}"
            )
            raise UpstreamError(f"Square {operation} failed") from e
        except httpx.RequestError as e:
            logger.error(f"Square {operation} request error: {e}")
            raise UpstreamError(f"Square {operation} failed") from e
        except ValueError as e:
            # response.json() on a non-JSON body
            logger.error(f"Square {operation} returned invalid JSON: {e}")
            raise UpstreamError(f"Square {operation} returned invalid JSON") from e
        finally:
            record_upstream_api_call(operation, time.perf_counter() - started, success)
