"""Response envelope models for the public JSON API.

Every successful body carries ``success``/``data``/``timestamp``; every
failure carries ``error``/``message``/``timestamp`` and, for validation
failures only, ``details``.
"""

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field

from menu_catalog_service.models.menu_models import Category, Location, MenuItem

ERROR_NAMES = {
    400: "Bad Request",
    401: "Unauthorized",
    403: "Forbidden",
    404: "Not Found",
    405: "Method Not Allowed",
    422: "Unprocessable Entity",
    429: "Too Many Requests",
    500: "Internal Server Error",
    502: "Bad Gateway",
    503: "Service Unavailable",
}


def utc_timestamp() -> str:
    """Current UTC time as an ISO-8601 string with millisecond precision."""
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def error_name(status_code: int) -> str:
    """Map an HTTP status code to the error name used in the envelope."""
    return ERROR_NAMES.get(status_code, "Error")


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    timestamp: str = Field(default_factory=utc_timestamp)
    environment: str
    service: str


class CatalogMetadata(BaseModel):
    """Summary counts for a catalog or category listing."""

    location_id: str
    total_categories: int
    total_items: int


class LocationsResponse(BaseModel):
    """Envelope for the location listing."""

    success: bool = True
    data: list[Location]
    count: int
    timestamp: str = Field(default_factory=utc_timestamp)


class CatalogEnvelope(BaseModel):
    """Envelope for a catalog grouped by category name."""

    success: bool = True
    data: dict[str, list[MenuItem]]
    metadata: CatalogMetadata
    timestamp: str = Field(default_factory=utc_timestamp)


class CategoriesEnvelope(BaseModel):
    """Envelope for the category listing."""

    success: bool = True
    data: list[Category]
    metadata: CatalogMetadata
    timestamp: str = Field(default_factory=utc_timestamp)


class FieldErrorDetail(BaseModel):
    """A single field-level validation problem."""

    field: str
    message: str


class ErrorResponse(BaseModel):
    """Error envelope returned for every failed request."""

    error: str
    message: str
    timestamp: str = Field(default_factory=utc_timestamp)
    details: list[FieldErrorDetail] | None = None

    def to_content(self) -> dict[str, Any]:
        """Serialize for a JSONResponse, omitting ``details`` when absent."""
        return self.model_dump(exclude_none=True)


class CacheStatsResponse(BaseModel):
    """Admin view of cache statistics."""

    keys: int
    hits: int
    misses: int
    evictions: int
    max_entries: int
    timestamp: str = Field(default_factory=utc_timestamp)
