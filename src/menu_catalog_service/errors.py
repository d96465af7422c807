"""Error taxonomy for the menu catalog service.

Lower-level failures (httpx errors, malformed upstream payloads, cache
problems) are caught where they happen and re-raised as one of these types.
Only sanitized messages are carried across the HTTP boundary.
"""

from typing import Any


class CatalogServiceError(Exception):
    """Base class for all errors rendered into the error envelope."""

    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(CatalogServiceError):
    """Missing or invalid request parameters.

    Attributes:
        details: Field-level problems as ``{"field": ..., "message": ...}`` dicts
    """

    status_code = 400

    def __init__(self, details: list[dict[str, Any]], message: str = "Validation Error") -> None:
        super().__init__(message)
        self.details = details


class UpstreamError(CatalogServiceError):
    """The upstream catalog/location API failed or returned malformed data.

    Never rendered verbatim; the query service wraps it in a ServiceError.
    """

    status_code = 502


class ServiceError(CatalogServiceError):
    """Generic internal failure with a client-safe message."""


class NotFoundError(CatalogServiceError):
    """Unmatched route or resource."""

    status_code = 404
