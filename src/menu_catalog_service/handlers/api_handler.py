"""FastAPI application for the public menu API and admin cache endpoints."""

import logging
import time
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Header, Query, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.gzip import GZipMiddleware

from menu_catalog_service.auth.api_dependencies import get_api_key_from_header
from menu_catalog_service.auth.api_key_validator import APIKeyValidator
from menu_catalog_service.errors import (
    CatalogServiceError,
    NotFoundError,
    UpstreamError,
    ValidationError,
)
from menu_catalog_service.models.api_models import (
    CacheStatsResponse,
    CatalogEnvelope,
    CatalogMetadata,
    CategoriesEnvelope,
    ErrorResponse,
    FieldErrorDetail,
    HealthResponse,
    LocationsResponse,
    error_name,
)
from menu_catalog_service.services.catalog_service import CatalogService

logger = logging.getLogger(__name__)

SERVICE_NAME = "Menu Catalog API"
RATE_LIMIT_MESSAGE = "Too many requests from this IP, please try again later."
GZIP_MINIMUM_SIZE = 1000


def require_location_id(location_id: str | None) -> str:
    """Validate the ``location_id`` query parameter.

    Raises:
        ValidationError: If the parameter is missing or blank
    """
    if location_id is None or not location_id.strip():
        raise ValidationError(
            details=[{"field": "location_id", "message": "location_id is required"}]
        )
    return location_id


def error_response(
    status_code: int,
    message: str,
    details: list[FieldErrorDetail] | None = None,
) -> JSONResponse:
    """Render the error envelope."""
    body = ErrorResponse(error=error_name(status_code), message=message, details=details)
    return JSONResponse(status_code=status_code, content=body.to_content())


def create_app(
    catalog_service: CatalogService,
    square_environment: str = "sandbox",
    cors_origin: str = "http://localhost:3000",
    rate_limit: str = "100 per 15 minutes",
    api_keys: list[str] | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        catalog_service: Service answering location, catalog and category queries
        square_environment: Upstream environment reported by the health check
        cors_origin: Origin allowed to call the API from a browser
        rate_limit: Per-client limit applied to every route, e.g. "100 per 15 minutes"
        api_keys: Admin API keys; admin routes are only mounted when non-empty

    Returns:
        Configured FastAPI application
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        app.state.catalog_service.cache.start()
        yield
        await app.state.catalog_service.cache.stop()

    app = FastAPI(
        title="Menu Catalog API",
        description="Cached, normalized access to restaurant locations and menus",
        version="1.0.0",
        lifespan=lifespan,
    )

    # Store services in app state for access in route handlers
    app.state.catalog_service = catalog_service
    app.state.square_environment = square_environment
    # Keyed by client IP; counters live in this process only
    app.state.limiter = Limiter(key_func=get_remote_address, default_limits=[rate_limit])

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[cors_origin],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=GZIP_MINIMUM_SIZE)
    app.add_middleware(SlowAPIMiddleware)

    @app.middleware("http")
    async def log_requests(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        started = time.perf_counter()
        client = request.client.host if request.client else "-"
        logger.info(f"{request.method} {request.url.path} - {client}")

        response = await call_next(request)

        duration_ms = round((time.perf_counter() - started) * 1000)
        logger.info(f"{request.method} {request.url.path} - {response.status_code} - {duration_ms}ms")
        return response

    @app.exception_handler(CatalogServiceError)
    async def handle_service_error(request: Request, exc: CatalogServiceError) -> JSONResponse:
        details = None
        message = exc.message
        if isinstance(exc, ValidationError):
            details = [FieldErrorDetail(**detail) for detail in exc.details]
        elif isinstance(exc, UpstreamError):
            message = "External API Error"

        logger.error(
            f"Error {exc.status_code}: {message}",
            extra={"url": str(request.url), "method": request.method},
        )
        return error_response(exc.status_code, message, details)

    # SlowAPIMiddleware calls this handler without awaiting it
    @app.exception_handler(RateLimitExceeded)
    def handle_rate_limit(request: Request, exc: RateLimitExceeded) -> JSONResponse:
        logger.warning(f"Rate limit exceeded for {get_remote_address(request)}: {exc.detail}")
        return error_response(429, RATE_LIMIT_MESSAGE)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
        details = [
            FieldErrorDetail(
                field=".".join(str(part) for part in error["loc"][1:]) or str(error["loc"][0]),
                message=error["msg"],
            )
            for error in exc.errors()
        ]
        return error_response(400, "Validation Error", details)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        if exc.status_code == 404:
            not_found = NotFoundError(f"Route {request.url.path} not found")
            return error_response(not_found.status_code, not_found.message)
        return error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
        return error_response(500, "Internal Server Error")

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    @app.get("/api/health", response_model=HealthResponse, tags=["Health"])
    async def health_check() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(
            status="healthy",
            environment=app.state.square_environment,
            service=SERVICE_NAME,
        )

    @app.get("/api/locations", response_model=LocationsResponse, tags=["Locations"])
    async def list_locations() -> LocationsResponse:
        """List all active locations.

        Returns:
            Envelope with the locations and their count
        """
        locations = await app.state.catalog_service.get_locations()
        return LocationsResponse(data=locations, count=len(locations))

    @app.get(
        "/api/catalog",
        response_model=CatalogEnvelope,
        response_model_exclude_none=True,
        tags=["Catalog"],
    )
    async def get_catalog(location_id: str | None = Query(None)) -> CatalogEnvelope:
        """Get the menu for a location, grouped by category name.

        Args:
            location_id: The location to fetch the menu for

        Returns:
            Envelope with the grouped menu and summary counts
        """
        location_id = require_location_id(location_id)
        catalog = await app.state.catalog_service.get_catalog_items(location_id)

        return CatalogEnvelope(
            data=catalog,
            metadata=CatalogMetadata(
                location_id=location_id,
                total_categories=len(catalog),
                total_items=sum(len(menu_items) for menu_items in catalog.values()),
            ),
        )

    @app.get("/api/catalog/categories", response_model=CategoriesEnvelope, tags=["Catalog"])
    async def get_categories(location_id: str | None = Query(None)) -> CategoriesEnvelope:
        """Get categories with item counts for a location.

        Args:
            location_id: The location to summarize

        Returns:
            Envelope with the sorted categories and summary counts
        """
        location_id = require_location_id(location_id)
        categories = await app.state.catalog_service.get_categories(location_id)

        return CategoriesEnvelope(
            data=categories,
            metadata=CatalogMetadata(
                location_id=location_id,
                total_categories=len(categories),
                total_items=sum(category.item_count for category in categories),
            ),
        )

    if api_keys:
        app.state.api_key_validator = APIKeyValidator(api_keys=api_keys)

        def validate_api_key(x_api_key: str | None = Header(None)) -> str:
            """Dependency to validate API key."""
            return get_api_key_from_header(
                x_api_key=x_api_key, validator=app.state.api_key_validator
            )

        @app.get("/admin/cache/stats", response_model=CacheStatsResponse, tags=["Admin"])
        async def cache_stats(_api_key: str = Depends(validate_api_key)) -> CacheStatsResponse:
            """Report cache hit/miss/key counters."""
            stats = app.state.catalog_service.cache_stats()
            return CacheStatsResponse(
                keys=stats.keys,
                hits=stats.hits,
                misses=stats.misses,
                evictions=stats.evictions,
                max_entries=stats.max_entries,
            )

        @app.delete("/admin/cache", status_code=204, tags=["Admin"])
        async def clear_cache(_api_key: str = Depends(validate_api_key)) -> Response:
            """Drop every cached entry so the next request refetches from upstream."""
            logger.info("Cache clear requested via admin API")
            app.state.catalog_service.clear_cache()
            return Response(status_code=204)
    else:
        logger.warning("No admin API keys configured - admin endpoints disabled")

    return app
