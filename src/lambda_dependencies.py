"""Shared dependency factory for the Lambda handler.

Dependencies are created once per Lambda container and reused across warm
invocations, so the catalog cache survives between requests served by the
same container.
"""

import logging

from fastapi import FastAPI

from menu_catalog_service.config import ServiceConfig
from menu_catalog_service.handlers.api_handler import create_app
from menu_catalog_service.observability import configure_logging
from menu_catalog_service.services.catalog_service import CatalogService

logger = logging.getLogger(__name__)

# Module-level caches for Lambda container reuse
_config: ServiceConfig | None = None
_catalog_service: CatalogService | None = None
_fastapi_app: FastAPI | None = None


def get_config() -> ServiceConfig:
    """Load or retrieve cached configuration."""
    global _config

    if _config is None:
        _config = ServiceConfig.from_env()
    return _config


def get_catalog_service() -> CatalogService:
    """Create or retrieve the cached catalog service.

    Returns:
        CatalogService holding the container-wide cache
    """
    global _catalog_service

    if _catalog_service is not None:
        return _catalog_service

    _catalog_service = CatalogService.from_config(get_config())
    logger.info("Catalog service initialized")
    return _catalog_service


def get_fastapi_app() -> FastAPI:
    """Create or retrieve the cached FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    global _fastapi_app

    if _fastapi_app is not None:
        return _fastapi_app

    config = get_config()
    _fastapi_app = create_app(
        catalog_service=get_catalog_service(),
        square_environment=config.square_environment,
        cors_origin=config.cors_origin,
        rate_limit=config.rate_limit,
        api_keys=config.admin_api_keys,
    )

    logger.info("FastAPI application initialized")
    return _fastapi_app


def initialize_lambda_environment() -> None:
    """Configure logging during Lambda cold start."""
    configure_logging(get_config().log_level)
    logger.info("Lambda environment initialized")
