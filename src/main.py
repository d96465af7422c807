"""Main application entry point for the menu catalog service.

This module provides the FastAPI application factory and configuration
for running the service locally or in production.
"""

import logging
import os

from fastapi import FastAPI

from menu_catalog_service.config import ServiceConfig
from menu_catalog_service.handlers.api_handler import create_app
from menu_catalog_service.observability import configure_logging, setup_observability
from menu_catalog_service.services.catalog_service import CatalogService

logger = logging.getLogger(__name__)


def create_application(config: ServiceConfig | None = None) -> FastAPI:
    """Create and configure the FastAPI application with all dependencies.

    This factory function:
    1. Loads and validates configuration
    2. Configures logging
    3. Wires the Square adapter, catalog client and cache into the catalog service
    4. Creates the FastAPI app
    5. Sets up observability

    Args:
        config: Configuration to use; loaded from the environment when omitted

    Returns:
        Configured FastAPI application instance

    Raises:
        pydantic.ValidationError: If the environment holds invalid configuration
    """
    if config is None:
        config = ServiceConfig.from_env()

    configure_logging(config.log_level)
    logger.info("Initializing menu catalog service...")

    catalog_service = CatalogService.from_config(config)
    logger.info(
        f"Catalog service configured - Square {config.square_environment}, "
        f"cache TTL {config.cache_ttl}s, max {config.cache_max_size} entries"
    )

    app = create_app(
        catalog_service=catalog_service,
        square_environment=config.square_environment,
        cors_origin=config.cors_origin,
        rate_limit=config.rate_limit,
        api_keys=config.admin_api_keys,
    )

    setup_observability(app)

    logger.info(f"CORS origin: {config.cors_origin}")
    logger.info("Menu catalog service initialized successfully")

    return app


# Create the FastAPI application instance (only when not in test mode)
# This prevents the app from being created during test collection
if os.getenv("ENVIRONMENT") != "test":  # noqa: SIM108
    app = create_application()
else:
    # Create a placeholder app for test imports
    app = FastAPI()


if __name__ == "__main__":
    """Run the application with uvicorn when executed directly."""
    import uvicorn

    config = ServiceConfig.from_env()

    logger.info(f"Starting development server on {config.host}:{config.port}")
    logger.info(f"API documentation available at http://{config.host}:{config.port}/docs")

    uvicorn.run(
        "main:app",
        host=config.host,
        port=config.port,
        reload=True,
        log_level=config.log_level.replace("warn", "warning"),
    )
