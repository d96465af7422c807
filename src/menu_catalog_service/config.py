"""Service configuration loaded from environment variables."""

import logging
import os
from typing import Literal

from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)


class ServiceConfig(BaseModel):
    """Runtime configuration for the menu catalog service.

    Every field has a default except that an empty Square access token only
    produces a warning; upstream calls will fail until it is set.
    """

    port: int = Field(default=3001, gt=0, description="HTTP port")
    host: str = Field(default="0.0.0.0", description="Bind address for the dev server")
    environment: str = Field(default="development", description="Deployment environment name")

    square_access_token: str = Field(default="", description="Square API access token")
    square_environment: Literal["sandbox", "production"] = Field(default="sandbox")
    square_api_version: str = Field(default="2024-01-18", description="Square-Version header")

    cors_origin: str = Field(default="http://localhost:3000", description="Allowed CORS origin")
    rate_limit: str = Field(
        default="100 per 15 minutes", description="Per-client request limit for all routes"
    )
    log_level: Literal["error", "warn", "info", "debug"] = Field(default="info")

    cache_ttl: int = Field(default=300, gt=0, description="Default cache TTL in seconds")
    cache_max_size: int = Field(default=100, gt=0, description="Maximum cache entries")
    cache_check_period: int = Field(default=60, gt=0, description="Expired-entry sweep interval")

    upstream_max_pages: int = Field(default=100, gt=0, description="Catalog pagination ceiling")
    admin_api_keys: list[str] = Field(default_factory=list, description="Keys for /admin routes")

    @field_validator("square_environment", "log_level", mode="before")
    @classmethod
    def normalize_case(cls, v: str) -> str:
        """Accept enum values in any case."""
        return v.lower() if isinstance(v, str) else v

    @classmethod
    def from_env(cls) -> "ServiceConfig":
        """Build configuration from the process environment.

        Returns:
            Validated ServiceConfig

        Raises:
            pydantic.ValidationError: If any value is out of range or not a valid choice
        """
        api_keys_str = os.getenv("ADMIN_API_KEY", "")

        config = cls(
            port=os.getenv("PORT", "3001"),
            host=os.getenv("HOST", "0.0.0.0"),
            environment=os.getenv("ENVIRONMENT", "development"),
            square_access_token=os.getenv("SQUARE_ACCESS_TOKEN", ""),
            square_environment=os.getenv("SQUARE_ENVIRONMENT", "sandbox"),
            square_api_version=os.getenv("SQUARE_API_VERSION", "2024-01-18"),
            cors_origin=os.getenv("CORS_ORIGIN", "http://localhost:3000"),
            rate_limit=os.getenv("RATE_LIMIT", "100 per 15 minutes"),
            log_level=os.getenv("LOG_LEVEL", "info"),
            cache_ttl=os.getenv("CACHE_TTL", "300"),
            cache_max_size=os.getenv("CACHE_MAX_SIZE", "100"),
            cache_check_period=os.getenv("CACHE_CHECK_PERIOD", "60"),
            upstream_max_pages=os.getenv("UPSTREAM_MAX_PAGES", "100"),
            admin_api_keys=[key.strip() for key in api_keys_str.split(",") if key.strip()],
        )
        config.log_warnings()
        return config

    def log_warnings(self) -> None:
        """Log configuration conditions that are allowed but worth flagging."""
        if self.square_environment == "production":
            logger.warning("Running against the Square PRODUCTION environment")

        if not self.square_access_token:
            logger.warning("SQUARE_ACCESS_TOKEN not set - upstream API calls will fail")
