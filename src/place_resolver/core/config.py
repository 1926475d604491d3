"""Application configuration via Pydantic Settings.

All configuration is loaded from environment variables following 12-factor principles.
"""

import re
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database
    database_url: str = Field(
        description="PostgreSQL+PostGIS async connection string",
    )
    database_schema: str | None = Field(
        default=None,
        description="PostgreSQL schema for isolated environments (e.g., pr_42)",
    )

    @field_validator("database_schema")
    @classmethod
    def validate_database_schema(cls, v: str | None) -> str | None:
        if v is None:
            return None
        if not re.match(r"^[a-z_][a-z0-9_]{0,62}$", v):
            msg = "Invalid database_schema: must match ^[a-z_][a-z0-9_]{0,62}$"
            raise ValueError(msg)
        return v

    # Google Maps Platform
    google_maps_api_key: str | None = Field(
        default=None,
        description="Google Maps API key used for Geocoding and Places requests",
    )
    google_maps_timeout: float = Field(
        default=10.0,
        description="Google Maps request timeout in seconds",
        gt=0,
    )

    # Location resolution
    resolver_track_coordinates: bool = Field(
        default=True,
        description="Forward-geocode addresses for an anchor coordinate and keep coordinates in the cache",
    )
    resolver_use_proximity_cache: bool = Field(
        default=True,
        description="Reuse cached places within 50 m of the anchor coordinate",
    )
    resolver_filter_nearby_results: bool = Field(
        default=True,
        description="Screen nearby-search results with the place classifier instead of taking the first",
    )
    resolver_search_mode: Literal["text", "nearby"] = Field(
        default="text",
        description="Places strategy used after the cache tiers miss",
    )

    # Batch enrichment
    enrich_batch_size: int = Field(
        default=50,
        description="Maximum addresses accepted per enrichment batch",
        gt=0,
    )
    enrich_batch_delay: float = Field(
        default=0.1,
        description="Delay in seconds between items of a sequential enrichment batch",
        ge=0,
    )

    # API usage audit
    api_audit_enabled: bool = Field(
        default=False,
        description="Persist an audit row for every upstream Google API call",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    log_dir: str | None = Field(
        default=None,
        description="Directory for log files (enables file logging with 24h rotation when set)",
    )

    # CORS
    cors_origins: str = Field(
        default="",
        description="Comma-separated list of allowed CORS origins (must be explicitly configured)",
    )
    cors_origin_regex: str = Field(
        default="",
        description="Regex pattern for allowed CORS origins",
    )

    # Environment
    environment: str = Field(
        default="production",
        description="Deployment environment name (e.g. production, dev, staging)",
    )

    # API
    api_v1_prefix: str = Field(
        default="/api/v1",
        description="API version prefix",
    )

    @property
    def cors_origin_list(self) -> list[str]:
        """Parse CORS origins string into a list."""
        if not self.cors_origins.strip():
            return []
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


def get_settings() -> Settings:
    """Create and return application settings."""
    return Settings()  # type: ignore[call-arg]
