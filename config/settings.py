"""
Application settings loaded from environment variables.

Uses pydantic-settings for validation and type safety.
Every value can be overridden through `.env` or the process environment.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from functools import lru_cache


class Settings(BaseSettings):
    """
    Application settings.

    All values loaded from .env file or environment variables.
    Validation happens automatically on startup.
    """

    model_config = SettingsConfigDict(
        env_file=(".env", "../.env"),  # Check current dir, then parent
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"  # Ignore extra env vars
    )

    # ===================
    # ZONES
    # ===================
    default_zone_radius_m: float = Field(
        default=300,
        gt=0,
        le=50000,
        description="Radius in meters given to new zones when none is provided"
    )
    max_search_results: int = Field(
        default=60,
        ge=1,
        le=200,
        description="Maximum zones created from a single place search"
    )

    # ===================
    # LOCATION GROUPING
    # ===================
    location_key_precision: int = Field(
        default=5,
        ge=1,
        le=8,
        description="Decimal places kept when rounding coordinates into a location key"
    )
    distance_group_size: int = Field(
        default=10,
        ge=1,
        le=500,
        description="Maximum items per distance group"
    )
    distance_group_min_m: float = Field(
        default=500,
        ge=0,
        le=100000,
        description="Minimum meters between members of the same distance group"
    )

    # ===================
    # REPORTS
    # ===================
    group_key_separator: str = Field(
        default=" | ",
        min_length=1,
        description="Separator between dimension values in a report group key"
    )
    unassigned_label: str = Field(
        default="Sin asignar",
        min_length=1,
        description="Group label used when a dimension has no value"
    )

    # ===================
    # APP SETTINGS
    # ===================
    environment: str = Field(
        default="development",
        pattern="^(development|staging|production)$",
        description="Application environment"
    )
    debug: bool = Field(
        default=True,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Logging level"
    )
    api_host: str = Field(
        default="0.0.0.0",
        description="API host"
    )
    api_port: int = Field(
        default=8000,
        ge=1000,
        le=65535,
        description="API port"
    )
    cors_origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:5173"],
        description="Frontends allowed to call the API (JSON list in env)"
    )

    # ===================
    # COMPUTED PROPERTIES
    # ===================
    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == "production"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload.

    Returns:
        Settings: Application settings

    Raises:
        ValidationError: If env vars are invalid
    """
    return Settings()


# For convenient imports: from config.settings import settings
settings = get_settings()
