"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.
Provides dependency injection factory for FastAPI.

Dependencies: All config modules
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from pydantic import Field, model_validator

from backend.configs.auth import DEV_SECRET_KEY, AuthSettings
from backend.configs.base import BaseSettings
from backend.configs.database import DatabaseSettings
from backend.configs.observability import ObservabilitySettings
from backend.configs.s3_media import S3MediaSettings


class Settings(BaseSettings):
    """Unified application settings aggregating all config modules."""

    app_name: str = Field(default="March Fitness API", description="OpenAPI title")
    cors_origins: list[str] = Field(
        default=["*"],
        description="Origins allowed by the CORS middleware",
    )

    # Aggregated settings
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    auth: AuthSettings = Field(default_factory=AuthSettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)
    s3_media: S3MediaSettings = Field(default_factory=S3MediaSettings)

    @model_validator(mode="after")
    def _production_requires_real_secrets(self) -> "Settings":
        if self.is_production:
            if self.auth.secret_key == DEV_SECRET_KEY:
                raise ValueError("AUTH_SECRET_KEY must be set in production")
            if "*" in self.cors_origins:
                raise ValueError("CORS_ORIGINS must list explicit origins in production")
        return self


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Returns Settings instance, cached for dependency injection.
    Environment variables loaded once at startup.

    Returns:
        Settings: Application settings instance

    Raises:
        pydantic.ValidationError: Production environment with development secrets

    Usage:
        from backend.configs import get_settings
        settings = get_settings()
    """
    return Settings()
