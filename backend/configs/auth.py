"""
Authentication configuration settings.

Shared-secret JWT settings for validating tokens issued by the
external identity provider.

Dependencies: pydantic, pydantic_settings
System role: Token validation configuration
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from backend.configs.base import BaseSettings

DEV_SECRET_KEY = "dev-secret-change-me-before-deploying-anywhere"


class AuthSettings(BaseSettings):
    """JWT bearer token configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="AUTH_",
        case_sensitive=False,
        extra="ignore",
    )

    secret_key: str = Field(
        default=DEV_SECRET_KEY,
        description="HMAC secret shared with the identity provider",
    )
    algorithm: str = Field(default="HS256", description="JWT signing algorithm")
    token_ttl_seconds: int = Field(
        default=60 * 60 * 24 * 7,
        description="Lifetime of locally issued development tokens",
    )
    issuer: str | None = Field(
        default=None,
        description="Expected 'iss' claim (not checked when unset)",
    )
