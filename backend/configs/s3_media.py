"""
S3 activity media bucket configuration.

Settings for workout photo/video storage and presigned URL generation.

Dependencies: pydantic_settings
System role: S3 media bucket configuration
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from backend.configs.base import BaseSettings


class S3MediaSettings(BaseSettings):
    """Settings for S3 activity media bucket operations."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="S3_MEDIA_",
        case_sensitive=False,
        extra="ignore",
    )

    bucket: str = Field(
        default="march-fitness-dev-media",
        description="S3 bucket for activity photos and videos",
    )
    region: str = Field(
        default="us-east-1",
        description="AWS region for S3 bucket",
    )
    presigned_url_expiry: int = Field(
        default=3600,
        description="Presigned URL expiry in seconds (default 1 hour)",
    )
    allowed_extensions: list[str] = Field(
        default=["jpg", "jpeg", "png", "gif", "webp", "heic", "mp4", "mov"],
        description="File extensions accepted for activity media uploads",
    )
