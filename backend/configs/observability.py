"""
Observability configuration settings.

Settings for request logging and slow-request reporting.

Dependencies: pydantic_settings
System role: Observability configuration for logging
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from backend.configs.base import BaseSettings


class ObservabilitySettings(BaseSettings):
    """Observability configuration for request logging."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="OBSERVABILITY_",
        case_sensitive=False,
        extra="ignore",
    )

    log_requests: bool = Field(
        default=True,
        description="Log every HTTP request and response",
    )
    slow_request_ms: float = Field(
        default=1000.0,
        description="Requests slower than this are logged at WARNING",
    )
    quiet_paths: list[str] = Field(
        default=["/api/v1/health"],
        description="Paths whose successful requests are logged at DEBUG (load balancer health checks)",
    )
