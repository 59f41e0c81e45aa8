"""
Database configuration settings.

PostgreSQL connection and pool parameters for the async engine. A full
`POSTGRES_URL` (e.g. from a managed provider) wins over the individual
host/user/password fields.

Dependencies: pydantic, pydantic_settings, sqlalchemy
System role: Database connection configuration for ORM
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import SettingsConfigDict
from sqlalchemy.engine import URL, make_url

from backend.configs.base import BaseSettings

ASYNC_DRIVER = "postgresql+asyncpg"


class DatabaseSettings(BaseSettings):
    """PostgreSQL database configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="POSTGRES_",
        case_sensitive=False,
        extra="ignore",
    )

    host: str = Field(default="localhost", description="PostgreSQL host")
    port: int = Field(default=5432, description="PostgreSQL port")
    user: str = Field(default="postgres", description="PostgreSQL user")
    password: str = Field(default="postgres", description="PostgreSQL password")
    db: str = Field(default="marchfitness", description="PostgreSQL database name")
    url: str | None = Field(
        default=None,
        description="Full connection URL; postgres:// and postgresql:// are switched to asyncpg",
    )
    ssl: Literal["disable", "require"] = Field(
        default="disable",
        description="asyncpg ssl mode for managed Postgres",
    )

    pool_size: int = Field(default=10, ge=1, description="Connection pool size")
    max_overflow: int = Field(default=20, ge=0, description="Maximum overflow connections")
    pool_timeout: int = Field(default=30, ge=1, description="Seconds to wait for a pooled connection")
    pool_recycle: int = Field(default=1800, description="Recycle connections older than this many seconds")
    echo_sql: bool = Field(default=False, description="Echo SQL statements to logs")

    create_tables_on_startup: bool = Field(
        default=False,
        description="Run metadata.create_all during application startup",
    )

    @property
    def async_database_url(self) -> URL:
        """
        SQLAlchemy URL for the asyncpg driver.

        Returns:
            URL: Password-safe URL object (renders masked in logs)
        """
        if self.url:
            url = make_url(self.url)
            if url.drivername in ("postgres", "postgresql"):
                url = url.set(drivername=ASYNC_DRIVER)
        else:
            url = URL.create(
                ASYNC_DRIVER,
                username=self.user,
                password=self.password,
                host=self.host,
                port=self.port,
                database=self.db,
            )
        if self.ssl == "require":
            url = url.update_query_dict({"ssl": "require"})
        return url
