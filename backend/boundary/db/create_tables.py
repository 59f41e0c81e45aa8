"""
Database schema bootstrap.

Creates (or, with --reset, drops and recreates) every table registered on
Base.metadata. Used by the app lifespan when POSTGRES_CREATE_TABLES_ON_STARTUP
is set, and from the command line for local databases.

Dependencies: sqlalchemy, backend.configs
System role: Database schema initialization

Usage:
    python -m backend.boundary.db.create_tables [--reset]
"""

import argparse
import asyncio
import logging

from sqlalchemy.ext.asyncio import AsyncEngine

from backend.boundary.db.base import Base
from backend.boundary.db.connection import get_async_engine

# Import all models to register them with Base.metadata
import backend.boundary.db.models  # noqa: F401

logger = logging.getLogger(__name__)


async def create_all_tables(engine: AsyncEngine | None = None) -> None:
    """
    Issue CREATE TABLE for every model table that does not exist yet.

    Existing tables are left untouched, so this never migrates columns.
    """
    engine = engine or get_async_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables ensured", extra={"tables": sorted(Base.metadata.tables)})


async def drop_all_tables(engine: AsyncEngine | None = None) -> None:
    """Drop every model table. Irreversible; development databases only."""
    engine = engine or get_async_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    logger.warning("All database tables dropped")


async def _main(reset: bool) -> None:
    from backend.configs import get_settings

    if reset and get_settings().is_production:
        raise SystemExit("Refusing to drop tables in production")

    engine = get_async_engine()
    try:
        if reset:
            await drop_all_tables(engine)
        await create_all_tables(engine)
    finally:
        await engine.dispose()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create March Fitness database tables")
    parser.add_argument("--reset", action="store_true", help="drop all tables first")
    args = parser.parse_args()

    from backend.observability import configure_logging

    configure_logging()
    asyncio.run(_main(args.reset))
