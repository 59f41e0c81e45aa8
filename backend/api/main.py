"""
FastAPI application factory.

Builds the March Fitness API: logging, CORS, correlation and access-log
middleware, and every router mounted under /api/v1.

Dependencies: fastapi, backend.api.routers, uvicorn
System role: API entry point with router assembly and server launch

Usage:
    uvicorn backend.api.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.api.deps.dependencies import get_service_cache
from backend.boundary.db.connection import get_async_engine
from backend.boundary.db.create_tables import create_all_tables
from backend.configs import get_settings
from backend.observability import configure_logging
from backend.observability.middleware import (
    CORRELATION_HEADER,
    CorrelationMiddleware,
    RequestLoggingMiddleware,
)
from .routers import (
    activities_router,
    activity_types_router,
    admin_router,
    categories_router,
    challenges_router,
    forum_router,
    health_router,
    mini_games_router,
    notifications_router,
    social_router,
    users_router,
)

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"

ROUTERS = (
    health_router,
    users_router,
    challenges_router,
    categories_router,
    activity_types_router,
    activities_router,
    social_router,
    notifications_router,
    admin_router,
    mini_games_router,
    forum_router,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging and schema on startup; release pools on shutdown."""
    configure_logging()
    settings = get_settings()
    logger.info(
        "Starting %s",
        settings.app_name,
        extra={"environment": settings.environment},
    )

    if settings.database.create_tables_on_startup:
        await create_all_tables()

    yield

    get_service_cache().clear()
    if get_async_engine.cache_info().currsize:
        await get_async_engine().dispose()
        get_async_engine.cache_clear()
    logger.info("Shutdown complete")


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        FastAPI: Application with middleware and all routers registered
    """
    settings = get_settings()
    app = FastAPI(
        title=settings.app_name,
        description="Fitness challenge backend: activity scoring, streaks, leaderboards and social feed",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[CORRELATION_HEADER],
    )
    # Added last so it wraps the access log and every log line carries the ID.
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationMiddleware)

    for router in ROUTERS:
        app.include_router(router, prefix=API_PREFIX)

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run("backend.api.main:app", host="0.0.0.0", port=8000)
