"""API routers."""

from .activities import router as activities_router  # activities/ package
from .activity_types import router as activity_types_router
from .admin import router as admin_router
from .categories import router as categories_router
from .challenges import router as challenges_router  # challenges/ package
from .forum import router as forum_router
from .health import router as health_router
from .mini_games import router as mini_games_router
from .notifications import router as notifications_router
from .social import router as social_router
from .users import router as users_router

__all__ = [
    "activities_router",
    "activity_types_router",
    "admin_router",
    "categories_router",
    "challenges_router",
    "forum_router",
    "health_router",
    "mini_games_router",
    "notifications_router",
    "social_router",
    "users_router",
]
