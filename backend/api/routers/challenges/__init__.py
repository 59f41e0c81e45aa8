"""
Challenges router package.

Exports a single router combining challenge configuration, membership
and standings endpoints under /challenges.
"""

from fastapi import APIRouter

from .challenges_router import router as challenges_router
from .membership_router import router as membership_router
from .standings_router import router as standings_router

router = APIRouter()
router.include_router(challenges_router)
router.include_router(membership_router)
router.include_router(standings_router)

__all__ = ["router"]
