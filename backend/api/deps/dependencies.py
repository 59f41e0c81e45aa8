"""
Dependency injection container.

Factory functions for FastAPI dependencies: per-request services bound to
the request's database session, the cached S3 media client and bearer
token authentication.

Dependencies: backend.configs, backend.application, backend.boundary
System role: DI container for service injection
"""

import logging
from functools import lru_cache
from typing import Any

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from backend.application.services import (
    AchievementService,
    ActivityService,
    ActivityTypeService,
    AdminService,
    CategoryService,
    ChallengeService,
    ForumService,
    LeaderboardService,
    MiniGameService,
    NotificationService,
    ParticipationService,
    SocialService,
    UserService,
)
from backend.boundary.aws.s3_client import S3MediaClient
from backend.boundary.db import get_async_db
from backend.boundary.db.models.user_model import UserModel
from backend.configs import Settings, get_settings
from backend.core.exceptions import NotAuthenticatedError
from backend.core.security import decode_access_token, get_bearer_token

logger = logging.getLogger(__name__)


class ServiceCache:
    """Container for cached service instances."""

    def __init__(self):
        self._media_client = None

    @property
    def media_client(self) -> S3MediaClient:
        """Get cached S3 media client."""
        if self._media_client is None:
            settings = get_settings()
            self._media_client = S3MediaClient(
                bucket=settings.s3_media.bucket,
                region=settings.s3_media.region,
                default_expiry=settings.s3_media.presigned_url_expiry,
            )
        return self._media_client

    def clear(self) -> None:
        """Clear all cached instances."""
        self._media_client = None


# Global service cache
_service_cache = ServiceCache()


def get_service_cache() -> ServiceCache:
    """Get service cache singleton."""
    return _service_cache


@lru_cache
def get_settings_dependency() -> Settings:
    """Get settings singleton."""
    return get_settings()


def get_media_client() -> S3MediaClient:
    """
    Get S3 media client for presigned URL generation.

    Returns:
        S3MediaClient: Client for the activity media bucket
    """
    return get_service_cache().media_client


def get_token_identity(authorization: str | None = Header(default=None)) -> dict[str, Any]:
    """
    Decode the bearer token without requiring an existing profile.

    Raises:
        HTTPException(401): Missing, expired or invalid token
    """
    token = get_bearer_token(authorization)
    if token is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        return decode_access_token(token)
    except NotAuthenticatedError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
            headers={"WWW-Authenticate": "Bearer"},
        )


def get_user_service(db: AsyncSession = Depends(get_async_db)) -> UserService:
    """
    Get user service instance.

    Args:
        db: Async database session (injected via Depends)

    Returns:
        UserService: User service instance
    """
    return UserService(db=db)


async def get_current_user(
    identity: dict[str, Any] = Depends(get_token_identity),
    user_service: UserService = Depends(get_user_service),
) -> UserModel:
    """
    Resolve the authenticated user from the token's email.

    Raises:
        HTTPException(401): Token is valid but no profile exists yet
    """
    user = await user_service.get_by_email(identity["sub"])
    if user is None:
        logger.info("Token for unknown user", extra={"email": identity["sub"]})
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def get_challenge_service(db: AsyncSession = Depends(get_async_db)) -> ChallengeService:
    return ChallengeService(db=db)


def get_category_service(db: AsyncSession = Depends(get_async_db)) -> CategoryService:
    return CategoryService(db=db)


def get_activity_type_service(db: AsyncSession = Depends(get_async_db)) -> ActivityTypeService:
    return ActivityTypeService(db=db)


def get_activity_service(
    db: AsyncSession = Depends(get_async_db),
    media_client: S3MediaClient = Depends(get_media_client),
) -> ActivityService:
    """
    Get activity service instance.

    Args:
        db: Async database session (injected)
        media_client: S3MediaClient for presigned view URLs (injected)

    Returns:
        ActivityService: Activity service instance
    """
    return ActivityService(db=db, media_client=media_client)


def get_social_service(db: AsyncSession = Depends(get_async_db)) -> SocialService:
    return SocialService(db=db)


def get_notification_service(db: AsyncSession = Depends(get_async_db)) -> NotificationService:
    return NotificationService(db=db)


def get_participation_service(db: AsyncSession = Depends(get_async_db)) -> ParticipationService:
    return ParticipationService(db=db)


def get_leaderboard_service(db: AsyncSession = Depends(get_async_db)) -> LeaderboardService:
    return LeaderboardService(db=db)


def get_admin_service(db: AsyncSession = Depends(get_async_db)) -> AdminService:
    return AdminService(db=db)


def get_achievement_service(db: AsyncSession = Depends(get_async_db)) -> AchievementService:
    return AchievementService(db=db)


def get_mini_game_service(db: AsyncSession = Depends(get_async_db)) -> MiniGameService:
    return MiniGameService(db=db)


def get_forum_service(db: AsyncSession = Depends(get_async_db)) -> ForumService:
    return ForumService(db=db)
