"""
Social service orchestrator.

Likes and comments on activities plus the follow graph. Every new
interaction aimed at someone else produces a notification.

Dependencies: backend.boundary.db.CRUD, NotificationService
System role: Social interaction use case orchestration
"""

import logging
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from backend.application.services.notification_service import NotificationService, NotificationType
from backend.application.services.service_helpers import user_summary
from backend.boundary.db.CRUD.activity_crud import activity_crud
from backend.boundary.db.CRUD.social_crud import comment_crud, follow_crud, like_crud
from backend.boundary.db.CRUD.user_crud import user_crud
from backend.boundary.db.models.activity_model import ActivityModel
from backend.boundary.db.models.social_model import CommentModel
from backend.boundary.db.models.user_model import UserModel
from backend.core.exceptions import FitnessChallengeError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def comment_to_dict(comment: CommentModel, author: UserModel | None) -> dict[str, Any]:
    return {
        "id": comment.id,
        "activity_id": comment.activity_id,
        "user_id": comment.user_id,
        "content": comment.content,
        "created_at": comment.created_at,
        "user": user_summary(author),
    }


class SocialService:
    """Social service orchestrator."""

    def __init__(self, db: AsyncSession) -> None:
        """
        Initialize social service with async database session.

        Args:
            db: Async SQLAlchemy session
        """
        self.db = db
        self.notifications = NotificationService(db)

    async def _require_activity(self, activity_id: UUID) -> ActivityModel:
        activity = await activity_crud.get_active(self.db, activity_id)
        if activity is None:
            raise NotFoundError("Activity", activity_id)
        return activity

    async def toggle_like(self, user: UserModel, activity_id: UUID) -> dict:
        """
        Like an activity, or remove the caller's existing like.

        Returns:
            dict: {"liked": bool} with the state after the toggle
        """
        activity = await self._require_activity(activity_id)
        existing = await like_crud.get_for(self.db, activity_id, user.id)
        if existing is not None:
            await like_crud.delete_by_id(self.db, existing.id)
            return {"liked": False}

        await like_crud.create(self.db, activity_id=activity_id, user_id=user.id)
        if activity.user_id != user.id:
            await self.notifications.notify(
                activity.user_id,
                NotificationType.LIKE,
                actor_id=user.id,
                data={"activity_id": activity_id},
            )
        return {"liked": True}

    async def create_comment(self, user: UserModel, activity_id: UUID, content: str) -> dict:
        content = (content or "").strip()
        if not content:
            raise ValidationError("Comment cannot be empty", field="content")
        activity = await self._require_activity(activity_id)

        try:
            comment = await comment_crud.create(
                self.db, activity_id=activity_id, user_id=user.id, content=content
            )
            if activity.user_id != user.id:
                await self.notifications.notify(
                    activity.user_id,
                    NotificationType.COMMENT,
                    actor_id=user.id,
                    data={"activity_id": activity_id, "comment_id": comment.id},
                )
            logger.info(
                "Comment created",
                extra={"comment_id": str(comment.id), "activity_id": str(activity_id)},
            )
            return comment_to_dict(comment, user)
        except Exception as e:
            logger.error(
                "Failed to create comment",
                extra={"error": str(e), "activity_id": str(activity_id)},
            )
            raise

    async def list_comments(self, activity_id: UUID) -> list[dict]:
        await self._require_activity(activity_id)
        comments = await comment_crud.list_for_activity(self.db, activity_id)
        authors = await user_crud.get_many(self.db, [c.user_id for c in comments])
        return [comment_to_dict(c, authors.get(c.user_id)) for c in comments]

    async def follow(self, user: UserModel, user_id: UUID) -> dict:
        """
        Follow another user.

        Returns:
            dict: {"following": True, "already_following": bool}

        Raises:
            ValidationError: If the caller tries to follow themselves
            NotFoundError: If the target user does not exist
        """
        if user_id == user.id:
            raise ValidationError("Cannot follow yourself", field="user_id")
        if not await user_crud.exists(self.db, user_id):
            raise NotFoundError("User", user_id, message="User not found")

        if await follow_crud.get_for(self.db, user.id, user_id) is not None:
            return {"following": True, "already_following": True}

        try:
            await follow_crud.create(self.db, follower_id=user.id, following_id=user_id)
            await self.notifications.notify(
                user_id, NotificationType.NEW_FOLLOWER, actor_id=user.id
            )
            logger.info(
                "User followed",
                extra={"follower_id": str(user.id), "following_id": str(user_id)},
            )
            return {"following": True, "already_following": False}
        except FitnessChallengeError:
            raise
        except Exception as e:
            logger.error(
                "Failed to follow user",
                extra={"error": str(e), "following_id": str(user_id)},
            )
            raise

    async def unfollow(self, user: UserModel, user_id: UUID) -> dict:
        existing = await follow_crud.get_for(self.db, user.id, user_id)
        if existing is not None:
            await follow_crud.delete_by_id(self.db, existing.id)
        return {"following": False}

    async def toggle_follow(self, user: UserModel, user_id: UUID) -> dict:
        if await follow_crud.get_for(self.db, user.id, user_id) is not None:
            return await self.unfollow(user, user_id)
        result = await self.follow(user, user_id)
        return {"following": result["following"]}

    async def is_following(self, user: UserModel, user_id: UUID) -> bool:
        return await follow_crud.get_for(self.db, user.id, user_id) is not None

    async def follow_counts(self, user_id: UUID) -> dict:
        followers, following = await follow_crud.counts(self.db, user_id)
        return {"followers": followers, "following": following}

    async def _summaries(self, user_ids: list[UUID]) -> list[dict]:
        users = await user_crud.get_many(self.db, user_ids)
        return [user_summary(users[uid]) for uid in user_ids if uid in users]

    async def list_followers(self, user_id: UUID) -> list[dict]:
        return await self._summaries(await follow_crud.follower_ids(self.db, user_id))

    async def list_following(self, user_id: UUID) -> list[dict]:
        return await self._summaries(await follow_crud.following_ids(self.db, user_id))
