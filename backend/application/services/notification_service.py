"""
Notification service orchestrator.

Creates in-app notifications for social and moderation events and
serves the recipient's inbox.

Dependencies: backend.boundary.db.CRUD
System role: Notification use case orchestration
"""

import logging
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from backend.application.services.service_helpers import user_summary
from backend.boundary.db.CRUD.social_crud import notification_crud
from backend.boundary.db.CRUD.user_crud import user_crud
from backend.boundary.db.models.social_model import NotificationModel
from backend.boundary.db.models.user_model import UserModel
from backend.core.dates import utc_now
from backend.core.exceptions import FitnessChallengeError, NotFoundError

logger = logging.getLogger(__name__)


class NotificationType:
    LIKE = "like"
    COMMENT = "comment"
    NEW_FOLLOWER = "new_follower"
    ADMIN_COMMENT = "admin_comment"
    ADMIN_EDIT = "admin_edit"
    FORUM_MENTION = "forum_mention"


def _jsonable(data: dict[str, Any]) -> dict[str, Any]:
    return {key: str(value) if isinstance(value, UUID) else value for key, value in data.items()}


class NotificationService:
    """Notification service orchestrator."""

    def __init__(self, db: AsyncSession) -> None:
        """
        Initialize notification service with async database session.

        Args:
            db: Async SQLAlchemy session
        """
        self.db = db

    async def notify(
        self,
        user_id: UUID,
        type: str,
        actor_id: UUID | None = None,
        data: dict[str, Any] | None = None,
    ) -> NotificationModel:
        """
        Record a notification for `user_id`.

        Args:
            user_id: Recipient
            type: Notification type (see NotificationType)
            actor_id: User whose action caused it
            data: Payload such as activity_id or post_id

        Returns:
            NotificationModel: Created notification
        """
        notification = await notification_crud.create(
            self.db,
            user_id=user_id,
            actor_id=actor_id,
            type=type,
            data=_jsonable(data or {}),
        )
        logger.debug(
            "Notification created",
            extra={"recipient_id": str(user_id), "notification_type": type},
        )
        return notification

    async def list_notifications(
        self,
        user: UserModel,
        limit: int = 50,
        unread_only: bool = False,
    ) -> list[dict]:
        """
        List the caller's notifications, newest first.

        Returns:
            list[dict]: Notifications with actor summaries
        """
        try:
            notifications = await notification_crud.list_for_user(
                self.db, user.id, limit=limit, unread_only=unread_only
            )
            actors = await user_crud.get_many(
                self.db, [n.actor_id for n in notifications if n.actor_id]
            )
            return [
                {
                    "id": n.id,
                    "type": n.type,
                    "data": n.data,
                    "actor": user_summary(actors.get(n.actor_id)),
                    "read_at": n.read_at,
                    "created_at": n.created_at,
                }
                for n in notifications
            ]
        except Exception as e:
            logger.error(
                "Failed to list notifications",
                extra={"error": str(e), "user_id": str(user.id)},
            )
            raise

    async def unread_count(self, user: UserModel) -> int:
        return await notification_crud.unread_count(self.db, user.id)

    async def mark_read(self, user: UserModel, notification_id: UUID) -> None:
        """
        Mark one of the caller's notifications read.

        Raises:
            NotFoundError: If missing or owned by someone else
        """
        try:
            notification = await notification_crud.get_by_id(self.db, notification_id)
            if notification is None or notification.user_id != user.id:
                raise NotFoundError("Notification", notification_id)
            if notification.read_at is None:
                notification.read_at = utc_now()
                await notification_crud.save(self.db, notification)
        except FitnessChallengeError:
            raise
        except Exception as e:
            logger.error(
                "Failed to mark notification read",
                extra={"error": str(e), "notification_id": str(notification_id)},
            )
            raise

    async def mark_all_read(self, user: UserModel) -> int:
        updated = await notification_crud.mark_all_read(self.db, user.id, utc_now())
        logger.info(
            "Notifications marked read",
            extra={"user_id": str(user.id), "count": updated},
        )
        return updated
