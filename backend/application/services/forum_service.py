"""
Forum service orchestrator.

Threaded challenge discussion: top-level posts with replies, upvotes,
pinning, soft deletion and @mention notifications.

Dependencies: backend.boundary.db.CRUD, backend.core.mentions, NotificationService
System role: Forum use case orchestration
"""

import logging
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from backend.application.services.notification_service import NotificationService, NotificationType
from backend.application.services.service_helpers import (
    is_challenge_admin,
    is_global_admin,
    require_challenge,
    require_challenge_admin,
    user_summary,
)
from backend.boundary.db.CRUD.forum_crud import forum_post_crud, forum_post_upvote_crud
from backend.boundary.db.CRUD.participation_crud import participation_crud
from backend.boundary.db.CRUD.user_crud import user_crud
from backend.boundary.db.models.forum_model import ForumPostModel
from backend.boundary.db.models.user_model import UserModel
from backend.core.dates import utc_now
from backend.core.exceptions import (
    FitnessChallengeError,
    NotAuthorizedError,
    NotFoundError,
    ValidationError,
)
from backend.core.mentions import extract_mentioned_user_ids

logger = logging.getLogger(__name__)


def post_to_dict(post: ForumPostModel) -> dict[str, Any]:
    return {
        "id": post.id,
        "challenge_id": post.challenge_id,
        "user_id": post.user_id,
        "parent_post_id": post.parent_post_id,
        "title": post.title,
        "content": post.content,
        "is_pinned": post.is_pinned,
        "created_at": post.created_at,
        "updated_at": post.updated_at,
    }


def _parse_user_ids(raw_ids: list[str]) -> list[UUID]:
    ids = []
    for raw in raw_ids:
        try:
            ids.append(UUID(raw))
        except ValueError:
            logger.debug("Ignoring malformed mention id", extra={"mention_id": raw})
    return ids


class ForumService:
    """Forum service orchestrator."""

    def __init__(self, db: AsyncSession) -> None:
        """
        Initialize forum service with async database session.

        Args:
            db: Async SQLAlchemy session
        """
        self.db = db
        self.notifications = NotificationService(db)

    async def _require_post(self, post_id: UUID) -> ForumPostModel:
        post = await forum_post_crud.get_active(self.db, post_id)
        if post is None:
            raise NotFoundError("Post", post_id)
        return post

    async def _require_author_or_admin(self, user: UserModel, post: ForumPostModel) -> None:
        if post.user_id == user.id:
            return
        challenge = await require_challenge(self.db, post.challenge_id)
        if not await is_challenge_admin(self.db, user, challenge):
            raise NotAuthorizedError("Only the author or a challenge admin can change this post")

    async def create_post(
        self,
        user: UserModel,
        challenge_id: UUID,
        content: str,
        title: str | None = None,
        parent_post_id: UUID | None = None,
    ) -> dict:
        """
        Create a top-level post or a reply.

        Users mentioned in the content are notified.

        Raises:
            ValidationError: If content is empty or a top-level post has no title
            NotAuthorizedError: If the caller cannot post in the challenge
            NotFoundError: If the parent post is missing or in another challenge
        """
        content = (content or "").strip()
        if not content:
            raise ValidationError("Post content cannot be empty", field="content")

        challenge = await require_challenge(self.db, challenge_id)
        if not (is_global_admin(user) or challenge.creator_id == user.id):
            if await participation_crud.get_for(self.db, user.id, challenge_id) is None:
                raise NotAuthorizedError("Not participating in this challenge")

        if parent_post_id is not None:
            parent = await forum_post_crud.get_active(self.db, parent_post_id)
            if parent is None or parent.challenge_id != challenge_id:
                raise NotFoundError("Parent post", parent_post_id)
            title = None
        else:
            title = (title or "").strip()
            if not title:
                raise ValidationError("Title is required for new posts", field="title")

        try:
            post = await forum_post_crud.create(
                self.db,
                challenge_id=challenge_id,
                user_id=user.id,
                parent_post_id=parent_post_id,
                title=title,
                content=content,
            )
            await self._notify_mentions(user, post)
            logger.info(
                "Forum post created",
                extra={"post_id": str(post.id), "challenge_id": str(challenge_id)},
            )
            return {**post_to_dict(post), "user": user_summary(user)}
        except FitnessChallengeError:
            raise
        except Exception as e:
            logger.error(
                "Failed to create forum post",
                extra={"error": str(e), "challenge_id": str(challenge_id)},
            )
            raise

    async def _notify_mentions(self, author: UserModel, post: ForumPostModel) -> None:
        mentioned = _parse_user_ids(extract_mentioned_user_ids(post.content))
        existing = await user_crud.get_many(self.db, mentioned)
        for user_id in mentioned:
            if user_id == author.id or user_id not in existing:
                continue
            await self.notifications.notify(
                user_id,
                NotificationType.FORUM_MENTION,
                actor_id=author.id,
                data={
                    "post_id": post.id,
                    "challenge_id": post.challenge_id,
                    "parent_post_id": post.parent_post_id,
                },
            )

    async def update_post(
        self,
        user: UserModel,
        post_id: UUID,
        content: str | None = None,
        title: str | None = None,
    ) -> dict:
        post = await self._require_post(post_id)
        await self._require_author_or_admin(user, post)

        if content is not None:
            content = content.strip()
            if not content:
                raise ValidationError("Post content cannot be empty", field="content")
            post.content = content
        if title is not None and post.parent_post_id is None:
            title = title.strip()
            if not title:
                raise ValidationError("Title is required for new posts", field="title")
            post.title = title

        post = await forum_post_crud.save(self.db, post)
        logger.info("Forum post updated", extra={"post_id": str(post_id)})
        return post_to_dict(post)

    async def remove_post(self, user: UserModel, post_id: UUID) -> None:
        post = await self._require_post(post_id)
        await self._require_author_or_admin(user, post)
        post.deleted_at = utc_now()
        await forum_post_crud.save(self.db, post)
        logger.info("Forum post removed", extra={"post_id": str(post_id), "removed_by": str(user.id)})

    async def toggle_upvote(self, user: UserModel, post_id: UUID) -> dict:
        await self._require_post(post_id)
        existing = await forum_post_upvote_crud.get_for(self.db, post_id, user.id)
        if existing is not None:
            await forum_post_upvote_crud.delete_by_id(self.db, existing.id)
            upvoted = False
        else:
            await forum_post_upvote_crud.create(self.db, post_id=post_id, user_id=user.id)
            upvoted = True
        counts = await forum_post_upvote_crud.counts(self.db, [post_id])
        return {"upvoted": upvoted, "upvote_count": counts.get(post_id, 0)}

    async def toggle_pin(self, user: UserModel, post_id: UUID) -> dict:
        post = await self._require_post(post_id)
        await require_challenge_admin(self.db, user, post.challenge_id)
        if post.parent_post_id is not None:
            raise ValidationError("Only top-level posts can be pinned")
        post.is_pinned = not post.is_pinned
        post = await forum_post_crud.save(self.db, post)
        logger.info("Forum post pin toggled", extra={"post_id": str(post_id), "is_pinned": post.is_pinned})
        return {"is_pinned": post.is_pinned}

    async def _decorate(self, user: UserModel, posts: list[ForumPostModel], with_replies: bool = True) -> list[dict]:
        ids = [p.id for p in posts]
        authors = await user_crud.get_many(self.db, [p.user_id for p in posts])
        upvotes = await forum_post_upvote_crud.counts(self.db, ids)
        upvoted = await forum_post_upvote_crud.upvoted_post_ids(self.db, user.id, ids)
        replies = await forum_post_crud.reply_counts(self.db, ids) if with_replies else {}
        items = []
        for post in posts:
            item = {
                **post_to_dict(post),
                "user": user_summary(authors.get(post.user_id)),
                "upvote_count": upvotes.get(post.id, 0),
                "upvoted_by_user": post.id in upvoted,
            }
            if with_replies:
                item["reply_count"] = replies.get(post.id, 0)
            items.append(item)
        return items

    async def list_posts(
        self,
        user: UserModel,
        challenge_id: UUID,
        limit: int = 50,
        offset: int = 0,
    ) -> list[dict]:
        await require_challenge(self.db, challenge_id)
        posts = await forum_post_crud.list_top_level(self.db, challenge_id, limit=limit, offset=offset)
        return await self._decorate(user, list(posts))

    async def get_post(self, user: UserModel, post_id: UUID) -> dict:
        """A post with its live replies, oldest first."""
        post = await self._require_post(post_id)
        [item] = await self._decorate(user, [post])
        replies = await forum_post_crud.list_replies(self.db, post_id)
        item["replies"] = await self._decorate(user, list(replies), with_replies=False)
        return item
