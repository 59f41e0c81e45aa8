"""
Forum CRUD operations.

Dependencies: sqlalchemy, backend.boundary.db.models
System role: Forum persistence operations
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.boundary.db.CRUD.base_crud import BaseCRUD
from backend.boundary.db.models.forum_model import ForumPostModel, ForumPostUpvoteModel

_not_deleted = ForumPostModel.deleted_at.is_(None)


class ForumPostCRUD(BaseCRUD[ForumPostModel]):
    """
    CRUD operations for ForumPostModel.

    Listing queries skip soft-deleted posts.
    """

    def __init__(self) -> None:
        super().__init__(ForumPostModel)

    async def get_active(self, session: AsyncSession, id: UUID) -> ForumPostModel | None:
        stmt = select(ForumPostModel).where(ForumPostModel.id == id, _not_deleted)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_top_level(
        self,
        session: AsyncSession,
        challenge_id: UUID,
        limit: int = 50,
        offset: int = 0,
    ) -> Sequence[ForumPostModel]:
        """Top-level posts, pinned first, then newest."""
        stmt = (
            select(ForumPostModel)
            .where(
                ForumPostModel.challenge_id == challenge_id,
                ForumPostModel.parent_post_id.is_(None),
                _not_deleted,
            )
            .order_by(ForumPostModel.is_pinned.desc(), ForumPostModel.created_at.desc())
            .offset(offset)
            .limit(limit)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def list_replies(
        self,
        session: AsyncSession,
        parent_post_id: UUID,
    ) -> Sequence[ForumPostModel]:
        stmt = (
            select(ForumPostModel)
            .where(ForumPostModel.parent_post_id == parent_post_id, _not_deleted)
            .order_by(ForumPostModel.created_at)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def reply_counts(
        self,
        session: AsyncSession,
        post_ids: Sequence[UUID],
    ) -> dict[UUID, int]:
        if not post_ids:
            return {}
        stmt = (
            select(ForumPostModel.parent_post_id, func.count(ForumPostModel.id))
            .where(ForumPostModel.parent_post_id.in_(post_ids), _not_deleted)
            .group_by(ForumPostModel.parent_post_id)
        )
        result = await session.execute(stmt)
        return {post_id: count for post_id, count in result.all()}


class ForumPostUpvoteCRUD(BaseCRUD[ForumPostUpvoteModel]):
    def __init__(self) -> None:
        super().__init__(ForumPostUpvoteModel)

    async def get_for(
        self,
        session: AsyncSession,
        post_id: UUID,
        user_id: UUID,
    ) -> ForumPostUpvoteModel | None:
        stmt = select(ForumPostUpvoteModel).where(
            ForumPostUpvoteModel.post_id == post_id,
            ForumPostUpvoteModel.user_id == user_id,
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def counts(self, session: AsyncSession, post_ids: Sequence[UUID]) -> dict[UUID, int]:
        if not post_ids:
            return {}
        stmt = (
            select(ForumPostUpvoteModel.post_id, func.count(ForumPostUpvoteModel.id))
            .where(ForumPostUpvoteModel.post_id.in_(post_ids))
            .group_by(ForumPostUpvoteModel.post_id)
        )
        result = await session.execute(stmt)
        return {post_id: count for post_id, count in result.all()}

    async def upvoted_post_ids(
        self,
        session: AsyncSession,
        user_id: UUID,
        post_ids: Sequence[UUID],
    ) -> set[UUID]:
        if not post_ids:
            return set()
        stmt = select(ForumPostUpvoteModel.post_id).where(
            ForumPostUpvoteModel.user_id == user_id,
            ForumPostUpvoteModel.post_id.in_(post_ids),
        )
        result = await session.execute(stmt)
        return set(result.scalars().all())


forum_post_crud = ForumPostCRUD()
forum_post_upvote_crud = ForumPostUpvoteCRUD()
