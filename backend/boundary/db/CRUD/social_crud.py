"""
Social CRUD operations: likes, comments, follows and notifications.

Dependencies: sqlalchemy, backend.boundary.db.models
System role: Feed interaction persistence operations
"""

from datetime import datetime
from typing import Sequence
from uuid import UUID

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from backend.boundary.db.CRUD.base_crud import BaseCRUD
from backend.boundary.db.models.social_model import (
    CommentModel,
    FollowModel,
    LikeModel,
    NotificationModel,
)


async def _count_by_activity(
    session: AsyncSession,
    model: type[LikeModel] | type[CommentModel],
    activity_ids: Sequence[UUID],
) -> dict[UUID, int]:
    if not activity_ids:
        return {}
    stmt = (
        select(model.activity_id, func.count(model.id))
        .where(model.activity_id.in_(activity_ids))
        .group_by(model.activity_id)
    )
    result = await session.execute(stmt)
    return {activity_id: count for activity_id, count in result.all()}


class LikeCRUD(BaseCRUD[LikeModel]):
    def __init__(self) -> None:
        super().__init__(LikeModel)

    async def get_for(
        self,
        session: AsyncSession,
        activity_id: UUID,
        user_id: UUID,
    ) -> LikeModel | None:
        stmt = select(LikeModel).where(
            LikeModel.activity_id == activity_id,
            LikeModel.user_id == user_id,
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def count_by_activity(
        self,
        session: AsyncSession,
        activity_ids: Sequence[UUID],
    ) -> dict[UUID, int]:
        return await _count_by_activity(session, LikeModel, activity_ids)

    async def liked_activity_ids(
        self,
        session: AsyncSession,
        user_id: UUID,
        activity_ids: Sequence[UUID],
    ) -> set[UUID]:
        if not activity_ids:
            return set()
        stmt = select(LikeModel.activity_id).where(
            LikeModel.user_id == user_id,
            LikeModel.activity_id.in_(activity_ids),
        )
        result = await session.execute(stmt)
        return set(result.scalars().all())

    async def delete_for_activity(self, session: AsyncSession, activity_id: UUID) -> int:
        stmt = delete(LikeModel).where(LikeModel.activity_id == activity_id)
        result = await session.execute(stmt)
        return result.rowcount


class CommentCRUD(BaseCRUD[CommentModel]):
    def __init__(self) -> None:
        super().__init__(CommentModel)

    async def list_for_activity(
        self,
        session: AsyncSession,
        activity_id: UUID,
    ) -> Sequence[CommentModel]:
        stmt = (
            select(CommentModel)
            .where(CommentModel.activity_id == activity_id)
            .order_by(CommentModel.created_at)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def count_by_activity(
        self,
        session: AsyncSession,
        activity_ids: Sequence[UUID],
    ) -> dict[UUID, int]:
        return await _count_by_activity(session, CommentModel, activity_ids)

    async def delete_for_activity(self, session: AsyncSession, activity_id: UUID) -> int:
        stmt = delete(CommentModel).where(CommentModel.activity_id == activity_id)
        result = await session.execute(stmt)
        return result.rowcount


class FollowCRUD(BaseCRUD[FollowModel]):
    """
    CRUD operations for the follow graph.

    Edges are directed: follower_id follows following_id.
    """

    def __init__(self) -> None:
        super().__init__(FollowModel)

    async def get_for(
        self,
        session: AsyncSession,
        follower_id: UUID,
        following_id: UUID,
    ) -> FollowModel | None:
        return await self.find_one(
            session,
            FollowModel.follower_id == follower_id,
            FollowModel.following_id == following_id,
        )

    async def following_ids(self, session: AsyncSession, user_id: UUID) -> list[UUID]:
        stmt = select(FollowModel.following_id).where(FollowModel.follower_id == user_id)
        result = await session.execute(stmt)
        return list(result.scalars().all())

    async def follower_ids(self, session: AsyncSession, user_id: UUID) -> list[UUID]:
        stmt = select(FollowModel.follower_id).where(FollowModel.following_id == user_id)
        result = await session.execute(stmt)
        return list(result.scalars().all())

    async def counts(self, session: AsyncSession, user_id: UUID) -> tuple[int, int]:
        """Return (followers, following) for a user."""
        followers = await self.count(session, FollowModel.following_id == user_id)
        following = await self.count(session, FollowModel.follower_id == user_id)
        return followers, following


class NotificationCRUD(BaseCRUD[NotificationModel]):
    def __init__(self) -> None:
        super().__init__(NotificationModel)

    async def list_for_user(
        self,
        session: AsyncSession,
        user_id: UUID,
        limit: int = 50,
        unread_only: bool = False,
    ) -> Sequence[NotificationModel]:
        stmt = select(NotificationModel).where(NotificationModel.user_id == user_id)
        if unread_only:
            stmt = stmt.where(NotificationModel.read_at.is_(None))
        stmt = stmt.order_by(NotificationModel.created_at.desc()).limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def unread_count(self, session: AsyncSession, user_id: UUID) -> int:
        return await self.count(
            session,
            NotificationModel.user_id == user_id,
            NotificationModel.read_at.is_(None),
        )

    async def mark_all_read(self, session: AsyncSession, user_id: UUID, when: datetime) -> int:
        stmt = (
            update(NotificationModel)
            .where(
                NotificationModel.user_id == user_id,
                NotificationModel.read_at.is_(None),
            )
            .values(read_at=when)
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        return result.rowcount


like_crud = LikeCRUD()
comment_crud = CommentCRUD()
follow_crud = FollowCRUD()
notification_crud = NotificationCRUD()
