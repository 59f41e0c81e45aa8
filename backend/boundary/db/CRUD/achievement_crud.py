"""
Achievement CRUD operations.

Dependencies: sqlalchemy, backend.boundary.db.models
System role: Achievement persistence operations
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.boundary.db.CRUD.base_crud import BaseCRUD
from backend.boundary.db.models.achievement_model import (
    AchievementModel,
    UserAchievementModel,
)


class AchievementCRUD(BaseCRUD[AchievementModel]):
    def __init__(self) -> None:
        super().__init__(AchievementModel)

    async def list_for_challenge(
        self,
        session: AsyncSession,
        challenge_id: UUID,
    ) -> Sequence[AchievementModel]:
        stmt = (
            select(AchievementModel)
            .where(AchievementModel.challenge_id == challenge_id)
            .order_by(AchievementModel.created_at)
        )
        result = await session.execute(stmt)
        return result.scalars().all()


class UserAchievementCRUD(BaseCRUD[UserAchievementModel]):
    """CRUD operations for earned achievements."""

    def __init__(self) -> None:
        super().__init__(UserAchievementModel)

    async def list_for_user(
        self,
        session: AsyncSession,
        user_id: UUID,
        challenge_id: UUID,
    ) -> Sequence[UserAchievementModel]:
        """A user's awards in a challenge, most recent first."""
        stmt = (
            select(UserAchievementModel)
            .where(
                UserAchievementModel.user_id == user_id,
                UserAchievementModel.challenge_id == challenge_id,
            )
            .order_by(UserAchievementModel.earned_at.desc())
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def delete_for_achievement(self, session: AsyncSession, achievement_id: UUID) -> int:
        stmt = delete(UserAchievementModel).where(
            UserAchievementModel.achievement_id == achievement_id
        )
        result = await session.execute(stmt)
        return result.rowcount


achievement_crud = AchievementCRUD()
user_achievement_crud = UserAchievementCRUD()
