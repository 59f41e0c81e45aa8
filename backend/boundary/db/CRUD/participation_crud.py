"""
Participation and invite CRUD operations.

Dependencies: sqlalchemy, backend.boundary.db.models
System role: Challenge membership persistence operations
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.boundary.db.CRUD.base_crud import BaseCRUD
from backend.boundary.db.models.participation_model import (
    ChallengeInviteModel,
    ParticipationModel,
)
from backend.boundary.db.models.user_model import UserModel


class ParticipationCRUD(BaseCRUD[ParticipationModel]):
    """
    CRUD operations for ParticipationModel.

    Extends BaseCRUD with (user, challenge) lookup and ranked listings.
    """

    def __init__(self) -> None:
        super().__init__(ParticipationModel)

    async def get_for(
        self,
        session: AsyncSession,
        user_id: UUID,
        challenge_id: UUID,
    ) -> ParticipationModel | None:
        return await self.find_one(
            session,
            ParticipationModel.user_id == user_id,
            ParticipationModel.challenge_id == challenge_id,
        )

    async def list_ranked(
        self,
        session: AsyncSession,
        challenge_id: UUID,
        limit: int | None = None,
        offset: int = 0,
    ) -> Sequence[ParticipationModel]:
        """
        Participations ordered by total points (highest first).

        Ties are broken by join time so ranks are stable.
        """
        return await self.find(
            session,
            ParticipationModel.challenge_id == challenge_id,
            order_by=[ParticipationModel.total_points.desc(), ParticipationModel.created_at],
            limit=limit,
            offset=offset,
        )

    async def count_for_challenge(self, session: AsyncSession, challenge_id: UUID) -> int:
        return await self.count(session, ParticipationModel.challenge_id == challenge_id)

    async def search_members(
        self,
        session: AsyncSession,
        challenge_id: UUID,
        search: str | None = None,
        limit: int = 20,
    ) -> Sequence[UserModel]:
        """Participants whose name or username contains `search`."""
        stmt = (
            select(UserModel)
            .join(ParticipationModel, ParticipationModel.user_id == UserModel.id)
            .where(ParticipationModel.challenge_id == challenge_id)
        )
        if search:
            pattern = f"%{search.strip().lower()}%"
            stmt = stmt.where(
                or_(
                    func.lower(UserModel.name).like(pattern),
                    func.lower(UserModel.username).like(pattern),
                )
            )
        stmt = stmt.order_by(UserModel.name).limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()


class ChallengeInviteCRUD(BaseCRUD[ChallengeInviteModel]):
    """CRUD operations for personal invite codes."""

    def __init__(self) -> None:
        super().__init__(ChallengeInviteModel)

    async def get_for(
        self,
        session: AsyncSession,
        challenge_id: UUID,
        user_id: UUID,
    ) -> ChallengeInviteModel | None:
        return await self.find_one(
            session,
            ChallengeInviteModel.challenge_id == challenge_id,
            ChallengeInviteModel.user_id == user_id,
        )

    async def get_by_code(self, session: AsyncSession, code: str) -> ChallengeInviteModel | None:
        return await self.find_one(session, ChallengeInviteModel.code == code)


participation_crud = ParticipationCRUD()
challenge_invite_crud = ChallengeInviteCRUD()
