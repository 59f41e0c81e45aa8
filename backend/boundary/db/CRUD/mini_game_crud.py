"""
Mini-game CRUD operations.

Dependencies: sqlalchemy, backend.boundary.db.models
System role: Mini-game persistence operations
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.boundary.db.CRUD.base_crud import BaseCRUD
from backend.boundary.db.models.mini_game_model import (
    MiniGameModel,
    MiniGameParticipantModel,
    MiniGameStatus,
)


class MiniGameCRUD(BaseCRUD[MiniGameModel]):
    def __init__(self) -> None:
        super().__init__(MiniGameModel)

    async def list_for_challenge(
        self,
        session: AsyncSession,
        challenge_id: UUID,
        status: MiniGameStatus | None = None,
    ) -> Sequence[MiniGameModel]:
        """Mini-games of a challenge, latest start first."""
        stmt = select(MiniGameModel).where(MiniGameModel.challenge_id == challenge_id)
        if status is not None:
            stmt = stmt.where(MiniGameModel.status == status)
        stmt = stmt.order_by(MiniGameModel.starts_at.desc())
        result = await session.execute(stmt)
        return result.scalars().all()


class MiniGameParticipantCRUD(BaseCRUD[MiniGameParticipantModel]):
    """CRUD operations for mini-game participant slots."""

    def __init__(self) -> None:
        super().__init__(MiniGameParticipantModel)

    async def list_for_game(
        self,
        session: AsyncSession,
        mini_game_id: UUID,
    ) -> Sequence[MiniGameParticipantModel]:
        return await self.find(
            session,
            MiniGameParticipantModel.mini_game_id == mini_game_id,
            order_by=[MiniGameParticipantModel.created_at],
        )

    async def get_for(
        self,
        session: AsyncSession,
        mini_game_id: UUID,
        user_id: UUID,
    ) -> MiniGameParticipantModel | None:
        return await self.find_one(
            session,
            MiniGameParticipantModel.mini_game_id == mini_game_id,
            MiniGameParticipantModel.user_id == user_id,
        )

    async def delete_for_game(self, session: AsyncSession, mini_game_id: UUID) -> int:
        stmt = delete(MiniGameParticipantModel).where(
            MiniGameParticipantModel.mini_game_id == mini_game_id
        )
        result = await session.execute(stmt)
        return result.rowcount


mini_game_crud = MiniGameCRUD()
mini_game_participant_crud = MiniGameParticipantCRUD()
