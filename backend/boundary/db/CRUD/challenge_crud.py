"""
Challenge and category CRUD operations.

Dependencies: sqlalchemy, backend.boundary.db.models
System role: Challenge configuration persistence operations
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.boundary.db.CRUD.base_crud import BaseCRUD
from backend.boundary.db.models.challenge_model import (
    CategoryModel,
    ChallengeModel,
    ChallengeVisibility,
)
from backend.boundary.db.models.participation_model import ParticipationModel


class ChallengeCRUD(BaseCRUD[ChallengeModel]):
    """
    CRUD operations for ChallengeModel.

    Extends BaseCRUD with public listing and membership-scoped queries.
    """

    def __init__(self) -> None:
        super().__init__(ChallengeModel)

    async def list_public(
        self,
        session: AsyncSession,
        limit: int = 50,
        offset: int = 0,
    ) -> Sequence[ChallengeModel]:
        """
        Retrieve public challenges, newest start date first.

        Args:
            session: Async database session
            limit: Maximum challenges to return
            offset: Challenges to skip

        Returns:
            Sequence of public ChallengeModels
        """
        stmt = (
            select(ChallengeModel)
            .where(ChallengeModel.visibility == ChallengeVisibility.PUBLIC)
            .order_by(ChallengeModel.start_date.desc(), ChallengeModel.created_at.desc())
            .offset(offset)
            .limit(limit)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def list_for_user(
        self,
        session: AsyncSession,
        user_id: UUID,
    ) -> Sequence[ChallengeModel]:
        """Challenges the user participates in, newest start date first."""
        stmt = (
            select(ChallengeModel)
            .join(ParticipationModel, ParticipationModel.challenge_id == ChallengeModel.id)
            .where(ParticipationModel.user_id == user_id)
            .order_by(ChallengeModel.start_date.desc())
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def participant_counts(
        self,
        session: AsyncSession,
        challenge_ids: Sequence[UUID],
    ) -> dict[UUID, int]:
        if not challenge_ids:
            return {}
        stmt = (
            select(ParticipationModel.challenge_id, func.count(ParticipationModel.id))
            .where(ParticipationModel.challenge_id.in_(challenge_ids))
            .group_by(ParticipationModel.challenge_id)
        )
        result = await session.execute(stmt)
        return {challenge_id: count for challenge_id, count in result.all()}


class CategoryCRUD(BaseCRUD[CategoryModel]):
    """CRUD operations for global categories."""

    def __init__(self) -> None:
        super().__init__(CategoryModel)

    async def get_by_name(self, session: AsyncSession, name: str) -> CategoryModel | None:
        stmt = select(CategoryModel).where(func.lower(CategoryModel.name) == name.strip().lower())
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_all(self, session: AsyncSession) -> Sequence[CategoryModel]:
        stmt = select(CategoryModel).order_by(CategoryModel.name)
        result = await session.execute(stmt)
        return result.scalars().all()


challenge_crud = ChallengeCRUD()
category_crud = CategoryCRUD()
