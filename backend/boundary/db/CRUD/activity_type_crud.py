"""
Activity type CRUD operations.

Dependencies: sqlalchemy, backend.boundary.db.models
System role: Activity type persistence operations
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.boundary.db.CRUD.base_crud import BaseCRUD
from backend.boundary.db.models.activity_type_model import ActivityTypeModel


class ActivityTypeCRUD(BaseCRUD[ActivityTypeModel]):
    """CRUD operations for ActivityTypeModel scoped to a challenge."""

    def __init__(self) -> None:
        super().__init__(ActivityTypeModel)

    async def list_for_challenge(
        self,
        session: AsyncSession,
        challenge_id: UUID,
    ) -> Sequence[ActivityTypeModel]:
        """
        Retrieve a challenge's activity types in display order.

        Types without a display_order sort after ordered ones; ties fall
        back to creation time.
        """
        stmt = (
            select(ActivityTypeModel)
            .where(ActivityTypeModel.challenge_id == challenge_id)
            .order_by(
                ActivityTypeModel.display_order.is_(None),
                ActivityTypeModel.display_order,
                ActivityTypeModel.created_at,
            )
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def get_by_name(
        self,
        session: AsyncSession,
        challenge_id: UUID,
        name: str,
    ) -> ActivityTypeModel | None:
        return await self.find_one(
            session,
            ActivityTypeModel.challenge_id == challenge_id,
            ActivityTypeModel.name == name,
        )


activity_type_crud = ActivityTypeCRUD()
