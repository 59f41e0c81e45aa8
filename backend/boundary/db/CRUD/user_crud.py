"""
User CRUD operations.

Dependencies: sqlalchemy, backend.boundary.db.models
System role: User persistence operations
"""

from typing import Sequence

from sqlalchemy import func, or_
from sqlalchemy.ext.asyncio import AsyncSession

from backend.boundary.db.CRUD.base_crud import BaseCRUD
from backend.boundary.db.models.user_model import UserModel


class UserCRUD(BaseCRUD[UserModel]):
    """CRUD operations for UserModel with lookup by email and username."""

    def __init__(self) -> None:
        super().__init__(UserModel)

    async def get_by_email(self, session: AsyncSession, email: str) -> UserModel | None:
        return await self.find_one(session, func.lower(UserModel.email) == email.strip().lower())

    async def get_by_username(self, session: AsyncSession, username: str) -> UserModel | None:
        return await self.find_one(session, UserModel.username == username)

    async def search(
        self,
        session: AsyncSession,
        search: str | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Sequence[UserModel]:
        """
        List users, optionally filtered by name, username or email.

        Args:
            session: Async database session
            search: Case-insensitive substring
            limit: Maximum users to return
            offset: Users to skip

        Returns:
            Users ordered by creation time
        """
        criteria = []
        if search:
            pattern = f"%{search.strip().lower()}%"
            criteria.append(
                or_(
                    func.lower(UserModel.name).like(pattern),
                    func.lower(UserModel.username).like(pattern),
                    func.lower(UserModel.email).like(pattern),
                )
            )
        return await self.find(
            session,
            *criteria,
            order_by=[UserModel.created_at],
            limit=limit,
            offset=offset,
        )


user_crud = UserCRUD()
