"""
Base CRUD operations for SQLAlchemy models.

Every model-specific CRUD class in this package subclasses BaseCRUD and
gets primary-key access plus filtered lookups (`find_one`, `find`,
`count`) that take plain SQLAlchemy criteria. Methods flush so generated
ids and defaults are visible; committing is left to the request session.

Dependencies: sqlalchemy, uuid
System role: Foundation for all database CRUD operations
"""

from typing import Any, Generic, Iterable, Sequence, TypeVar
from uuid import UUID

from sqlalchemy import ColumnElement, delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from backend.boundary.db.base import Base

ModelT = TypeVar("ModelT", bound=Base)


class BaseCRUD(Generic[ModelT]):
    """
    Generic persistence helper bound to one model class.

    Type Parameters:
        ModelT: SQLAlchemy model class inheriting from Base (with a UUID `id`)
    """

    def __init__(self, model: type[ModelT]) -> None:
        self.model = model

    # -- writes ------------------------------------------------------------

    async def create(self, session: AsyncSession, **values: Any) -> ModelT:
        """
        Insert a row and return it with id, timestamps and defaults loaded.

        Args:
            session: Async database session
            **values: Column values for the new row
        """
        return await self.save(session, self.model(**values))

    async def save(self, session: AsyncSession, instance: ModelT) -> ModelT:
        """
        Flush pending attribute changes on an instance and reload it.

        Args:
            session: Async database session
            instance: New or modified model instance

        Returns:
            The refreshed instance (server defaults and onupdate values loaded)
        """
        session.add(instance)
        await session.flush()
        await session.refresh(instance)
        return instance

    async def update_by_id(
        self,
        session: AsyncSession,
        id: UUID,
        **values: Any,
    ) -> ModelT | None:
        """Bulk-style UPDATE by primary key; None when no row matched."""
        stmt = (
            update(self.model)
            .where(self.model.id == id)
            .values(**values)
            .returning(self.model)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def delete_by_id(self, session: AsyncSession, id: UUID) -> bool:
        """
        Delete a row by primary key.

        Returns:
            True if a row was removed
        """
        result = await session.execute(delete(self.model).where(self.model.id == id))
        return result.rowcount > 0

    # -- reads -------------------------------------------------------------

    async def get_by_id(self, session: AsyncSession, id: UUID) -> ModelT | None:
        return await self.find_one(session, self.model.id == id)

    async def get_many(
        self,
        session: AsyncSession,
        ids: Iterable[UUID],
    ) -> dict[UUID, ModelT]:
        """
        Load several rows keyed by id.

        Duplicate ids are collapsed and missing ids are simply absent from
        the result, so callers can look up authors, types and the like for
        a page of rows in one query.
        """
        wanted = set(ids)
        if not wanted:
            return {}
        rows = await self.find(session, self.model.id.in_(wanted))
        return {row.id: row for row in rows}

    async def get_all(
        self,
        session: AsyncSession,
        limit: int | None = None,
        offset: int = 0,
    ) -> Sequence[ModelT]:
        return await self.find(session, limit=limit, offset=offset)

    async def exists(self, session: AsyncSession, id: UUID) -> bool:
        return await self.count(session, self.model.id == id) > 0

    async def find_one(
        self,
        session: AsyncSession,
        *criteria: ColumnElement[bool],
    ) -> ModelT | None:
        """First row matching all criteria, or None."""
        stmt = select(self.model).where(*criteria).limit(1)
        result = await session.execute(stmt)
        return result.scalars().first()

    async def find(
        self,
        session: AsyncSession,
        *criteria: ColumnElement[bool],
        order_by: Sequence[Any] = (),
        limit: int | None = None,
        offset: int = 0,
    ) -> Sequence[ModelT]:
        """
        Rows matching all criteria.

        Args:
            session: Async database session
            *criteria: SQLAlchemy boolean expressions, ANDed together
            order_by: Ordering clauses applied in sequence
            limit: Maximum rows (None for all)
            offset: Rows to skip

        Returns:
            Sequence of model instances
        """
        stmt = select(self.model).where(*criteria).order_by(*order_by).offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def count(self, session: AsyncSession, *criteria: ColumnElement[bool]) -> int:
        stmt = select(func.count(self.model.id)).where(*criteria)
        result = await session.execute(stmt)
        return result.scalar_one()
