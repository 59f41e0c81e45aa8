"""
Activity CRUD operations.

Provides activity persistence plus the aggregate queries used by
scoring (daily totals), streaks, leaderboards, mini-games and the
moderation queue. Every query except `get_by_id` skips soft-deleted rows.

Dependencies: sqlalchemy, backend.boundary.db.models
System role: Activity persistence operations
"""

from datetime import datetime
from typing import Sequence
from uuid import UUID

from sqlalchemy import and_, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.boundary.db.CRUD.base_crud import BaseCRUD
from backend.boundary.db.models.activity_model import (
    ActivityFlagHistoryModel,
    ActivityModel,
    ActivitySource,
    ResolutionStatus,
)
from backend.boundary.db.models.activity_type_model import ActivityTypeModel
from backend.boundary.db.models.challenge_model import CategoryModel
from backend.boundary.db.models.user_model import UserModel

_not_deleted = ActivityModel.deleted_at.is_(None)


class ActivityCRUD(BaseCRUD[ActivityModel]):
    """
    CRUD operations for ActivityModel.

    Extends BaseCRUD with per-user, per-challenge and moderation queries.
    """

    def __init__(self) -> None:
        super().__init__(ActivityModel)

    async def get_active(self, session: AsyncSession, id: UUID) -> ActivityModel | None:
        """Retrieve an activity unless it has been soft-deleted."""
        stmt = select(ActivityModel).where(ActivityModel.id == id, _not_deleted)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def count_for_type(
        self,
        session: AsyncSession,
        user_id: UUID,
        activity_type_id: UUID,
    ) -> int:
        stmt = select(func.count(ActivityModel.id)).where(
            ActivityModel.user_id == user_id,
            ActivityModel.activity_type_id == activity_type_id,
            _not_deleted,
        )
        result = await session.execute(stmt)
        return result.scalar_one()

    async def list_for_type_between(
        self,
        session: AsyncSession,
        user_id: UUID,
        activity_type_id: UUID,
        start: datetime,
        end: datetime,
    ) -> Sequence[ActivityModel]:
        """User's activities of one type with start <= logged_date < end."""
        stmt = select(ActivityModel).where(
            ActivityModel.user_id == user_id,
            ActivityModel.activity_type_id == activity_type_id,
            ActivityModel.logged_date >= start,
            ActivityModel.logged_date < end,
            _not_deleted,
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def streak_entries(
        self,
        session: AsyncSession,
        user_id: UUID,
        challenge_id: UUID,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[tuple[datetime, float]]:
        """
        (logged_date, points) of streak-contributing activities.

        Args:
            session: Async database session
            user_id: Participant
            challenge_id: Challenge
            start: Optional inclusive lower bound on logged_date
            end: Optional exclusive upper bound on logged_date

        Returns:
            list of (logged_date, points_earned) pairs
        """
        stmt = (
            select(ActivityModel.logged_date, ActivityModel.points_earned)
            .join(ActivityTypeModel, ActivityTypeModel.id == ActivityModel.activity_type_id)
            .where(
                ActivityModel.user_id == user_id,
                ActivityModel.challenge_id == challenge_id,
                ActivityTypeModel.contributes_to_streak.is_(True),
                _not_deleted,
            )
        )
        if start is not None:
            stmt = stmt.where(ActivityModel.logged_date >= start)
        if end is not None:
            stmt = stmt.where(ActivityModel.logged_date < end)
        result = await session.execute(stmt)
        return [(logged_date, points) for logged_date, points in result.all()]

    async def list_for_user(
        self,
        session: AsyncSession,
        user_id: UUID,
        challenge_id: UUID,
        limit: int | None = None,
        offset: int = 0,
        oldest_first: bool = False,
    ) -> Sequence[ActivityModel]:
        order = ActivityModel.logged_date if oldest_first else ActivityModel.logged_date.desc()
        stmt = (
            select(ActivityModel)
            .where(
                ActivityModel.user_id == user_id,
                ActivityModel.challenge_id == challenge_id,
                _not_deleted,
            )
            .order_by(order, ActivityModel.created_at)
            .offset(offset)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def list_feed(
        self,
        session: AsyncSession,
        challenge_id: UUID,
        limit: int,
        offset: int = 0,
        user_ids: Sequence[UUID] | None = None,
    ) -> Sequence[ActivityModel]:
        """
        Retrieve a page of the challenge feed, newest first.

        Args:
            user_ids: Restrict to these authors (following-only feed)
        """
        stmt = select(ActivityModel).where(
            ActivityModel.challenge_id == challenge_id,
            _not_deleted,
        )
        if user_ids is not None:
            stmt = stmt.where(ActivityModel.user_id.in_(user_ids))
        stmt = stmt.order_by(ActivityModel.created_at.desc()).offset(offset).limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def list_in_period(
        self,
        session: AsyncSession,
        user_id: UUID,
        challenge_id: UUID,
        start: datetime | None,
        end: datetime,
        include_end: bool = True,
        exclude_source: ActivitySource | None = None,
    ) -> Sequence[ActivityModel]:
        """
        User's activities logged within a period.

        Args:
            start: Inclusive lower bound (None for no bound)
            end: Upper bound, inclusive unless include_end is False
            exclude_source: Skip activities generated by this source
        """
        stmt = select(ActivityModel).where(
            ActivityModel.user_id == user_id,
            ActivityModel.challenge_id == challenge_id,
            _not_deleted,
        )
        if start is not None:
            stmt = stmt.where(ActivityModel.logged_date >= start)
        if include_end:
            stmt = stmt.where(ActivityModel.logged_date <= end)
        else:
            stmt = stmt.where(ActivityModel.logged_date < end)
        if exclude_source is not None:
            stmt = stmt.where(ActivityModel.source != exclude_source)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def category_points(
        self,
        session: AsyncSession,
        challenge_id: UUID,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[tuple[UUID | None, str | None, UUID, float]]:
        """
        (category_id, category_name, user_id, points) for each activity.

        Args:
            start: Optional inclusive lower bound on logged_date
            end: Optional exclusive upper bound on logged_date
        """
        stmt = (
            select(
                ActivityTypeModel.category_id,
                CategoryModel.name,
                ActivityModel.user_id,
                ActivityModel.points_earned,
            )
            .join(ActivityTypeModel, ActivityTypeModel.id == ActivityModel.activity_type_id)
            .outerjoin(CategoryModel, CategoryModel.id == ActivityTypeModel.category_id)
            .where(ActivityModel.challenge_id == challenge_id, _not_deleted)
        )
        if start is not None:
            stmt = stmt.where(ActivityModel.logged_date >= start)
        if end is not None:
            stmt = stmt.where(ActivityModel.logged_date < end)
        result = await session.execute(stmt)
        return [tuple(row) for row in result.all()]

    async def list_flagged(
        self,
        session: AsyncSession,
        challenge_id: UUID,
        status: ResolutionStatus | None = None,
        participant_id: UUID | None = None,
        search: str | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Sequence[ActivityModel]:
        """
        Moderation queue: flagged or pending-review activities.

        Args:
            status: Only activities in this resolution status
            participant_id: Only this user's activities
            search: Case-insensitive match on user name, email or flag reason

        Returns:
            Activities ordered by flagged_at desc, then created_at desc
        """
        stmt = (
            select(ActivityModel)
            .join(UserModel, UserModel.id == ActivityModel.user_id)
            .where(
                ActivityModel.challenge_id == challenge_id,
                _not_deleted,
                or_(
                    ActivityModel.flagged.is_(True),
                    and_(
                        ActivityModel.flagged_at.is_not(None),
                        ActivityModel.resolution_status == ResolutionStatus.PENDING,
                    ),
                ),
            )
        )
        if status is not None:
            stmt = stmt.where(ActivityModel.resolution_status == status)
        if participant_id is not None:
            stmt = stmt.where(ActivityModel.user_id == participant_id)
        if search:
            pattern = f"%{search.strip().lower()}%"
            stmt = stmt.where(
                or_(
                    func.lower(UserModel.name).like(pattern),
                    func.lower(UserModel.email).like(pattern),
                    func.lower(ActivityModel.flagged_reason).like(pattern),
                )
            )
        stmt = (
            stmt.order_by(
                ActivityModel.flagged_at.is_(None),
                ActivityModel.flagged_at.desc(),
                ActivityModel.created_at.desc(),
            )
            .offset(offset)
            .limit(limit)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def list_outside(
        self,
        session: AsyncSession,
        challenge_id: UUID,
        start: datetime,
        end: datetime,
    ) -> Sequence[ActivityModel]:
        """Activities logged before `start` or at/after `end`."""
        stmt = (
            select(ActivityModel)
            .where(
                ActivityModel.challenge_id == challenge_id,
                _not_deleted,
                or_(ActivityModel.logged_date < start, ActivityModel.logged_date >= end),
            )
            .order_by(ActivityModel.logged_date)
        )
        result = await session.execute(stmt)
        return result.scalars().all()


class ActivityFlagHistoryCRUD(BaseCRUD[ActivityFlagHistoryModel]):
    """CRUD operations for the moderation audit trail."""

    def __init__(self) -> None:
        super().__init__(ActivityFlagHistoryModel)

    async def list_for_activity(
        self,
        session: AsyncSession,
        activity_id: UUID,
    ) -> Sequence[ActivityFlagHistoryModel]:
        stmt = (
            select(ActivityFlagHistoryModel)
            .where(ActivityFlagHistoryModel.activity_id == activity_id)
            .order_by(ActivityFlagHistoryModel.created_at.desc())
        )
        result = await session.execute(stmt)
        return result.scalars().all()


activity_crud = ActivityCRUD()
activity_flag_history_crud = ActivityFlagHistoryCRUD()
