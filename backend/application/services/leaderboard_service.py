"""
Leaderboard service orchestrator.

Overall standings from participation totals, plus weekly and cumulative
per-category boards computed from activity points.

Dependencies: backend.boundary.db.CRUD, backend.core.leaderboards
System role: Leaderboard query orchestration
"""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from backend.application.services.service_helpers import require_challenge, user_summary
from backend.boundary.db.CRUD.activity_crud import activity_crud
from backend.boundary.db.CRUD.challenge_crud import challenge_crud
from backend.boundary.db.CRUD.participation_crud import participation_crud
from backend.boundary.db.CRUD.user_crud import user_crud
from backend.core.dates import utc_now
from backend.core.leaderboards import (
    CUMULATIVE_TOP_N,
    GENDER_GROUPS,
    WEEKLY_TOP_N,
    bucket_by_category,
    split_by_gender,
    top_entries,
)
from backend.core.weeks import challenge_week_number, clamp_week, total_weeks, week_date_range

logger = logging.getLogger(__name__)


class LeaderboardService:
    """Leaderboard service orchestrator."""

    def __init__(self, db: AsyncSession) -> None:
        """
        Initialize leaderboard service with async database session.

        Args:
            db: Async SQLAlchemy session
        """
        self.db = db

    async def get_leaderboard(
        self,
        challenge_id: UUID,
        limit: int = 50,
        cursor: int | None = None,
    ) -> dict:
        """
        Participants ranked by total points.

        Ranks are global positions, so page two starts at rank limit + 1.

        Returns:
            dict: items of {rank, user, total_points, current_streak},
            next_cursor and is_done
        """
        await require_challenge(self.db, challenge_id)
        offset = max(cursor or 0, 0)
        page = await participation_crud.list_ranked(
            self.db, challenge_id, limit=limit + 1, offset=offset
        )
        is_done = len(page) <= limit
        page = page[:limit]
        users = await user_crud.get_many(self.db, [p.user_id for p in page])

        items = [
            {
                "rank": offset + index + 1,
                "user": user_summary(users.get(participation.user_id)),
                "total_points": participation.total_points,
                "current_streak": participation.current_streak,
            }
            for index, participation in enumerate(page)
        ]
        return {
            "items": items,
            "next_cursor": None if is_done else offset + limit,
            "is_done": is_done,
        }

    async def get_weekly_category_leaderboard(
        self,
        challenge_id: UUID,
        week_number: int | None = None,
    ) -> dict | None:
        """
        Top scorers per category for one challenge week.

        Args:
            challenge_id: Challenge UUID
            week_number: Week to show (defaults to the current week), clamped
                into the challenge's weeks

        Returns:
            dict | None: week_number, total_weeks and categories, or None if
            the challenge does not exist
        """
        challenge = await challenge_crud.get_by_id(self.db, challenge_id)
        if challenge is None:
            return None

        if week_number is None:
            week_number = challenge_week_number(challenge.start_date, utc_now())
        week = clamp_week(week_number, challenge.duration_days)
        start, end = week_date_range(challenge.start_date, week)

        rows = await activity_crud.category_points(self.db, challenge_id, start=start, end=end)
        buckets = bucket_by_category(rows)
        user_ids = {user_id for bucket in buckets for user_id in bucket.points_by_user}
        users = await user_crud.get_many(self.db, user_ids)

        categories = []
        for bucket in buckets:
            entries = [
                {"rank": rank, "user": user_summary(users.get(user_id)), "weekly_points": points}
                for rank, user_id, points in top_entries(bucket.points_by_user, WEEKLY_TOP_N)
            ]
            categories.append(
                {"category_id": bucket.category_id, "category_name": bucket.name, "entries": entries}
            )

        return {
            "week_number": week,
            "total_weeks": total_weeks(challenge.duration_days),
            "categories": categories,
        }

    async def get_cumulative_category_leaderboard(self, challenge_id: UUID) -> dict | None:
        """Top five per category for women, men and unspecified gender."""
        challenge = await challenge_crud.get_by_id(self.db, challenge_id)
        if challenge is None:
            return None

        rows = await activity_crud.category_points(self.db, challenge_id)
        buckets = bucket_by_category(rows)
        user_ids = {user_id for bucket in buckets for user_id in bucket.points_by_user}
        users = await user_crud.get_many(self.db, user_ids)
        genders = {
            user_id: (user.gender.value if user.gender else None)
            for user_id, user in users.items()
        }

        categories = []
        for bucket in buckets:
            groups = split_by_gender(bucket.points_by_user, genders)
            categories.append(
                {
                    "category_id": bucket.category_id,
                    "category_name": bucket.name,
                    **{
                        group: [
                            {"rank": rank, "user": user_summary(users.get(user_id)), "total_points": points}
                            for rank, user_id, points in top_entries(groups[group], CUMULATIVE_TOP_N)
                        ]
                        for group in GENDER_GROUPS
                    },
                }
            )
        return {"categories": categories}
