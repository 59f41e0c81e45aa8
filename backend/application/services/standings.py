"""
Participation standings bookkeeping.

Keeps a participation's running totals consistent with its activities:
point deltas after logging/editing/deleting, incremental streak updates
after logging, and full streak recomputes after backfills and edits.

Dependencies: backend.boundary.db.CRUD, backend.core.streaks
System role: Shared points/streak updates for activity-changing services
"""

import logging
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from backend.boundary.db.CRUD.activity_crud import activity_crud
from backend.boundary.db.CRUD.participation_crud import participation_crud
from backend.boundary.db.models.challenge_model import ChallengeModel
from backend.boundary.db.models.participation_model import ParticipationModel
from backend.core.dates import day_bounds, utc_day
from backend.core.streaks import StreakState, next_streak, recompute_streak

logger = logging.getLogger(__name__)


def apply_points_delta(
    participation: ParticipationModel,
    delta: float,
    floor_at_zero: bool = False,
) -> None:
    """Add `delta` to the running total (optionally clamped at zero)."""
    total = (participation.total_points or 0.0) + delta
    participation.total_points = max(0.0, total) if floor_at_zero else total


def _state(participation: ParticipationModel) -> StreakState:
    return StreakState(
        current_streak=participation.current_streak or 0,
        last_streak_date=participation.last_streak_day,
    )


def _store(participation: ParticipationModel, state: StreakState) -> None:
    participation.current_streak = state.current_streak
    participation.last_streak_day = state.last_streak_date


async def recompute_participation_streak(
    db: AsyncSession,
    participation: ParticipationModel,
    challenge: ChallengeModel,
) -> StreakState:
    """Rebuild the streak from every non-deleted contributing activity."""
    entries = await activity_crud.streak_entries(
        db, participation.user_id, participation.challenge_id
    )
    state = recompute_streak(entries, challenge.streak_min_points)
    _store(participation, state)
    logger.debug(
        "Streak recomputed",
        extra={
            "participation_id": str(participation.id),
            "current_streak": state.current_streak,
        },
    )
    return state


async def advance_participation_streak(
    db: AsyncSession,
    participation: ParticipationModel,
    challenge: ChallengeModel,
    logged_date: datetime,
) -> StreakState:
    """
    Update the streak after an activity on `logged_date` was inserted.

    Falls back to a full recompute when the activity backfills a day
    before the last streak day.
    """
    start, end = day_bounds(logged_date)
    entries = await activity_crud.streak_entries(
        db, participation.user_id, participation.challenge_id, start=start, end=end
    )
    day_total = sum(points for _, points in entries)

    state = next_streak(
        _state(participation),
        utc_day(logged_date),
        day_total,
        challenge.streak_min_points,
    )
    if state is None:
        return await recompute_participation_streak(db, participation, challenge)
    _store(participation, state)
    return state


async def save_participation(db: AsyncSession, participation: ParticipationModel) -> None:
    await participation_crud.save(db, participation)
