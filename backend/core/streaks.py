"""
Streak calculation.

A streak day is a UTC day whose streak-contributing points reach the
challenge's `streak_min_points`. The current streak is the length of the
run of consecutive streak days ending at the last streak day.

Dependencies: backend.core.dates
System role: Participation streak bookkeeping after logging, edits and deletes
"""

from collections import defaultdict
from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable

from backend.core.dates import DAY, utc_day


@dataclass(frozen=True)
class StreakState:
    current_streak: int
    last_streak_date: date | None


def daily_points(entries: Iterable[tuple[datetime, float]]) -> dict[date, float]:
    """Sum (logged_date, points) pairs per UTC day."""
    totals: dict[date, float] = defaultdict(float)
    for logged_date, points in entries:
        totals[utc_day(logged_date)] += points
    return dict(totals)


def next_streak(
    state: StreakState,
    logged_day: date,
    day_total: float,
    streak_min_points: float,
) -> StreakState | None:
    """
    Incrementally advance a streak after an activity is logged.

    Args:
        state: Participation streak before the new activity
        logged_day: UTC day of the new activity
        day_total: Streak-contributing points on `logged_day` including it
        streak_min_points: Points needed for a day to count

    Returns:
        StreakState | None: New state, or None when the activity backfills a
        day before the last streak day and a full recompute is needed
    """
    meets = day_total >= streak_min_points
    if not meets:
        return state

    last = state.last_streak_date
    if last is None:
        return StreakState(current_streak=1, last_streak_date=logged_day)
    if logged_day == last:
        return state
    if logged_day == last + DAY:
        return StreakState(current_streak=state.current_streak + 1, last_streak_date=logged_day)
    if logged_day > last:
        return StreakState(current_streak=1, last_streak_date=logged_day)
    return None


def recompute_streak(
    entries: Iterable[tuple[datetime, float]],
    streak_min_points: float,
) -> StreakState:
    """
    Rebuild a streak from every streak-contributing activity.

    Args:
        entries: (logged_date, points) for non-deleted contributing activities
        streak_min_points: Points needed for a day to count

    Returns:
        StreakState: Streak ending at the latest qualifying day, or (0, None)
    """
    qualifying = sorted(
        day for day, total in daily_points(entries).items() if total >= streak_min_points
    )
    if not qualifying:
        return StreakState(current_streak=0, last_streak_date=None)

    streak = 1
    for previous, current in zip(qualifying, qualifying[1:]):
        streak = streak + 1 if current - previous == DAY else 1
    return StreakState(current_streak=streak, last_streak_date=qualifying[-1])
