"""
Challenge week arithmetic.

Week 1 covers days 0-6 after the challenge start, week 2 days 7-13, and
so on. All day boundaries are UTC.

Dependencies: backend.core.dates
System role: Week numbering for activity restrictions and leaderboards
"""

import math
from datetime import date, datetime, timedelta

from backend.core.dates import as_utc, day_start, utc_day


def challenge_week_number(start_date: date, when: datetime) -> int:
    """
    Week of the challenge containing `when`.

    Returns:
        int: 1-based week number, or 0 before the challenge starts
    """
    days_since_start = (utc_day(when) - start_date).days
    if days_since_start < 0:
        return 0
    return days_since_start // 7 + 1


def week_date_range(start_date: date, week_number: int) -> tuple[datetime, datetime]:
    """Half-open UTC [start, end) range covered by `week_number`."""
    week_start = day_start(start_date) + timedelta(days=(week_number - 1) * 7)
    return week_start, week_start + timedelta(days=7)


def total_weeks(duration_days: int) -> int:
    """Number of (possibly partial) weeks in a challenge."""
    return math.ceil(duration_days / 7)


def clamp_week(week_number: int, duration_days: int) -> int:
    """Clamp a requested week into [1, total_weeks]."""
    return min(max(week_number, 1), max(total_weeks(duration_days), 1))


def week_start_sunday(when: datetime) -> datetime:
    """UTC midnight of the Sunday on or before `when`."""
    when = as_utc(when)
    days_since_sunday = (when.weekday() + 1) % 7
    return day_start(utc_day(when) - timedelta(days=days_since_sunday))
