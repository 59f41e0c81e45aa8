"""
Test suite for streak bookkeeping.

System role: Verification of incremental and full streak calculation
"""

from datetime import date, datetime, timezone

import pytest

from backend.core.streaks import StreakState, daily_points, next_streak, recompute_streak


def at(day: int, hour: int = 12) -> datetime:
    return datetime(2026, 3, day, hour, tzinfo=timezone.utc)


class TestNextStreak:
    """Test suite for next_streak()."""

    def test_first_qualifying_day_starts_streak(self) -> None:
        state = next_streak(StreakState(0, None), date(2026, 3, 1), 5, 1)

        assert state == StreakState(1, date(2026, 3, 1))

    def test_day_below_minimum_leaves_state_unchanged(self) -> None:
        before = StreakState(2, date(2026, 3, 2))

        assert next_streak(before, date(2026, 3, 3), 0.5, 1) == before

    def test_same_day_does_not_double_count(self) -> None:
        before = StreakState(2, date(2026, 3, 2))

        assert next_streak(before, date(2026, 3, 2), 10, 1) == before

    def test_consecutive_day_extends(self) -> None:
        state = next_streak(StreakState(2, date(2026, 3, 2)), date(2026, 3, 3), 1, 1)

        assert state == StreakState(3, date(2026, 3, 3))

    def test_gap_resets_to_one(self) -> None:
        state = next_streak(StreakState(4, date(2026, 3, 2)), date(2026, 3, 5), 1, 1)

        assert state == StreakState(1, date(2026, 3, 5))

    def test_backfill_requests_recompute(self) -> None:
        assert next_streak(StreakState(3, date(2026, 3, 5)), date(2026, 3, 1), 1, 1) is None


class TestRecomputeStreak:
    """Test suite for recompute_streak()."""

    def test_no_entries(self) -> None:
        assert recompute_streak([], 1) == StreakState(0, None)

    def test_run_ending_at_latest_qualifying_day(self) -> None:
        # Arrange
        entries = [(at(1), 2), (at(2), 2), (at(4), 2), (at(5), 2), (at(6), 2)]

        # Act
        state = recompute_streak(entries, 1)

        # Assert
        assert state == StreakState(3, date(2026, 3, 6))

    def test_points_are_summed_per_day(self) -> None:
        entries = [(at(1, 8), 1), (at(1, 20), 1), (at(2), 1)]

        state = recompute_streak(entries, 2)

        assert state == StreakState(1, date(2026, 3, 1))

    def test_negative_points_can_break_a_day(self) -> None:
        entries = [(at(1), 3), (at(2), 3), (at(2, 22), -3)]

        assert recompute_streak(entries, 1) == StreakState(1, date(2026, 3, 1))

    @pytest.mark.parametrize("minimum", [0, 0.0])
    def test_zero_minimum_counts_any_logged_day(self, minimum) -> None:
        assert recompute_streak([(at(1), 0), (at(2), 0)], minimum) == StreakState(2, date(2026, 3, 2))


def test_daily_points_buckets_by_utc_day() -> None:
    late = datetime(2026, 3, 1, 23, 30, tzinfo=timezone.utc)

    totals = daily_points([(late, 1), (at(2, 0), 2), (at(2, 23), 3)])

    assert totals == {date(2026, 3, 1): 1, date(2026, 3, 2): 5}
