"""
Test suite for mini-game pairing and outcome rules.

System role: Verification of partner, hunt and PR week calculations
"""

import uuid

import pytest

from backend.core.mini_games import (
    assign_slots,
    hunt_outcome,
    js_round,
    partner_outcome,
    pr_outcome,
    rank_map,
    resolved_config,
)

USERS = [uuid.uuid4() for _ in range(5)]


def ranked(count: int) -> list[tuple[uuid.UUID, float]]:
    return [(user_id, float(100 - index * 10)) for index, user_id in enumerate(USERS[:count])]


class TestConfig:
    def test_defaults(self) -> None:
        assert resolved_config("hunt_week", None) == {"catch_bonus": 75, "caught_penalty": 25}

    def test_overrides_accept_camel_case(self) -> None:
        config = resolved_config("partner_week", {"bonusPercentage": "20", "ignored": 1})

        assert config == {"bonus_percentage": 20}

    def test_unknown_game_type_has_no_config(self) -> None:
        assert resolved_config("relay_week", {"x": 1}) == {}


class TestAssignSlots:
    """Test suite for assign_slots()."""

    def test_partner_pairs_top_with_bottom(self) -> None:
        slots = assign_slots("partner_week", ranked(4))

        assert [s.partner_user_id for s in slots] == [USERS[3], USERS[2], USERS[1], USERS[0]]
        assert [s.rank for s in slots] == [1, 2, 3, 4]

    def test_partner_odd_middle_pairs_with_self(self) -> None:
        slots = assign_slots("partner_week", ranked(3))

        assert slots[1].partner_user_id == USERS[1]

    def test_hunt_prey_above_hunter_below(self) -> None:
        slots = assign_slots("hunt_week", ranked(3))

        assert (slots[0].prey_user_id, slots[0].hunter_user_id) == (None, USERS[1])
        assert (slots[1].prey_user_id, slots[1].hunter_user_id) == (USERS[0], USERS[2])
        assert (slots[2].prey_user_id, slots[2].hunter_user_id) == (USERS[1], None)

    def test_initial_state_records_rank_and_points(self) -> None:
        slots = assign_slots("pr_week", ranked(2))

        assert slots[1].initial_state == {"rank": 2, "points": 90.0}
        assert slots[1].partner_user_id is None


class TestOutcomes:
    """Test suite for per-game outcome calculations."""

    @pytest.mark.parametrize("value,expected", [(2.5, 3), (2.49, 2), (-2.5, -2), (0, 0)])
    def test_js_round_half_up(self, value, expected) -> None:
        assert js_round(value) == expected

    def test_partner_bonus_is_percentage_of_partner_points(self) -> None:
        outcome = partner_outcome(45, 10)

        assert outcome.bonus_points == 5
        assert outcome.outcome == {"partner_week_points": 45}
        assert outcome.description == "Partner Week Bonus (10% of partner's 45 pts)"

    def test_hunt_caught_prey(self) -> None:
        outcome = hunt_outcome(2, 3, prey_rank=3, hunter_rank=4, catch_bonus=75, caught_penalty=25)

        assert outcome.bonus_points == 75
        assert outcome.outcome["caught_prey"] is True
        assert outcome.outcome["was_caught"] is False

    def test_hunt_caught_and_was_caught(self) -> None:
        outcome = hunt_outcome(3, 2, prey_rank=4, hunter_rank=1, catch_bonus=75, caught_penalty=25)

        assert outcome.bonus_points == 50
        assert "but was caught" in outcome.description

    def test_hunt_was_caught(self) -> None:
        outcome = hunt_outcome(3, 2, prey_rank=1, hunter_rank=2, catch_bonus=75, caught_penalty=25)

        assert outcome.bonus_points == -25

    def test_hunt_leader_without_prey(self) -> None:
        outcome = hunt_outcome(1, 1, prey_rank=None, hunter_rank=2, catch_bonus=75, caught_penalty=25)

        assert outcome.bonus_points == 0

    def test_pr_hit(self) -> None:
        outcome = pr_outcome(10, 12.5, 100)

        assert outcome.bonus_points == 100
        assert outcome.outcome["hit_pr"] is True

    def test_pr_tie_is_not_a_pr(self) -> None:
        assert pr_outcome(10, 10, 100).bonus_points == 0


def test_rank_map() -> None:
    assert rank_map(USERS[:3]) == {USERS[0]: 1, USERS[1]: 2, USERS[2]: 3}
