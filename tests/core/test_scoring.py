"""
Test suite for the scoring engine.

Covers each scorer (per-unit, tiered, completion, variable, variants,
unit-based caps, drink penalties), metric aliasing, sign rules and the
bonus stack assembled by calculate_final_score.

System role: Verification of activity point calculations
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone

import pytest

from backend.core.scoring import (
    MEDIA_BONUS_POINTS,
    ScoringContext,
    apply_point_sign,
    calculate_activity_points,
    calculate_final_score,
    calculate_threshold_bonuses,
    config_value,
    metric_value_for_unit,
    select_variant,
    to_number,
)

LOGGED = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)


@dataclass
class FakeActivityType:
    scoring_config: dict = field(default_factory=dict)
    bonus_thresholds: list | None = None
    is_negative: bool = False


def context(metrics: dict, existing: float = 0.0) -> ScoringContext:
    return ScoringContext(metrics=metrics, logged_date=LOGGED, existing_daily_units=existing)


class TestHelpers:
    """Test suite for value coercion and config lookup."""

    @pytest.mark.parametrize(
        "value,expected",
        [(3, 3.0), ("2.5", 2.5), (None, 0.0), ("abc", 0.0), (float("nan"), 0.0)],
    )
    def test_to_number(self, value, expected) -> None:
        assert to_number(value) == expected

    def test_config_value_accepts_snake_and_camel_keys(self) -> None:
        assert config_value({"pointsPerUnit": 2}, "points_per_unit") == 2
        assert config_value({"points_per_unit": 3}, "points_per_unit") == 3
        assert config_value({}, "points_per_unit", 1) == 1

    def test_metric_lookup_prefers_exact_key(self) -> None:
        assert metric_value_for_unit("miles", {"miles": 4, "distance_miles": 9}) == 4

    def test_metric_lookup_falls_back_to_aliases(self) -> None:
        assert metric_value_for_unit("miles", {"distance_miles": 2.5}) == 2.5
        assert metric_value_for_unit("minutes", {"duration_minutes": 30}) == 30

    def test_metric_lookup_returns_none_without_match(self) -> None:
        assert metric_value_for_unit("miles", {"steps": 1000}) is None
        assert metric_value_for_unit(None, {"miles": 1}) is None


class TestBasePoints:
    """Test suite for calculate_activity_points() per scoring type."""

    def test_points_per_unit(self) -> None:
        activity_type = FakeActivityType({"unit": "miles", "pointsPerUnit": 2})

        assert calculate_activity_points(activity_type, context({"miles": 3})) == 6

    def test_points_per_unit_uses_alias_metric(self) -> None:
        activity_type = FakeActivityType({"unit": "miles", "pointsPerUnit": 2})

        assert calculate_activity_points(activity_type, context({"distance_miles": 2.5})) == 5

    def test_base_points_only_when_metric_missing(self) -> None:
        activity_type = FakeActivityType({"unit": "miles", "basePoints": 2, "pointsPerUnit": 5})

        assert calculate_activity_points(activity_type, context({})) == 2

    def test_unit_based_caps_at_max_units(self) -> None:
        activity_type = FakeActivityType(
            {"type": "unit_based", "unit": "minutes", "pointsPerUnit": 0.5, "maxUnits": 60}
        )

        assert calculate_activity_points(activity_type, context({"minutes": 90})) == 30

    @pytest.mark.parametrize("minutes,expected", [(20, 1), (45, 3), (60, 3), (100, 5)])
    def test_tiered(self, minutes, expected) -> None:
        activity_type = FakeActivityType(
            {
                "type": "tiered",
                "metric": "minutes",
                "tiers": [
                    {"maxValue": 30, "points": 1},
                    {"maxValue": 60, "points": 3},
                    {"points": 5},
                ],
            }
        )

        assert calculate_activity_points(activity_type, context({"minutes": minutes})) == expected

    def test_tiered_without_tiers_scores_zero(self) -> None:
        activity_type = FakeActivityType({"type": "tiered", "metric": "minutes"})

        assert calculate_activity_points(activity_type, context({"minutes": 10})) == 0

    def test_completion_uses_fixed_points(self) -> None:
        activity_type = FakeActivityType({"type": "completion", "fixedPoints": 4})

        assert calculate_activity_points(activity_type, context({"completed": True})) == 4

    def test_variable_scores_zero_until_reviewed(self) -> None:
        activity_type = FakeActivityType({"type": "variable", "unit": "miles"})

        assert calculate_activity_points(activity_type, context({"miles": 10})) == 0


class TestDrinkPenalty:
    """Test suite for the per-day drink allowance."""

    CONFIG = {"unit": "drinks", "pointsPerUnit": 1, "freebiesPerDay": 1}

    def test_drinks_beyond_allowance_are_charged(self) -> None:
        activity_type = FakeActivityType(self.CONFIG, is_negative=True)

        score = calculate_final_score(activity_type, context({"drinks": 3}))

        assert score.base_points == 2
        assert score.points_earned == -2

    def test_free_drink_costs_nothing(self) -> None:
        activity_type = FakeActivityType(self.CONFIG, is_negative=True)

        assert calculate_final_score(activity_type, context({"drinks": 1})).points_earned == 0

    def test_earlier_drinks_same_day_use_up_allowance(self) -> None:
        activity_type = FakeActivityType(self.CONFIG, is_negative=True)

        score = calculate_final_score(activity_type, context({"drinks": 1}, existing=1))

        assert score.points_earned == -1


class TestVariants:
    """Test suite for variant selection and scoring."""

    VARIANTS = {
        "easy": {"points": 1, "condition": {"field": "minutes", "operator": "lt", "value": 30}},
        "hard": {"points": 3, "condition": {"field": "minutes", "operator": "gte", "value": 60}},
        "normal": {"points": 2},
    }

    def test_requested_variant_wins(self) -> None:
        assert select_variant(self.VARIANTS, {"variant": "normal", "minutes": 90}) == "normal"

    def test_condition_selects_variant(self) -> None:
        assert select_variant(self.VARIANTS, {"minutes": 90}) == "hard"
        assert select_variant(self.VARIANTS, {"minutes": 10}) == "easy"

    def test_default_variant_when_no_condition_matches(self) -> None:
        assert select_variant(self.VARIANTS, {"minutes": 45}, "normal") == "normal"
        assert select_variant(self.VARIANTS, {"minutes": 45}) is None

    def test_variant_points(self) -> None:
        activity_type = FakeActivityType({"variants": self.VARIANTS, "defaultVariant": "normal"})

        assert calculate_activity_points(activity_type, context({"minutes": 90})) == 3
        assert calculate_activity_points(activity_type, context({"minutes": 45})) == 2

    def test_variant_outside_date_window_is_skipped(self) -> None:
        variants = {
            "early": {"points": 10, "validTo": "2026-03-05"},
            "late": {"points": 4},
        }
        activity_type = FakeActivityType({"variants": variants, "defaultVariant": "early"})

        # Falls back to per-unit scoring, which has no unit and no base points
        assert calculate_activity_points(activity_type, context({"variant": "early"})) == 0


class TestBonuses:
    """Test suite for threshold, optional and media bonuses."""

    def test_threshold_bonus_triggers_at_threshold(self) -> None:
        thresholds = [
            {"metric": "distance_miles", "threshold": 5, "bonusPoints": 2, "description": "5 mile run"}
        ]

        triggered = calculate_threshold_bonuses(thresholds, {"miles": 5})

        assert [b.description for b in triggered] == ["5 mile run"]
        assert triggered[0].bonus_points == 2

    def test_threshold_bonus_not_triggered_below(self) -> None:
        thresholds = [{"metric": "distance_miles", "threshold": 5, "bonusPoints": 2}]

        assert calculate_threshold_bonuses(thresholds, {"miles": 4.9}) == []

    def test_final_score_stacks_all_bonuses(self) -> None:
        # Arrange
        activity_type = FakeActivityType(
            scoring_config={
                "unit": "miles",
                "pointsPerUnit": 1,
                "optionalBonuses": [
                    {"name": "hills", "bonusPoints": 3, "description": "Hill workout"},
                    {"name": "buddy", "bonusPoints": 1},
                ],
            },
            bonus_thresholds=[{"metric": "distance_miles", "threshold": 5, "bonusPoints": 2}],
        )

        # Act
        score = calculate_final_score(
            activity_type,
            context({"miles": 6, "selectedBonuses": ["hills"]}),
            include_media_bonus=True,
        )

        # Assert
        assert score.base_points == 6
        assert score.bonus_points == 2 + 3 + MEDIA_BONUS_POINTS
        assert score.points_earned == 12
        assert [b.metric for b in score.triggered_bonuses] == ["distance_miles", "optional", "media"]

    def test_negative_type_makes_bonus_total_negative(self) -> None:
        activity_type = FakeActivityType({"type": "completion", "fixedPoints": 5}, is_negative=True)

        score = calculate_final_score(activity_type, context({}), include_media_bonus=True)

        assert score.points_earned == -6


class TestPointSign:
    def test_negative_forces_sign(self) -> None:
        assert apply_point_sign(4, True) == -4
        assert apply_point_sign(-4, True) == -4

    def test_positive_passes_through(self) -> None:
        assert apply_point_sign(-1.5, False) == -1.5

    def test_non_finite_scores_zero(self) -> None:
        assert apply_point_sign(float("nan"), False) == 0
        assert apply_point_sign(float("inf"), True) == 0
