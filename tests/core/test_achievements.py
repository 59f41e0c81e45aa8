"""
Test suite for achievement criteria and award frequency rules.

System role: Verification of pure achievement evaluation
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone

import pytest

from backend.core.achievements import (
    CriteriaProgress,
    criteria_activity_type_ids,
    criteria_type,
    evaluate_criteria,
    is_blocked_by_earlier_award,
)

RUN = uuid.uuid4()
SWIM = uuid.uuid4()
BIKE = uuid.uuid4()


@dataclass
class FakeActivity:
    activity_type_id: uuid.UUID
    metrics: dict = field(default_factory=dict)
    id: uuid.UUID = field(default_factory=uuid.uuid4)


class TestCriteriaType:
    def test_explicit_type(self) -> None:
        assert criteria_type({"criteriaType": "cumulative"}) == "cumulative"

    def test_legacy_type_field(self) -> None:
        assert criteria_type({"type": "all_activity_type_thresholds"}) == "all_activity_type_thresholds"

    def test_untyped_counts(self) -> None:
        assert criteria_type({"type": "count_threshold"}) == "count"

    def test_type_ids_deduplicated_and_malformed_dropped(self) -> None:
        criteria = {"activityTypeIds": [str(RUN), str(RUN), "nope", str(SWIM)]}

        assert criteria_activity_type_ids(criteria) == [RUN, SWIM]


class TestEvaluateCriteria:
    """Test suite for evaluate_criteria() across criteria kinds."""

    def test_count_with_metric_threshold(self) -> None:
        # Arrange
        criteria = {
            "criteria_type": "count",
            "activity_type_ids": [str(RUN)],
            "metric": "distance_miles",
            "threshold": 3,
            "required_count": 2,
        }
        long_run = FakeActivity(RUN, {"miles": 5})
        short_run = FakeActivity(RUN, {"miles": 1})
        other_long_run = FakeActivity(RUN, {"distance_miles": 3})
        swim = FakeActivity(SWIM, {"miles": 10})

        # Act
        progress = evaluate_criteria(criteria, [long_run, short_run, other_long_run, swim])

        # Assert
        assert progress.current_count == 2
        assert progress.is_met
        assert progress.qualifying_activity_ids == [long_run.id, other_long_run.id]

    def test_cumulative_applies_unit_conversion(self) -> None:
        criteria = {
            "criteriaType": "cumulative",
            "activityTypeIds": [str(RUN), str(BIKE)],
            "metric": "distance_miles",
            "threshold": 10,
            "unitConversions": {str(BIKE): 0.25},
        }
        activities = [FakeActivity(RUN, {"miles": 4}), FakeActivity(BIKE, {"miles": 20})]

        progress = evaluate_criteria(criteria, activities)

        assert progress.current_count == 9
        assert not progress.is_met

    def test_cumulative_falls_back_to_alternate_distance_when_converted(self) -> None:
        criteria = {
            "criteriaType": "cumulative",
            "activityTypeIds": [str(BIKE)],
            "metric": "distance_miles",
            "threshold": 5,
            "unitConversions": {str(BIKE): 0.621371},
        }

        progress = evaluate_criteria(criteria, [FakeActivity(BIKE, {"km": 10})])

        assert progress.current_count == 6.21
        assert progress.is_met

    def test_distinct_types(self) -> None:
        criteria = {
            "criteriaType": "distinct_types",
            "activityTypeIds": [str(RUN), str(SWIM), str(BIKE)],
            "requiredCount": 2,
        }
        activities = [FakeActivity(RUN), FakeActivity(RUN), FakeActivity(SWIM)]

        progress = evaluate_criteria(criteria, activities)

        assert progress.current_count == 2
        assert progress.is_met

    def test_one_of_each_needs_every_type(self) -> None:
        criteria = {"criteriaType": "one_of_each", "activityTypeIds": [str(RUN), str(SWIM)]}

        progress = evaluate_criteria(criteria, [FakeActivity(RUN)])

        assert (progress.current_count, progress.required_count) == (1, 2)
        assert not progress.is_met

    def test_all_activity_type_thresholds(self) -> None:
        criteria = {
            "type": "all_activity_type_thresholds",
            "requirements": [
                {"activityTypeId": str(RUN), "metric": "distance_miles", "threshold": 3},
                {"activityTypeId": str(SWIM), "metric": "duration_minutes", "threshold": 30},
            ],
        }
        run = FakeActivity(RUN, {"miles": 3})
        swim = FakeActivity(SWIM, {"minutes": 45})

        progress = evaluate_criteria(criteria, [run, FakeActivity(SWIM, {"minutes": 10}), swim])

        assert progress.is_met
        assert progress.qualifying_activity_ids == [run.id, swim.id]

    def test_zero_requirement_is_never_met(self) -> None:
        progress = CriteriaProgress(current_count=5, required_count=0)

        assert not progress.is_met


class TestAwardFrequency:
    """Test suite for is_blocked_by_earlier_award()."""

    NOW = datetime(2026, 3, 11, 12, tzinfo=timezone.utc)  # Wednesday

    def test_no_previous_awards(self) -> None:
        assert not is_blocked_by_earlier_award("once_per_challenge", [], self.NOW)

    def test_unlimited_never_blocks(self) -> None:
        assert not is_blocked_by_earlier_award("unlimited", [self.NOW], self.NOW)

    def test_once_per_challenge_blocks_forever(self) -> None:
        earlier = datetime(2026, 3, 1, tzinfo=timezone.utc)

        assert is_blocked_by_earlier_award("once_per_challenge", [earlier], self.NOW)

    @pytest.mark.parametrize(
        "earned_at,blocked",
        [
            (datetime(2026, 3, 8, 0, 0, tzinfo=timezone.utc), True),
            (datetime(2026, 3, 7, 23, 59, tzinfo=timezone.utc), False),
        ],
    )
    def test_once_per_week_uses_sunday_window(self, earned_at, blocked) -> None:
        assert is_blocked_by_earlier_award("once_per_week", [earned_at], self.NOW) is blocked
