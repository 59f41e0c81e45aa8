"""
Test suite for leaderboard ranking helpers.

System role: Verification of category bucketing and top-N ranking
"""

import uuid

from backend.core.leaderboards import (
    UNCATEGORIZED_ID,
    bucket_by_category,
    gender_group,
    split_by_gender,
    top_entries,
)

ALICE = uuid.uuid4()
BOB = uuid.uuid4()
CARA = uuid.uuid4()


class TestBucketByCategory:
    """Test suite for bucket_by_category()."""

    def test_sums_points_per_user_per_category(self) -> None:
        # Arrange
        cardio = uuid.uuid4()
        rows = [
            (cardio, "Cardio", ALICE, 3.0),
            (cardio, "Cardio", ALICE, 2.0),
            (cardio, "Cardio", BOB, 4.0),
        ]

        # Act
        [bucket] = bucket_by_category(rows)

        # Assert
        assert bucket.category_id == str(cardio)
        assert bucket.name == "Cardio"
        assert dict(bucket.points_by_user) == {ALICE: 5.0, BOB: 4.0}

    def test_other_sorts_last(self) -> None:
        rows = [
            (None, None, ALICE, 1.0),
            (uuid.uuid4(), "Yoga", ALICE, 1.0),
            (uuid.uuid4(), "cardio", BOB, 1.0),
        ]

        buckets = bucket_by_category(rows)

        assert [b.name for b in buckets] == ["cardio", "Yoga", "Other"]
        assert buckets[-1].category_id == UNCATEGORIZED_ID

    def test_no_rows_no_buckets(self) -> None:
        assert bucket_by_category([]) == []


class TestRanking:
    def test_top_entries_ranked_and_limited(self) -> None:
        points = {ALICE: 5.0, BOB: 9.0, CARA: 7.0}

        assert top_entries(points, 2) == [(1, BOB, 9.0), (2, CARA, 7.0)]

    def test_split_by_gender(self) -> None:
        points = {ALICE: 5.0, BOB: 9.0, CARA: 7.0}
        genders = {ALICE: "female", BOB: "male"}

        groups = split_by_gender(points, genders)

        assert groups == {"women": {ALICE: 5.0}, "men": {BOB: 9.0}, "no_gender": {CARA: 7.0}}

    def test_unknown_gender_value_has_no_group(self) -> None:
        assert gender_group("other") == "no_gender"
        assert gender_group(None) == "no_gender"
