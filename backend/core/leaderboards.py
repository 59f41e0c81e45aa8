"""
Leaderboard ranking helpers.

Groups activity points by category (and by participant gender for the
cumulative board) and produces ranked top-N lists.

Dependencies: None (pure domain layer)
System role: Ranking logic behind the challenge leaderboards
"""

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Iterable
from uuid import UUID

UNCATEGORIZED_ID = "uncategorized"
UNCATEGORIZED_NAME = "Other"

WEEKLY_TOP_N = 10
CUMULATIVE_TOP_N = 5

GENDER_GROUPS = ("women", "men", "no_gender")


@dataclass
class CategoryBucket:
    category_id: str
    name: str
    points_by_user: dict[UUID, float] = field(default_factory=lambda: defaultdict(float))


def gender_group(gender: str | None) -> str:
    if gender == "female":
        return "women"
    if gender == "male":
        return "men"
    return "no_gender"


def bucket_by_category(
    rows: Iterable[tuple[UUID | None, str | None, UUID, float]],
) -> list[CategoryBucket]:
    """
    Sum points per (category, user).

    Args:
        rows: (category_id, category_name, user_id, points) per activity;
            a None category lands in the "Other" bucket

    Returns:
        list[CategoryBucket]: Buckets sorted alphabetically with Other last;
        empty buckets never appear
    """
    buckets: dict[str, CategoryBucket] = {}
    for category_id, category_name, user_id, points in rows:
        if category_id is None:
            key, name = UNCATEGORIZED_ID, UNCATEGORIZED_NAME
        else:
            key, name = str(category_id), category_name or UNCATEGORIZED_NAME
        bucket = buckets.setdefault(key, CategoryBucket(category_id=key, name=name))
        bucket.points_by_user[user_id] += points

    return sorted(
        buckets.values(),
        key=lambda b: (b.category_id == UNCATEGORIZED_ID, b.name.lower()),
    )


def top_entries(points_by_user: dict[UUID, float], limit: int) -> list[tuple[int, UUID, float]]:
    """Highest totals first as (rank, user_id, points), limited to `limit`."""
    ranked = sorted(points_by_user.items(), key=lambda item: item[1], reverse=True)
    return [(index + 1, user_id, points) for index, (user_id, points) in enumerate(ranked[:limit])]


def split_by_gender(
    points_by_user: dict[UUID, float],
    genders: dict[UUID, str | None],
) -> dict[str, dict[UUID, float]]:
    groups: dict[str, dict[UUID, float]] = {group: {} for group in GENDER_GROUPS}
    for user_id, points in points_by_user.items():
        groups[gender_group(genders.get(user_id))][user_id] = points
    return groups
