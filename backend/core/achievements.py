"""
Achievement criteria evaluation.

Computes progress toward an achievement from a user's activities. Used
both for progress display and for awarding after an activity is logged.

Criteria are stored as JSON; keys may be snake_case or camelCase.

Dependencies: backend.core.scoring, backend.core.weeks
System role: Pure achievement rules
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Protocol
from uuid import UUID

from backend.core.dates import as_utc
from backend.core.scoring import THRESHOLD_METRIC_KEYS, config_value, to_number
from backend.core.weeks import week_start_sunday

CRITERIA_TYPES = (
    "count",
    "cumulative",
    "distinct_types",
    "one_of_each",
    "all_activity_type_thresholds",
)

FREQUENCIES = ("once_per_challenge", "once_per_week", "unlimited")

_ALTERNATE_DISTANCE = {
    "distance_miles": "distance_km",
    "distance_km": "distance_miles",
}


class AchievementActivity(Protocol):
    id: UUID
    activity_type_id: UUID
    metrics: dict | None


@dataclass
class CriteriaProgress:
    current_count: float
    required_count: float
    qualifying_activity_ids: list[UUID] = field(default_factory=list)

    @property
    def is_met(self) -> bool:
        return self.required_count > 0 and self.current_count >= self.required_count


def metric_value(metrics: dict[str, Any] | None, metric: str) -> float:
    """First positive value among the keys that can carry `metric`."""
    metrics = metrics or {}
    for key in THRESHOLD_METRIC_KEYS.get(metric, [metric]):
        value = to_number(metrics.get(key))
        if value > 0:
            return value
    return 0.0


def criteria_type(criteria: dict) -> str:
    kind = config_value(criteria, "criteria_type")
    if kind:
        return kind
    if criteria.get("type") == "all_activity_type_thresholds":
        return "all_activity_type_thresholds"
    # Legacy "count_threshold" and untyped criteria both count activities
    return "count"


def _as_uuid(value: Any) -> UUID | None:
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except (TypeError, ValueError):
        return None


def _requirements(criteria: dict) -> list[dict]:
    return config_value(criteria, "requirements") or []


def criteria_activity_type_ids(criteria: dict) -> list[UUID]:
    """Activity type ids an achievement looks at, deduplicated in order."""
    if criteria_type(criteria) == "all_activity_type_thresholds":
        raw = [config_value(req, "activity_type_id") for req in _requirements(criteria)]
    else:
        raw = config_value(criteria, "activity_type_ids") or []

    ids: list[UUID] = []
    for value in raw:
        type_id = _as_uuid(value)
        if type_id and type_id not in ids:
            ids.append(type_id)
    return ids


def _unit_conversion(criteria: dict, type_id: UUID) -> float:
    conversions = config_value(criteria, "unit_conversions") or {}
    factor = conversions.get(str(type_id))
    return to_number(factor) if factor is not None else 1.0


def evaluate_criteria(
    criteria: dict,
    activities: list[AchievementActivity],
) -> CriteriaProgress:
    """
    Progress toward `criteria` over a user's non-deleted activities.

    Args:
        criteria: Achievement criteria JSON
        activities: The user's activities in the challenge, oldest first

    Returns:
        CriteriaProgress: Current count, required count and qualifying ids
    """
    kind = criteria_type(criteria)
    type_ids = criteria_activity_type_ids(criteria)
    matching = [a for a in activities if a.activity_type_id in type_ids]

    if kind == "count":
        metric = config_value(criteria, "metric", "")
        threshold = to_number(config_value(criteria, "threshold", 0))
        qualifying = [a.id for a in matching if metric_value(a.metrics, metric) >= threshold]
        return CriteriaProgress(
            current_count=len(qualifying),
            required_count=to_number(config_value(criteria, "required_count", 0)),
            qualifying_activity_ids=qualifying,
        )

    if kind == "cumulative":
        metric = config_value(criteria, "metric", "")
        total = 0.0
        ids = []
        for activity in matching:
            factor = _unit_conversion(criteria, activity.activity_type_id)
            value = metric_value(activity.metrics, metric)
            if value == 0 and factor != 1:
                value = metric_value(activity.metrics, _ALTERNATE_DISTANCE.get(metric, metric))
            value *= factor
            if value > 0:
                total += value
                ids.append(activity.id)
        return CriteriaProgress(
            current_count=round(total, 2),
            required_count=to_number(config_value(criteria, "threshold", 0)),
            qualifying_activity_ids=ids,
        )

    if kind in ("distinct_types", "one_of_each"):
        seen: dict[UUID, UUID] = {}
        for activity in matching:
            seen.setdefault(activity.activity_type_id, activity.id)
        if kind == "distinct_types":
            required = to_number(config_value(criteria, "required_count", 0))
        else:
            required = len(type_ids)
        return CriteriaProgress(
            current_count=len(seen),
            required_count=required,
            qualifying_activity_ids=list(seen.values()),
        )

    if kind == "all_activity_type_thresholds":
        requirements = _requirements(criteria)
        qualifying_by_type: dict[UUID, UUID] = {}
        for requirement in requirements:
            type_id = _as_uuid(config_value(requirement, "activity_type_id"))
            metric = requirement.get("metric", "")
            threshold = to_number(requirement.get("threshold"))
            found = next(
                (
                    a
                    for a in matching
                    if a.activity_type_id == type_id
                    and metric_value(a.metrics, metric) >= threshold
                ),
                None,
            )
            if found is not None:
                qualifying_by_type[type_id] = found.id
        return CriteriaProgress(
            current_count=len(qualifying_by_type),
            required_count=len(requirements),
            qualifying_activity_ids=list(qualifying_by_type.values()),
        )

    return CriteriaProgress(current_count=0, required_count=0)


def earned_window_start(frequency: str, now: datetime) -> datetime | None:
    """
    Earliest `earned_at` that blocks another award.

    Returns:
        datetime | None: Start of the blocking window; None means any earlier
        award blocks (once per challenge)

    Raises:
        ValueError: For `unlimited`, which never blocks
    """
    if frequency == "once_per_week":
        return week_start_sunday(now)
    if frequency == "once_per_challenge":
        return None
    raise ValueError(f"Frequency {frequency!r} has no earned window")


def is_blocked_by_earlier_award(
    frequency: str,
    earned_at: list[datetime],
    now: datetime,
) -> bool:
    """Whether previous awards prevent earning the achievement again now."""
    if frequency == "unlimited" or not earned_at:
        return False
    window_start = earned_window_start(frequency, now)
    if window_start is None:
        return True
    return any(as_utc(when) >= window_start for when in earned_at)
