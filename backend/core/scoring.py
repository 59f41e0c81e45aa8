"""
Activity scoring engine.

Turns an activity type's scoring configuration plus the metrics a
participant submitted into points. Supports tiered, completion, variable,
variant, unit-based (with caps and the daily drink allowance) and default
per-unit scoring, followed by threshold, optional and media bonuses.

Scoring configs are stored as JSON and historically use camelCase keys
(`pointsPerUnit`); snake_case keys are accepted as well.

Dependencies: backend.core.dates
System role: Pure point calculation used when logging and rescoring activities
"""

import math
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Protocol

from backend.core.dates import format_date_only

MEDIA_BONUS_POINTS = 1

# Canonical aliases used across ingestion paths
UNIT_ALIASES: dict[str, list[str]] = {
    "miles": ["distance_miles", "mile", "distance_mile"],
    "kilometers": [
        "distance_km",
        "distance_kilometers",
        "km",
        "kilometres",
        "kilometer",
        "kilometre",
    ],
    "minutes": ["duration_minutes", "moving_minutes", "minute"],
    "count": ["counts", "instances", "instance"],
    "completion": ["completed", "is_completed"],
    "full_days": ["full_day"],
    "half_days": ["half_day"],
}

# Threshold metric name -> keys that may carry the value in activity metrics
THRESHOLD_METRIC_KEYS: dict[str, list[str]] = {
    "distance_miles": ["miles", "distance_miles", "distance"],
    "distance_km": ["kilometers", "km", "distance_km", "distance"],
    "duration_minutes": ["minutes", "duration_minutes", "duration"],
}

_CONDITION_OPERATORS = {
    "eq": lambda a, b: a == b,
    "lte": lambda a, b: a <= b,
    "gte": lambda a, b: a >= b,
    "lt": lambda a, b: a < b,
    "gt": lambda a, b: a > b,
}


class ScorableActivityType(Protocol):
    """Attributes of an activity type the engine reads."""

    scoring_config: dict | None
    bonus_thresholds: list | None
    is_negative: bool


@dataclass
class ScoringContext:
    """
    Inputs for a single scoring run.

    Attributes:
        metrics: Metrics submitted with the activity
        logged_date: When the activity happened (UTC)
        existing_daily_units: Drinks already logged by the user for this
            activity type on the same UTC day (drink scorer only)
    """

    metrics: dict[str, Any]
    logged_date: datetime
    existing_daily_units: float = 0.0


@dataclass
class TriggeredBonus:
    metric: str
    threshold: float
    bonus_points: float
    description: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "metric": self.metric,
            "threshold": self.threshold,
            "bonus_points": self.bonus_points,
            "description": self.description,
        }


@dataclass
class FinalScore:
    base_points: float
    bonus_points: float
    points_earned: float
    triggered_bonuses: list[TriggeredBonus] = field(default_factory=list)


def to_number(value: Any) -> float:
    """Coerce a metric value to a finite float; anything else becomes 0."""
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return 0.0
        try:
            number = float(text)
        except ValueError:
            return 0.0
    else:
        return 0.0
    return number if math.isfinite(number) else 0.0


def normalize_metric_key(key: str) -> str:
    return re.sub(r"[\s-]+", "_", key.strip().lower())


def _camel(key: str) -> str:
    head, *rest = key.split("_")
    return head + "".join(part.capitalize() for part in rest)


def config_value(config: dict, key: str, default: Any = None) -> Any:
    """Read `key` from a scoring config in snake_case or camelCase form."""
    for candidate in (key, _camel(key)):
        value = config.get(candidate)
        if value is not None:
            return value
    return default


def metric_value_for_unit(unit: str | None, metrics: dict[str, Any]) -> float | None:
    """
    Find the value for `unit` in submitted metrics.

    The exact key wins. Otherwise keys are normalized and compared against
    the unit, its singular/plural forms and its canonical aliases.

    Returns:
        float | None: Metric value, or None when no key matches
    """
    if not unit:
        return None

    if metrics.get(unit) is not None:
        return to_number(metrics[unit])

    normalized = normalize_metric_key(unit)
    singular = normalized[:-1] if normalized.endswith("s") else normalized
    plural = normalized if normalized.endswith("s") else f"{normalized}s"

    candidates = {normalized, singular, plural}
    candidates.update(UNIT_ALIASES.get(normalized) or UNIT_ALIASES.get(singular) or [])

    for key, value in metrics.items():
        if value is not None and normalize_metric_key(key) in candidates:
            return to_number(value)
    return None


def _per_unit_points(config: dict, metrics: dict[str, Any], unit: str | None) -> float:
    base_points = to_number(config_value(config, "base_points", 0))
    unit_value = metric_value_for_unit(unit, metrics)
    if unit_value is None:
        return base_points
    return base_points + unit_value * to_number(config_value(config, "points_per_unit", 1))


def calculate_default_points(config: dict, context: ScoringContext) -> float:
    return _per_unit_points(config, context.metrics, config_value(config, "unit"))


def calculate_tiered_points(config: dict, context: ScoringContext) -> float:
    metric = config_value(config, "metric")
    tiers = config_value(config, "tiers") or []
    if not metric or not tiers:
        return 0.0

    value = to_number(context.metrics.get(metric))
    for tier in tiers:
        max_value = config_value(tier, "max_value")
        if max_value is None or value <= to_number(max_value):
            return to_number(tier.get("points"))
    # Value exceeds every maxValue
    return to_number(tiers[-1].get("points"))


def calculate_completion_points(config: dict, context: ScoringContext) -> float:
    fixed = config_value(config, "fixed_points")
    if fixed is None:
        fixed = config.get("points", 0)
    return to_number(fixed)


def calculate_unit_based_points(config: dict, context: ScoringContext) -> float:
    base_points = to_number(config_value(config, "base_points", 0))
    unit_value = metric_value_for_unit(config_value(config, "unit"), context.metrics)
    if unit_value is None:
        return base_points

    max_units = config_value(config, "max_units")
    if max_units is not None and unit_value > to_number(max_units):
        unit_value = to_number(max_units)
    return base_points + unit_value * to_number(config_value(config, "points_per_unit", 1))


def calculate_drink_points(config: dict, context: ScoringContext) -> float:
    """
    Penalty points for drinks beyond the daily allowance.

    Only the units of this entry that push the day's total past
    `freebiesPerDay` are charged.
    """
    points_per_unit = to_number(config_value(config, "points_per_unit", 0))
    freebies = to_number(config_value(config, "freebies_per_day", 1))

    current = to_number(context.metrics.get("drinks"))
    existing = context.existing_daily_units
    penalty_before = max(0.0, existing - freebies)
    penalty_after = max(0.0, existing + current - freebies)
    return (penalty_after - penalty_before) * points_per_unit


def _variant_valid_on(variant: dict, logged_day: str) -> bool:
    valid_from = config_value(variant, "valid_from")
    valid_to = config_value(variant, "valid_to")
    if valid_from and logged_day < valid_from:
        return False
    if valid_to and logged_day > valid_to:
        return False
    return True


def evaluate_condition(condition: dict, metrics: dict[str, Any]) -> bool:
    field_name = condition.get("field")
    if field_name not in metrics or metrics[field_name] is None:
        return False
    compare = _CONDITION_OPERATORS.get(condition.get("operator"))
    if compare is None:
        return False
    return compare(to_number(metrics[field_name]), to_number(condition.get("value")))


def select_variant(
    variants: dict[str, dict],
    metrics: dict[str, Any],
    default_variant: str | None = None,
) -> str | None:
    """
    Pick the variant key to score with.

    Order: explicitly requested `metrics["variant"]`, then the first
    matching condition (lowest condition value first), then the default.
    """
    requested = metrics.get("variant")
    if isinstance(requested, str) and requested in variants:
        return requested

    conditional = sorted(
        ((key, variant) for key, variant in variants.items() if variant.get("condition")),
        key=lambda item: to_number(item[1]["condition"].get("value")),
    )
    for key, variant in conditional:
        if evaluate_condition(variant["condition"], metrics):
            return key

    if default_variant and default_variant in variants:
        return default_variant
    return None


def calculate_variant_points(config: dict, context: ScoringContext) -> float:
    variants = config_value(config, "variants")
    if not isinstance(variants, dict):
        return calculate_default_points(config, context)

    logged_day = format_date_only(context.logged_date)
    valid = {
        key: variant
        for key, variant in variants.items()
        if _variant_valid_on(variant, logged_day)
    }

    selected = select_variant(valid, context.metrics, config_value(config, "default_variant"))
    if selected is None:
        return calculate_default_points(config, context)

    variant = valid[selected]
    if variant.get("points") is not None:
        return to_number(variant["points"])
    unit = config_value(variant, "unit") or config_value(config, "unit")
    return _per_unit_points(variant, context.metrics, unit)


def calculate_activity_points(
    activity_type: ScorableActivityType,
    context: ScoringContext,
) -> float:
    """
    Base points for an activity before bonuses and sign rules.

    Args:
        activity_type: Activity type carrying the scoring config
        context: Submitted metrics and logging context

    Returns:
        float: Raw base points
    """
    config = activity_type.scoring_config or {}
    scoring_type = config.get("type")
    unit = config_value(config, "unit")

    if scoring_type == "tiered":
        return calculate_tiered_points(config, context)
    if scoring_type == "completion":
        return calculate_completion_points(config, context)
    if scoring_type == "variable":
        # Admin-assigned after review
        return 0.0
    if isinstance(config_value(config, "variants"), dict):
        return calculate_variant_points(config, context)
    if scoring_type == "unit_based" or unit:
        if unit == "drinks":
            return calculate_drink_points(config, context)
        return calculate_unit_based_points(config, context)
    return calculate_default_points(config, context)


def apply_point_sign(raw_points: float, is_negative: bool) -> float:
    """Force penalties negative; non-finite input scores 0."""
    if not math.isfinite(raw_points):
        return 0.0
    return -abs(raw_points) if is_negative else raw_points


def calculate_threshold_bonuses(
    bonus_thresholds: list[dict] | None,
    metrics: dict[str, Any],
) -> list[TriggeredBonus]:
    triggered = []
    for threshold in bonus_thresholds or []:
        metric = threshold.get("metric", "")
        value = 0.0
        for key in THRESHOLD_METRIC_KEYS.get(metric, [metric]):
            candidate = to_number(metrics.get(key))
            if candidate > 0:
                value = candidate
                break

        required = to_number(threshold.get("threshold"))
        if value >= required:
            triggered.append(
                TriggeredBonus(
                    metric=metric,
                    threshold=required,
                    bonus_points=to_number(config_value(threshold, "bonus_points", 0)),
                    description=threshold.get("description") or metric,
                )
            )
    return triggered


def calculate_optional_bonuses(
    config: dict,
    selected_bonuses: list[str] | None,
) -> list[TriggeredBonus]:
    optional = config_value(config, "optional_bonuses") or []
    if not optional or not selected_bonuses:
        return []
    return [
        TriggeredBonus(
            metric="optional",
            threshold=0,
            bonus_points=to_number(config_value(bonus, "bonus_points", 0)),
            description=bonus.get("description") or bonus.get("name", ""),
        )
        for bonus in optional
        if bonus.get("name") in selected_bonuses
    ]


def calculate_media_bonus(has_media: bool) -> TriggeredBonus | None:
    if not has_media:
        return None
    return TriggeredBonus(
        metric="media",
        threshold=1,
        bonus_points=MEDIA_BONUS_POINTS,
        description="Photo bonus",
    )


def selected_optional_bonuses(metrics: dict[str, Any]) -> list[str] | None:
    selected = metrics.get("selected_bonuses", metrics.get("selectedBonuses"))
    if isinstance(selected, list):
        return [str(name) for name in selected]
    return None


def calculate_final_score(
    activity_type: ScorableActivityType,
    context: ScoringContext,
    include_media_bonus: bool = False,
) -> FinalScore:
    """
    Full score for a logged activity.

    Combines base points with threshold, optional and media bonuses and
    applies the activity type's sign rule to the sum.

    Args:
        activity_type: Activity type being logged
        context: Submitted metrics and logging context
        include_media_bonus: Whether the activity carries a photo/video

    Returns:
        FinalScore: Base, bonus and signed total points plus bonus breakdown
    """
    base_points = calculate_activity_points(activity_type, context)

    triggered = calculate_threshold_bonuses(activity_type.bonus_thresholds, context.metrics)
    triggered += calculate_optional_bonuses(
        activity_type.scoring_config or {},
        selected_optional_bonuses(context.metrics),
    )
    media = calculate_media_bonus(include_media_bonus)
    if media:
        triggered.append(media)

    bonus_points = sum(bonus.bonus_points for bonus in triggered)
    return FinalScore(
        base_points=base_points,
        bonus_points=bonus_points,
        points_earned=apply_point_sign(base_points + bonus_points, activity_type.is_negative),
        triggered_bonuses=triggered,
    )
