"""
Automatic moderation rules.

A challenge's `auto_flag_rules` JSON may contain:

- max_points_per_activity: flag activities whose absolute points exceed it
- flag_activity_type_ids: always flag activities of these types

Dependencies: backend.core.scoring
System role: Decides whether a freshly logged activity needs admin review
"""

from uuid import UUID

from backend.core.scoring import config_value, to_number


def auto_flag_reason(
    rules: dict | None,
    activity_type_id: UUID,
    points_earned: float,
) -> str | None:
    """
    Reason to flag a new activity, or None when no rule triggers.

    Args:
        rules: The challenge's auto_flag_rules
        activity_type_id: Type of the logged activity
        points_earned: Signed points the activity scored
    """
    if not rules:
        return None

    flagged_types = {str(type_id) for type_id in config_value(rules, "flag_activity_type_ids") or []}
    if str(activity_type_id) in flagged_types:
        return "Auto-flagged: activity type requires review"

    max_points = config_value(rules, "max_points_per_activity")
    if max_points is not None and abs(points_earned) > to_number(max_points):
        return f"Auto-flagged: {points_earned:g} points exceeds the {to_number(max_points):g} point limit"

    return None
