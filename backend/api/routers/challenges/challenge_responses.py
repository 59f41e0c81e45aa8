"""
Challenge response mapping utilities.

Transforms service dictionaries into Pydantic response models.

Dependencies: backend.models
System role: Challenge response transformation
"""

from typing import Any

from backend.models.activity import ActivityFeedResponse, ActivityResponse
from backend.models.challenge import ActivityTypeResponse, ChallengeResponse
from backend.models.participation import ParticipationResponse


def map_challenge_to_response(challenge_data: dict[str, Any]) -> ChallengeResponse:
    return ChallengeResponse(**challenge_data)


def map_challenges_to_response(challenges_data: list[dict[str, Any]]) -> list[ChallengeResponse]:
    return [map_challenge_to_response(challenge) for challenge in challenges_data]


def map_activity_types_to_response(types_data: list[dict[str, Any]]) -> list[ActivityTypeResponse]:
    return [ActivityTypeResponse(**activity_type) for activity_type in types_data]


def map_participations_to_response(
    participations_data: list[dict[str, Any]],
) -> list[ParticipationResponse]:
    return [ParticipationResponse(**participation) for participation in participations_data]


def map_feed_to_response(feed_data: dict[str, Any]) -> ActivityFeedResponse:
    """
    Transform a feed page into ActivityFeedResponse.

    Args:
        feed_data: Dictionary with items, next_cursor and is_done

    Returns:
        ActivityFeedResponse: Page of enriched activities
    """
    return ActivityFeedResponse(
        items=[ActivityResponse(**item) for item in feed_data["items"]],
        next_cursor=feed_data["next_cursor"],
        is_done=feed_data["is_done"],
    )
