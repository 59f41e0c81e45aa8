"""
Challenge API endpoints.

Routes:
- POST /challenges - Create challenge (creator joins as admin)
- GET /challenges - List public challenges
- GET /challenges/mine - List challenges the caller joined
- GET /challenges/{id} - Get challenge with participant count
- PATCH /challenges/{id} - Update settings or announcement
- POST /challenges/{id}/announcement/dismiss - Hide announcement for caller
- GET /challenges/{id}/activity-types - List activity types
- GET /challenges/{id}/feed - Activity feed (cursor paginated)
- GET /challenges/{id}/users/{user_id}/activities - A participant's activities

Dependencies: backend.application.services, backend.models
System role: Challenge configuration HTTP API
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends

from backend.api.deps.dependencies import (
    get_activity_service,
    get_activity_type_service,
    get_challenge_service,
    get_current_user,
)
from backend.api.routers.router_utils import handle_domain_errors
from backend.application.services.activity_service import ActivityService
from backend.application.services.activity_type_service import ActivityTypeService
from backend.application.services.challenge_service import ChallengeService
from backend.boundary.db.models.user_model import UserModel
from backend.models.activity import ActivityFeedResponse, ActivityResponse
from backend.models.challenge import (
    ActivityTypeResponse,
    ChallengeResponse,
    CreateChallengeRequest,
    UpdateChallengeRequest,
)
from backend.models.common import MessageResponse

from .challenge_responses import (
    map_activity_types_to_response,
    map_challenge_to_response,
    map_challenges_to_response,
    map_feed_to_response,
)
from .challenge_validators import validate_challenge_creation, validate_challenge_update

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/challenges", tags=["challenges"])


@router.post("", response_model=ChallengeResponse, status_code=201)
@handle_domain_errors
async def create_challenge(
    request: CreateChallengeRequest,
    current_user: UserModel = Depends(get_current_user),
    challenge_service: ChallengeService = Depends(get_challenge_service),
) -> ChallengeResponse:
    """
    Create a challenge owned by the caller.

    Args:
        request: CreateChallengeRequest with name, dates and scoring settings
        current_user: Authenticated caller
        challenge_service: Injected ChallengeService

    Returns:
        ChallengeResponse: Created challenge

    Raises:
        HTTPException(400): Invalid dates or settings
    """
    validate_challenge_creation(request)

    logger.info(
        "Creating challenge",
        extra={"challenge_name": request.name, "user_id": str(current_user.id)},
    )
    challenge = await challenge_service.create_challenge(
        current_user,
        name=request.name.strip(),
        start_date=request.start_date,
        end_date=request.end_date,
        description=request.description,
        duration_days=request.duration_days,
        streak_min_points=request.streak_min_points,
        week_calc_method=request.week_calc_method,
        auto_flag_rules=request.auto_flag_rules,
        visibility=request.visibility,
        payment_required=request.payment_required,
    )
    return map_challenge_to_response(challenge)


@router.get("", response_model=list[ChallengeResponse])
@handle_domain_errors
async def list_public_challenges(
    limit: int = 50,
    offset: int = 0,
    current_user: UserModel = Depends(get_current_user),
    challenge_service: ChallengeService = Depends(get_challenge_service),
) -> list[ChallengeResponse]:
    challenges = await challenge_service.list_public(limit=limit, offset=offset)
    return map_challenges_to_response(challenges)


@router.get("/mine", response_model=list[ChallengeResponse])
@handle_domain_errors
async def list_my_challenges(
    current_user: UserModel = Depends(get_current_user),
    challenge_service: ChallengeService = Depends(get_challenge_service),
) -> list[ChallengeResponse]:
    challenges = await challenge_service.list_for_user(current_user)
    return map_challenges_to_response(challenges)


@router.get("/{challenge_id}", response_model=ChallengeResponse)
@handle_domain_errors
async def get_challenge(
    challenge_id: UUID,
    current_user: UserModel = Depends(get_current_user),
    challenge_service: ChallengeService = Depends(get_challenge_service),
) -> ChallengeResponse:
    challenge = await challenge_service.get_challenge(challenge_id)
    return map_challenge_to_response(challenge)


@router.patch("/{challenge_id}", response_model=ChallengeResponse)
@handle_domain_errors
async def update_challenge(
    challenge_id: UUID,
    request: UpdateChallengeRequest,
    current_user: UserModel = Depends(get_current_user),
    challenge_service: ChallengeService = Depends(get_challenge_service),
) -> ChallengeResponse:
    """
    Update challenge settings (challenge admins only).

    Only fields present in the request body are changed; sending
    "announcement": null clears the announcement.
    """
    validate_challenge_update(request)

    changes = request.model_dump(exclude_unset=True)
    logger.info(
        "Updating challenge",
        extra={"challenge_id": str(challenge_id), "fields": sorted(changes)},
    )
    challenge = await challenge_service.update_challenge(current_user, challenge_id, **changes)
    return map_challenge_to_response(challenge)


@router.post("/{challenge_id}/announcement/dismiss", response_model=MessageResponse)
@handle_domain_errors
async def dismiss_announcement(
    challenge_id: UUID,
    current_user: UserModel = Depends(get_current_user),
    challenge_service: ChallengeService = Depends(get_challenge_service),
) -> MessageResponse:
    await challenge_service.dismiss_announcement(current_user, challenge_id)
    return MessageResponse(message="Announcement dismissed")


@router.get("/{challenge_id}/activity-types", response_model=list[ActivityTypeResponse])
@handle_domain_errors
async def list_activity_types(
    challenge_id: UUID,
    visible_only: bool = False,
    current_user: UserModel = Depends(get_current_user),
    activity_type_service: ActivityTypeService = Depends(get_activity_type_service),
) -> list[ActivityTypeResponse]:
    """
    List a challenge's activity types.

    Args:
        visible_only: Hide types not loggable in the current week
    """
    if visible_only:
        types = await activity_type_service.list_visible_activity_types(challenge_id)
    else:
        types = await activity_type_service.list_activity_types(challenge_id)
    return map_activity_types_to_response(types)


@router.get("/{challenge_id}/feed", response_model=ActivityFeedResponse)
@handle_domain_errors
async def get_challenge_feed(
    challenge_id: UUID,
    following_only: bool = False,
    limit: int = 20,
    cursor: int | None = None,
    current_user: UserModel = Depends(get_current_user),
    activity_service: ActivityService = Depends(get_activity_service),
) -> ActivityFeedResponse:
    feed = await activity_service.get_challenge_feed(
        current_user,
        challenge_id,
        following_only=following_only,
        limit=limit,
        cursor=cursor,
    )
    return map_feed_to_response(feed)


@router.get(
    "/{challenge_id}/users/{user_id}/activities",
    response_model=list[ActivityResponse],
)
@handle_domain_errors
async def list_user_activities(
    challenge_id: UUID,
    user_id: UUID,
    limit: int = 50,
    offset: int = 0,
    current_user: UserModel = Depends(get_current_user),
    activity_service: ActivityService = Depends(get_activity_service),
) -> list[ActivityResponse]:
    activities = await activity_service.list_user_activities(
        current_user, challenge_id, user_id, limit=limit, offset=offset
    )
    return [ActivityResponse(**activity) for activity in activities]
