"""
Social API endpoints.

Routes:
- POST /social/activities/{id}/like - Toggle like
- GET /social/activities/{id}/comments - List comments, oldest first
- POST /social/activities/{id}/comments - Add comment
- POST /social/users/{id}/follow - Follow user
- DELETE /social/users/{id}/follow - Unfollow user
- POST /social/users/{id}/follow/toggle - Toggle follow
- GET /social/users/{id}/follow - Whether the caller follows the user
- GET /social/users/{id}/follow-counts - Follower and following counts
- GET /social/users/{id}/followers - Followers
- GET /social/users/{id}/following - Users followed

Dependencies: backend.application.services, backend.models
System role: Likes, comments and follows HTTP API
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends

from backend.api.deps.dependencies import get_current_user, get_social_service
from backend.api.routers.router_utils import handle_domain_errors
from backend.application.services.social_service import SocialService
from backend.boundary.db.models.user_model import UserModel
from backend.models.common import UserSummary
from backend.models.social import (
    CommentResponse,
    CreateCommentRequest,
    FollowCountsResponse,
    FollowResponse,
    LikeResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/social", tags=["social"])


@router.post("/activities/{activity_id}/like", response_model=LikeResponse)
@handle_domain_errors
async def toggle_like(
    activity_id: UUID,
    current_user: UserModel = Depends(get_current_user),
    social_service: SocialService = Depends(get_social_service),
) -> LikeResponse:
    result = await social_service.toggle_like(current_user, activity_id)
    return LikeResponse(**result)


@router.get("/activities/{activity_id}/comments", response_model=list[CommentResponse])
@handle_domain_errors
async def list_comments(
    activity_id: UUID,
    current_user: UserModel = Depends(get_current_user),
    social_service: SocialService = Depends(get_social_service),
) -> list[CommentResponse]:
    comments = await social_service.list_comments(activity_id)
    return [CommentResponse(**c) for c in comments]


@router.post(
    "/activities/{activity_id}/comments",
    response_model=CommentResponse,
    status_code=201,
)
@handle_domain_errors
async def create_comment(
    activity_id: UUID,
    request: CreateCommentRequest,
    current_user: UserModel = Depends(get_current_user),
    social_service: SocialService = Depends(get_social_service),
) -> CommentResponse:
    """
    Comment on an activity.

    The activity's owner is notified unless commenting on their own activity.

    Raises:
        HTTPException(400): Empty comment
        HTTPException(404): Activity not found
    """
    comment = await social_service.create_comment(current_user, activity_id, request.content)
    return CommentResponse(**comment)


@router.post("/users/{user_id}/follow", response_model=FollowResponse)
@handle_domain_errors
async def follow_user(
    user_id: UUID,
    current_user: UserModel = Depends(get_current_user),
    social_service: SocialService = Depends(get_social_service),
) -> FollowResponse:
    result = await social_service.follow(current_user, user_id)
    return FollowResponse(**result)


@router.delete("/users/{user_id}/follow", response_model=FollowResponse)
@handle_domain_errors
async def unfollow_user(
    user_id: UUID,
    current_user: UserModel = Depends(get_current_user),
    social_service: SocialService = Depends(get_social_service),
) -> FollowResponse:
    result = await social_service.unfollow(current_user, user_id)
    return FollowResponse(**result)


@router.post("/users/{user_id}/follow/toggle", response_model=FollowResponse)
@handle_domain_errors
async def toggle_follow(
    user_id: UUID,
    current_user: UserModel = Depends(get_current_user),
    social_service: SocialService = Depends(get_social_service),
) -> FollowResponse:
    result = await social_service.toggle_follow(current_user, user_id)
    return FollowResponse(**result)


@router.get("/users/{user_id}/follow", response_model=FollowResponse)
@handle_domain_errors
async def get_follow_status(
    user_id: UUID,
    current_user: UserModel = Depends(get_current_user),
    social_service: SocialService = Depends(get_social_service),
) -> FollowResponse:
    following = await social_service.is_following(current_user, user_id)
    return FollowResponse(following=following)


@router.get("/users/{user_id}/follow-counts", response_model=FollowCountsResponse)
@handle_domain_errors
async def get_follow_counts(
    user_id: UUID,
    current_user: UserModel = Depends(get_current_user),
    social_service: SocialService = Depends(get_social_service),
) -> FollowCountsResponse:
    counts = await social_service.follow_counts(user_id)
    return FollowCountsResponse(**counts)


@router.get("/users/{user_id}/followers", response_model=list[UserSummary])
@handle_domain_errors
async def list_followers(
    user_id: UUID,
    current_user: UserModel = Depends(get_current_user),
    social_service: SocialService = Depends(get_social_service),
) -> list[UserSummary]:
    followers = await social_service.list_followers(user_id)
    return [UserSummary(**u) for u in followers]


@router.get("/users/{user_id}/following", response_model=list[UserSummary])
@handle_domain_errors
async def list_following(
    user_id: UUID,
    current_user: UserModel = Depends(get_current_user),
    social_service: SocialService = Depends(get_social_service),
) -> list[UserSummary]:
    following = await social_service.list_following(user_id)
    return [UserSummary(**u) for u in following]
