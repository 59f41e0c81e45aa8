"""
Forum API endpoints.

Routes:
- POST /forum/posts - Create post or reply
- GET /forum/posts/{id} - Post with replies
- PATCH /forum/posts/{id} - Edit post (author or challenge admin)
- DELETE /forum/posts/{id} - Remove post (author or challenge admin)
- POST /forum/posts/{id}/upvote - Toggle upvote
- POST /forum/posts/{id}/pin - Toggle pin (challenge admins)

Listing lives under GET /challenges/{id}/forum.

Dependencies: backend.application.services, backend.models
System role: Forum HTTP API
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends

from backend.api.deps.dependencies import get_current_user, get_forum_service
from backend.api.routers.router_utils import handle_domain_errors
from backend.application.services.forum_service import ForumService
from backend.boundary.db.models.user_model import UserModel
from backend.models.forum import (
    CreatePostRequest,
    ForumPostDetailResponse,
    ForumPostResponse,
    PinResponse,
    UpdatePostRequest,
    UpvoteResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/forum", tags=["forum"])


@router.post("/posts", response_model=ForumPostResponse, status_code=201)
@handle_domain_errors
async def create_post(
    request: CreatePostRequest,
    current_user: UserModel = Depends(get_current_user),
    forum_service: ForumService = Depends(get_forum_service),
) -> ForumPostResponse:
    """
    Create a top-level post (title required) or a reply.

    Raises:
        HTTPException(400): Empty content or missing title
        HTTPException(403): Not participating in the challenge
        HTTPException(404): Parent post not found
    """
    post = await forum_service.create_post(
        current_user,
        request.challenge_id,
        content=request.content,
        title=request.title,
        parent_post_id=request.parent_post_id,
    )
    return ForumPostResponse(**post)


@router.get("/posts/{post_id}", response_model=ForumPostDetailResponse)
@handle_domain_errors
async def get_post(
    post_id: UUID,
    current_user: UserModel = Depends(get_current_user),
    forum_service: ForumService = Depends(get_forum_service),
) -> ForumPostDetailResponse:
    post = await forum_service.get_post(current_user, post_id)
    return ForumPostDetailResponse(**post)


@router.patch("/posts/{post_id}", response_model=ForumPostResponse)
@handle_domain_errors
async def update_post(
    post_id: UUID,
    request: UpdatePostRequest,
    current_user: UserModel = Depends(get_current_user),
    forum_service: ForumService = Depends(get_forum_service),
) -> ForumPostResponse:
    post = await forum_service.update_post(
        current_user, post_id, content=request.content, title=request.title
    )
    return ForumPostResponse(**post)


@router.delete("/posts/{post_id}", status_code=204)
@handle_domain_errors
async def remove_post(
    post_id: UUID,
    current_user: UserModel = Depends(get_current_user),
    forum_service: ForumService = Depends(get_forum_service),
) -> None:
    await forum_service.remove_post(current_user, post_id)


@router.post("/posts/{post_id}/upvote", response_model=UpvoteResponse)
@handle_domain_errors
async def toggle_upvote(
    post_id: UUID,
    current_user: UserModel = Depends(get_current_user),
    forum_service: ForumService = Depends(get_forum_service),
) -> UpvoteResponse:
    result = await forum_service.toggle_upvote(current_user, post_id)
    return UpvoteResponse(**result)


@router.post("/posts/{post_id}/pin", response_model=PinResponse)
@handle_domain_errors
async def toggle_pin(
    post_id: UUID,
    current_user: UserModel = Depends(get_current_user),
    forum_service: ForumService = Depends(get_forum_service),
) -> PinResponse:
    result = await forum_service.toggle_pin(current_user, post_id)
    return PinResponse(**result)
