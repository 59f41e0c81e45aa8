"""
User API endpoints.

Routes:
- POST /users/me - Create the caller's profile from the token if missing
- GET /users/me - Get the caller's profile
- PATCH /users/me - Update the caller's profile
- GET /users - List users (global admins)
- GET /users/{id} - Get a user's profile

Dependencies: backend.application.services, backend.models
System role: User profile HTTP API
"""

import logging
from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends

from backend.api.deps.dependencies import get_current_user, get_token_identity, get_user_service
from backend.api.routers.router_utils import handle_domain_errors
from backend.application.services.user_service import UserService, user_to_dict
from backend.boundary.db.models.user_model import UserModel
from backend.models.user import UpdateUserRequest, UserResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


@router.post("/me", response_model=UserResponse)
@handle_domain_errors
async def ensure_current_user(
    identity: dict[str, Any] = Depends(get_token_identity),
    user_service: UserService = Depends(get_user_service),
) -> UserResponse:
    """
    Bootstrap the caller's profile on first sign-in.

    Idempotent: returns the existing profile when one exists.
    """
    user = await user_service.ensure_current(identity)
    return UserResponse(**user)


@router.get("/me", response_model=UserResponse)
@handle_domain_errors
async def get_me(current_user: UserModel = Depends(get_current_user)) -> UserResponse:
    return UserResponse(**user_to_dict(current_user))


@router.patch("/me", response_model=UserResponse)
@handle_domain_errors
async def update_me(
    request: UpdateUserRequest,
    current_user: UserModel = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service),
) -> UserResponse:
    user = await user_service.update_user(
        current_user,
        name=request.name,
        username=request.username,
        avatar_url=request.avatar_url,
        gender=request.gender,
        age=request.age,
        clear_gender=request.clear_gender,
    )
    return UserResponse(**user)


@router.get("", response_model=list[UserResponse])
@handle_domain_errors
async def list_users(
    search: str | None = None,
    limit: int = 50,
    offset: int = 0,
    current_user: UserModel = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service),
) -> list[UserResponse]:
    users = await user_service.list_users(current_user, search=search, limit=limit, offset=offset)
    logger.info("Users listed", extra={"count": len(users)})
    return [UserResponse(**u) for u in users]


@router.get("/{user_id}", response_model=UserResponse)
@handle_domain_errors
async def get_user(
    user_id: UUID,
    current_user: UserModel = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service),
) -> UserResponse:
    user = await user_service.get_user(user_id)
    return UserResponse(**user)
