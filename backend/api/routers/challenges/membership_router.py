"""
Challenge membership API endpoints.

Routes:
- POST /challenges/{id}/join - Join (invite code or inviter for private challenges)
- GET /challenges/{id}/participation - Caller's participation, or null
- GET /challenges/{id}/participants - Participants ranked by points
- GET /challenges/{id}/mentionable - Members matching a search, for @mentions
- PATCH /challenges/{id}/participants/{user_id}/role - Change member role
- PATCH /challenges/{id}/participants/{user_id}/payment - Change payment status
- GET /challenges/{id}/invite-code - Caller's personal invite code
- GET /challenges/invites/{code} - Resolve an invite code

Dependencies: backend.application.services, backend.models
System role: Challenge membership HTTP API
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status

from backend.api.deps.dependencies import get_current_user, get_participation_service
from backend.api.routers.router_utils import handle_domain_errors
from backend.application.services.participation_service import ParticipationService
from backend.boundary.db.models.user_model import UserModel
from backend.models.common import UserSummary
from backend.models.participation import (
    InviteCodeResponse,
    JoinChallengeRequest,
    ParticipationResponse,
    ResolvedInviteResponse,
    UpdatePaymentStatusRequest,
    UpdateRoleRequest,
)

from .challenge_responses import map_participations_to_response

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/challenges", tags=["participation"])


@router.get("/invites/{code}", response_model=ResolvedInviteResponse)
@handle_domain_errors
async def resolve_invite_code(
    code: str,
    participation_service: ParticipationService = Depends(get_participation_service),
) -> ResolvedInviteResponse:
    """
    Resolve an invite code to its challenge and inviter.

    Public so invite links can be previewed before signing in.

    Raises:
        HTTPException(404): Unknown code
    """
    invite = await participation_service.resolve_invite_code(code)
    if invite is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Invite code not found")
    return ResolvedInviteResponse(**invite)


@router.post("/{challenge_id}/join", response_model=ParticipationResponse, status_code=201)
@handle_domain_errors
async def join_challenge(
    challenge_id: UUID,
    request: JoinChallengeRequest | None = None,
    current_user: UserModel = Depends(get_current_user),
    participation_service: ParticipationService = Depends(get_participation_service),
) -> ParticipationResponse:
    """
    Join a challenge.

    Raises:
        HTTPException(403): Private challenge without an invitation
        HTTPException(409): Already joined
    """
    request = request or JoinChallengeRequest()
    logger.info(
        "Joining challenge",
        extra={
            "challenge_id": str(challenge_id),
            "user_id": str(current_user.id),
            "has_invite_code": bool(request.invite_code),
        },
    )
    participation = await participation_service.join(
        current_user,
        challenge_id,
        invite_code=request.invite_code,
        invited_by_user_id=request.invited_by_user_id,
    )
    return ParticipationResponse(**participation)


@router.get("/{challenge_id}/participation", response_model=ParticipationResponse | None)
@handle_domain_errors
async def get_my_participation(
    challenge_id: UUID,
    current_user: UserModel = Depends(get_current_user),
    participation_service: ParticipationService = Depends(get_participation_service),
) -> ParticipationResponse | None:
    participation = await participation_service.get_participation(current_user, challenge_id)
    return ParticipationResponse(**participation) if participation else None


@router.get("/{challenge_id}/participants", response_model=list[ParticipationResponse])
@handle_domain_errors
async def list_participants(
    challenge_id: UUID,
    limit: int = 100,
    offset: int = 0,
    current_user: UserModel = Depends(get_current_user),
    participation_service: ParticipationService = Depends(get_participation_service),
) -> list[ParticipationResponse]:
    participants = await participation_service.list_participants(
        challenge_id, limit=limit, offset=offset
    )
    return map_participations_to_response(participants)


@router.get("/{challenge_id}/mentionable", response_model=list[UserSummary])
@handle_domain_errors
async def get_mentionable_users(
    challenge_id: UUID,
    search: str | None = None,
    current_user: UserModel = Depends(get_current_user),
    participation_service: ParticipationService = Depends(get_participation_service),
) -> list[UserSummary]:
    users = await participation_service.get_mentionable(challenge_id, search=search)
    return [UserSummary(**user) for user in users]


@router.patch(
    "/{challenge_id}/participants/{user_id}/role",
    response_model=ParticipationResponse,
)
@handle_domain_errors
async def update_participant_role(
    challenge_id: UUID,
    user_id: UUID,
    request: UpdateRoleRequest,
    current_user: UserModel = Depends(get_current_user),
    participation_service: ParticipationService = Depends(get_participation_service),
) -> ParticipationResponse:
    participation = await participation_service.update_role(
        current_user, challenge_id, user_id, request.role
    )
    return ParticipationResponse(**participation)


@router.patch(
    "/{challenge_id}/participants/{user_id}/payment",
    response_model=ParticipationResponse,
)
@handle_domain_errors
async def update_payment_status(
    challenge_id: UUID,
    user_id: UUID,
    request: UpdatePaymentStatusRequest,
    current_user: UserModel = Depends(get_current_user),
    participation_service: ParticipationService = Depends(get_participation_service),
) -> ParticipationResponse:
    participation = await participation_service.set_payment_status(
        current_user, challenge_id, user_id, request.status
    )
    return ParticipationResponse(**participation)


@router.get("/{challenge_id}/invite-code", response_model=InviteCodeResponse)
@handle_domain_errors
async def get_invite_code(
    challenge_id: UUID,
    current_user: UserModel = Depends(get_current_user),
    participation_service: ParticipationService = Depends(get_participation_service),
) -> InviteCodeResponse:
    invite = await participation_service.get_or_create_invite_code(current_user, challenge_id)
    return InviteCodeResponse(**invite)
