"""
Admin moderation API endpoints.

Routes:
- GET /admin/challenges/{id}/flagged - Flagged activity review queue
- GET /admin/challenges/{id}/out-of-bounds - Activities dated outside the challenge
- GET /admin/activities/{id} - Activity detail with moderation history
- PATCH /admin/activities/{id}/resolution - Resolve or reopen a flag
- POST /admin/activities/{id}/comment - Add admin comment
- PATCH /admin/activities/{id} - Edit activity fields
- PATCH /admin/achievements/{id} - Update achievement
- DELETE /admin/achievements/{id} - Delete achievement and its awards

All routes require challenge admin rights on the target's challenge.

Dependencies: backend.application.services, backend.models
System role: Moderation HTTP API
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends

from backend.api.deps.dependencies import (
    get_achievement_service,
    get_admin_service,
    get_current_user,
)
from backend.api.routers.router_utils import handle_domain_errors
from backend.application.services.achievement_service import AchievementService
from backend.application.services.admin_service import AdminService
from backend.boundary.db.models.user_model import UserModel
from backend.models.achievement import AchievementResponse, UpdateAchievementRequest
from backend.models.activity import ActivityResponse
from backend.models.admin import (
    AdminCommentRequest,
    AdminEditActivityRequest,
    FlaggedActivityDetailResponse,
    UpdateResolutionRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/challenges/{challenge_id}/flagged", response_model=list[ActivityResponse])
@handle_domain_errors
async def list_flagged_activities(
    challenge_id: UUID,
    status: str | None = None,
    participant_id: UUID | None = None,
    search: str | None = None,
    limit: int = 50,
    offset: int = 0,
    current_user: UserModel = Depends(get_current_user),
    admin_service: AdminService = Depends(get_admin_service),
) -> list[ActivityResponse]:
    """
    List flagged activities, newest flag first.

    Args:
        status: pending or resolved
        participant_id: Only this participant's activities
        search: Case-insensitive match on user name, email or flag reason
    """
    activities = await admin_service.list_flagged_activities(
        current_user,
        challenge_id,
        status=status,
        participant_id=participant_id,
        search=search,
        limit=limit,
        offset=offset,
    )
    return [ActivityResponse(**a) for a in activities]


@router.get("/challenges/{challenge_id}/out-of-bounds", response_model=list[ActivityResponse])
@handle_domain_errors
async def list_out_of_bounds_activities(
    challenge_id: UUID,
    current_user: UserModel = Depends(get_current_user),
    admin_service: AdminService = Depends(get_admin_service),
) -> list[ActivityResponse]:
    activities = await admin_service.check_out_of_bounds_activities(current_user, challenge_id)
    logger.info(
        "Out-of-bounds check complete",
        extra={"challenge_id": str(challenge_id), "count": len(activities)},
    )
    return [ActivityResponse(**a) for a in activities]


@router.get("/activities/{activity_id}", response_model=FlaggedActivityDetailResponse)
@handle_domain_errors
async def get_flagged_activity_detail(
    activity_id: UUID,
    current_user: UserModel = Depends(get_current_user),
    admin_service: AdminService = Depends(get_admin_service),
) -> FlaggedActivityDetailResponse:
    detail = await admin_service.get_flagged_activity_detail(current_user, activity_id)
    return FlaggedActivityDetailResponse(**detail)


@router.patch("/activities/{activity_id}/resolution", response_model=ActivityResponse)
@handle_domain_errors
async def update_flag_resolution(
    activity_id: UUID,
    request: UpdateResolutionRequest,
    current_user: UserModel = Depends(get_current_user),
    admin_service: AdminService = Depends(get_admin_service),
) -> ActivityResponse:
    activity = await admin_service.update_flag_resolution(
        current_user, activity_id, request.status, request.notes
    )
    return ActivityResponse(**activity)


@router.post("/activities/{activity_id}/comment", response_model=ActivityResponse)
@handle_domain_errors
async def add_admin_comment(
    activity_id: UUID,
    request: AdminCommentRequest,
    current_user: UserModel = Depends(get_current_user),
    admin_service: AdminService = Depends(get_admin_service),
) -> ActivityResponse:
    activity = await admin_service.add_admin_comment(
        current_user, activity_id, request.comment, request.visibility
    )
    return ActivityResponse(**activity)


@router.patch("/activities/{activity_id}", response_model=ActivityResponse)
@handle_domain_errors
async def admin_edit_activity(
    activity_id: UUID,
    request: AdminEditActivityRequest,
    current_user: UserModel = Depends(get_current_user),
    admin_service: AdminService = Depends(get_admin_service),
) -> ActivityResponse:
    """
    Correct an activity's type, points, notes, date or metrics.

    Raises:
        HTTPException(400): Nothing changed or type from another challenge
    """
    activity = await admin_service.admin_edit_activity(
        current_user,
        activity_id,
        activity_type_id=request.activity_type_id,
        points_earned=request.points_earned,
        notes=request.notes,
        logged_date=request.logged_date,
        metrics=request.metrics,
    )
    return ActivityResponse(**activity)


@router.patch("/achievements/{achievement_id}", response_model=AchievementResponse)
@handle_domain_errors
async def update_achievement(
    achievement_id: UUID,
    request: UpdateAchievementRequest,
    current_user: UserModel = Depends(get_current_user),
    achievement_service: AchievementService = Depends(get_achievement_service),
) -> AchievementResponse:
    achievement = await achievement_service.update_achievement(
        current_user,
        achievement_id,
        name=request.name,
        description=request.description,
        bonus_points=request.bonus_points,
        criteria=request.criteria,
        frequency=request.frequency,
    )
    return AchievementResponse(**achievement)


@router.delete("/achievements/{achievement_id}", status_code=204)
@handle_domain_errors
async def delete_achievement(
    achievement_id: UUID,
    current_user: UserModel = Depends(get_current_user),
    achievement_service: AchievementService = Depends(get_achievement_service),
) -> None:
    await achievement_service.delete_achievement(current_user, achievement_id)
