"""
Activity type API endpoints.

Routes:
- POST /activity-types - Add activity type to a challenge (challenge admins)
- GET /activity-types/{id} - Get activity type
- PATCH /activity-types/{id} - Update activity type (challenge admins)

Listing lives under GET /challenges/{id}/activity-types.

Dependencies: backend.application.services, backend.models
System role: Scoring configuration HTTP API
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends

from backend.api.deps.dependencies import get_activity_type_service, get_current_user
from backend.api.routers.router_utils import handle_domain_errors
from backend.application.services.activity_type_service import ActivityTypeService
from backend.boundary.db.models.user_model import UserModel
from backend.models.challenge import (
    ActivityTypeResponse,
    CreateActivityTypeRequest,
    UpdateActivityTypeRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/activity-types", tags=["activity-types"])


@router.post("", response_model=ActivityTypeResponse, status_code=201)
@handle_domain_errors
async def create_activity_type(
    request: CreateActivityTypeRequest,
    current_user: UserModel = Depends(get_current_user),
    activity_type_service: ActivityTypeService = Depends(get_activity_type_service),
) -> ActivityTypeResponse:
    logger.info(
        "Creating activity type",
        extra={"challenge_id": str(request.challenge_id), "activity_type_name": request.name},
    )
    fields = request.model_dump(exclude={"challenge_id", "name", "scoring_config"})
    activity_type = await activity_type_service.create_activity_type(
        current_user,
        request.challenge_id,
        name=request.name,
        scoring_config=request.scoring_config,
        **fields,
    )
    return ActivityTypeResponse(**activity_type)


@router.get("/{activity_type_id}", response_model=ActivityTypeResponse)
@handle_domain_errors
async def get_activity_type(
    activity_type_id: UUID,
    current_user: UserModel = Depends(get_current_user),
    activity_type_service: ActivityTypeService = Depends(get_activity_type_service),
) -> ActivityTypeResponse:
    activity_type = await activity_type_service.get_activity_type(activity_type_id)
    return ActivityTypeResponse(**activity_type)


@router.patch("/{activity_type_id}", response_model=ActivityTypeResponse)
@handle_domain_errors
async def update_activity_type(
    activity_type_id: UUID,
    request: UpdateActivityTypeRequest,
    current_user: UserModel = Depends(get_current_user),
    activity_type_service: ActivityTypeService = Depends(get_activity_type_service),
) -> ActivityTypeResponse:
    """
    Update an activity type.

    Only fields present in the body change; send null to clear
    category_id, max_per_challenge or display_order.
    """
    changes = request.model_dump(exclude_unset=True)
    activity_type = await activity_type_service.update_activity_type(
        current_user, activity_type_id, **changes
    )
    return ActivityTypeResponse(**activity_type)
