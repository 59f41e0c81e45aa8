"""
Activity API endpoints.

Routes:
- POST /activities - Log an activity and score it
- POST /activities/media/upload-url - Presigned URL for a photo upload
- GET /activities/{id} - Get an activity with social counts
- DELETE /activities/{id} - Soft-delete own activity (admins: any)
- POST /activities/{id}/flag - Report an activity for review

The feed and per-user listings live under /challenges/{id}.

Dependencies: backend.application.services, backend.models
System role: Activity logging HTTP API
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status

from backend.api.deps.dependencies import (
    get_activity_service,
    get_current_user,
    get_media_client,
    get_settings_dependency,
)
from backend.api.routers.router_utils import handle_domain_errors
from backend.application.services.activity_service import ActivityService
from backend.boundary.aws.s3_client import S3MediaClient
from backend.boundary.db.models.user_model import UserModel
from backend.configs import Settings
from backend.models.activity import (
    ActivityResponse,
    DeleteActivityRequest,
    FlagActivityRequest,
    LogActivityRequest,
    LogActivityResponse,
    MediaUploadRequest,
    MediaUploadResponse,
)

from .media_upload_handler import MediaUploadError, handle_media_upload_request

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/activities", tags=["activities"])


@router.post("", response_model=LogActivityResponse, status_code=201)
@handle_domain_errors
async def log_activity(
    request: LogActivityRequest,
    current_user: UserModel = Depends(get_current_user),
    activity_service: ActivityService = Depends(get_activity_service),
) -> LogActivityResponse:
    """
    Log an activity for the caller.

    Scores the activity, updates the caller's total and streak, and
    awards any newly earned achievements.

    Raises:
        HTTPException(400): Metrics, date or type limits invalid
        HTTPException(403): Not participating in the challenge
        HTTPException(404): Challenge or activity type not found
    """
    logger.info(
        "Logging activity",
        extra={
            "challenge_id": str(request.challenge_id),
            "activity_type_id": str(request.activity_type_id),
            "user_id": str(current_user.id),
        },
    )
    result = await activity_service.log_activity(
        current_user,
        request.challenge_id,
        request.activity_type_id,
        logged_date=request.logged_date,
        metrics=request.metrics,
        notes=request.notes,
        image_url=request.image_url,
        media_keys=request.media_keys,
        source=request.source,
        external_id=request.external_id,
        external_data=request.external_data,
    )
    return LogActivityResponse(**result)


@router.post("/media/upload-url", response_model=MediaUploadResponse)
@handle_domain_errors
async def get_media_upload_url(
    request: MediaUploadRequest,
    current_user: UserModel = Depends(get_current_user),
    media_client: S3MediaClient = Depends(get_media_client),
    settings: Settings = Depends(get_settings_dependency),
) -> MediaUploadResponse:
    """
    Generate a presigned URL for uploading an activity photo to S3.

    Raises:
        HTTPException(400): Invalid filename or extension
        HTTPException(502): S3 presigning failed
    """
    try:
        return handle_media_upload_request(
            current_user.id, request, media_client, settings.s3_media
        )
    except MediaUploadError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))


@router.get("/{activity_id}", response_model=ActivityResponse)
@handle_domain_errors
async def get_activity(
    activity_id: UUID,
    current_user: UserModel = Depends(get_current_user),
    activity_service: ActivityService = Depends(get_activity_service),
) -> ActivityResponse:
    activity = await activity_service.get_activity(current_user, activity_id)
    return ActivityResponse(**activity)


@router.delete("/{activity_id}", status_code=204)
@handle_domain_errors
async def delete_activity(
    activity_id: UUID,
    request: DeleteActivityRequest | None = None,
    current_user: UserModel = Depends(get_current_user),
    activity_service: ActivityService = Depends(get_activity_service),
) -> None:
    """
    Soft-delete an activity and reverse its points.

    Owners delete their own; challenge admins may delete any, and the
    owner is notified with the given reason.
    """
    reason = request.reason if request else None
    await activity_service.delete_activity(current_user, activity_id, reason=reason)


@router.post("/{activity_id}/flag", response_model=ActivityResponse)
@handle_domain_errors
async def flag_activity(
    activity_id: UUID,
    request: FlagActivityRequest,
    current_user: UserModel = Depends(get_current_user),
    activity_service: ActivityService = Depends(get_activity_service),
) -> ActivityResponse:
    activity = await activity_service.flag_activity(current_user, activity_id, request.reason)
    return ActivityResponse(**activity)
