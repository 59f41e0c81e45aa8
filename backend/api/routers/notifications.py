"""
Notification API endpoints.

Routes:
- GET /notifications - Caller's notifications, newest first
- GET /notifications/unread-count - Number of unread notifications
- POST /notifications/{id}/read - Mark one read
- POST /notifications/read-all - Mark all read

Dependencies: backend.application.services, backend.models
System role: Notification inbox HTTP API
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends

from backend.api.deps.dependencies import get_current_user, get_notification_service
from backend.api.routers.router_utils import handle_domain_errors
from backend.application.services.notification_service import NotificationService
from backend.boundary.db.models.user_model import UserModel
from backend.models.common import MessageResponse
from backend.models.social import NotificationResponse, UnreadCountResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=list[NotificationResponse])
@handle_domain_errors
async def list_notifications(
    limit: int = 50,
    unread_only: bool = False,
    current_user: UserModel = Depends(get_current_user),
    notification_service: NotificationService = Depends(get_notification_service),
) -> list[NotificationResponse]:
    notifications = await notification_service.list_notifications(
        current_user, limit=limit, unread_only=unread_only
    )
    return [NotificationResponse(**n) for n in notifications]


@router.get("/unread-count", response_model=UnreadCountResponse)
@handle_domain_errors
async def get_unread_count(
    current_user: UserModel = Depends(get_current_user),
    notification_service: NotificationService = Depends(get_notification_service),
) -> UnreadCountResponse:
    count = await notification_service.unread_count(current_user)
    return UnreadCountResponse(unread=count)


@router.post("/read-all", response_model=MessageResponse)
@handle_domain_errors
async def mark_all_read(
    current_user: UserModel = Depends(get_current_user),
    notification_service: NotificationService = Depends(get_notification_service),
) -> MessageResponse:
    updated = await notification_service.mark_all_read(current_user)
    return MessageResponse(message=f"{updated} notifications marked read")


@router.post("/{notification_id}/read", response_model=MessageResponse)
@handle_domain_errors
async def mark_read(
    notification_id: UUID,
    current_user: UserModel = Depends(get_current_user),
    notification_service: NotificationService = Depends(get_notification_service),
) -> MessageResponse:
    await notification_service.mark_read(current_user, notification_id)
    return MessageResponse(message="Notification marked read")
