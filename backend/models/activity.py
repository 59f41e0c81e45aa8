"""
Activity domain models and schemas.

Request/response schemas for logging, viewing and flagging activities
and for media uploads.

Dependencies: pydantic
System role: Activity API contracts
"""

import uuid
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from backend.models.common import UserSummary


class LogActivityRequest(BaseModel):
    """Request schema for logging an activity."""

    challenge_id: uuid.UUID
    activity_type_id: uuid.UUID
    logged_date: str = Field(..., description="ISO-8601 datetime or YYYY-MM-DD")
    metrics: dict = Field(default_factory=dict, description="Submitted metrics")
    notes: str | None = Field(None, max_length=4096)
    image_url: str | None = Field(None, max_length=2048)
    media_keys: list[str] = Field(default_factory=list, max_length=10)
    source: Literal["manual", "strava", "apple_health", "mini_game"] = "manual"
    external_id: str | None = Field(None, max_length=255)
    external_data: dict | None = None


class LogActivityResponse(BaseModel):
    """Scoring outcome of a logged activity."""

    id: uuid.UUID
    points_earned: float
    base_points: float
    bonus_points: float
    triggered_bonuses: list[str]
    current_streak: int
    achievements_awarded: list[dict] = Field(default_factory=list)


class ActivityTypeSummary(BaseModel):
    id: uuid.UUID
    name: str
    category_id: uuid.UUID | None = None
    is_negative: bool = False


class ActivityResponse(BaseModel):
    """Activity with social counts and presigned media URLs."""

    id: uuid.UUID
    user_id: uuid.UUID
    challenge_id: uuid.UUID
    activity_type_id: uuid.UUID
    logged_date: datetime
    metrics: dict
    notes: str | None
    image_url: str | None
    media_keys: list[str]
    points_earned: float
    triggered_bonuses: list[dict]
    flagged: bool
    flagged_at: datetime | None
    flagged_reason: str | None
    admin_comment: str | None
    admin_comment_visibility: str
    resolution_status: str
    source: str
    external_id: str | None
    created_at: datetime
    user: UserSummary | None = None
    activity_type: ActivityTypeSummary | None = None
    like_count: int = 0
    comment_count: int = 0
    liked_by_user: bool = False
    media_urls: list[str] = Field(default_factory=list)


class ActivityFeedResponse(BaseModel):
    items: list[ActivityResponse]
    next_cursor: int | None = None
    is_done: bool = True


class DeleteActivityRequest(BaseModel):
    reason: str | None = Field(None, max_length=1024)


class FlagActivityRequest(BaseModel):
    reason: str = Field(..., min_length=1, max_length=1024)


class MediaUploadRequest(BaseModel):
    """Request schema for a presigned media upload URL."""

    filename: str = Field(..., min_length=1, max_length=255)
    content_type: str = Field(..., min_length=1, max_length=255)


class MediaUploadResponse(BaseModel):
    upload_url: str
    s3_key: str
    expires_at: datetime
