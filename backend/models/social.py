"""
Social domain models and schemas.

Request/response schemas for likes, comments, follows and notifications.

Dependencies: pydantic
System role: Social API contracts
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from backend.models.common import UserSummary


class LikeResponse(BaseModel):
    liked: bool


class CreateCommentRequest(BaseModel):
    content: str = Field(..., max_length=2000, description="Comment text")


class CommentResponse(BaseModel):
    id: uuid.UUID
    activity_id: uuid.UUID
    user_id: uuid.UUID
    content: str
    created_at: datetime
    user: UserSummary | None = None


class FollowResponse(BaseModel):
    following: bool
    already_following: bool | None = None


class FollowCountsResponse(BaseModel):
    followers: int
    following: int


class NotificationResponse(BaseModel):
    id: uuid.UUID
    type: str
    data: dict
    read_at: datetime | None
    created_at: datetime
    actor: UserSummary | None = None


class UnreadCountResponse(BaseModel):
    unread: int
