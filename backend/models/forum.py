"""
Forum schemas.

Dependencies: pydantic
System role: Forum API contracts
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from backend.models.common import UserSummary


class CreatePostRequest(BaseModel):
    challenge_id: uuid.UUID
    title: str | None = Field(None, max_length=500)
    content: str = Field(..., max_length=20000, description="Plain text or Tiptap JSON")
    parent_post_id: uuid.UUID | None = None


class UpdatePostRequest(BaseModel):
    title: str | None = Field(None, max_length=500)
    content: str | None = Field(None, max_length=20000)


class ForumPostResponse(BaseModel):
    id: uuid.UUID
    challenge_id: uuid.UUID
    user_id: uuid.UUID
    parent_post_id: uuid.UUID | None
    title: str | None
    content: str
    is_pinned: bool
    created_at: datetime
    updated_at: datetime
    user: UserSummary | None = None
    upvote_count: int = 0
    upvoted_by_user: bool = False
    reply_count: int | None = None


class ForumPostDetailResponse(ForumPostResponse):
    replies: list[ForumPostResponse] = Field(default_factory=list)


class UpvoteResponse(BaseModel):
    upvoted: bool
    upvote_count: int


class PinResponse(BaseModel):
    is_pinned: bool
