"""
Admin moderation schemas.

Request/response schemas for the flagged-activity review workflow.

Dependencies: pydantic
System role: Moderation API contracts
"""

import uuid
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from backend.models.activity import ActivityResponse, ActivityTypeSummary
from backend.models.challenge import ChallengeResponse
from backend.models.common import UserSummary


class UpdateResolutionRequest(BaseModel):
    status: Literal["pending", "resolved"]
    notes: str | None = Field(None, max_length=4096)


class AdminCommentRequest(BaseModel):
    comment: str = Field(..., min_length=1, max_length=4096)
    visibility: Literal["internal", "participant"] = "internal"


class AdminEditActivityRequest(BaseModel):
    """Fields to correct; omitted fields are unchanged."""

    activity_type_id: uuid.UUID | None = None
    points_earned: float | None = None
    notes: str | None = Field(None, max_length=4096)
    logged_date: str | None = None
    metrics: dict | None = None


class FlagHistoryEntry(BaseModel):
    id: uuid.UUID
    action_type: str
    payload: dict
    created_at: datetime
    actor: UserSummary | None = None


class FlaggedActivityDetailResponse(BaseModel):
    activity: ActivityResponse
    user: UserSummary | None
    activity_type: ActivityTypeSummary | None
    challenge: ChallengeResponse
    history: list[FlagHistoryEntry]
