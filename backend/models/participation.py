"""
Participation domain models and schemas.

Request/response schemas for joining challenges, member management and
invite codes.

Dependencies: pydantic
System role: Membership API contracts
"""

import uuid
from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, Field

from backend.models.challenge import ChallengeResponse
from backend.models.common import UserSummary


class JoinChallengeRequest(BaseModel):
    invite_code: str | None = Field(None, max_length=32)
    invited_by_user_id: uuid.UUID | None = None


class UpdateRoleRequest(BaseModel):
    role: Literal["member", "admin"]


class UpdatePaymentStatusRequest(BaseModel):
    status: Literal["unpaid", "pending", "paid", "failed"]


class ParticipationResponse(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    challenge_id: uuid.UUID
    role: str
    total_points: float
    current_streak: int
    last_streak_day: date | None
    modifier_factor: float
    payment_status: str
    invited_by_user_id: uuid.UUID | None
    dismissed_announcement_at: datetime | None
    joined_at: datetime
    user: UserSummary | None = None


class InviteCodeResponse(BaseModel):
    code: str
    challenge_id: uuid.UUID


class ResolvedInviteResponse(BaseModel):
    code: str
    challenge: ChallengeResponse
    inviter: UserSummary | None
