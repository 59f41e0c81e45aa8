"""
Mini-game schemas.

Dependencies: pydantic
System role: Mini-game API contracts
"""

import uuid
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from backend.models.common import UserSummary


class CreateMiniGameRequest(BaseModel):
    type: Literal["partner_week", "hunt_week", "pr_week"]
    name: str = Field(..., min_length=1, max_length=255)
    starts_at: str = Field(..., description="ISO-8601 start")
    ends_at: str = Field(..., description="ISO-8601 end")
    config: dict | None = None


class UpdateMiniGameRequest(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    starts_at: str | None = None
    ends_at: str | None = None
    config: dict | None = None


class MiniGameResponse(BaseModel):
    id: uuid.UUID
    challenge_id: uuid.UUID
    type: str
    name: str
    starts_at: datetime
    ends_at: datetime
    status: str
    config: dict
    created_at: datetime


class MiniGameParticipantResponse(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    initial_state: dict
    final_state: dict | None
    partner_user_id: uuid.UUID | None
    prey_user_id: uuid.UUID | None
    hunter_user_id: uuid.UUID | None
    bonus_points: float | None
    outcome: dict | None
    bonus_activity_id: uuid.UUID | None
    user: UserSummary | None = None


class MiniGameDetailResponse(MiniGameResponse):
    participants: list[MiniGameParticipantResponse]


class MiniGameUserStatusResponse(BaseModel):
    mini_game: MiniGameResponse
    initial_state: dict
    partner: UserSummary | None = None
    prey: UserSummary | None = None
    hunter: UserSummary | None = None
    pr_target: float | None = None


class MiniGameHistoryResponse(BaseModel):
    mini_game: MiniGameResponse
    bonus_points: float | None
    outcome: dict | None
    initial_state: dict
    final_state: dict | None
