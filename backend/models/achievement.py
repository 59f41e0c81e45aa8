"""
Achievement schemas.

Dependencies: pydantic
System role: Achievement API contracts
"""

import uuid
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

Frequency = Literal["once_per_challenge", "once_per_week", "unlimited"]


class CreateAchievementRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str = Field("", max_length=4096)
    bonus_points: float = 0.0
    criteria: dict = Field(..., description="Criteria definition, see criteria_type")
    frequency: Frequency = "once_per_challenge"


class UpdateAchievementRequest(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, max_length=4096)
    bonus_points: float | None = None
    criteria: dict | None = None
    frequency: Frequency | None = None


class AchievementResponse(BaseModel):
    id: uuid.UUID
    challenge_id: uuid.UUID
    name: str
    description: str
    bonus_points: float
    criteria: dict
    frequency: str
    created_at: datetime


class AchievementProgressResponse(AchievementResponse):
    current_count: float
    required_count: float
    is_earned: bool
    earned_at: datetime | None = None
