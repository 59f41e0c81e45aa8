"""
Challenge domain models and schemas.

Request/response schemas for challenges, categories and activity types.

Dependencies: pydantic
System role: Challenge configuration API contracts
"""

import uuid
from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, Field


class CreateChallengeRequest(BaseModel):
    """Request schema for creating a challenge."""

    name: str = Field(..., min_length=1, max_length=255, description="Challenge name")
    description: str | None = Field(None, max_length=4096, description="Challenge description")
    start_date: str = Field(..., description="First day, YYYY-MM-DD")
    end_date: str = Field(..., description="Last day, YYYY-MM-DD")
    duration_days: int | None = Field(None, ge=1, description="Length in days")
    streak_min_points: float = Field(0.0, ge=0, description="Daily points needed to extend a streak")
    week_calc_method: str = Field("from_start", max_length=32)
    auto_flag_rules: dict | None = Field(None, description="Automatic moderation rules")
    visibility: Literal["public", "private"] = "public"
    payment_required: bool = False


class UpdateChallengeRequest(BaseModel):
    """Request schema for updating a challenge; omitted fields are unchanged."""

    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, max_length=4096)
    start_date: str | None = None
    end_date: str | None = None
    duration_days: int | None = Field(None, ge=1)
    streak_min_points: float | None = Field(None, ge=0)
    week_calc_method: str | None = Field(None, max_length=32)
    auto_flag_rules: dict | None = None
    visibility: Literal["public", "private"] | None = None
    payment_required: bool | None = None
    announcement: str | None = Field(None, max_length=4096)


class ChallengeResponse(BaseModel):
    """Response schema for challenge operations."""

    id: uuid.UUID
    name: str
    description: str | None
    creator_id: uuid.UUID | None
    start_date: date
    end_date: date
    duration_days: int
    streak_min_points: float
    week_calc_method: str
    auto_flag_rules: dict | None
    visibility: str
    payment_required: bool
    announcement: str | None
    announcement_updated_at: datetime | None
    participant_count: int | None = None
    created_at: datetime
    updated_at: datetime


class CategoryRequest(BaseModel):
    """Request schema for creating or renaming a category."""

    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, max_length=4096)


class CategoryResponse(BaseModel):
    id: uuid.UUID
    name: str
    description: str | None
    created_at: datetime


class BonusThreshold(BaseModel):
    """Extra points when a metric reaches a threshold."""

    metric: str = Field(..., min_length=1)
    threshold: float
    bonus_points: float
    description: str = ""


class CreateActivityTypeRequest(BaseModel):
    """Request schema for adding an activity type to a challenge."""

    challenge_id: uuid.UUID
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(None, max_length=4096)
    scoring_config: dict = Field(default_factory=dict, description="Scoring rules")
    contributes_to_streak: bool = True
    is_negative: bool = False
    category_id: uuid.UUID | None = None
    bonus_thresholds: list[BonusThreshold] = Field(default_factory=list)
    max_per_challenge: int | None = Field(None, ge=0)
    valid_weeks: list[int] = Field(default_factory=list)
    display_order: int | None = None


class UpdateActivityTypeRequest(BaseModel):
    """Request schema for updating an activity type; only sent fields change."""

    name: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, max_length=4096)
    scoring_config: dict | None = None
    contributes_to_streak: bool | None = None
    is_negative: bool | None = None
    category_id: uuid.UUID | None = None
    bonus_thresholds: list[BonusThreshold] | None = None
    max_per_challenge: int | None = Field(None, ge=0)
    valid_weeks: list[int] | None = None
    display_order: int | None = None


class ActivityTypeResponse(BaseModel):
    id: uuid.UUID
    challenge_id: uuid.UUID
    category_id: uuid.UUID | None
    name: str
    description: str | None
    scoring_config: dict
    contributes_to_streak: bool
    is_negative: bool
    bonus_thresholds: list[dict]
    max_per_challenge: int | None
    valid_weeks: list[int]
    display_order: int | None
    created_at: datetime
    updated_at: datetime
