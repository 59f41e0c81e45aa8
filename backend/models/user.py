"""
User domain models and schemas.

Request/response schemas for user profile operations.

Dependencies: pydantic
System role: User API contracts
"""

import uuid
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class UpdateUserRequest(BaseModel):
    """Request schema for updating the caller's profile."""

    name: str | None = Field(None, min_length=1, max_length=255, description="Display name")
    username: str | None = Field(None, min_length=2, max_length=64, description="Unique handle")
    avatar_url: str | None = Field(None, max_length=2048, description="Avatar image URL")
    gender: Literal["female", "male"] | None = Field(None, description="Profile gender")
    clear_gender: bool = Field(False, description="Unset the profile gender")
    age: int | None = Field(None, ge=0, le=150, description="Age in years")


class UserResponse(BaseModel):
    """Response schema for user operations."""

    id: uuid.UUID
    email: str
    name: str | None
    username: str | None
    avatar_url: str | None
    gender: str | None
    age: int | None
    role: str
    created_at: datetime
