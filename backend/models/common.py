"""
Common response models and utilities.

Generic response wrappers, error schemas and shared summaries.

Dependencies: pydantic
System role: Common API response structures
"""

import uuid
from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ErrorResponse(BaseModel):
    """Error response schema."""

    success: bool = False
    error: str = Field(description="Error message")
    details: dict | None = Field(default=None, description="Additional error context")


class CursorPage(BaseModel, Generic[T]):
    """Offset-cursor page; pass next_cursor back to fetch the following page."""

    items: list[T]
    next_cursor: int | None = None
    is_done: bool = True


class UserSummary(BaseModel):
    """Compact user reference embedded in other responses."""

    id: uuid.UUID
    name: str | None = None
    username: str | None = None
    avatar_url: str | None = None


class MessageResponse(BaseModel):
    """Plain acknowledgement."""

    message: str
