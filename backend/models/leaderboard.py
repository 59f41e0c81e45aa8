"""
Leaderboard schemas.

Dependencies: pydantic
System role: Leaderboard API contracts
"""

from pydantic import BaseModel, Field

from backend.models.common import UserSummary


class LeaderboardEntry(BaseModel):
    rank: int
    user: UserSummary | None
    total_points: float
    current_streak: int


class LeaderboardResponse(BaseModel):
    items: list[LeaderboardEntry]
    next_cursor: int | None = None
    is_done: bool = True


class WeeklyCategoryEntry(BaseModel):
    rank: int
    user: UserSummary | None
    weekly_points: float


class WeeklyCategory(BaseModel):
    category_id: str
    category_name: str
    entries: list[WeeklyCategoryEntry]


class WeeklyCategoryLeaderboardResponse(BaseModel):
    week_number: int
    total_weeks: int
    categories: list[WeeklyCategory]


class CumulativeEntry(BaseModel):
    rank: int
    user: UserSummary | None
    total_points: float


class CumulativeCategory(BaseModel):
    category_id: str
    category_name: str
    women: list[CumulativeEntry] = Field(default_factory=list)
    men: list[CumulativeEntry] = Field(default_factory=list)
    no_gender: list[CumulativeEntry] = Field(default_factory=list)


class CumulativeCategoryLeaderboardResponse(BaseModel):
    categories: list[CumulativeCategory]
