"""
Achievement ORM models.

Dependencies: sqlalchemy, backend.boundary.db.base
System role: Achievement definitions and awards persistence
"""

import enum
from datetime import datetime
from uuid import UUID

from sqlalchemy import JSON, Float, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from backend.boundary.db.base import Base, TimestampMixin, UTCDateTime, UUIDMixin, str_enum


class AchievementFrequency(str, enum.Enum):
    """
    How often an achievement can be earned.

    ONCE_PER_CHALLENGE: A single award for the whole challenge
    ONCE_PER_WEEK: At most one award per Sunday-started UTC week
    UNLIMITED: Every time the criteria are met
    """

    ONCE_PER_CHALLENGE = "once_per_challenge"
    ONCE_PER_WEEK = "once_per_week"
    UNLIMITED = "unlimited"


class AchievementModel(Base, UUIDMixin, TimestampMixin):
    """
    Achievement definition.

    Attributes:
        challenge_id: Owning challenge
        name: Display name
        description: Explanation shown to participants
        bonus_points: Points awarded on earning
        criteria: Criteria JSON (see backend.core.achievements)
        frequency: Award frequency
    """

    __tablename__ = "achievements"

    challenge_id: Mapped[UUID] = mapped_column(
        ForeignKey("challenges.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    description: Mapped[str] = mapped_column(String(4096), nullable=False, default="")

    bonus_points: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)

    criteria: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)

    frequency: Mapped[AchievementFrequency] = mapped_column(
        str_enum(AchievementFrequency),
        nullable=False,
        default=AchievementFrequency.ONCE_PER_CHALLENGE,
    )


class UserAchievementModel(Base, UUIDMixin, TimestampMixin):
    """
    A single award of an achievement to a user.

    Attributes:
        activity_ids: Activities that satisfied the criteria (as strings)
        bonus_activity_id: Activity carrying the awarded bonus points
    """

    __tablename__ = "user_achievements"

    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    challenge_id: Mapped[UUID] = mapped_column(
        ForeignKey("challenges.id", ondelete="CASCADE"),
        nullable=False,
    )

    achievement_id: Mapped[UUID] = mapped_column(
        ForeignKey("achievements.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    earned_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)

    activity_ids: Mapped[list] = mapped_column(JSON, nullable=False, default=list)

    bonus_activity_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("activities.id", ondelete="SET NULL"),
        nullable=True,
        default=None,
    )
