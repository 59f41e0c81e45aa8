"""
Challenge and category ORM models.

A challenge is a dated competition with its own activity types,
participants, achievements and mini-games. Categories are global
groupings of activity types used by the category leaderboards.

Dependencies: sqlalchemy, backend.boundary.db.base
System role: Challenge configuration persistence
"""

import enum
from datetime import date, datetime
from uuid import UUID

from sqlalchemy import JSON, Boolean, Date, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from backend.boundary.db.base import Base, TimestampMixin, UTCDateTime, UUIDMixin, str_enum


class ChallengeVisibility(str, enum.Enum):
    """
    Who may join a challenge.

    PUBLIC: Listed and open to anyone
    PRIVATE: Joinable only through an invite
    """

    PUBLIC = "public"
    PRIVATE = "private"


class CategoryModel(Base, UUIDMixin, TimestampMixin):
    """
    Global activity type category.

    Attributes:
        name: Category name (unique)
        description: Optional description
    """

    __tablename__ = "categories"

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        doc="Category name",
    )

    description: Mapped[str | None] = mapped_column(
        String(4096),
        nullable=True,
        default=None,
    )


class ChallengeModel(Base, UUIDMixin, TimestampMixin):
    """
    Challenge ORM model.

    Attributes:
        id: UUID primary key (auto-generated)
        name: Challenge name
        description: Optional long description
        creator_id: User who created the challenge (implicit admin)
        start_date: First day (date only, UTC)
        end_date: Last day (date only, UTC, inclusive)
        duration_days: Length of the challenge used for week counts
        streak_min_points: Daily points needed for a streak day
        week_calc_method: How weeks are numbered for display
        auto_flag_rules: JSON rules that flag suspicious activities on log
        visibility: public/private
        payment_required: Whether participants must be paid up to log
        announcement: Optional banner text shown to participants
        announcement_updated_at: When the banner last changed
    """

    __tablename__ = "challenges"

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        doc="Challenge name",
    )

    description: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        default=None,
    )

    creator_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    start_date: Mapped[date] = mapped_column(Date, nullable=False)

    end_date: Mapped[date] = mapped_column(Date, nullable=False)

    duration_days: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        doc="Challenge length in days",
    )

    streak_min_points: Mapped[float] = mapped_column(
        Float,
        nullable=False,
        default=0.0,
        doc="Minimum streak-contributing points for a streak day",
    )

    week_calc_method: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default="from_start",
        doc="Week numbering label shown to participants",
    )

    auto_flag_rules: Mapped[dict | None] = mapped_column(
        JSON,
        nullable=True,
        default=None,
        doc="Auto-flag rules (max_points_per_activity, flag_activity_type_ids)",
    )

    visibility: Mapped[ChallengeVisibility] = mapped_column(
        str_enum(ChallengeVisibility),
        nullable=False,
        default=ChallengeVisibility.PUBLIC,
    )

    payment_required: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
    )

    announcement: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        default=None,
    )

    announcement_updated_at: Mapped[datetime | None] = mapped_column(
        UTCDateTime,
        nullable=True,
        default=None,
    )
