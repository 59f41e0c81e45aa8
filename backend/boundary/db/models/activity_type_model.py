"""
Activity type ORM model.

An activity type is something participants can log in a challenge
(e.g. "Run", "Drinks") together with the JSON scoring configuration
that turns submitted metrics into points.

Dependencies: sqlalchemy, backend.boundary.db.base
System role: Scoring configuration persistence
"""

from uuid import UUID

from sqlalchemy import JSON, Boolean, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from backend.boundary.db.base import Base, TimestampMixin, UUIDMixin


class ActivityTypeModel(Base, UUIDMixin, TimestampMixin):
    """
    Activity type ORM model.

    Attributes:
        challenge_id: Owning challenge
        category_id: Optional global category (leaderboard grouping)
        name: Display name
        description: Optional help text
        scoring_config: Scoring rules (see backend.core.scoring)
        contributes_to_streak: Whether points count toward streak days
        is_negative: Penalty type; points are always negative
        bonus_thresholds: [{metric, threshold, bonus_points, description}]
        max_per_challenge: Per-user logging cap (null/0 = unlimited)
        valid_weeks: Challenge weeks in which the type may be logged (empty = all)
        display_order: Sort key in type pickers
    """

    __tablename__ = "activity_types"

    challenge_id: Mapped[UUID] = mapped_column(
        ForeignKey("challenges.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    category_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("categories.id", ondelete="SET NULL"),
        nullable=True,
        default=None,
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    description: Mapped[str | None] = mapped_column(
        String(4096),
        nullable=True,
        default=None,
    )

    scoring_config: Mapped[dict] = mapped_column(
        JSON,
        nullable=False,
        default=dict,
        doc="Scoring rules JSON",
    )

    contributes_to_streak: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
    )

    is_negative: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
    )

    bonus_thresholds: Mapped[list | None] = mapped_column(
        JSON,
        nullable=True,
        default=None,
    )

    max_per_challenge: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
        default=None,
    )

    valid_weeks: Mapped[list | None] = mapped_column(
        JSON,
        nullable=True,
        default=None,
        doc="Week numbers the type is available in",
    )

    display_order: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
        default=None,
    )
