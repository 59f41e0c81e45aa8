"""
Mini-game ORM models.

Dependencies: sqlalchemy, backend.boundary.db.base
System role: Mini-game and per-participant outcome persistence
"""

import enum
from datetime import datetime
from uuid import UUID

from sqlalchemy import JSON, Float, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from backend.boundary.db.base import Base, TimestampMixin, UTCDateTime, UUIDMixin, str_enum


class MiniGameType(str, enum.Enum):
    PARTNER_WEEK = "partner_week"
    HUNT_WEEK = "hunt_week"
    PR_WEEK = "pr_week"


class MiniGameStatus(str, enum.Enum):
    """
    Mini-game lifecycle.

    DRAFT: Editable, not yet started
    ACTIVE: Participants assigned, game running
    CALCULATING: Outcomes being computed
    COMPLETED: Outcomes stored and bonuses awarded
    """

    DRAFT = "draft"
    ACTIVE = "active"
    CALCULATING = "calculating"
    COMPLETED = "completed"


class MiniGameModel(Base, UUIDMixin, TimestampMixin):
    """
    Mini-game ORM model.

    Attributes:
        challenge_id: Owning challenge
        type: partner_week, hunt_week or pr_week
        name: Display name
        starts_at/ends_at: Game period (UTC)
        status: Lifecycle state
        config: Type-specific settings (bonus_percentage, catch_bonus, ...)
    """

    __tablename__ = "mini_games"

    challenge_id: Mapped[UUID] = mapped_column(
        ForeignKey("challenges.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    type: Mapped[MiniGameType] = mapped_column(str_enum(MiniGameType), nullable=False)

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    starts_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)

    ends_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)

    status: Mapped[MiniGameStatus] = mapped_column(
        str_enum(MiniGameStatus),
        nullable=False,
        default=MiniGameStatus.DRAFT,
    )

    config: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)


class MiniGameParticipantModel(Base, UUIDMixin, TimestampMixin):
    """
    A participant's slot in a mini-game.

    Attributes:
        initial_state: {rank, points[, daily_pr]} at start
        final_state: {points[, rank]} at end
        partner_user_id: Partner (partner_week)
        prey_user_id/hunter_user_id: Neighbours (hunt_week)
        bonus_points: Points awarded (may be negative)
        outcome: Type-specific result details
        bonus_activity_id: Generated bonus activity, if any
    """

    __tablename__ = "mini_game_participants"
    __table_args__ = (
        UniqueConstraint("mini_game_id", "user_id", name="uq_mini_game_participant"),
    )

    mini_game_id: Mapped[UUID] = mapped_column(
        ForeignKey("mini_games.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    initial_state: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)

    final_state: Mapped[dict | None] = mapped_column(JSON, nullable=True, default=None)

    partner_user_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        default=None,
    )

    prey_user_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        default=None,
    )

    hunter_user_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        default=None,
    )

    bonus_points: Mapped[float | None] = mapped_column(Float, nullable=True, default=None)

    outcome: Mapped[dict | None] = mapped_column(JSON, nullable=True, default=None)

    bonus_activity_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("activities.id", ondelete="SET NULL"),
        nullable=True,
        default=None,
    )
