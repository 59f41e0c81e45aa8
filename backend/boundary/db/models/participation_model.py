"""
Participation and invite ORM models.

A participation links a user to a challenge and carries their running
totals (points, streak). Invite codes let participants bring friends
into private challenges.

Dependencies: sqlalchemy, backend.boundary.db.base
System role: Challenge membership persistence
"""

import enum
from datetime import date, datetime
from uuid import UUID

from sqlalchemy import Date, Float, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from backend.boundary.db.base import Base, TimestampMixin, UTCDateTime, UUIDMixin, str_enum


class ParticipationRole(str, enum.Enum):
    MEMBER = "member"
    ADMIN = "admin"


class PaymentStatus(str, enum.Enum):
    UNPAID = "unpaid"
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"


class ParticipationModel(Base, UUIDMixin, TimestampMixin):
    """
    User-in-challenge ORM model.

    Attributes:
        user_id: Participant
        challenge_id: Challenge joined
        role: member or admin (challenge-scoped)
        total_points: Running points total (bonus activities included)
        current_streak: Consecutive streak days ending at last_streak_day
        last_streak_day: Most recent qualifying UTC day
        modifier_factor: Point multiplier reserved for handicaps
        payment_status: unpaid, pending, paid or failed
        invited_by_user_id: Inviter, when joined through an invite
        dismissed_announcement_at: When the participant hid the banner

    Constraints:
        (user_id, challenge_id): UNIQUE; one participation per challenge
    """

    __tablename__ = "participations"
    __table_args__ = (
        UniqueConstraint("user_id", "challenge_id", name="uq_participation_user_challenge"),
    )

    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    challenge_id: Mapped[UUID] = mapped_column(
        ForeignKey("challenges.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    role: Mapped[ParticipationRole] = mapped_column(
        str_enum(ParticipationRole),
        nullable=False,
        default=ParticipationRole.MEMBER,
    )

    total_points: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)

    current_streak: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    last_streak_day: Mapped[date | None] = mapped_column(Date, nullable=True, default=None)

    modifier_factor: Mapped[float] = mapped_column(Float, nullable=False, default=1.0)

    payment_status: Mapped[PaymentStatus] = mapped_column(
        str_enum(PaymentStatus),
        nullable=False,
        default=PaymentStatus.PAID,
    )

    invited_by_user_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        default=None,
    )

    dismissed_announcement_at: Mapped[datetime | None] = mapped_column(
        UTCDateTime,
        nullable=True,
        default=None,
    )


class ChallengeInviteModel(Base, UUIDMixin, TimestampMixin):
    """
    Personal invite code for a challenge.

    Constraints:
        code: UNIQUE
        (challenge_id, user_id): UNIQUE; one code per user per challenge
    """

    __tablename__ = "challenge_invites"
    __table_args__ = (
        UniqueConstraint("challenge_id", "user_id", name="uq_invite_challenge_user"),
    )

    challenge_id: Mapped[UUID] = mapped_column(
        ForeignKey("challenges.id", ondelete="CASCADE"),
        nullable=False,
    )

    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    code: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        unique=True,
        index=True,
    )
