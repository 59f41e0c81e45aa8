"""
Activity ORM models.

An activity is one logged workout (or penalty) with its submitted
metrics and the points it earned. Activities are soft-deleted so
moderation history and mini-game outcomes stay explainable.

Dependencies: sqlalchemy, backend.boundary.db.base
System role: Activity and moderation history persistence
"""

import enum
from datetime import datetime
from uuid import UUID

from sqlalchemy import JSON, Boolean, Float, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from backend.boundary.db.base import Base, TimestampMixin, UTCDateTime, UUIDMixin, str_enum


class ActivitySource(str, enum.Enum):
    MANUAL = "manual"
    STRAVA = "strava"
    APPLE_HEALTH = "apple_health"
    MINI_GAME = "mini_game"


class ResolutionStatus(str, enum.Enum):
    """
    Moderation state of an activity.

    PENDING: Awaiting (or needing) admin review
    RESOLVED: Reviewed and closed
    """

    PENDING = "pending"
    RESOLVED = "resolved"


class CommentVisibility(str, enum.Enum):
    """
    Audience of an admin comment.

    INTERNAL: Challenge admins only
    PARTICIPANT: Also shown to the activity owner
    """

    INTERNAL = "internal"
    PARTICIPANT = "participant"


class FlagActionType(str, enum.Enum):
    FLAG = "flag"
    COMMENT = "comment"
    RESOLUTION = "resolution"
    EDIT = "edit"


class ActivityModel(Base, UUIDMixin, TimestampMixin):
    """
    Activity ORM model.

    Attributes:
        user_id: Participant who logged it
        challenge_id: Challenge the activity counts toward
        activity_type_id: Scored activity type
        logged_date: When the activity happened (UTC)
        metrics: Submitted metrics JSON
        notes: Free text from the participant
        image_url: Legacy single image URL
        media_keys: S3 object keys of attached photos/videos
        points_earned: Signed total points
        triggered_bonuses: Bonus breakdown [{metric, threshold, bonus_points, description}]
        flagged/flagged_at/flagged_reason: Moderation flag state
        admin_comment/admin_comment_visibility: Latest admin comment
        resolution_status/resolution_notes/resolved_at/resolved_by_id: Review outcome
        source: manual, strava, apple_health or mini_game
        external_id/external_data: Idempotency key and payload of generated activities
        deleted_at/deleted_by_id/deleted_reason: Soft delete
    """

    __tablename__ = "activities"
    __table_args__ = (
        Index("ix_activities_user_challenge_date", "user_id", "challenge_id", "logged_date"),
        Index("ix_activities_challenge_flagged", "challenge_id", "flagged"),
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

    activity_type_id: Mapped[UUID] = mapped_column(
        ForeignKey("activity_types.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    logged_date: Mapped[datetime] = mapped_column(
        UTCDateTime,
        nullable=False,
        doc="When the activity happened",
    )

    metrics: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)

    notes: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)

    image_url: Mapped[str | None] = mapped_column(String(2048), nullable=True, default=None)

    media_keys: Mapped[list] = mapped_column(
        JSON,
        nullable=False,
        default=list,
        doc="S3 object keys for attached media",
    )

    points_earned: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)

    triggered_bonuses: Mapped[list] = mapped_column(JSON, nullable=False, default=list)

    flagged: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    flagged_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True, default=None)

    flagged_reason: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)

    admin_comment: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)

    admin_comment_visibility: Mapped[CommentVisibility] = mapped_column(
        str_enum(CommentVisibility),
        nullable=False,
        default=CommentVisibility.INTERNAL,
    )

    resolution_status: Mapped[ResolutionStatus] = mapped_column(
        str_enum(ResolutionStatus),
        nullable=False,
        default=ResolutionStatus.PENDING,
    )

    resolution_notes: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)

    resolved_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True, default=None)

    resolved_by_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        default=None,
    )

    source: Mapped[ActivitySource] = mapped_column(
        str_enum(ActivitySource),
        nullable=False,
        default=ActivitySource.MANUAL,
    )

    external_id: Mapped[str | None] = mapped_column(String(255), nullable=True, default=None)

    external_data: Mapped[dict | None] = mapped_column(JSON, nullable=True, default=None)

    deleted_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True, default=None)

    deleted_by_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        default=None,
    )

    deleted_reason: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)


class ActivityFlagHistoryModel(Base, UUIDMixin, TimestampMixin):
    """
    Moderation audit trail entry.

    Attributes:
        activity_id: Activity the action applies to
        actor_id: User who acted (None for automatic flags)
        action_type: flag, comment, resolution or edit
        payload: Action details (reason, status, {field: {from, to}}, ...)
    """

    __tablename__ = "activity_flag_history"

    activity_id: Mapped[UUID] = mapped_column(
        ForeignKey("activities.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    actor_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        default=None,
    )

    action_type: Mapped[FlagActionType] = mapped_column(
        str_enum(FlagActionType),
        nullable=False,
    )

    payload: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
