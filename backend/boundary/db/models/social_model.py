"""
Social ORM models: likes, comments, follows and notifications.

Dependencies: sqlalchemy, backend.boundary.db.base
System role: Feed interaction persistence
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import JSON, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from backend.boundary.db.base import Base, TimestampMixin, UTCDateTime, UUIDMixin


class LikeModel(Base, UUIDMixin, TimestampMixin):
    """One like per user per activity."""

    __tablename__ = "likes"
    __table_args__ = (
        UniqueConstraint("activity_id", "user_id", name="uq_like_activity_user"),
    )

    activity_id: Mapped[UUID] = mapped_column(
        ForeignKey("activities.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )


class CommentModel(Base, UUIDMixin, TimestampMixin):
    __tablename__ = "comments"

    activity_id: Mapped[UUID] = mapped_column(
        ForeignKey("activities.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    content: Mapped[str] = mapped_column(Text, nullable=False)


class FollowModel(Base, UUIDMixin, TimestampMixin):
    """
    Directed follow edge.

    Attributes:
        follower_id: User who follows
        following_id: User being followed
    """

    __tablename__ = "follows"
    __table_args__ = (
        UniqueConstraint("follower_id", "following_id", name="uq_follow_pair"),
    )

    follower_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    following_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )


class NotificationModel(Base, UUIDMixin, TimestampMixin):
    """
    In-app notification.

    Attributes:
        user_id: Recipient
        actor_id: User whose action triggered it (None for system events)
        type: like, comment, new_follower, admin_comment, admin_edit, forum_mention
        data: Type-specific payload (activity_id, post_id, ...)
        read_at: When the recipient read it
    """

    __tablename__ = "notifications"

    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    actor_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        default=None,
    )

    type: Mapped[str] = mapped_column(String(64), nullable=False)

    data: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)

    read_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True, default=None)
