"""
Forum ORM models.

Posts are threaded one level deep: top-level posts carry a title,
replies point at their parent. Content is Tiptap JSON or plain text.

Dependencies: sqlalchemy, backend.boundary.db.base
System role: Challenge forum persistence
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import Boolean, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from backend.boundary.db.base import Base, TimestampMixin, UTCDateTime, UUIDMixin


class ForumPostModel(Base, UUIDMixin, TimestampMixin):
    """
    Forum post or reply.

    Attributes:
        challenge_id: Owning challenge
        user_id: Author
        parent_post_id: Parent for replies (None for top-level posts)
        title: Title (top-level posts only)
        content: Body (Tiptap JSON or text)
        is_pinned: Pinned to the top of the list (top-level only)
        deleted_at: Soft delete timestamp
    """

    __tablename__ = "forum_posts"

    challenge_id: Mapped[UUID] = mapped_column(
        ForeignKey("challenges.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    parent_post_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("forum_posts.id", ondelete="CASCADE"),
        nullable=True,
        default=None,
        index=True,
    )

    title: Mapped[str | None] = mapped_column(String(500), nullable=True, default=None)

    content: Mapped[str] = mapped_column(Text, nullable=False)

    is_pinned: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    deleted_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True, default=None)


class ForumPostUpvoteModel(Base, UUIDMixin, TimestampMixin):
    __tablename__ = "forum_post_upvotes"
    __table_args__ = (
        UniqueConstraint("post_id", "user_id", name="uq_forum_upvote_post_user"),
    )

    post_id: Mapped[UUID] = mapped_column(
        ForeignKey("forum_posts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
