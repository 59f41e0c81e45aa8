"""
User ORM model.

Represents a person signed in through the external identity provider.
Profiles are created on first authenticated request.

Dependencies: sqlalchemy, backend.boundary.db.base
System role: User profile persistence
"""

import enum

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from backend.boundary.db.base import Base, TimestampMixin, UUIDMixin, str_enum


class UserRole(str, enum.Enum):
    """
    Global user roles.

    USER: Regular participant
    ADMIN: Platform administrator (manages categories, sees all users)
    """

    USER = "user"
    ADMIN = "admin"


class Gender(str, enum.Enum):
    """Profile gender used to split cumulative leaderboards."""

    FEMALE = "female"
    MALE = "male"


class UserModel(Base, UUIDMixin, TimestampMixin):
    """
    User ORM model.

    Attributes:
        id: UUID primary key (auto-generated)
        email: Identity provider subject (unique)
        name: Display name
        username: Optional unique handle used for mentions
        avatar_url: Profile picture URL
        gender: Optional gender for leaderboard grouping
        age: Optional age in years
        role: Global role (user/admin)
        created_at: Profile creation timestamp (UTC)
        updated_at: Last modification timestamp (UTC)

    Constraints:
        email: UNIQUE
        username: UNIQUE (nullable)
    """

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(
        String(320),
        nullable=False,
        unique=True,
        index=True,
        doc="Email address from the identity provider",
    )

    name: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        default=None,
        doc="Display name",
    )

    username: Mapped[str | None] = mapped_column(
        String(64),
        nullable=True,
        unique=True,
        default=None,
        doc="Unique handle",
    )

    avatar_url: Mapped[str | None] = mapped_column(
        String(2048),
        nullable=True,
        default=None,
    )

    gender: Mapped[Gender | None] = mapped_column(
        str_enum(Gender),
        nullable=True,
        default=None,
    )

    age: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
        default=None,
    )

    role: Mapped[UserRole] = mapped_column(
        str_enum(UserRole),
        nullable=False,
        default=UserRole.USER,
    )
