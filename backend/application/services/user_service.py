"""
User service orchestrator.

Bootstraps profiles from identity-provider tokens and manages profile
edits.

Dependencies: backend.boundary.db.CRUD, backend.core.exceptions
System role: User use case orchestration
"""

import logging
import re
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from backend.application.services.service_helpers import is_global_admin
from backend.boundary.db.CRUD.user_crud import user_crud
from backend.boundary.db.models.user_model import Gender, UserModel, UserRole
from backend.core.exceptions import (
    ConflictError,
    FitnessChallengeError,
    NotAuthorizedError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

_USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_.-]{2,64}$")


def user_to_dict(user: UserModel) -> dict[str, Any]:
    return {
        "id": user.id,
        "email": user.email,
        "name": user.name,
        "username": user.username,
        "avatar_url": user.avatar_url,
        "gender": user.gender,
        "age": user.age,
        "role": user.role,
        "created_at": user.created_at,
        "updated_at": user.updated_at,
    }


def username_from_email(email: str) -> str:
    local_part = email.split("@", 1)[0]
    cleaned = re.sub(r"[^A-Za-z0-9_.-]", "", local_part).lower()
    return cleaned[:48] or "user"


class UserService:
    """User service orchestrator."""

    def __init__(self, db: AsyncSession) -> None:
        """
        Initialize user service with async database session.

        Args:
            db: Async SQLAlchemy session
        """
        self.db = db

    async def get_by_email(self, email: str) -> UserModel | None:
        return await user_crud.get_by_email(self.db, email)

    async def ensure_current(self, identity: dict[str, Any]) -> dict:
        """
        Return the caller's profile, creating it on first sign-in.

        Args:
            identity: Decoded token claims (`sub` = email, optional `name`)

        Returns:
            dict: User profile
        """
        email = str(identity["sub"]).strip().lower()
        try:
            user = await user_crud.get_by_email(self.db, email)
            if user is None:
                user = await user_crud.create(
                    self.db,
                    email=email,
                    name=identity.get("name") or None,
                    username=await self._available_username(username_from_email(email)),
                    role=UserRole.USER,
                )
                logger.info("User profile created", extra={"user_id": str(user.id)})
            return user_to_dict(user)
        except Exception as e:
            logger.error("Failed to ensure user profile", extra={"error": str(e)})
            raise

    async def _available_username(self, base: str) -> str:
        candidate = base
        suffix = 1
        while await user_crud.get_by_username(self.db, candidate) is not None:
            suffix += 1
            candidate = f"{base}{suffix}"
        return candidate

    async def get_user(self, user_id: UUID) -> dict:
        """
        Get user profile by ID.

        Raises:
            NotFoundError: If user not found
        """
        user = await user_crud.get_by_id(self.db, user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return user_to_dict(user)

    async def update_user(
        self,
        user: UserModel,
        name: str | None = None,
        username: str | None = None,
        avatar_url: str | None = None,
        gender: str | None = None,
        age: int | None = None,
        clear_gender: bool = False,
    ) -> dict:
        """
        Update the caller's profile.

        Args:
            user: Current user
            name/username/avatar_url/age: New values (None keeps current)
            gender: "female" or "male"
            clear_gender: Unset gender

        Returns:
            dict: Updated profile

        Raises:
            ValidationError: If username or gender is malformed
            ConflictError: If username is taken by another user
        """
        try:
            if username is not None:
                username = username.strip()
                if not _USERNAME_PATTERN.match(username):
                    raise ValidationError(
                        "Username must be 2-64 letters, digits, '.', '_' or '-'",
                        field="username",
                    )
                existing = await user_crud.get_by_username(self.db, username)
                if existing is not None and existing.id != user.id:
                    raise ConflictError("Username is already taken", {"username": username})
                user.username = username

            if name is not None:
                user.name = name.strip() or None
            if avatar_url is not None:
                user.avatar_url = avatar_url or None
            if age is not None:
                if age < 0 or age > 150:
                    raise ValidationError("Age must be between 0 and 150", field="age")
                user.age = age
            if clear_gender:
                user.gender = None
            elif gender is not None:
                try:
                    user.gender = Gender(gender)
                except ValueError:
                    raise ValidationError("Gender must be 'female' or 'male'", field="gender")

            user = await user_crud.save(self.db, user)
            logger.info("User profile updated", extra={"user_id": str(user.id)})
            return user_to_dict(user)
        except FitnessChallengeError:
            raise
        except Exception as e:
            logger.error(
                "Failed to update user",
                extra={"error": str(e), "user_id": str(user.id)},
            )
            raise

    async def list_users(
        self,
        user: UserModel,
        search: str | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[dict]:
        """
        List users (global admins only).

        Raises:
            NotAuthorizedError: If the caller is not a global admin
        """
        if not is_global_admin(user):
            raise NotAuthorizedError("Not authorized - admin required")
        users = await user_crud.search(self.db, search=search, limit=limit, offset=offset)
        return [user_to_dict(u) for u in users]
