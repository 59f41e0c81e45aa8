"""
Shared service helpers.

Lookups and permission checks used by several services: loading a
challenge or participation with a domain error when missing, the single
challenge-admin rule, and the summary dicts embedded in responses.

Dependencies: backend.boundary.db.CRUD, backend.core.exceptions
System role: Cross-service access control and serialization helpers
"""

from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from backend.boundary.db.CRUD.activity_type_crud import activity_type_crud
from backend.boundary.db.CRUD.challenge_crud import challenge_crud
from backend.boundary.db.CRUD.participation_crud import participation_crud
from backend.boundary.db.models.activity_type_model import ActivityTypeModel
from backend.boundary.db.models.challenge_model import ChallengeModel
from backend.boundary.db.models.participation_model import (
    ParticipationModel,
    ParticipationRole,
)
from backend.boundary.db.models.user_model import UserModel, UserRole
from backend.core.exceptions import NotAuthorizedError, NotFoundError


def user_summary(user: UserModel | None) -> dict[str, Any] | None:
    if user is None:
        return None
    return {
        "id": user.id,
        "name": user.name,
        "username": user.username,
        "avatar_url": user.avatar_url,
    }


def activity_type_summary(activity_type: ActivityTypeModel | None) -> dict[str, Any] | None:
    if activity_type is None:
        return None
    return {
        "id": activity_type.id,
        "name": activity_type.name,
        "category_id": activity_type.category_id,
        "is_negative": activity_type.is_negative,
    }


def is_global_admin(user: UserModel) -> bool:
    return user.role == UserRole.ADMIN


async def require_challenge(db: AsyncSession, challenge_id: UUID) -> ChallengeModel:
    challenge = await challenge_crud.get_by_id(db, challenge_id)
    if challenge is None:
        raise NotFoundError("Challenge", challenge_id)
    return challenge


async def is_challenge_admin(
    db: AsyncSession,
    user: UserModel,
    challenge: ChallengeModel,
) -> bool:
    """
    Whether `user` may administer `challenge`.

    Global admins, the challenge creator and participants with the
    challenge-scoped admin role all qualify.
    """
    if is_global_admin(user) or challenge.creator_id == user.id:
        return True
    participation = await participation_crud.get_for(db, user.id, challenge.id)
    return participation is not None and participation.role == ParticipationRole.ADMIN


async def require_challenge_admin(
    db: AsyncSession,
    user: UserModel,
    challenge_id: UUID,
) -> ChallengeModel:
    """
    Load a challenge and check the caller administers it.

    Raises:
        NotFoundError: If the challenge does not exist
        NotAuthorizedError: If the caller is not a challenge admin
    """
    challenge = await require_challenge(db, challenge_id)
    if not await is_challenge_admin(db, user, challenge):
        raise NotAuthorizedError(
            details={"challenge_id": str(challenge_id), "user_id": str(user.id)}
        )
    return challenge


async def require_participation(
    db: AsyncSession,
    user_id: UUID,
    challenge_id: UUID,
    message: str = "Not participating in this challenge",
) -> ParticipationModel:
    participation = await participation_crud.get_for(db, user_id, challenge_id)
    if participation is None:
        raise NotAuthorizedError(
            message,
            details={"challenge_id": str(challenge_id), "user_id": str(user_id)},
        )
    return participation


async def get_or_create_bonus_type(
    db: AsyncSession,
    challenge_id: UUID,
    name: str,
    description: str,
    scoring_config: dict,
) -> ActivityTypeModel:
    """
    Find the challenge's system activity type for generated bonus points.

    Bonus types score nothing themselves and never count toward streaks.
    """
    activity_type = await activity_type_crud.get_by_name(db, challenge_id, name)
    if activity_type is None:
        activity_type = await activity_type_crud.create(
            db,
            challenge_id=challenge_id,
            name=name,
            description=description,
            scoring_config=scoring_config,
            contributes_to_streak=False,
            is_negative=False,
        )
    return activity_type
