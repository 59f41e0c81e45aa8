"""
Participation service orchestrator.

Joining challenges (directly or through personal invite codes), member
roles and payment status, participant listings and @mention lookups.

Dependencies: backend.boundary.db.CRUD, backend.core.invite_codes
System role: Challenge membership use case orchestration
"""

import logging
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from backend.application.services.challenge_service import challenge_to_dict
from backend.application.services.service_helpers import (
    require_challenge,
    require_challenge_admin,
    require_participation,
    user_summary,
)
from backend.boundary.db.CRUD.participation_crud import challenge_invite_crud, participation_crud
from backend.boundary.db.CRUD.social_crud import follow_crud
from backend.boundary.db.CRUD.user_crud import user_crud
from backend.boundary.db.models.challenge_model import ChallengeVisibility
from backend.boundary.db.models.participation_model import (
    ParticipationModel,
    ParticipationRole,
    PaymentStatus,
)
from backend.boundary.db.models.user_model import UserModel
from backend.core.exceptions import (
    ConflictError,
    FitnessChallengeError,
    NotAuthorizedError,
    NotFoundError,
    ValidationError,
)
from backend.core.invite_codes import generate_invite_code

logger = logging.getLogger(__name__)

MAX_CODE_ATTEMPTS = 10


def participation_to_dict(participation: ParticipationModel) -> dict[str, Any]:
    return {
        "id": participation.id,
        "user_id": participation.user_id,
        "challenge_id": participation.challenge_id,
        "role": participation.role,
        "total_points": participation.total_points,
        "current_streak": participation.current_streak,
        "last_streak_day": participation.last_streak_day,
        "modifier_factor": participation.modifier_factor,
        "payment_status": participation.payment_status,
        "invited_by_user_id": participation.invited_by_user_id,
        "dismissed_announcement_at": participation.dismissed_announcement_at,
        "joined_at": participation.created_at,
    }


class ParticipationService:
    """Participation service orchestrator."""

    def __init__(self, db: AsyncSession) -> None:
        """
        Initialize participation service with async database session.

        Args:
            db: Async SQLAlchemy session
        """
        self.db = db

    async def join(
        self,
        user: UserModel,
        challenge_id: UUID,
        invite_code: str | None = None,
        invited_by_user_id: UUID | None = None,
    ) -> dict:
        """
        Join a challenge.

        Private challenges require an inviter, given directly or resolved
        from an invite code of the same challenge. Joining through an
        inviter makes the two users follow each other.

        Raises:
            ConflictError: If the caller already joined
            NotAuthorizedError: If the challenge is private and no inviter is known
            ValidationError: If the inviter is the caller or not a participant
        """
        challenge = await require_challenge(self.db, challenge_id)
        if await participation_crud.get_for(self.db, user.id, challenge_id) is not None:
            raise ConflictError("Already joined this challenge", {"challenge_id": str(challenge_id)})

        if invited_by_user_id is None and invite_code:
            invite = await challenge_invite_crud.get_by_code(self.db, invite_code.strip())
            if invite is not None and invite.challenge_id == challenge_id:
                invited_by_user_id = invite.user_id

        if invited_by_user_id is not None:
            if invited_by_user_id == user.id:
                raise ValidationError("You cannot invite yourself", field="invited_by_user_id")
            inviter = await participation_crud.get_for(self.db, invited_by_user_id, challenge_id)
            if inviter is None:
                raise ValidationError(
                    "Inviter is not a participant of this challenge",
                    field="invited_by_user_id",
                )

        if challenge.visibility == ChallengeVisibility.PRIVATE and invited_by_user_id is None:
            raise NotAuthorizedError(
                "This is a private challenge. You need an invitation to join.",
                details={"challenge_id": str(challenge_id)},
            )

        try:
            participation = await participation_crud.create(
                self.db,
                user_id=user.id,
                challenge_id=challenge_id,
                role=ParticipationRole.MEMBER,
                total_points=0.0,
                current_streak=0,
                modifier_factor=1.0,
                payment_status=(
                    PaymentStatus.UNPAID if challenge.payment_required else PaymentStatus.PAID
                ),
                invited_by_user_id=invited_by_user_id,
            )

            if invited_by_user_id is not None:
                await self._follow_each_other(user.id, invited_by_user_id)

            logger.info(
                "Challenge joined",
                extra={
                    "challenge_id": str(challenge_id),
                    "user_id": str(user.id),
                    "invited_by": str(invited_by_user_id) if invited_by_user_id else None,
                },
            )
            return participation_to_dict(participation)
        except Exception as e:
            logger.error(
                "Failed to join challenge",
                extra={"error": str(e), "challenge_id": str(challenge_id)},
            )
            raise

    async def _follow_each_other(self, user_id: UUID, other_id: UUID) -> None:
        for follower_id, following_id in ((user_id, other_id), (other_id, user_id)):
            if await follow_crud.get_for(self.db, follower_id, following_id) is None:
                await follow_crud.create(
                    self.db, follower_id=follower_id, following_id=following_id
                )

    async def _target_participation(self, challenge_id: UUID, user_id: UUID) -> ParticipationModel:
        participation = await participation_crud.get_for(self.db, user_id, challenge_id)
        if participation is None:
            raise NotFoundError("Participation", message="Participation not found")
        return participation

    async def update_role(self, user: UserModel, challenge_id: UUID, user_id: UUID, role: str) -> dict:
        await require_challenge_admin(self.db, user, challenge_id)
        try:
            new_role = ParticipationRole(role)
        except ValueError:
            raise ValidationError("Role must be member or admin", field="role")

        participation = await self._target_participation(challenge_id, user_id)
        participation.role = new_role
        participation = await participation_crud.save(self.db, participation)
        logger.info(
            "Participant role updated",
            extra={"challenge_id": str(challenge_id), "user_id": str(user_id), "role": new_role.value},
        )
        return participation_to_dict(participation)

    async def set_payment_status(
        self,
        user: UserModel,
        challenge_id: UUID,
        user_id: UUID,
        status: str,
    ) -> dict:
        await require_challenge_admin(self.db, user, challenge_id)
        try:
            new_status = PaymentStatus(status)
        except ValueError:
            raise ValidationError(
                "Payment status must be unpaid, pending, paid or failed", field="status"
            )

        participation = await self._target_participation(challenge_id, user_id)
        participation.payment_status = new_status
        participation = await participation_crud.save(self.db, participation)
        logger.info(
            "Payment status updated",
            extra={"challenge_id": str(challenge_id), "user_id": str(user_id), "status": new_status.value},
        )
        return participation_to_dict(participation)

    async def get_participation(self, user: UserModel, challenge_id: UUID) -> dict | None:
        participation = await participation_crud.get_for(self.db, user.id, challenge_id)
        return participation_to_dict(participation) if participation else None

    async def list_participants(self, challenge_id: UUID, limit: int = 100, offset: int = 0) -> list[dict]:
        await require_challenge(self.db, challenge_id)
        participations = await participation_crud.list_ranked(
            self.db, challenge_id, limit=limit, offset=offset
        )
        users = await user_crud.get_many(self.db, [p.user_id for p in participations])
        return [
            {**participation_to_dict(p), "user": user_summary(users.get(p.user_id))}
            for p in participations
        ]

    async def get_mentionable(self, challenge_id: UUID, search: str | None = None) -> list[dict]:
        members = await participation_crud.search_members(self.db, challenge_id, search, limit=20)
        return [user_summary(member) for member in members]

    async def get_or_create_invite_code(self, user: UserModel, challenge_id: UUID) -> dict:
        """
        The caller's personal invite code for a challenge.

        Raises:
            NotAuthorizedError: If the caller has not joined the challenge
        """
        await require_participation(self.db, user.id, challenge_id)
        invite = await challenge_invite_crud.get_for(self.db, challenge_id, user.id)
        if invite is not None:
            return {"code": invite.code, "challenge_id": challenge_id}

        try:
            for _ in range(MAX_CODE_ATTEMPTS):
                code = generate_invite_code()
                if await challenge_invite_crud.get_by_code(self.db, code) is None:
                    break
            else:
                raise ConflictError("Could not generate a unique invite code")

            invite = await challenge_invite_crud.create(
                self.db, challenge_id=challenge_id, user_id=user.id, code=code
            )
            logger.info(
                "Invite code created",
                extra={"challenge_id": str(challenge_id), "user_id": str(user.id)},
            )
            return {"code": invite.code, "challenge_id": challenge_id}
        except FitnessChallengeError:
            raise
        except Exception as e:
            logger.error(
                "Failed to create invite code",
                extra={"error": str(e), "challenge_id": str(challenge_id)},
            )
            raise

    async def resolve_invite_code(self, code: str) -> dict | None:
        """Challenge and inviter behind an invite code, or None if unknown."""
        invite = await challenge_invite_crud.get_by_code(self.db, code.strip())
        if invite is None:
            return None
        challenge = await require_challenge(self.db, invite.challenge_id)
        inviter = await user_crud.get_by_id(self.db, invite.user_id)
        return {
            "challenge": challenge_to_dict(challenge),
            "inviter": user_summary(inviter),
            "code": invite.code,
        }
