"""
Challenge service orchestrator.

Coordinates challenge lifecycle operations: creation (with the creator
joining as admin), settings updates, listings and announcements.

Dependencies: backend.boundary.db.CRUD, backend.core
System role: Challenge use case orchestration
"""

import logging
from datetime import date
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from backend.application.services.service_helpers import (
    require_challenge,
    require_challenge_admin,
    require_participation,
)
from backend.boundary.db.CRUD.challenge_crud import challenge_crud
from backend.boundary.db.CRUD.participation_crud import participation_crud
from backend.boundary.db.models.challenge_model import ChallengeModel, ChallengeVisibility
from backend.boundary.db.models.participation_model import ParticipationRole, PaymentStatus
from backend.boundary.db.models.user_model import UserModel
from backend.core.dates import parse_date_only, utc_now
from backend.core.exceptions import FitnessChallengeError, ValidationError

logger = logging.getLogger(__name__)

_UPDATABLE_FIELDS = (
    "name",
    "description",
    "streak_min_points",
    "week_calc_method",
    "auto_flag_rules",
    "payment_required",
)


def challenge_to_dict(challenge: ChallengeModel, participant_count: int | None = None) -> dict[str, Any]:
    data = {
        "id": challenge.id,
        "name": challenge.name,
        "description": challenge.description,
        "creator_id": challenge.creator_id,
        "start_date": challenge.start_date,
        "end_date": challenge.end_date,
        "duration_days": challenge.duration_days,
        "streak_min_points": challenge.streak_min_points,
        "week_calc_method": challenge.week_calc_method,
        "auto_flag_rules": challenge.auto_flag_rules,
        "visibility": challenge.visibility,
        "payment_required": challenge.payment_required,
        "announcement": challenge.announcement,
        "announcement_updated_at": challenge.announcement_updated_at,
        "created_at": challenge.created_at,
        "updated_at": challenge.updated_at,
    }
    if participant_count is not None:
        data["participant_count"] = participant_count
    return data


def validate_date_range(start: str | date, end: str | date) -> tuple[date, date]:
    """
    Parse and check a challenge's date-only range.

    Raises:
        ValidationError: If either date is malformed or end precedes start
    """
    start_date = parse_date_only(start, field="start_date")
    end_date = parse_date_only(end, field="end_date")
    if end_date < start_date:
        raise ValidationError("End date must be on or after start date", field="end_date")
    return start_date, end_date


def _visibility(value: str | None) -> ChallengeVisibility:
    try:
        return ChallengeVisibility(value or ChallengeVisibility.PUBLIC)
    except ValueError:
        raise ValidationError("Visibility must be 'public' or 'private'", field="visibility")


class ChallengeService:
    """Challenge service orchestrator."""

    def __init__(self, db: AsyncSession) -> None:
        """
        Initialize challenge service with async database session.

        Args:
            db: Async SQLAlchemy session
        """
        self.db = db

    async def create_challenge(
        self,
        user: UserModel,
        name: str,
        start_date: str | date,
        end_date: str | date,
        description: str | None = None,
        duration_days: int | None = None,
        streak_min_points: float = 0.0,
        week_calc_method: str = "from_start",
        auto_flag_rules: dict | None = None,
        visibility: str | None = None,
        payment_required: bool = False,
    ) -> dict:
        """
        Create a challenge and enroll the creator as its admin.

        Args:
            user: Creator
            name: Challenge name
            start_date: First day (YYYY-MM-DD)
            end_date: Last day (YYYY-MM-DD), on or after start_date
            duration_days: Length in days (defaults to the inclusive range)

        Returns:
            dict: Created challenge

        Raises:
            ValidationError: If name or dates are invalid
        """
        if not name or not name.strip():
            raise ValidationError("Challenge name is required", field="name")
        start, end = validate_date_range(start_date, end_date)

        try:
            challenge = await challenge_crud.create(
                self.db,
                name=name.strip(),
                description=description,
                creator_id=user.id,
                start_date=start,
                end_date=end,
                duration_days=duration_days or (end - start).days + 1,
                streak_min_points=streak_min_points,
                week_calc_method=week_calc_method,
                auto_flag_rules=auto_flag_rules,
                visibility=_visibility(visibility),
                payment_required=payment_required,
            )
            await participation_crud.create(
                self.db,
                user_id=user.id,
                challenge_id=challenge.id,
                role=ParticipationRole.ADMIN,
                payment_status=PaymentStatus.PAID,
            )
            logger.info(
                "Challenge created",
                extra={"challenge_id": str(challenge.id), "creator_id": str(user.id)},
            )
            return challenge_to_dict(challenge, participant_count=1)
        except Exception as e:
            logger.error(
                "Failed to create challenge",
                extra={"error": str(e), "challenge_name": name},
            )
            raise

    async def update_challenge(self, user: UserModel, challenge_id: UUID, **changes: Any) -> dict:
        """
        Update challenge settings (challenge admins only).

        Args:
            user: Caller
            challenge_id: Challenge UUID
            **changes: Fields to change; start_date/end_date are validated
                against the merged range, announcement stamps its timestamp

        Returns:
            dict: Updated challenge

        Raises:
            NotFoundError: If the challenge does not exist
            NotAuthorizedError: If the caller is not a challenge admin
            ValidationError: If the merged dates are invalid
        """
        challenge = await require_challenge_admin(self.db, user, challenge_id)
        try:
            if "start_date" in changes or "end_date" in changes:
                start, end = validate_date_range(
                    changes.get("start_date") or challenge.start_date,
                    changes.get("end_date") or challenge.end_date,
                )
                challenge.start_date = start
                challenge.end_date = end

            if changes.get("duration_days") is not None:
                if changes["duration_days"] < 1:
                    raise ValidationError("Duration must be at least 1 day", field="duration_days")
                challenge.duration_days = changes["duration_days"]

            if changes.get("name") is not None and not changes["name"].strip():
                raise ValidationError("Challenge name is required", field="name")

            for field in _UPDATABLE_FIELDS:
                if changes.get(field) is not None:
                    setattr(challenge, field, changes[field])

            if changes.get("visibility") is not None:
                challenge.visibility = _visibility(changes["visibility"])

            if "announcement" in changes:
                challenge.announcement = changes["announcement"] or None
                challenge.announcement_updated_at = utc_now()

            challenge = await challenge_crud.save(self.db, challenge)
            logger.info("Challenge updated", extra={"challenge_id": str(challenge_id)})
            return challenge_to_dict(challenge)
        except FitnessChallengeError:
            raise
        except Exception as e:
            logger.error(
                "Failed to update challenge",
                extra={"error": str(e), "challenge_id": str(challenge_id)},
            )
            raise

    async def get_challenge(self, challenge_id: UUID) -> dict:
        """
        Get challenge with its participant count.

        Raises:
            NotFoundError: If challenge not found
        """
        challenge = await require_challenge(self.db, challenge_id)
        count = await participation_crud.count_for_challenge(self.db, challenge_id)
        return challenge_to_dict(challenge, participant_count=count)

    async def list_public(self, limit: int = 50, offset: int = 0) -> list[dict]:
        challenges = await challenge_crud.list_public(self.db, limit=limit, offset=offset)
        counts = await challenge_crud.participant_counts(self.db, [c.id for c in challenges])
        return [challenge_to_dict(c, counts.get(c.id, 0)) for c in challenges]

    async def list_for_user(self, user: UserModel) -> list[dict]:
        challenges = await challenge_crud.list_for_user(self.db, user.id)
        counts = await challenge_crud.participant_counts(self.db, [c.id for c in challenges])
        return [challenge_to_dict(c, counts.get(c.id, 0)) for c in challenges]

    async def dismiss_announcement(self, user: UserModel, challenge_id: UUID) -> None:
        """
        Hide the current announcement for the caller.

        Raises:
            NotAuthorizedError: If the caller has not joined the challenge
        """
        participation = await require_participation(self.db, user.id, challenge_id)
        participation.dismissed_announcement_at = utc_now()
        await participation_crud.save(self.db, participation)
        logger.info(
            "Announcement dismissed",
            extra={"challenge_id": str(challenge_id), "user_id": str(user.id)},
        )
