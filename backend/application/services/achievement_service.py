"""
Achievement service orchestrator.

Manages achievement definitions, reports per-user progress and awards
achievements (with bonus-point activities) after activities are logged.

Dependencies: backend.boundary.db.CRUD, backend.core.achievements
System role: Achievement use case orchestration
"""

import logging
from collections import defaultdict
from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from backend.application.services.service_helpers import (
    get_or_create_bonus_type,
    require_challenge,
    require_challenge_admin,
)
from backend.application.services.standings import apply_points_delta
from backend.boundary.db.CRUD.achievement_crud import achievement_crud, user_achievement_crud
from backend.boundary.db.CRUD.activity_crud import activity_crud
from backend.boundary.db.CRUD.participation_crud import participation_crud
from backend.boundary.db.models.achievement_model import AchievementFrequency, AchievementModel
from backend.boundary.db.models.activity_model import ActivitySource, ResolutionStatus
from backend.boundary.db.models.challenge_model import ChallengeModel
from backend.boundary.db.models.user_model import UserModel
from backend.core.achievements import (
    CRITERIA_TYPES,
    criteria_type,
    evaluate_criteria,
    is_blocked_by_earlier_award,
)
from backend.core.dates import utc_now
from backend.core.exceptions import FitnessChallengeError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

ACHIEVEMENT_BONUS_TYPE = "Achievement Bonus"


def achievement_to_dict(achievement: AchievementModel) -> dict[str, Any]:
    return {
        "id": achievement.id,
        "challenge_id": achievement.challenge_id,
        "name": achievement.name,
        "description": achievement.description,
        "bonus_points": achievement.bonus_points,
        "criteria": achievement.criteria,
        "frequency": achievement.frequency,
        "created_at": achievement.created_at,
    }


def _frequency(value: str | None) -> AchievementFrequency:
    try:
        return AchievementFrequency(value or AchievementFrequency.ONCE_PER_CHALLENGE)
    except ValueError:
        raise ValidationError(
            "Frequency must be once_per_challenge, once_per_week or unlimited",
            field="frequency",
        )


def _check_criteria(criteria: dict) -> None:
    if not isinstance(criteria, dict) or criteria_type(criteria) not in CRITERIA_TYPES:
        raise ValidationError(
            f"Criteria type must be one of: {', '.join(CRITERIA_TYPES)}",
            field="criteria",
        )


class AchievementService:
    """Achievement service orchestrator."""

    def __init__(self, db: AsyncSession) -> None:
        """
        Initialize achievement service with async database session.

        Args:
            db: Async SQLAlchemy session
        """
        self.db = db

    async def create_achievement(
        self,
        user: UserModel,
        challenge_id: UUID,
        name: str,
        criteria: dict,
        bonus_points: float = 0.0,
        description: str = "",
        frequency: str | None = None,
    ) -> dict:
        """
        Define an achievement (challenge admins only).

        Raises:
            ValidationError: If name, criteria or frequency are invalid
        """
        await require_challenge_admin(self.db, user, challenge_id)
        if not name or not name.strip():
            raise ValidationError("Achievement name is required", field="name")
        _check_criteria(criteria)

        try:
            achievement = await achievement_crud.create(
                self.db,
                challenge_id=challenge_id,
                name=name.strip(),
                description=description,
                bonus_points=bonus_points,
                criteria=criteria,
                frequency=_frequency(frequency),
            )
            logger.info(
                "Achievement created",
                extra={"achievement_id": str(achievement.id), "challenge_id": str(challenge_id)},
            )
            return achievement_to_dict(achievement)
        except Exception as e:
            logger.error(
                "Failed to create achievement",
                extra={"error": str(e), "challenge_id": str(challenge_id)},
            )
            raise

    async def _require_admin_achievement(self, user: UserModel, achievement_id: UUID) -> AchievementModel:
        achievement = await achievement_crud.get_by_id(self.db, achievement_id)
        if achievement is None:
            raise NotFoundError("Achievement", achievement_id)
        await require_challenge_admin(self.db, user, achievement.challenge_id)
        return achievement

    async def update_achievement(
        self,
        user: UserModel,
        achievement_id: UUID,
        name: str | None = None,
        description: str | None = None,
        bonus_points: float | None = None,
        criteria: dict | None = None,
        frequency: str | None = None,
    ) -> dict:
        achievement = await self._require_admin_achievement(user, achievement_id)
        try:
            if name is not None:
                if not name.strip():
                    raise ValidationError("Achievement name is required", field="name")
                achievement.name = name.strip()
            if description is not None:
                achievement.description = description
            if bonus_points is not None:
                achievement.bonus_points = bonus_points
            if criteria is not None:
                _check_criteria(criteria)
                achievement.criteria = criteria
            if frequency is not None:
                achievement.frequency = _frequency(frequency)

            achievement = await achievement_crud.save(self.db, achievement)
            logger.info("Achievement updated", extra={"achievement_id": str(achievement_id)})
            return achievement_to_dict(achievement)
        except FitnessChallengeError:
            raise
        except Exception as e:
            logger.error(
                "Failed to update achievement",
                extra={"error": str(e), "achievement_id": str(achievement_id)},
            )
            raise

    async def delete_achievement(self, user: UserModel, achievement_id: UUID) -> None:
        """Delete an achievement and every award of it."""
        await self._require_admin_achievement(user, achievement_id)
        removed = await user_achievement_crud.delete_for_achievement(self.db, achievement_id)
        await achievement_crud.delete_by_id(self.db, achievement_id)
        logger.info(
            "Achievement deleted",
            extra={"achievement_id": str(achievement_id), "awards_removed": removed},
        )

    async def list_achievements(self, challenge_id: UUID) -> list[dict]:
        await require_challenge(self.db, challenge_id)
        achievements = await achievement_crud.list_for_challenge(self.db, challenge_id)
        return [achievement_to_dict(a) for a in achievements]

    async def get_user_progress(self, user: UserModel, challenge_id: UUID) -> list[dict]:
        """
        Progress of the caller toward each achievement in a challenge.

        Returns:
            list[dict]: Achievement plus current_count, required_count,
            is_earned and the most recent earned_at
        """
        await require_challenge(self.db, challenge_id)
        achievements = await achievement_crud.list_for_challenge(self.db, challenge_id)
        activities = await activity_crud.list_for_user(
            self.db, user.id, challenge_id, oldest_first=True
        )
        earned = await self._earned_at_by_achievement(user.id, challenge_id)

        progress = []
        for achievement in achievements:
            result = evaluate_criteria(achievement.criteria, list(activities))
            earned_at = earned.get(achievement.id, [])
            progress.append(
                {
                    **achievement_to_dict(achievement),
                    "current_count": result.current_count,
                    "required_count": result.required_count,
                    "is_earned": bool(earned_at),
                    "earned_at": earned_at[0] if earned_at else None,
                }
            )
        return progress

    async def _earned_at_by_achievement(
        self,
        user_id: UUID,
        challenge_id: UUID,
    ) -> dict[UUID, list[datetime]]:
        awards = await user_achievement_crud.list_for_user(self.db, user_id, challenge_id)
        earned: dict[UUID, list[datetime]] = defaultdict(list)
        for award in awards:
            earned[award.achievement_id].append(award.earned_at)
        return earned

    async def check_and_award(self, user_id: UUID, challenge: ChallengeModel) -> list[dict]:
        """
        Award every achievement whose criteria the user now meets.

        Skips achievements already earned within their frequency window.
        Each award creates an "Achievement Bonus" activity and adds its
        points to the participation.

        Args:
            user_id: Participant who just logged an activity
            challenge: Challenge the activity belongs to

        Returns:
            list[dict]: Newly awarded achievements
        """
        achievements = await achievement_crud.list_for_challenge(self.db, challenge.id)
        if not achievements:
            return []

        activities = list(
            await activity_crud.list_for_user(self.db, user_id, challenge.id, oldest_first=True)
        )
        earned = await self._earned_at_by_achievement(user_id, challenge.id)
        now = utc_now()
        awarded = []

        for achievement in achievements:
            if is_blocked_by_earlier_award(achievement.frequency, earned.get(achievement.id, []), now):
                continue

            progress = evaluate_criteria(achievement.criteria, activities)
            if not progress.is_met:
                continue

            qualifying = progress.qualifying_activity_ids
            if criteria_type(achievement.criteria) == "count":
                qualifying = qualifying[: int(progress.required_count)]

            bonus_activity = await self._create_bonus_activity(user_id, challenge, achievement, now)
            await user_achievement_crud.create(
                self.db,
                user_id=user_id,
                challenge_id=challenge.id,
                achievement_id=achievement.id,
                earned_at=now,
                activity_ids=[str(activity_id) for activity_id in qualifying],
                bonus_activity_id=bonus_activity.id,
            )

            participation = await participation_crud.get_for(self.db, user_id, challenge.id)
            if participation is not None:
                apply_points_delta(participation, achievement.bonus_points)
                await participation_crud.save(self.db, participation)

            earned.setdefault(achievement.id, []).append(now)
            awarded.append(
                {
                    "id": achievement.id,
                    "name": achievement.name,
                    "bonus_points": achievement.bonus_points,
                }
            )
            logger.info(
                "Achievement awarded",
                extra={
                    "achievement_id": str(achievement.id),
                    "user_id": str(user_id),
                    "bonus_points": achievement.bonus_points,
                },
            )

        return awarded

    async def _create_bonus_activity(
        self,
        user_id: UUID,
        challenge: ChallengeModel,
        achievement: AchievementModel,
        now: datetime,
    ):
        bonus_type = await get_or_create_bonus_type(
            self.db,
            challenge.id,
            ACHIEVEMENT_BONUS_TYPE,
            "Bonus points for earning achievements",
            scoring_config={"basePoints": 0},
        )
        return await activity_crud.create(
            self.db,
            user_id=user_id,
            challenge_id=challenge.id,
            activity_type_id=bonus_type.id,
            logged_date=now,
            metrics={"achievement_id": str(achievement.id), "achievement_name": achievement.name},
            notes=f"Achievement earned: {achievement.name}",
            source=ActivitySource.MANUAL,
            points_earned=achievement.bonus_points,
            resolution_status=ResolutionStatus.PENDING,
        )
