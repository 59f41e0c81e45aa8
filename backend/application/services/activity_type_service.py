"""
Activity type and category service orchestrators.

Activity types are configured per challenge by challenge admins;
categories are global and managed by platform admins.

Dependencies: backend.boundary.db.CRUD, backend.core.weeks
System role: Scoring configuration use case orchestration
"""

import logging
from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from backend.application.services.service_helpers import (
    is_global_admin,
    require_challenge,
    require_challenge_admin,
)
from backend.boundary.db.CRUD.activity_type_crud import activity_type_crud
from backend.boundary.db.CRUD.challenge_crud import category_crud
from backend.boundary.db.models.activity_type_model import ActivityTypeModel
from backend.boundary.db.models.challenge_model import CategoryModel
from backend.boundary.db.models.user_model import UserModel
from backend.core.dates import utc_now
from backend.core.exceptions import (
    ConflictError,
    FitnessChallengeError,
    NotAuthorizedError,
    NotFoundError,
    ValidationError,
)
from backend.core.weeks import challenge_week_number

logger = logging.getLogger(__name__)

_ACTIVITY_TYPE_FIELDS = (
    "name",
    "description",
    "scoring_config",
    "contributes_to_streak",
    "is_negative",
    "category_id",
    "bonus_thresholds",
    "max_per_challenge",
    "valid_weeks",
    "display_order",
)


def activity_type_to_dict(activity_type: ActivityTypeModel) -> dict[str, Any]:
    return {
        "id": activity_type.id,
        "challenge_id": activity_type.challenge_id,
        "category_id": activity_type.category_id,
        "name": activity_type.name,
        "description": activity_type.description,
        "scoring_config": activity_type.scoring_config,
        "contributes_to_streak": activity_type.contributes_to_streak,
        "is_negative": activity_type.is_negative,
        "bonus_thresholds": activity_type.bonus_thresholds or [],
        "max_per_challenge": activity_type.max_per_challenge,
        "valid_weeks": activity_type.valid_weeks or [],
        "display_order": activity_type.display_order,
        "created_at": activity_type.created_at,
        "updated_at": activity_type.updated_at,
    }


def category_to_dict(category: CategoryModel) -> dict[str, Any]:
    return {
        "id": category.id,
        "name": category.name,
        "description": category.description,
        "created_at": category.created_at,
    }


def _check_bonus_thresholds(thresholds: list | None) -> None:
    for threshold in thresholds or []:
        if not isinstance(threshold, dict) or not threshold.get("metric"):
            raise ValidationError(
                "Each bonus threshold needs a metric, threshold and bonus_points",
                field="bonus_thresholds",
            )


class ActivityTypeService:
    """Activity type service orchestrator."""

    def __init__(self, db: AsyncSession) -> None:
        """
        Initialize activity type service with async database session.

        Args:
            db: Async SQLAlchemy session
        """
        self.db = db

    async def _check_category(self, category_id: UUID | None) -> None:
        if category_id is not None and not await category_crud.exists(self.db, category_id):
            raise NotFoundError("Category", category_id)

    async def create_activity_type(
        self,
        user: UserModel,
        challenge_id: UUID,
        name: str,
        scoring_config: dict | None = None,
        **fields: Any,
    ) -> dict:
        """
        Add an activity type to a challenge (challenge admins only).

        Args:
            user: Caller
            challenge_id: Challenge UUID
            name: Display name
            scoring_config: Scoring rules JSON
            **fields: Remaining activity type columns

        Returns:
            dict: Created activity type
        """
        await require_challenge_admin(self.db, user, challenge_id)
        if not name or not name.strip():
            raise ValidationError("Activity type name is required", field="name")
        _check_bonus_thresholds(fields.get("bonus_thresholds"))
        await self._check_category(fields.get("category_id"))

        try:
            values = {k: v for k, v in fields.items() if k in _ACTIVITY_TYPE_FIELDS and v is not None}
            activity_type = await activity_type_crud.create(
                self.db,
                challenge_id=challenge_id,
                name=name.strip(),
                scoring_config=scoring_config or {},
                **values,
            )
            logger.info(
                "Activity type created",
                extra={
                    "activity_type_id": str(activity_type.id),
                    "challenge_id": str(challenge_id),
                },
            )
            return activity_type_to_dict(activity_type)
        except Exception as e:
            logger.error(
                "Failed to create activity type",
                extra={"error": str(e), "challenge_id": str(challenge_id)},
            )
            raise

    async def update_activity_type(
        self,
        user: UserModel,
        activity_type_id: UUID,
        **changes: Any,
    ) -> dict:
        """
        Update an activity type (challenge admins only).

        Only keys present in `changes` are applied, so nullable columns
        can be cleared by passing None explicitly.
        """
        activity_type = await activity_type_crud.get_by_id(self.db, activity_type_id)
        if activity_type is None:
            raise NotFoundError("Activity type", activity_type_id)
        await require_challenge_admin(self.db, user, activity_type.challenge_id)

        if "name" in changes and not (changes["name"] or "").strip():
            raise ValidationError("Activity type name is required", field="name")
        if "bonus_thresholds" in changes:
            _check_bonus_thresholds(changes["bonus_thresholds"])
        if changes.get("category_id") is not None:
            await self._check_category(changes["category_id"])

        try:
            for field, value in changes.items():
                if field not in _ACTIVITY_TYPE_FIELDS:
                    continue
                if field in ("scoring_config", "contributes_to_streak", "is_negative") and value is None:
                    continue
                setattr(activity_type, field, value)

            activity_type = await activity_type_crud.save(self.db, activity_type)
            logger.info("Activity type updated", extra={"activity_type_id": str(activity_type_id)})
            return activity_type_to_dict(activity_type)
        except Exception as e:
            logger.error(
                "Failed to update activity type",
                extra={"error": str(e), "activity_type_id": str(activity_type_id)},
            )
            raise

    async def get_activity_type(self, activity_type_id: UUID) -> dict:
        activity_type = await activity_type_crud.get_by_id(self.db, activity_type_id)
        if activity_type is None:
            raise NotFoundError("Activity type", activity_type_id)
        return activity_type_to_dict(activity_type)

    async def list_activity_types(self, challenge_id: UUID) -> list[dict]:
        await require_challenge(self.db, challenge_id)
        types = await activity_type_crud.list_for_challenge(self.db, challenge_id)
        return [activity_type_to_dict(t) for t in types]

    async def list_visible_activity_types(
        self,
        challenge_id: UUID,
        now: datetime | None = None,
    ) -> list[dict]:
        """
        Activity types loggable in the current challenge week.

        Types whose valid_weeks is non-empty and excludes the current week
        are hidden.
        """
        challenge = await require_challenge(self.db, challenge_id)
        week = challenge_week_number(challenge.start_date, now or utc_now())
        types = await activity_type_crud.list_for_challenge(self.db, challenge_id)
        return [
            activity_type_to_dict(t)
            for t in types
            if not t.valid_weeks or week in t.valid_weeks
        ]


class CategoryService:
    """Category service orchestrator (global admins manage categories)."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def create_category(
        self,
        user: UserModel,
        name: str,
        description: str | None = None,
    ) -> dict:
        """
        Create a global category.

        Raises:
            NotAuthorizedError: If the caller is not a global admin
            ConflictError: If the name is taken
        """
        if not is_global_admin(user):
            raise NotAuthorizedError("Not authorized - admin required")
        if not name or not name.strip():
            raise ValidationError("Category name is required", field="name")
        if await category_crud.get_by_name(self.db, name) is not None:
            raise ConflictError("Category already exists", {"name": name})

        try:
            category = await category_crud.create(
                self.db, name=name.strip(), description=description
            )
            logger.info("Category created", extra={"category_id": str(category.id)})
            return category_to_dict(category)
        except Exception as e:
            logger.error("Failed to create category", extra={"error": str(e), "category_name": name})
            raise

    async def update_category(
        self,
        user: UserModel,
        category_id: UUID,
        name: str | None = None,
        description: str | None = None,
    ) -> dict:
        if not is_global_admin(user):
            raise NotAuthorizedError("Not authorized - admin required")
        try:
            category = await category_crud.get_by_id(self.db, category_id)
            if category is None:
                raise NotFoundError("Category", category_id)
            if name is not None:
                if not name.strip():
                    raise ValidationError("Category name is required", field="name")
                existing = await category_crud.get_by_name(self.db, name)
                if existing is not None and existing.id != category_id:
                    raise ConflictError("Category already exists", {"name": name})
                category.name = name.strip()
            if description is not None:
                category.description = description
            category = await category_crud.save(self.db, category)
            logger.info("Category updated", extra={"category_id": str(category_id)})
            return category_to_dict(category)
        except FitnessChallengeError:
            raise
        except Exception as e:
            logger.error(
                "Failed to update category",
                extra={"error": str(e), "category_id": str(category_id)},
            )
            raise

    async def list_categories(self) -> list[dict]:
        categories = await category_crud.list_all(self.db)
        return [category_to_dict(c) for c in categories]
