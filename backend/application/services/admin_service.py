"""
Admin moderation service orchestrator.

Review queue for flagged activities: resolution, admin comments, edits
with a full audit trail, and date-range sanity checks. Every operation
requires challenge admin rights on the activity's challenge.

Dependencies: backend.boundary.db.CRUD, NotificationService, standings
System role: Moderation use case orchestration
"""

import logging
from datetime import date, datetime
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from backend.application.services.activity_service import activity_to_dict
from backend.application.services.challenge_service import challenge_to_dict
from backend.application.services.notification_service import NotificationService, NotificationType
from backend.application.services.service_helpers import (
    activity_type_summary,
    require_challenge_admin,
    user_summary,
)
from backend.application.services.standings import (
    apply_points_delta,
    recompute_participation_streak,
    save_participation,
)
from backend.boundary.db.CRUD.activity_crud import activity_crud, activity_flag_history_crud
from backend.boundary.db.CRUD.activity_type_crud import activity_type_crud
from backend.boundary.db.CRUD.participation_crud import participation_crud
from backend.boundary.db.CRUD.user_crud import user_crud
from backend.boundary.db.models.activity_model import (
    ActivityModel,
    CommentVisibility,
    FlagActionType,
    ResolutionStatus,
)
from backend.boundary.db.models.challenge_model import ChallengeModel
from backend.boundary.db.models.user_model import UserModel
from backend.core.dates import DAY, day_start, format_date_only, parse_logged_date, utc_now
from backend.core.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def _history_value(value: Any) -> Any:
    """JSON-safe form of an edited field value."""
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, date):
        return format_date_only(value)
    return value


class AdminService:
    """Admin moderation service orchestrator."""

    def __init__(self, db: AsyncSession) -> None:
        """
        Initialize admin service with async database session.

        Args:
            db: Async SQLAlchemy session
        """
        self.db = db
        self.notifications = NotificationService(db)

    async def _require_admin_activity(
        self,
        user: UserModel,
        activity_id: UUID,
    ) -> tuple[ActivityModel, ChallengeModel]:
        activity = await activity_crud.get_active(self.db, activity_id)
        if activity is None:
            raise NotFoundError("Activity", activity_id)
        challenge = await require_challenge_admin(self.db, user, activity.challenge_id)
        return activity, challenge

    async def _record(
        self,
        activity_id: UUID,
        actor: UserModel,
        action_type: FlagActionType,
        payload: dict,
    ) -> None:
        await activity_flag_history_crud.create(
            self.db,
            activity_id=activity_id,
            actor_id=actor.id,
            action_type=action_type,
            payload=payload,
        )

    async def update_flag_resolution(
        self,
        user: UserModel,
        activity_id: UUID,
        status: str,
        notes: str | None = None,
    ) -> dict:
        """
        Move a flagged activity between pending and resolved.

        Resolving clears the flag; returning to pending re-raises it.
        """
        activity, _ = await self._require_admin_activity(user, activity_id)
        try:
            new_status = ResolutionStatus(status)
        except ValueError:
            raise ValidationError("Status must be pending or resolved", field="status")

        resolved = new_status == ResolutionStatus.RESOLVED
        activity.resolution_status = new_status
        activity.resolution_notes = notes
        activity.flagged = not resolved
        activity.resolved_at = utc_now() if resolved else None
        activity.resolved_by_id = user.id if resolved else None
        activity = await activity_crud.save(self.db, activity)

        await self._record(
            activity_id, user, FlagActionType.RESOLUTION, {"status": new_status.value, "notes": notes}
        )
        logger.info(
            "Flag resolution updated",
            extra={"activity_id": str(activity_id), "status": new_status.value, "admin_id": str(user.id)},
        )
        return activity_to_dict(activity, show_admin_comment=True)

    async def add_admin_comment(
        self,
        user: UserModel,
        activity_id: UUID,
        comment: str,
        visibility: str = CommentVisibility.INTERNAL.value,
    ) -> dict:
        activity, _ = await self._require_admin_activity(user, activity_id)
        comment = (comment or "").strip()
        if not comment:
            raise ValidationError("Comment cannot be empty", field="comment")
        try:
            new_visibility = CommentVisibility(visibility)
        except ValueError:
            raise ValidationError("Visibility must be internal or participant", field="visibility")

        activity.admin_comment = comment
        activity.admin_comment_visibility = new_visibility
        activity = await activity_crud.save(self.db, activity)

        await self._record(
            activity_id,
            user,
            FlagActionType.COMMENT,
            {"comment": comment, "visibility": new_visibility.value},
        )
        if new_visibility == CommentVisibility.PARTICIPANT:
            await self.notifications.notify(
                activity.user_id,
                NotificationType.ADMIN_COMMENT,
                actor_id=user.id,
                data={"activity_id": activity_id, "comment": comment},
            )
        logger.info("Admin comment added", extra={"activity_id": str(activity_id), "admin_id": str(user.id)})
        return activity_to_dict(activity, show_admin_comment=True)

    async def admin_edit_activity(
        self,
        user: UserModel,
        activity_id: UUID,
        activity_type_id: UUID | None = None,
        points_earned: float | None = None,
        notes: str | None = None,
        logged_date: str | date | datetime | None = None,
        metrics: dict | None = None,
    ) -> dict:
        """
        Correct an activity's type, points, notes, date or metrics.

        Point changes flow into the owner's participation total and the
        streak is recomputed. The edit is audited field by field and the
        owner is notified.

        Raises:
            ValidationError: If the new type is not in the same challenge
                or nothing changed
        """
        activity, challenge = await self._require_admin_activity(user, activity_id)

        if activity_type_id is not None and activity_type_id != activity.activity_type_id:
            new_type = await activity_type_crud.get_by_id(self.db, activity_type_id)
            if new_type is None or new_type.challenge_id != activity.challenge_id:
                raise ValidationError(
                    "Activity type must belong to the same challenge", field="activity_type_id"
                )

        proposed: dict[str, Any] = {}
        if activity_type_id is not None:
            proposed["activity_type_id"] = activity_type_id
        if points_earned is not None:
            proposed["points_earned"] = points_earned
        if notes is not None:
            proposed["notes"] = notes
        if logged_date is not None:
            proposed["logged_date"] = parse_logged_date(logged_date)
        if metrics is not None:
            proposed["metrics"] = metrics

        changes = {
            field: {"from": _history_value(getattr(activity, field)), "to": _history_value(value)}
            for field, value in proposed.items()
            if getattr(activity, field) != value
        }
        if not changes:
            raise ValidationError("No changes to apply")

        try:
            old_points = activity.points_earned
            for field in changes:
                setattr(activity, field, proposed[field])
            activity = await activity_crud.save(self.db, activity)

            participation = await participation_crud.get_for(
                self.db, activity.user_id, activity.challenge_id
            )
            if participation is not None:
                apply_points_delta(participation, activity.points_earned - old_points)
                await recompute_participation_streak(self.db, participation, challenge)
                await save_participation(self.db, participation)

            await self._record(activity_id, user, FlagActionType.EDIT, changes)
            await self.notifications.notify(
                activity.user_id,
                NotificationType.ADMIN_EDIT,
                actor_id=user.id,
                data={"activity_id": activity_id, "fields": sorted(changes)},
            )
            logger.info(
                "Activity edited by admin",
                extra={"activity_id": str(activity_id), "fields": sorted(changes), "admin_id": str(user.id)},
            )
            return activity_to_dict(activity, show_admin_comment=True)
        except Exception as e:
            logger.error(
                "Failed to edit activity",
                extra={"error": str(e), "activity_id": str(activity_id)},
            )
            raise

    async def list_flagged_activities(
        self,
        user: UserModel,
        challenge_id: UUID,
        status: str | None = None,
        participant_id: UUID | None = None,
        search: str | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[dict]:
        await require_challenge_admin(self.db, user, challenge_id)
        status_filter = None
        if status:
            try:
                status_filter = ResolutionStatus(status)
            except ValueError:
                raise ValidationError("Status must be pending or resolved", field="status")

        activities = await activity_crud.list_flagged(
            self.db,
            challenge_id,
            status=status_filter,
            participant_id=participant_id,
            search=search,
            limit=limit,
            offset=offset,
        )
        users = await user_crud.get_many(self.db, [a.user_id for a in activities])
        types = await activity_type_crud.get_many(self.db, [a.activity_type_id for a in activities])
        return [
            {
                **activity_to_dict(a, show_admin_comment=True),
                "user": user_summary(users.get(a.user_id)),
                "activity_type": activity_type_summary(types.get(a.activity_type_id)),
            }
            for a in activities
        ]

    async def get_flagged_activity_detail(self, user: UserModel, activity_id: UUID) -> dict:
        """Activity with its owner, type, challenge and moderation history."""
        activity, challenge = await self._require_admin_activity(user, activity_id)
        owner = await user_crud.get_by_id(self.db, activity.user_id)
        activity_type = await activity_type_crud.get_by_id(self.db, activity.activity_type_id)

        history = await activity_flag_history_crud.list_for_activity(self.db, activity_id)
        actors = await user_crud.get_many(
            self.db, [entry.actor_id for entry in history if entry.actor_id is not None]
        )
        return {
            "activity": activity_to_dict(activity, show_admin_comment=True),
            "user": user_summary(owner),
            "activity_type": activity_type_summary(activity_type),
            "challenge": challenge_to_dict(challenge),
            "history": [
                {
                    "id": entry.id,
                    "action_type": entry.action_type,
                    "payload": entry.payload,
                    "created_at": entry.created_at,
                    "actor": user_summary(actors.get(entry.actor_id)) if entry.actor_id else None,
                }
                for entry in history
            ],
        }

    async def check_out_of_bounds_activities(self, user: UserModel, challenge_id: UUID) -> list[dict]:
        """Activities logged before the start day or after the end day."""
        challenge = await require_challenge_admin(self.db, user, challenge_id)
        activities = await activity_crud.list_outside(
            self.db,
            challenge_id,
            start=day_start(challenge.start_date),
            end=day_start(challenge.end_date) + DAY,
        )
        users = await user_crud.get_many(self.db, [a.user_id for a in activities])
        return [
            {**activity_to_dict(a, show_admin_comment=True), "user": user_summary(users.get(a.user_id))}
            for a in activities
        ]
