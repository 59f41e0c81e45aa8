"""
Activity service orchestrator.

Logs activities through the scoring engine and keeps participation
totals, streaks, achievements and moderation flags in step with them.
Also serves the challenge feed and single-activity views.

Dependencies: backend.boundary.db.CRUD, backend.core.scoring, backend.boundary.aws
System role: Activity logging use case orchestration
"""

import logging
from datetime import date, datetime
from typing import Any, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from backend.application.services.achievement_service import AchievementService
from backend.application.services.service_helpers import (
    activity_type_summary,
    is_challenge_admin,
    require_challenge,
    require_participation,
    user_summary,
)
from backend.application.services.standings import (
    advance_participation_streak,
    apply_points_delta,
    recompute_participation_streak,
    save_participation,
)
from backend.boundary.aws.s3_client import S3MediaClient
from backend.boundary.db.CRUD.activity_crud import activity_crud, activity_flag_history_crud
from backend.boundary.db.CRUD.activity_type_crud import activity_type_crud
from backend.boundary.db.CRUD.participation_crud import participation_crud
from backend.boundary.db.CRUD.social_crud import comment_crud, follow_crud, like_crud
from backend.boundary.db.CRUD.user_crud import user_crud
from backend.boundary.db.models.activity_model import (
    ActivityModel,
    ActivitySource,
    CommentVisibility,
    FlagActionType,
    ResolutionStatus,
)
from backend.boundary.db.models.participation_model import PaymentStatus
from backend.boundary.db.models.user_model import UserModel
from backend.core.dates import day_bounds, parse_logged_date, utc_now
from backend.core.exceptions import (
    FitnessChallengeError,
    NotAuthorizedError,
    NotFoundError,
    ValidationError,
)
from backend.core.media_keys import foreign_media_keys
from backend.core.moderation import auto_flag_reason
from backend.core.scoring import ScoringContext, calculate_final_score, config_value, to_number
from backend.core.weeks import challenge_week_number

logger = logging.getLogger(__name__)


def activity_to_dict(activity: ActivityModel, show_admin_comment: bool = False) -> dict[str, Any]:
    """Serialize an activity; the admin comment is blanked unless shown."""
    return {
        "id": activity.id,
        "user_id": activity.user_id,
        "challenge_id": activity.challenge_id,
        "activity_type_id": activity.activity_type_id,
        "logged_date": activity.logged_date,
        "metrics": activity.metrics or {},
        "notes": activity.notes,
        "image_url": activity.image_url,
        "media_keys": activity.media_keys or [],
        "points_earned": activity.points_earned,
        "triggered_bonuses": activity.triggered_bonuses or [],
        "flagged": activity.flagged,
        "flagged_at": activity.flagged_at,
        "flagged_reason": activity.flagged_reason,
        "admin_comment": activity.admin_comment if show_admin_comment else None,
        "admin_comment_visibility": activity.admin_comment_visibility,
        "resolution_status": activity.resolution_status,
        "source": activity.source,
        "external_id": activity.external_id,
        "created_at": activity.created_at,
    }


def _source(value: str | None) -> ActivitySource:
    try:
        return ActivitySource(value or ActivitySource.MANUAL)
    except ValueError:
        raise ValidationError(f"Unknown activity source: {value}", field="source")


def _admin_comment_visible(activity: ActivityModel, viewer_id: UUID, viewer_is_admin: bool) -> bool:
    if viewer_is_admin:
        return True
    return (
        activity.user_id == viewer_id
        and activity.admin_comment_visibility == CommentVisibility.PARTICIPANT
    )


class ActivityService:
    """Activity service orchestrator."""

    def __init__(self, db: AsyncSession, media_client: S3MediaClient | None = None) -> None:
        """
        Initialize activity service.

        Args:
            db: Async SQLAlchemy session
            media_client: S3 client used to presign media view URLs
        """
        self.db = db
        self.media_client = media_client

    def _media_urls(self, activity: ActivityModel) -> list[str]:
        urls = []
        if activity.image_url:
            urls.append(activity.image_url)
        if self.media_client is not None:
            urls.extend(self.media_client.generate_view_urls(activity.media_keys or []))
        return urls

    async def _existing_daily_drinks(
        self,
        user_id: UUID,
        activity_type_id: UUID,
        logged_date: datetime,
    ) -> float:
        start, end = day_bounds(logged_date)
        same_day = await activity_crud.list_for_type_between(
            self.db, user_id, activity_type_id, start, end
        )
        return sum(to_number((a.metrics or {}).get("drinks")) for a in same_day)

    async def log_activity(
        self,
        user: UserModel,
        challenge_id: UUID,
        activity_type_id: UUID,
        logged_date: str | date | datetime,
        metrics: dict[str, Any] | None = None,
        notes: str | None = None,
        image_url: str | None = None,
        media_keys: list[str] | None = None,
        source: str | None = None,
        external_id: str | None = None,
        external_data: dict | None = None,
    ) -> dict:
        """
        Score and record an activity for the caller.

        Args:
            user: Participant logging the activity
            challenge_id: Challenge UUID
            activity_type_id: Activity type within the challenge
            logged_date: When the activity happened
            metrics: Submitted metrics (distance, minutes, drinks, ...)
            notes: Free-text notes
            image_url: Legacy single photo URL
            media_keys: S3 keys of uploaded photos/videos
            source: manual, strava, apple_health or mini_game
            external_id: Identifier in the source system
            external_data: Raw payload from the source system

        Returns:
            dict: id, points_earned, base_points, bonus_points,
            triggered_bonuses, current_streak and awarded achievements

        Raises:
            NotAuthorizedError: If the caller has not joined or has not paid
            NotFoundError: If the activity type is not in the challenge
            ValidationError: If the week or per-challenge limit rejects it, or a
                media key is outside the caller's upload prefix
        """
        challenge = await require_challenge(self.db, challenge_id)
        participation = await require_participation(
            self.db, user.id, challenge_id, message="You are not part of this challenge"
        )
        if challenge.payment_required and participation.payment_status != PaymentStatus.PAID:
            raise NotAuthorizedError(
                "Payment required to log activities",
                details={"challenge_id": str(challenge_id)},
            )

        activity_type = await activity_type_crud.get_by_id(self.db, activity_type_id)
        if activity_type is None or activity_type.challenge_id != challenge_id:
            raise NotFoundError("Activity type", activity_type_id)

        media_keys = list(media_keys or [])
        if foreign_media_keys(user.id, media_keys):
            raise ValidationError(
                "Media must be uploaded by you through the media upload URL",
                field="media_keys",
            )

        when = parse_logged_date(logged_date)
        metrics = dict(metrics or {})

        if activity_type.valid_weeks:
            week = challenge_week_number(challenge.start_date, when)
            if week not in activity_type.valid_weeks:
                weeks = ", ".join(str(w) for w in activity_type.valid_weeks)
                raise ValidationError(
                    f"This activity type is only available during week(s) {weeks}",
                    field="logged_date",
                )

        if activity_type.max_per_challenge and activity_type.max_per_challenge > 0:
            count = await activity_crud.count_for_type(self.db, user.id, activity_type_id)
            if count >= activity_type.max_per_challenge:
                raise ValidationError(
                    f"You can only log {activity_type.name} "
                    f"{activity_type.max_per_challenge} time(s) in this challenge",
                    field="activity_type_id",
                )

        try:
            existing_drinks = 0.0
            if config_value(activity_type.scoring_config or {}, "unit") == "drinks":
                existing_drinks = await self._existing_daily_drinks(user.id, activity_type_id, when)

            score = calculate_final_score(
                activity_type,
                ScoringContext(metrics=metrics, logged_date=when, existing_daily_units=existing_drinks),
                include_media_bonus=bool(media_keys or image_url),
            )

            activity = await activity_crud.create(
                self.db,
                user_id=user.id,
                challenge_id=challenge_id,
                activity_type_id=activity_type_id,
                logged_date=when,
                metrics=metrics,
                notes=notes,
                image_url=image_url,
                media_keys=media_keys,
                points_earned=score.points_earned,
                triggered_bonuses=[bonus.to_dict() for bonus in score.triggered_bonuses],
                flagged=False,
                admin_comment_visibility=CommentVisibility.INTERNAL,
                resolution_status=ResolutionStatus.PENDING,
                source=_source(source),
                external_id=external_id,
                external_data=external_data,
            )

            reason = auto_flag_reason(challenge.auto_flag_rules, activity_type_id, score.points_earned)
            if reason:
                activity.flagged = True
                activity.flagged_at = utc_now()
                activity.flagged_reason = reason
                await activity_crud.save(self.db, activity)
                await activity_flag_history_crud.create(
                    self.db,
                    activity_id=activity.id,
                    actor_id=None,
                    action_type=FlagActionType.FLAG,
                    payload={"reason": reason, "automatic": True},
                )
                logger.info(
                    "Activity auto-flagged",
                    extra={"activity_id": str(activity.id), "reason": reason},
                )

            apply_points_delta(participation, score.points_earned)
            if activity_type.contributes_to_streak:
                await advance_participation_streak(self.db, participation, challenge, when)
            await save_participation(self.db, participation)

            awarded = await AchievementService(self.db).check_and_award(user.id, challenge)

            logger.info(
                "Activity logged",
                extra={
                    "activity_id": str(activity.id),
                    "user_id": str(user.id),
                    "challenge_id": str(challenge_id),
                    "points_earned": score.points_earned,
                },
            )
            return {
                "id": activity.id,
                "points_earned": score.points_earned,
                "base_points": score.base_points,
                "bonus_points": score.bonus_points,
                "triggered_bonuses": [bonus.description for bonus in score.triggered_bonuses],
                "current_streak": participation.current_streak,
                "achievements_awarded": awarded,
            }
        except FitnessChallengeError:
            raise
        except Exception as e:
            logger.error(
                "Failed to log activity",
                extra={"error": str(e), "user_id": str(user.id), "challenge_id": str(challenge_id)},
            )
            raise

    async def _enrich(self, user: UserModel, activities: Sequence[ActivityModel], viewer_is_admin: bool) -> list[dict]:
        """Attach user/type summaries, social counts and media URLs."""
        ids = [a.id for a in activities]
        users = await user_crud.get_many(self.db, [a.user_id for a in activities])
        types = await activity_type_crud.get_many(self.db, [a.activity_type_id for a in activities])
        likes = await like_crud.count_by_activity(self.db, ids)
        comments = await comment_crud.count_by_activity(self.db, ids)
        liked = await like_crud.liked_activity_ids(self.db, user.id, ids)

        items = []
        for activity in activities:
            item = activity_to_dict(
                activity, _admin_comment_visible(activity, user.id, viewer_is_admin)
            )
            item.update(
                user=user_summary(users.get(activity.user_id)),
                activity_type=activity_type_summary(types.get(activity.activity_type_id)),
                like_count=likes.get(activity.id, 0),
                comment_count=comments.get(activity.id, 0),
                liked_by_user=activity.id in liked,
                media_urls=self._media_urls(activity),
            )
            items.append(item)
        return items

    async def get_activity(self, user: UserModel, activity_id: UUID) -> dict:
        activity = await activity_crud.get_active(self.db, activity_id)
        if activity is None:
            raise NotFoundError("Activity", activity_id)
        challenge = await require_challenge(self.db, activity.challenge_id)
        viewer_is_admin = await is_challenge_admin(self.db, user, challenge)
        items = await self._enrich(user, [activity], viewer_is_admin)
        return items[0]

    async def get_challenge_feed(
        self,
        user: UserModel,
        challenge_id: UUID,
        following_only: bool = False,
        limit: int = 20,
        cursor: int | None = None,
    ) -> dict:
        """
        Page through a challenge's activity feed, newest first.

        Args:
            following_only: Only activities by users the caller follows
            limit: Page size
            cursor: Offset returned as next_cursor by the previous page

        Returns:
            dict: items, next_cursor and is_done
        """
        challenge = await require_challenge(self.db, challenge_id)
        offset = max(cursor or 0, 0)

        user_ids = None
        if following_only:
            user_ids = await follow_crud.following_ids(self.db, user.id)
            if not user_ids:
                return {"items": [], "next_cursor": None, "is_done": True}

        page = await activity_crud.list_feed(
            self.db, challenge_id, limit=limit + 1, offset=offset, user_ids=user_ids
        )
        is_done = len(page) <= limit
        page = page[:limit]

        viewer_is_admin = await is_challenge_admin(self.db, user, challenge)
        return {
            "items": await self._enrich(user, page, viewer_is_admin),
            "next_cursor": None if is_done else offset + limit,
            "is_done": is_done,
        }

    async def list_user_activities(
        self,
        user: UserModel,
        challenge_id: UUID,
        user_id: UUID,
        limit: int = 50,
        offset: int = 0,
    ) -> list[dict]:
        challenge = await require_challenge(self.db, challenge_id)
        activities = await activity_crud.list_for_user(
            self.db, user_id, challenge_id, limit=limit, offset=offset
        )
        viewer_is_admin = await is_challenge_admin(self.db, user, challenge)
        return await self._enrich(user, activities, viewer_is_admin)

    async def delete_activity(
        self,
        user: UserModel,
        activity_id: UUID,
        reason: str | None = None,
    ) -> None:
        """
        Soft-delete an activity and roll back its effect on standings.

        Raises:
            NotFoundError: If the activity does not exist or is deleted
            NotAuthorizedError: If the caller is neither owner nor challenge admin
        """
        activity = await activity_crud.get_active(self.db, activity_id)
        if activity is None:
            raise NotFoundError("Activity", activity_id)
        challenge = await require_challenge(self.db, activity.challenge_id)
        if activity.user_id != user.id and not await is_challenge_admin(self.db, user, challenge):
            raise NotAuthorizedError("Not authorized to delete this activity")

        try:
            activity.deleted_at = utc_now()
            activity.deleted_by_id = user.id
            activity.deleted_reason = reason
            await activity_crud.save(self.db, activity)

            participation = await participation_crud.get_for(
                self.db, activity.user_id, activity.challenge_id
            )
            if participation is not None:
                apply_points_delta(participation, -activity.points_earned, floor_at_zero=True)
                await recompute_participation_streak(self.db, participation, challenge)
                await save_participation(self.db, participation)

            await like_crud.delete_for_activity(self.db, activity_id)
            await comment_crud.delete_for_activity(self.db, activity_id)
            logger.info(
                "Activity deleted",
                extra={"activity_id": str(activity_id), "deleted_by": str(user.id)},
            )
        except Exception as e:
            logger.error(
                "Failed to delete activity",
                extra={"error": str(e), "activity_id": str(activity_id)},
            )
            raise

    async def flag_activity(self, user: UserModel, activity_id: UUID, reason: str) -> dict:
        """
        Report another participant's activity for admin review.

        Raises:
            ValidationError: If the reason is empty or the activity is the caller's own
        """
        activity = await activity_crud.get_active(self.db, activity_id)
        if activity is None:
            raise NotFoundError("Activity", activity_id)
        await require_participation(self.db, user.id, activity.challenge_id)
        if activity.user_id == user.id:
            raise ValidationError("You cannot flag your own activity")
        reason = (reason or "").strip()
        if not reason:
            raise ValidationError("A reason is required to flag an activity", field="reason")

        activity.flagged = True
        activity.flagged_at = utc_now()
        activity.flagged_reason = reason
        activity.resolution_status = ResolutionStatus.PENDING
        activity.resolved_at = None
        activity.resolved_by_id = None
        activity = await activity_crud.save(self.db, activity)

        await activity_flag_history_crud.create(
            self.db,
            activity_id=activity.id,
            actor_id=user.id,
            action_type=FlagActionType.FLAG,
            payload={"reason": reason},
        )
        logger.info(
            "Activity flagged",
            extra={"activity_id": str(activity_id), "flagged_by": str(user.id)},
        )
        return activity_to_dict(activity)
