"""
Mini-game service orchestrator.

Runs the draft -> active -> calculating -> completed lifecycle of
partner, hunt and PR weeks: assigning starting slots from the live
standings, scoring outcomes at the end and paying bonuses out as
"Mini-Game Bonus" activities.

Dependencies: backend.boundary.db.CRUD, backend.core.mini_games
System role: Mini-game use case orchestration
"""

import logging
from collections import defaultdict
from datetime import date, datetime
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from backend.application.services.service_helpers import (
    get_or_create_bonus_type,
    require_challenge,
    require_challenge_admin,
    user_summary,
)
from backend.application.services.standings import apply_points_delta, save_participation
from backend.boundary.db.CRUD.activity_crud import activity_crud
from backend.boundary.db.CRUD.mini_game_crud import mini_game_crud, mini_game_participant_crud
from backend.boundary.db.CRUD.participation_crud import participation_crud
from backend.boundary.db.CRUD.user_crud import user_crud
from backend.boundary.db.models.activity_model import ActivityModel, ActivitySource, ResolutionStatus
from backend.boundary.db.models.challenge_model import ChallengeModel
from backend.boundary.db.models.mini_game_model import (
    MiniGameModel,
    MiniGameParticipantModel,
    MiniGameStatus,
    MiniGameType,
)
from backend.boundary.db.models.user_model import UserModel
from backend.core.dates import DAY, day_start, parse_logged_date, utc_day, utc_now
from backend.core.exceptions import (
    FitnessChallengeError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from backend.core.mini_games import (
    MISSING_RANK,
    GameOutcome,
    assign_slots,
    hunt_outcome,
    partner_outcome,
    pr_outcome,
    rank_map,
    resolved_config,
)
from backend.core.scoring import config_value, to_number

logger = logging.getLogger(__name__)

MINI_GAME_BONUS_TYPE = "Mini-Game Bonus"


def mini_game_to_dict(game: MiniGameModel) -> dict[str, Any]:
    return {
        "id": game.id,
        "challenge_id": game.challenge_id,
        "type": game.type,
        "name": game.name,
        "starts_at": game.starts_at,
        "ends_at": game.ends_at,
        "status": game.status,
        "config": game.config or {},
        "created_at": game.created_at,
    }


def participant_to_dict(participant: MiniGameParticipantModel) -> dict[str, Any]:
    return {
        "id": participant.id,
        "user_id": participant.user_id,
        "initial_state": participant.initial_state,
        "final_state": participant.final_state,
        "partner_user_id": participant.partner_user_id,
        "prey_user_id": participant.prey_user_id,
        "hunter_user_id": participant.hunter_user_id,
        "bonus_points": participant.bonus_points,
        "outcome": participant.outcome,
        "bonus_activity_id": participant.bonus_activity_id,
    }


def _game_type(value: str) -> MiniGameType:
    try:
        return MiniGameType(value)
    except ValueError:
        raise ValidationError(
            "Mini-game type must be partner_week, hunt_week or pr_week", field="type"
        )


def _validate_window(challenge: ChallengeModel, starts_at: datetime, ends_at: datetime) -> None:
    if starts_at >= ends_at:
        raise ValidationError("Start date must be before end date", field="starts_at")
    if ends_at > day_start(challenge.end_date) + DAY:
        raise ValidationError("Mini-game cannot end after the challenge ends", field="ends_at")


def max_daily_points(activities: list[ActivityModel]) -> float:
    """Best single-UTC-day point total, or 0 with no activities."""
    totals: dict[date, float] = defaultdict(float)
    for activity in activities:
        totals[utc_day(activity.logged_date)] += activity.points_earned
    return max(totals.values(), default=0.0)


class MiniGameService:
    """Mini-game service orchestrator."""

    def __init__(self, db: AsyncSession) -> None:
        """
        Initialize mini-game service with async database session.

        Args:
            db: Async SQLAlchemy session
        """
        self.db = db

    async def _require_game(self, mini_game_id: UUID) -> MiniGameModel:
        game = await mini_game_crud.get_by_id(self.db, mini_game_id)
        if game is None:
            raise NotFoundError("Mini-game", mini_game_id)
        return game

    async def _require_admin_game(self, user: UserModel, mini_game_id: UUID) -> tuple[MiniGameModel, ChallengeModel]:
        game = await self._require_game(mini_game_id)
        challenge = await require_challenge_admin(self.db, user, game.challenge_id)
        return game, challenge

    @staticmethod
    def _require_status(game: MiniGameModel, status: MiniGameStatus, action: str) -> None:
        if game.status != status:
            raise InvalidStateError(
                f"Only {status.value} mini-games can be {action}",
                current_state=game.status.value,
                details={"mini_game_id": str(game.id)},
            )

    async def create(
        self,
        user: UserModel,
        challenge_id: UUID,
        type: str,
        name: str,
        starts_at: str | datetime,
        ends_at: str | datetime,
        config: dict | None = None,
    ) -> dict:
        """
        Create a draft mini-game (challenge admins only).

        Missing config keys are filled from the type's defaults.

        Raises:
            ValidationError: If the type, name or time window is invalid
        """
        challenge = await require_challenge_admin(self.db, user, challenge_id)
        game_type = _game_type(type)
        if not name or not name.strip():
            raise ValidationError("Mini-game name is required", field="name")
        start, end = parse_logged_date(starts_at), parse_logged_date(ends_at)
        _validate_window(challenge, start, end)

        try:
            game = await mini_game_crud.create(
                self.db,
                challenge_id=challenge_id,
                type=game_type,
                name=name.strip(),
                starts_at=start,
                ends_at=end,
                status=MiniGameStatus.DRAFT,
                config=resolved_config(game_type.value, config),
            )
            logger.info(
                "Mini-game created",
                extra={"mini_game_id": str(game.id), "challenge_id": str(challenge_id), "type": game_type.value},
            )
            return mini_game_to_dict(game)
        except Exception as e:
            logger.error(
                "Failed to create mini-game",
                extra={"error": str(e), "challenge_id": str(challenge_id)},
            )
            raise

    async def update(
        self,
        user: UserModel,
        mini_game_id: UUID,
        name: str | None = None,
        starts_at: str | datetime | None = None,
        ends_at: str | datetime | None = None,
        config: dict | None = None,
    ) -> dict:
        game, challenge = await self._require_admin_game(user, mini_game_id)
        self._require_status(game, MiniGameStatus.DRAFT, "updated")

        start = parse_logged_date(starts_at) if starts_at is not None else game.starts_at
        end = parse_logged_date(ends_at) if ends_at is not None else game.ends_at
        _validate_window(challenge, start, end)

        if name is not None:
            if not name.strip():
                raise ValidationError("Mini-game name is required", field="name")
            game.name = name.strip()
        game.starts_at, game.ends_at = start, end
        if config is not None:
            current = resolved_config(game.type.value, game.config)
            game.config = {
                key: to_number(config_value(config, key, value)) for key, value in current.items()
            }

        game = await mini_game_crud.save(self.db, game)
        logger.info("Mini-game updated", extra={"mini_game_id": str(mini_game_id)})
        return mini_game_to_dict(game)

    async def remove(self, user: UserModel, mini_game_id: UUID) -> None:
        game, _ = await self._require_admin_game(user, mini_game_id)
        self._require_status(game, MiniGameStatus.DRAFT, "removed")
        await mini_game_participant_crud.delete_for_game(self.db, mini_game_id)
        await mini_game_crud.delete_by_id(self.db, mini_game_id)
        logger.info("Mini-game removed", extra={"mini_game_id": str(mini_game_id)})

    async def _period_activities(
        self,
        user_id: UUID,
        challenge_id: UUID,
        start: datetime | None,
        end: datetime,
        include_end: bool = True,
    ) -> list[ActivityModel]:
        return list(
            await activity_crud.list_in_period(
                self.db,
                user_id,
                challenge_id,
                start,
                end,
                include_end=include_end,
                exclude_source=ActivitySource.MINI_GAME,
            )
        )

    async def start(self, user: UserModel, mini_game_id: UUID) -> dict:
        """
        Activate a draft game and assign every participant a starting slot.

        Raises:
            InvalidStateError: If the game is not a draft
            ValidationError: If the challenge has no participants
        """
        game, _ = await self._require_admin_game(user, mini_game_id)
        self._require_status(game, MiniGameStatus.DRAFT, "started")

        participations = await participation_crud.list_ranked(self.db, game.challenge_id)
        if not participations:
            raise ValidationError("No participants in challenge")

        try:
            slots = assign_slots(
                game.type.value, [(p.user_id, p.total_points) for p in participations]
            )
            for slot in slots:
                initial_state = slot.initial_state
                if game.type == MiniGameType.PR_WEEK:
                    before = await self._period_activities(
                        slot.user_id, game.challenge_id, None, game.starts_at, include_end=False
                    )
                    initial_state["daily_pr"] = max_daily_points(before)
                await mini_game_participant_crud.create(
                    self.db,
                    mini_game_id=game.id,
                    user_id=slot.user_id,
                    initial_state=initial_state,
                    partner_user_id=slot.partner_user_id,
                    prey_user_id=slot.prey_user_id,
                    hunter_user_id=slot.hunter_user_id,
                )

            game.status = MiniGameStatus.ACTIVE
            game = await mini_game_crud.save(self.db, game)
            logger.info(
                "Mini-game started",
                extra={"mini_game_id": str(mini_game_id), "participants": len(slots)},
            )
            return mini_game_to_dict(game)
        except FitnessChallengeError:
            raise
        except Exception as e:
            logger.error(
                "Failed to start mini-game",
                extra={"error": str(e), "mini_game_id": str(mini_game_id)},
            )
            raise

    async def _outcome(
        self,
        game: MiniGameModel,
        participant: MiniGameParticipantModel,
        config: dict[str, float],
        ranks: dict[UUID, int],
    ) -> GameOutcome:
        if game.type == MiniGameType.PARTNER_WEEK:
            partner_id = participant.partner_user_id or participant.user_id
            partner_activities = await self._period_activities(
                partner_id, game.challenge_id, game.starts_at, game.ends_at
            )
            partner_points = sum(a.points_earned for a in partner_activities)
            return partner_outcome(partner_points, config["bonus_percentage"])

        if game.type == MiniGameType.HUNT_WEEK:
            prey_rank = (
                ranks.get(participant.prey_user_id, MISSING_RANK)
                if participant.prey_user_id
                else None
            )
            hunter_rank = (
                ranks.get(participant.hunter_user_id, MISSING_RANK)
                if participant.hunter_user_id
                else None
            )
            return hunt_outcome(
                ranks.get(participant.user_id, MISSING_RANK),
                participant.initial_state.get("rank", MISSING_RANK),
                prey_rank,
                hunter_rank,
                config["catch_bonus"],
                config["caught_penalty"],
            )

        week_activities = await self._period_activities(
            participant.user_id, game.challenge_id, game.starts_at, game.ends_at
        )
        return pr_outcome(
            participant.initial_state.get("daily_pr", 0.0),
            max_daily_points(week_activities),
            config["pr_bonus"],
        )

    async def end(self, user: UserModel, mini_game_id: UUID) -> dict:
        """
        Score an active game and pay out bonuses.

        Returns:
            dict: The completed game with its participants' outcomes

        Raises:
            InvalidStateError: If the game is not active
        """
        game, _ = await self._require_admin_game(user, mini_game_id)
        self._require_status(game, MiniGameStatus.ACTIVE, "ended")

        game.status = MiniGameStatus.CALCULATING
        game = await mini_game_crud.save(self.db, game)

        try:
            config = resolved_config(game.type.value, game.config)
            standings = await participation_crud.list_ranked(self.db, game.challenge_id)
            ranks = rank_map([p.user_id for p in standings])
            points = {p.user_id: p.total_points for p in standings}

            participants = await mini_game_participant_crud.list_for_game(self.db, game.id)
            for participant in participants:
                outcome = await self._outcome(game, participant, config, ranks)
                participant.final_state = {
                    "rank": ranks.get(participant.user_id, MISSING_RANK),
                    "points": points.get(participant.user_id, 0.0),
                }
                participant.bonus_points = outcome.bonus_points
                participant.outcome = outcome.outcome

                if outcome.bonus_points != 0:
                    participant.bonus_activity_id = await self._pay_bonus(game, participant, outcome)
                await mini_game_participant_crud.save(self.db, participant)

            game.status = MiniGameStatus.COMPLETED
            game = await mini_game_crud.save(self.db, game)
            logger.info(
                "Mini-game completed",
                extra={"mini_game_id": str(mini_game_id), "participants": len(participants)},
            )
            return await self.get(mini_game_id)
        except Exception as e:
            logger.error(
                "Failed to end mini-game",
                extra={"error": str(e), "mini_game_id": str(mini_game_id)},
            )
            raise

    async def _pay_bonus(
        self,
        game: MiniGameModel,
        participant: MiniGameParticipantModel,
        outcome: GameOutcome,
    ) -> UUID:
        bonus_type = await get_or_create_bonus_type(
            self.db,
            game.challenge_id,
            MINI_GAME_BONUS_TYPE,
            "Bonus points awarded from mini-games",
            scoring_config={"type": "fixed", "basePoints": 0},
        )
        activity = await activity_crud.create(
            self.db,
            user_id=participant.user_id,
            challenge_id=game.challenge_id,
            activity_type_id=bonus_type.id,
            logged_date=utc_now(),
            metrics={"mini_game_id": str(game.id), "mini_game_type": game.type.value},
            notes=outcome.description,
            points_earned=float(outcome.bonus_points),
            source=ActivitySource.MINI_GAME,
            resolution_status=ResolutionStatus.RESOLVED,
            external_id=f"mini_game_{game.id}_{participant.user_id}",
        )

        participation = await participation_crud.get_for(
            self.db, participant.user_id, game.challenge_id
        )
        if participation is not None:
            apply_points_delta(participation, outcome.bonus_points)
            await save_participation(self.db, participation)
        return activity.id

    async def list_games(self, challenge_id: UUID, status: str | None = None) -> list[dict]:
        await require_challenge(self.db, challenge_id)
        status_filter = None
        if status:
            try:
                status_filter = MiniGameStatus(status)
            except ValueError:
                raise ValidationError("Status must be draft, active, calculating or completed", field="status")
        games = await mini_game_crud.list_for_challenge(self.db, challenge_id, status_filter)
        return [mini_game_to_dict(g) for g in games]

    async def get(self, mini_game_id: UUID) -> dict:
        game = await self._require_game(mini_game_id)
        participants = await mini_game_participant_crud.list_for_game(self.db, mini_game_id)
        users = await user_crud.get_many(self.db, [p.user_id for p in participants])
        return {
            **mini_game_to_dict(game),
            "participants": [
                {**participant_to_dict(p), "user": user_summary(users.get(p.user_id))}
                for p in participants
            ],
        }

    async def get_active(self, challenge_id: UUID) -> list[dict]:
        games = await mini_game_crud.list_for_challenge(
            self.db, challenge_id, MiniGameStatus.ACTIVE
        )
        return [mini_game_to_dict(g) for g in games]

    async def get_user_status(self, user: UserModel, challenge_id: UUID) -> list[dict]:
        """
        The caller's role in each active game of a challenge.

        Partner games report the partner, hunts the prey and hunter, and
        PR weeks the daily total to beat.
        """
        games = await mini_game_crud.list_for_challenge(
            self.db, challenge_id, MiniGameStatus.ACTIVE
        )
        statuses = []
        for game in games:
            slot = await mini_game_participant_crud.get_for(self.db, game.id, user.id)
            if slot is None:
                continue
            related = await user_crud.get_many(
                self.db,
                [uid for uid in (slot.partner_user_id, slot.prey_user_id, slot.hunter_user_id) if uid],
            )
            status: dict[str, Any] = {
                "mini_game": mini_game_to_dict(game),
                "initial_state": slot.initial_state,
            }
            if game.type == MiniGameType.PARTNER_WEEK:
                status["partner"] = user_summary(related.get(slot.partner_user_id))
            elif game.type == MiniGameType.HUNT_WEEK:
                status["prey"] = user_summary(related.get(slot.prey_user_id))
                status["hunter"] = user_summary(related.get(slot.hunter_user_id))
            else:
                status["pr_target"] = slot.initial_state.get("daily_pr", 0.0)
            statuses.append(status)
        return statuses

    async def get_user_history(self, user: UserModel, challenge_id: UUID) -> list[dict]:
        games = await mini_game_crud.list_for_challenge(
            self.db, challenge_id, MiniGameStatus.COMPLETED
        )
        history = []
        for game in games:
            slot = await mini_game_participant_crud.get_for(self.db, game.id, user.id)
            if slot is not None:
                history.append(
                    {
                        "mini_game": mini_game_to_dict(game),
                        "bonus_points": slot.bonus_points,
                        "outcome": slot.outcome,
                        "initial_state": slot.initial_state,
                        "final_state": slot.final_state,
                    }
                )
        return history
