"""
Test suite for ActivityService against an in-memory database.

Covers logging (scoring, limits, payment, auto-flagging, drink penalties),
streak upkeep, soft deletion and participant flagging.

System role: Verification of activity use case orchestration
"""

import pytest

from backend.application.services.activity_service import ActivityService
from backend.boundary.db.CRUD.activity_crud import activity_crud, activity_flag_history_crud
from backend.boundary.db.CRUD.participation_crud import participation_crud
from backend.boundary.db.models.activity_model import FlagActionType
from backend.core.exceptions import NotAuthorizedError, NotFoundError, ValidationError


@pytest.fixture
async def setup(test_async_db, make_user, make_challenge, make_activity_type, join):
    """Admin-created challenge with one joined runner and a per-mile type."""
    admin = await make_user("Admin")
    runner = await make_user("Runner")
    challenge = await make_challenge(admin, streak_min_points=1)
    running = await make_activity_type(challenge, "Running", {"unit": "miles", "pointsPerUnit": 1})
    await join(runner, challenge)
    return admin, runner, challenge, running


class TestLogActivity:
    """Test suite for ActivityService.log_activity()."""

    async def test_scores_and_updates_participation(self, test_async_db, setup) -> None:
        # Arrange
        _, runner, challenge, running = setup
        service = ActivityService(test_async_db)

        # Act
        result = await service.log_activity(
            runner, challenge.id, running.id, "2026-03-02", metrics={"miles": 3}
        )

        # Assert
        assert result["points_earned"] == 3
        assert result["base_points"] == 3
        assert result["bonus_points"] == 0
        assert result["current_streak"] == 1
        assert result["achievements_awarded"] == []
        participation = await participation_crud.get_for(test_async_db, runner.id, challenge.id)
        assert participation.total_points == 3

    async def test_media_adds_photo_bonus(self, test_async_db, setup) -> None:
        _, runner, challenge, running = setup

        result = await ActivityService(test_async_db).log_activity(
            runner,
            challenge.id,
            running.id,
            "2026-03-02",
            metrics={"miles": 2},
            media_keys=[f"activity-media/{runner.id}/1a2b3c4d-run.jpg"],
        )

        assert result["points_earned"] == 3
        assert result["triggered_bonuses"] == ["Photo bonus"]

    @pytest.mark.parametrize(
        "key_template",
        [
            "activity-media/{other}/secret.jpg",
            "anything/else/in/bucket.pdf",
            "activity-media/{own}/../{other}/secret.jpg",
            "activity-media/{own}/",
        ],
    )
    async def test_media_outside_own_prefix_rejected(self, test_async_db, setup, key_template) -> None:
        # Arrange
        creator, runner, challenge, running = setup
        key = key_template.format(own=runner.id, other=creator.id)

        # Act
        with pytest.raises(ValidationError) as exc_info:
            await ActivityService(test_async_db).log_activity(
                runner, challenge.id, running.id, "2026-03-02", metrics={"miles": 2}, media_keys=[key]
            )

        # Assert
        assert exc_info.value.field == "media_keys"
        participation = await participation_crud.get_for(test_async_db, runner.id, challenge.id)
        assert participation.total_points == 0

    async def test_consecutive_days_extend_streak(self, test_async_db, setup) -> None:
        _, runner, challenge, running = setup
        service = ActivityService(test_async_db)

        for day in ("2026-03-02", "2026-03-03", "2026-03-04"):
            result = await service.log_activity(runner, challenge.id, running.id, day, metrics={"miles": 1})

        assert result["current_streak"] == 3

    async def test_backfilled_day_recomputes_streak(self, test_async_db, setup) -> None:
        _, runner, challenge, running = setup
        service = ActivityService(test_async_db)

        await service.log_activity(runner, challenge.id, running.id, "2026-03-05", metrics={"miles": 1})
        result = await service.log_activity(runner, challenge.id, running.id, "2026-03-04", metrics={"miles": 1})

        assert result["current_streak"] == 2

    async def test_day_below_streak_minimum_does_not_count(self, test_async_db, setup) -> None:
        _, runner, challenge, running = setup

        result = await ActivityService(test_async_db).log_activity(
            runner, challenge.id, running.id, "2026-03-02", metrics={"miles": 0.5}
        )

        assert result["current_streak"] == 0

    async def test_non_participant_rejected(self, test_async_db, setup, make_user) -> None:
        _, _, challenge, running = setup
        outsider = await make_user("Outsider")

        with pytest.raises(NotAuthorizedError, match="You are not part of this challenge"):
            await ActivityService(test_async_db).log_activity(
                outsider, challenge.id, running.id, "2026-03-02", metrics={"miles": 1}
            )

    async def test_unpaid_participant_rejected(
        self, test_async_db, make_user, make_challenge, make_activity_type, join
    ) -> None:
        admin = await make_user("Admin")
        runner = await make_user("Runner")
        challenge = await make_challenge(admin, payment_required=True)
        running = await make_activity_type(challenge)
        await join(runner, challenge)

        with pytest.raises(NotAuthorizedError, match="Payment required"):
            await ActivityService(test_async_db).log_activity(
                runner, challenge.id, running.id, "2026-03-02", metrics={"miles": 1}
            )

    async def test_type_from_another_challenge_not_found(
        self, test_async_db, setup, make_challenge, make_activity_type
    ) -> None:
        admin, runner, challenge, _ = setup
        other = await make_challenge(admin, name="Other")
        foreign_type = await make_activity_type(other, "Swimming")

        with pytest.raises(NotFoundError):
            await ActivityService(test_async_db).log_activity(
                runner, challenge.id, foreign_type.id, "2026-03-02", metrics={"miles": 1}
            )

    async def test_week_restricted_type(self, test_async_db, setup, make_activity_type) -> None:
        _, runner, challenge, _ = setup
        race = await make_activity_type(challenge, "Race", {"type": "completion", "fixedPoints": 5}, valid_weeks=[2])
        service = ActivityService(test_async_db)

        with pytest.raises(ValidationError, match=r"week\(s\) 2"):
            await service.log_activity(runner, challenge.id, race.id, "2026-03-02")

        result = await service.log_activity(runner, challenge.id, race.id, "2026-03-09")
        assert result["points_earned"] == 5

    async def test_max_per_challenge(self, test_async_db, setup, make_activity_type) -> None:
        _, runner, challenge, _ = setup
        marathon = await make_activity_type(
            challenge, "Marathon", {"type": "completion", "fixedPoints": 20}, max_per_challenge=1
        )
        service = ActivityService(test_async_db)
        await service.log_activity(runner, challenge.id, marathon.id, "2026-03-02")

        with pytest.raises(ValidationError, match="1 time"):
            await service.log_activity(runner, challenge.id, marathon.id, "2026-03-03")

    async def test_drink_penalty_counts_earlier_drinks_same_day(
        self, test_async_db, setup, make_activity_type
    ) -> None:
        # Arrange
        _, runner, challenge, _ = setup
        drinks = await make_activity_type(
            challenge,
            "Drinks",
            {"unit": "drinks", "pointsPerUnit": 1, "freebiesPerDay": 1},
            is_negative=True,
            contributes_to_streak=False,
        )
        service = ActivityService(test_async_db)

        # Act
        first = await service.log_activity(runner, challenge.id, drinks.id, "2026-03-02T18:00:00Z", metrics={"drinks": 1})
        second = await service.log_activity(runner, challenge.id, drinks.id, "2026-03-02T21:00:00Z", metrics={"drinks": 2})
        next_day = await service.log_activity(runner, challenge.id, drinks.id, "2026-03-03T18:00:00Z", metrics={"drinks": 1})

        # Assert
        assert first["points_earned"] == 0
        assert second["points_earned"] == -2
        assert next_day["points_earned"] == 0
        participation = await participation_crud.get_for(test_async_db, runner.id, challenge.id)
        assert participation.total_points == -2

    async def test_auto_flag_rule_flags_activity(
        self, test_async_db, make_user, make_challenge, make_activity_type, join
    ) -> None:
        # Arrange
        admin = await make_user("Admin")
        runner = await make_user("Runner")
        challenge = await make_challenge(admin, auto_flag_rules={"maxPointsPerActivity": 5})
        running = await make_activity_type(challenge)
        await join(runner, challenge)

        # Act
        result = await ActivityService(test_async_db).log_activity(
            runner, challenge.id, running.id, "2026-03-02", metrics={"miles": 26}
        )

        # Assert
        activity = await activity_crud.get_by_id(test_async_db, result["id"])
        assert activity.flagged
        assert activity.flagged_reason.startswith("Auto-flagged")
        [entry] = await activity_flag_history_crud.list_for_activity(test_async_db, activity.id)
        assert entry.action_type == FlagActionType.FLAG
        assert entry.actor_id is None
        # Flagged activities still count until an admin acts
        assert result["points_earned"] == 26


class TestDeleteActivity:
    """Test suite for ActivityService.delete_activity()."""

    async def test_delete_rolls_back_points_and_streak(self, test_async_db, setup) -> None:
        # Arrange
        _, runner, challenge, running = setup
        service = ActivityService(test_async_db)
        await service.log_activity(runner, challenge.id, running.id, "2026-03-02", metrics={"miles": 3})
        second = await service.log_activity(runner, challenge.id, running.id, "2026-03-03", metrics={"miles": 4})

        # Act
        await service.delete_activity(runner, second["id"], reason="duplicate")

        # Assert
        participation = await participation_crud.get_for(test_async_db, runner.id, challenge.id)
        assert participation.total_points == 3
        assert participation.current_streak == 1
        deleted = await activity_crud.get_by_id(test_async_db, second["id"])
        assert deleted.deleted_at is not None
        assert deleted.deleted_reason == "duplicate"
        with pytest.raises(NotFoundError):
            await service.get_activity(runner, second["id"])

    async def test_total_never_drops_below_zero(self, test_async_db, setup) -> None:
        _, runner, challenge, running = setup
        service = ActivityService(test_async_db)
        logged = await service.log_activity(runner, challenge.id, running.id, "2026-03-02", metrics={"miles": 3})
        participation = await participation_crud.get_for(test_async_db, runner.id, challenge.id)
        participation.total_points = 1
        await participation_crud.save(test_async_db, participation)

        await service.delete_activity(runner, logged["id"])

        participation = await participation_crud.get_for(test_async_db, runner.id, challenge.id)
        assert participation.total_points == 0

    async def test_other_participant_cannot_delete(self, test_async_db, setup, make_user, join) -> None:
        _, runner, challenge, running = setup
        other = await make_user("Other")
        await join(other, challenge)
        service = ActivityService(test_async_db)
        logged = await service.log_activity(runner, challenge.id, running.id, "2026-03-02", metrics={"miles": 3})

        with pytest.raises(NotAuthorizedError):
            await service.delete_activity(other, logged["id"])

    async def test_challenge_admin_can_delete(self, test_async_db, setup) -> None:
        admin, runner, challenge, running = setup
        service = ActivityService(test_async_db)
        logged = await service.log_activity(runner, challenge.id, running.id, "2026-03-02", metrics={"miles": 3})

        await service.delete_activity(admin, logged["id"])

        assert (await activity_crud.get_active(test_async_db, logged["id"])) is None


class TestFlagActivity:
    """Test suite for ActivityService.flag_activity()."""

    async def test_participant_flags_other_activity(self, test_async_db, setup, make_user, join) -> None:
        _, runner, challenge, running = setup
        reporter = await make_user("Reporter")
        await join(reporter, challenge)
        service = ActivityService(test_async_db)
        logged = await service.log_activity(runner, challenge.id, running.id, "2026-03-02", metrics={"miles": 3})

        flagged = await service.flag_activity(reporter, logged["id"], "  GPS glitch  ")

        assert flagged["flagged"] is True
        assert flagged["flagged_reason"] == "GPS glitch"
        [entry] = await activity_flag_history_crud.list_for_activity(test_async_db, logged["id"])
        assert entry.actor_id == reporter.id

    async def test_cannot_flag_own_activity(self, test_async_db, setup) -> None:
        _, runner, challenge, running = setup
        service = ActivityService(test_async_db)
        logged = await service.log_activity(runner, challenge.id, running.id, "2026-03-02", metrics={"miles": 3})

        with pytest.raises(ValidationError):
            await service.flag_activity(runner, logged["id"], "oops")
