"""
Test suite for MiniGameService lifecycle and payouts.

System role: Verification of mini-game start assignments, scoring and
bonus activities
"""

import pytest

from backend.application.services.activity_service import ActivityService
from backend.application.services.mini_game_service import MiniGameService
from backend.boundary.db.CRUD.activity_crud import activity_crud
from backend.boundary.db.CRUD.participation_crud import participation_crud
from backend.boundary.db.models.activity_model import ActivitySource
from backend.boundary.db.models.mini_game_model import MiniGameStatus
from backend.core.exceptions import InvalidStateError, NotAuthorizedError, ValidationError

GAME_START = "2026-03-08"
GAME_END = "2026-03-14T23:59:59Z"


@pytest.fixture
async def field(test_async_db, make_user, make_challenge, make_activity_type, join):
    """
    Challenge where, before the game, ana has 10 points, ben 5 and the
    admin 0. Standing order at start: ana, ben, admin.
    """
    admin = await make_user("Admin")
    ana = await make_user("Ana")
    ben = await make_user("Ben")
    challenge = await make_challenge(admin)
    running = await make_activity_type(challenge)
    await join(ana, challenge)
    await join(ben, challenge)
    activities = ActivityService(test_async_db)
    await activities.log_activity(ana, challenge.id, running.id, "2026-03-02", metrics={"miles": 10})
    await activities.log_activity(ben, challenge.id, running.id, "2026-03-02", metrics={"miles": 5})
    return admin, ana, ben, challenge, running


async def total_points(db, user, challenge) -> float:
    participation = await participation_crud.get_for(db, user.id, challenge.id)
    return participation.total_points


class TestLifecycle:
    """Test suite for creating and transitioning games."""

    async def test_create_fills_default_config(self, test_async_db, field) -> None:
        admin, *_, challenge, _ = field

        game = await MiniGameService(test_async_db).create(
            admin, challenge.id, "hunt_week", " Hunt ", GAME_START, GAME_END
        )

        assert game["name"] == "Hunt"
        assert game["status"] == MiniGameStatus.DRAFT
        assert game["config"] == {"catch_bonus": 75, "caught_penalty": 25}

    async def test_create_rejects_unknown_type(self, test_async_db, field) -> None:
        admin, *_, challenge, _ = field

        with pytest.raises(ValidationError, match="partner_week"):
            await MiniGameService(test_async_db).create(
                admin, challenge.id, "relay_week", "Relay", GAME_START, GAME_END
            )

    async def test_create_rejects_window_past_challenge_end(self, test_async_db, field) -> None:
        admin, *_, challenge, _ = field

        with pytest.raises(ValidationError, match="after the challenge ends"):
            await MiniGameService(test_async_db).create(
                admin, challenge.id, "pr_week", "Late", "2026-03-28", "2026-04-03"
            )

    async def test_create_rejects_inverted_window(self, test_async_db, field) -> None:
        admin, *_, challenge, _ = field

        with pytest.raises(ValidationError):
            await MiniGameService(test_async_db).create(
                admin, challenge.id, "pr_week", "Backwards", "2026-03-14", "2026-03-08"
            )

    async def test_members_cannot_create(self, test_async_db, field) -> None:
        _, ana, _, challenge, _ = field

        with pytest.raises(NotAuthorizedError):
            await MiniGameService(test_async_db).create(
                ana, challenge.id, "pr_week", "PR", GAME_START, GAME_END
            )

    async def test_state_machine(self, test_async_db, field) -> None:
        # Arrange
        admin, *_, challenge, _ = field
        service = MiniGameService(test_async_db)
        game = await service.create(admin, challenge.id, "pr_week", "PR", GAME_START, GAME_END)

        # Act / Assert
        with pytest.raises(InvalidStateError):
            await service.end(admin, game["id"])

        started = await service.start(admin, game["id"])
        assert started["status"] == MiniGameStatus.ACTIVE
        assert [g["id"] for g in await service.get_active(challenge.id)] == [game["id"]]

        with pytest.raises(InvalidStateError):
            await service.start(admin, game["id"])
        with pytest.raises(InvalidStateError):
            await service.update(admin, game["id"], name="Renamed")
        with pytest.raises(InvalidStateError):
            await service.remove(admin, game["id"])

        ended = await service.end(admin, game["id"])
        assert ended["status"] == MiniGameStatus.COMPLETED
        assert await service.list_games(challenge.id, status="completed") != []

    async def test_remove_draft(self, test_async_db, field) -> None:
        admin, *_, challenge, _ = field
        service = MiniGameService(test_async_db)
        game = await service.create(admin, challenge.id, "pr_week", "PR", GAME_START, GAME_END)

        await service.remove(admin, game["id"])

        assert await service.list_games(challenge.id) == []

    async def test_update_draft_config(self, test_async_db, field) -> None:
        admin, *_, challenge, _ = field
        service = MiniGameService(test_async_db)
        game = await service.create(admin, challenge.id, "partner_week", "Partners", GAME_START, GAME_END)

        updated = await service.update(admin, game["id"], config={"bonusPercentage": 25})

        assert updated["config"] == {"bonus_percentage": 25}

    async def test_invalid_status_filter(self, test_async_db, field) -> None:
        *_, challenge, _ = field

        with pytest.raises(ValidationError):
            await MiniGameService(test_async_db).list_games(challenge.id, status="paused")


class TestPartnerWeek:
    async def test_partner_bonus_paid_from_partner_points(self, test_async_db, field) -> None:
        # Arrange
        admin, ana, ben, challenge, running = field
        service = MiniGameService(test_async_db)
        game = await service.create(admin, challenge.id, "partner_week", "Partners", GAME_START, GAME_END)
        await service.start(admin, game["id"])
        [status] = await service.get_user_status(ana, challenge.id)
        activities = ActivityService(test_async_db)
        await activities.log_activity(ben, challenge.id, running.id, "2026-03-09", metrics={"miles": 20})
        await activities.log_activity(ana, challenge.id, running.id, "2026-03-10", metrics={"miles": 30})
        await activities.log_activity(ana, challenge.id, running.id, "2026-03-16", metrics={"miles": 50})

        # Act
        ended = await service.end(admin, game["id"])

        # Assert
        assert status["partner"]["id"] == admin.id
        by_user = {p["user_id"]: p for p in ended["participants"]}
        assert by_user[ana.id]["bonus_points"] == 0
        assert by_user[ana.id]["bonus_activity_id"] is None
        assert by_user[ben.id]["partner_user_id"] == ben.id
        assert by_user[ben.id]["bonus_points"] == 2
        assert by_user[admin.id]["bonus_points"] == 3
        assert await total_points(test_async_db, ben, challenge) == 5 + 20 + 2
        assert await total_points(test_async_db, admin, challenge) == 3
        bonus = await activity_crud.get_by_id(test_async_db, by_user[admin.id]["bonus_activity_id"])
        assert bonus.source == ActivitySource.MINI_GAME
        assert bonus.notes == "Partner Week Bonus (10% of partner's 30 pts)"


class TestHuntWeek:
    async def test_catching_and_being_caught(self, test_async_db, field) -> None:
        # Arrange
        admin, ana, ben, challenge, running = field
        service = MiniGameService(test_async_db)
        game = await service.create(admin, challenge.id, "hunt_week", "Hunt", GAME_START, GAME_END)
        await service.start(admin, game["id"])
        await ActivityService(test_async_db).log_activity(
            admin, challenge.id, running.id, "2026-03-09", metrics={"miles": 20}
        )

        # Act
        ended = await service.end(admin, game["id"])

        # Assert
        by_user = {p["user_id"]: p for p in ended["participants"]}
        assert by_user[admin.id]["prey_user_id"] == ben.id
        assert by_user[admin.id]["bonus_points"] == 75
        assert by_user[ben.id]["outcome"]["was_caught"] is True
        assert by_user[ben.id]["bonus_points"] == -25
        assert by_user[ana.id]["bonus_points"] == 0
        assert by_user[ana.id]["final_state"] == {"rank": 2, "points": 10}
        assert await total_points(test_async_db, ben, challenge) == 5 - 25


class TestPrWeek:
    async def test_beating_pre_game_best_day(self, test_async_db, field) -> None:
        # Arrange
        admin, ana, ben, challenge, running = field
        service = MiniGameService(test_async_db)
        game = await service.create(admin, challenge.id, "pr_week", "PR", GAME_START, GAME_END)
        await service.start(admin, game["id"])
        activities = ActivityService(test_async_db)
        await activities.log_activity(ana, challenge.id, running.id, "2026-03-09", metrics={"miles": 12})
        await activities.log_activity(ben, challenge.id, running.id, "2026-03-09", metrics={"miles": 3})

        # Act
        ended = await service.end(admin, game["id"])
        history = await service.get_user_history(ana, challenge.id)

        # Assert
        by_user = {p["user_id"]: p for p in ended["participants"]}
        assert by_user[ana.id]["initial_state"]["daily_pr"] == 10
        assert by_user[ana.id]["bonus_points"] == 100
        assert by_user[ben.id]["bonus_points"] == 0
        assert by_user[admin.id]["outcome"]["hit_pr"] is False
        assert [h["bonus_points"] for h in history] == [100]
