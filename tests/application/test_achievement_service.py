"""
Test suite for AchievementService.

Covers awarding (once, with a bonus activity), progress reporting and
who may define achievements.

System role: Verification of achievement use case orchestration
"""

import pytest

from backend.application.services.achievement_service import AchievementService
from backend.application.services.activity_service import ActivityService
from backend.boundary.db.CRUD.activity_crud import activity_crud
from backend.boundary.db.CRUD.participation_crud import participation_crud
from backend.core.exceptions import NotAuthorizedError, ValidationError


class TestAchievements:
    """Test suite for achievement definition and awarding."""

    async def test_award_once_with_bonus_activity(
        self, test_async_db, make_user, make_challenge, make_activity_type, join
    ) -> None:
        # Arrange
        admin = await make_user("Admin")
        runner = await make_user("Runner")
        challenge = await make_challenge(admin)
        running = await make_activity_type(challenge)
        await join(runner, challenge)
        achievement = await AchievementService(test_async_db).create_achievement(
            admin,
            challenge.id,
            "Two Runs",
            criteria={"criteriaType": "count", "activityTypeIds": [str(running.id)], "requiredCount": 2},
            bonus_points=10,
        )
        activities = ActivityService(test_async_db)

        # Act
        first = await activities.log_activity(runner, challenge.id, running.id, "2026-03-02", metrics={"miles": 3})
        second = await activities.log_activity(runner, challenge.id, running.id, "2026-03-03", metrics={"miles": 4})
        third = await activities.log_activity(runner, challenge.id, running.id, "2026-03-04", metrics={"miles": 1})

        # Assert
        assert first["achievements_awarded"] == []
        assert second["achievements_awarded"] == [
            {"id": achievement["id"], "name": "Two Runs", "bonus_points": 10}
        ]
        assert third["achievements_awarded"] == []
        participation = await participation_crud.get_for(test_async_db, runner.id, challenge.id)
        assert participation.total_points == 3 + 4 + 1 + 10
        logged = await activity_crud.list_for_user(test_async_db, runner.id, challenge.id)
        assert sum(1 for a in logged if a.notes == "Achievement earned: Two Runs") == 1

    async def test_progress(self, test_async_db, make_user, make_challenge, make_activity_type, join) -> None:
        admin = await make_user("Admin")
        runner = await make_user("Runner")
        challenge = await make_challenge(admin)
        running = await make_activity_type(challenge)
        await join(runner, challenge)
        service = AchievementService(test_async_db)
        await service.create_achievement(
            admin,
            challenge.id,
            "Ten Miles",
            criteria={"criteriaType": "cumulative", "activityTypeIds": [str(running.id)], "metric": "distance_miles", "threshold": 10},
        )
        await ActivityService(test_async_db).log_activity(
            runner, challenge.id, running.id, "2026-03-02", metrics={"miles": 4}
        )

        [progress] = await service.get_user_progress(runner, challenge.id)

        assert (progress["current_count"], progress["required_count"]) == (4, 10)
        assert progress["is_earned"] is False
        assert progress["earned_at"] is None

    async def test_only_admins_define_achievements(self, test_async_db, make_user, make_challenge, join) -> None:
        admin = await make_user("Admin")
        member = await make_user("Member")
        challenge = await make_challenge(admin)
        await join(member, challenge)

        with pytest.raises(NotAuthorizedError):
            await AchievementService(test_async_db).create_achievement(
                member, challenge.id, "Mine", criteria={"criteriaType": "count"}
            )

    async def test_unknown_criteria_type(self, test_async_db, make_user, make_challenge) -> None:
        admin = await make_user("Admin")
        challenge = await make_challenge(admin)

        with pytest.raises(ValidationError):
            await AchievementService(test_async_db).create_achievement(
                admin, challenge.id, "Odd", criteria={"criteriaType": "vibes"}
            )
