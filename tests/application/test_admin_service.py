"""
Test suite for AdminService moderation flows.

System role: Verification of flag resolution, admin comments, audited
edits and out-of-bounds checks
"""

import pytest

from backend.application.services.activity_service import ActivityService
from backend.application.services.admin_service import AdminService
from backend.application.services.notification_service import NotificationService, NotificationType
from backend.boundary.db.CRUD.participation_crud import participation_crud
from backend.boundary.db.models.activity_model import CommentVisibility, FlagActionType, ResolutionStatus
from backend.core.exceptions import NotAuthorizedError, ValidationError


@pytest.fixture
async def flagged(test_async_db, make_user, make_challenge, make_activity_type, join):
    """A runner's activity flagged by another participant."""
    admin = await make_user("Admin")
    runner = await make_user("Runner")
    reporter = await make_user("Reporter")
    challenge = await make_challenge(admin, streak_min_points=1)
    running = await make_activity_type(challenge)
    await join(runner, challenge)
    await join(reporter, challenge)
    activities = ActivityService(test_async_db)
    logged = await activities.log_activity(runner, challenge.id, running.id, "2026-03-02", metrics={"miles": 5})
    await activities.flag_activity(reporter, logged["id"], "Looks like a car ride")
    return admin, runner, reporter, challenge, running, logged["id"]


class TestFlagQueue:
    """Test suite for listing and resolving flagged activities."""

    async def test_list_flagged_with_filters(self, test_async_db, flagged) -> None:
        admin, runner, _, challenge, _, activity_id = flagged
        service = AdminService(test_async_db)

        pending = await service.list_flagged_activities(admin, challenge.id, status="pending")
        searched = await service.list_flagged_activities(admin, challenge.id, search="CAR RIDE")
        nobody = await service.list_flagged_activities(admin, challenge.id, search="bicycle")

        assert [a["id"] for a in pending] == [activity_id]
        assert pending[0]["user"]["id"] == runner.id
        assert [a["id"] for a in searched] == [activity_id]
        assert nobody == []

    async def test_member_cannot_see_queue(self, test_async_db, flagged) -> None:
        _, _, reporter, challenge, _, _ = flagged

        with pytest.raises(NotAuthorizedError):
            await AdminService(test_async_db).list_flagged_activities(reporter, challenge.id)

    async def test_invalid_status_filter(self, test_async_db, flagged) -> None:
        admin, _, _, challenge, _, _ = flagged

        with pytest.raises(ValidationError):
            await AdminService(test_async_db).list_flagged_activities(admin, challenge.id, status="closed")

    async def test_resolve_and_reopen(self, test_async_db, flagged) -> None:
        # Arrange
        admin, _, _, _, _, activity_id = flagged
        service = AdminService(test_async_db)

        # Act
        resolved = await service.update_flag_resolution(admin, activity_id, "resolved", notes="Checked GPS")
        reopened = await service.update_flag_resolution(admin, activity_id, "pending")

        # Assert
        assert resolved["resolution_status"] == ResolutionStatus.RESOLVED
        assert resolved["flagged"] is False
        assert reopened["flagged"] is True
        detail = await service.get_flagged_activity_detail(admin, activity_id)
        assert [h["action_type"] for h in detail["history"]] == [
            FlagActionType.RESOLUTION,
            FlagActionType.RESOLUTION,
            FlagActionType.FLAG,
        ]
        assert detail["history"][1]["payload"] == {"status": "resolved", "notes": "Checked GPS"}

    async def test_unknown_resolution_status(self, test_async_db, flagged) -> None:
        admin, _, _, _, _, activity_id = flagged

        with pytest.raises(ValidationError, match="pending or resolved"):
            await AdminService(test_async_db).update_flag_resolution(admin, activity_id, "ignored")


class TestAdminComments:
    """Test suite for admin comments and their visibility."""

    async def test_participant_visible_comment_notifies_owner(self, test_async_db, flagged) -> None:
        admin, runner, _, _, _, activity_id = flagged

        result = await AdminService(test_async_db).add_admin_comment(
            admin, activity_id, "Please attach a map", visibility="participant"
        )

        assert result["admin_comment"] == "Please attach a map"
        assert result["admin_comment_visibility"] == CommentVisibility.PARTICIPANT
        [notification] = await NotificationService(test_async_db).list_notifications(runner)
        assert notification["type"] == NotificationType.ADMIN_COMMENT
        owner_view = await ActivityService(test_async_db).get_activity(runner, activity_id)
        assert owner_view["admin_comment"] == "Please attach a map"

    async def test_internal_comment_hidden_from_participants(self, test_async_db, flagged) -> None:
        admin, runner, reporter, _, _, activity_id = flagged

        await AdminService(test_async_db).add_admin_comment(admin, activity_id, "Repeat offender")

        activities = ActivityService(test_async_db)
        assert (await activities.get_activity(runner, activity_id))["admin_comment"] is None
        assert (await activities.get_activity(reporter, activity_id))["admin_comment"] is None
        assert (await activities.get_activity(admin, activity_id))["admin_comment"] == "Repeat offender"
        assert await NotificationService(test_async_db).unread_count(runner) == 0

    async def test_bad_visibility(self, test_async_db, flagged) -> None:
        admin, _, _, _, _, activity_id = flagged

        with pytest.raises(ValidationError):
            await AdminService(test_async_db).add_admin_comment(admin, activity_id, "x", visibility="public")


class TestAdminEdit:
    """Test suite for AdminService.admin_edit_activity()."""

    async def test_point_edit_flows_into_participation(self, test_async_db, flagged) -> None:
        # Arrange
        admin, runner, _, challenge, _, activity_id = flagged

        # Act
        edited = await AdminService(test_async_db).admin_edit_activity(
            admin, activity_id, points_earned=2, notes="Capped to walking pace"
        )

        # Assert
        assert edited["points_earned"] == 2
        participation = await participation_crud.get_for(test_async_db, runner.id, challenge.id)
        assert participation.total_points == 2
        detail = await AdminService(test_async_db).get_flagged_activity_detail(admin, activity_id)
        edit = detail["history"][0]
        assert edit["action_type"] == FlagActionType.EDIT
        assert edit["payload"]["points_earned"] == {"from": 5, "to": 2}
        assert edit["actor"]["id"] == admin.id

    async def test_moving_date_recomputes_streak(
        self, test_async_db, flagged
    ) -> None:
        admin, runner, _, challenge, running, activity_id = flagged
        await ActivityService(test_async_db).log_activity(
            runner, challenge.id, running.id, "2026-03-03", metrics={"miles": 1}
        )

        await AdminService(test_async_db).admin_edit_activity(admin, activity_id, logged_date="2026-03-10")

        participation = await participation_crud.get_for(test_async_db, runner.id, challenge.id)
        assert participation.current_streak == 1
        assert participation.last_streak_day.isoformat() == "2026-03-10"

    async def test_no_changes_rejected(self, test_async_db, flagged) -> None:
        admin, _, _, _, _, activity_id = flagged

        with pytest.raises(ValidationError, match="No changes"):
            await AdminService(test_async_db).admin_edit_activity(admin, activity_id, points_earned=5)

    async def test_type_must_be_in_same_challenge(
        self, test_async_db, flagged, make_challenge, make_activity_type
    ) -> None:
        admin, _, _, _, _, activity_id = flagged
        other = await make_challenge(admin, name="Other")
        foreign = await make_activity_type(other, "Rowing")

        with pytest.raises(ValidationError, match="same challenge"):
            await AdminService(test_async_db).admin_edit_activity(admin, activity_id, activity_type_id=foreign.id)

    async def test_owner_notified_of_edit(self, test_async_db, flagged) -> None:
        admin, runner, _, _, _, activity_id = flagged

        await AdminService(test_async_db).admin_edit_activity(admin, activity_id, notes="edited")

        [notification] = await NotificationService(test_async_db).list_notifications(runner)
        assert notification["type"] == NotificationType.ADMIN_EDIT
        assert notification["data"]["fields"] == ["notes"]


async def test_out_of_bounds_activities(test_async_db, flagged) -> None:
    admin, runner, _, challenge, running, _ = flagged
    activities = ActivityService(test_async_db)
    early = await activities.log_activity(runner, challenge.id, running.id, "2026-02-27", metrics={"miles": 1})
    await activities.log_activity(runner, challenge.id, running.id, "2026-03-31T23:59:00Z", metrics={"miles": 1})
    late = await activities.log_activity(runner, challenge.id, running.id, "2026-04-01", metrics={"miles": 1})

    found = await AdminService(test_async_db).check_out_of_bounds_activities(admin, challenge.id)

    assert {a["id"] for a in found} == {early["id"], late["id"]}
