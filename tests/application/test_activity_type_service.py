"""
Test suite for ActivityTypeService and CategoryService.

Covers week-limited visibility, display ordering, and the global-admin
rules for categories.

System role: Verification of scoring configuration orchestration
"""

import uuid
from datetime import datetime, timezone

import pytest

from backend.application.services.activity_type_service import ActivityTypeService, CategoryService
from backend.boundary.db.models.user_model import UserRole
from backend.core.exceptions import ConflictError, NotAuthorizedError, NotFoundError, ValidationError

# The default challenge starts 2026-03-01, so this instant is in week 2.
WEEK_TWO = datetime(2026, 3, 9, 12, 0, tzinfo=timezone.utc)


class TestVisibleActivityTypes:
    """Test suite for ActivityTypeService.list_visible_activity_types()."""

    async def test_hides_types_outside_current_week(
        self, test_async_db, make_user, make_challenge, make_activity_type
    ) -> None:
        # Arrange
        admin = await make_user("Admin")
        challenge = await make_challenge(admin)
        await make_activity_type(challenge, "Running")
        await make_activity_type(challenge, "Week 1 Swim", valid_weeks=[1])
        await make_activity_type(challenge, "Week 2-3 Hike", valid_weeks=[2, 3])

        # Act
        visible = await ActivityTypeService(test_async_db).list_visible_activity_types(
            challenge.id, now=WEEK_TWO
        )

        # Assert
        assert {t["name"] for t in visible} == {"Running", "Week 2-3 Hike"}

    async def test_ordered_by_display_order_then_creation(
        self, test_async_db, make_user, make_challenge, make_activity_type
    ) -> None:
        admin = await make_user("Admin")
        challenge = await make_challenge(admin)
        await make_activity_type(challenge, "Unordered A")
        await make_activity_type(challenge, "Second", display_order=2)
        await make_activity_type(challenge, "Unordered B")
        await make_activity_type(challenge, "First", display_order=1)

        visible = await ActivityTypeService(test_async_db).list_visible_activity_types(
            challenge.id, now=WEEK_TWO
        )

        assert [t["name"] for t in visible] == ["First", "Second", "Unordered A", "Unordered B"]

    async def test_unknown_challenge(self, test_async_db) -> None:
        with pytest.raises(NotFoundError):
            await ActivityTypeService(test_async_db).list_visible_activity_types(uuid.uuid4())


class TestActivityTypeAdmin:
    """Test suite for creating and updating activity types."""

    async def test_members_cannot_create(self, test_async_db, make_user, make_challenge, join) -> None:
        admin = await make_user("Admin")
        member = await make_user("Member")
        challenge = await make_challenge(admin)
        await join(member, challenge)

        with pytest.raises(NotAuthorizedError):
            await ActivityTypeService(test_async_db).create_activity_type(member, challenge.id, "Rowing")

    async def test_update_can_clear_valid_weeks(
        self, test_async_db, make_user, make_challenge, make_activity_type
    ) -> None:
        admin = await make_user("Admin")
        challenge = await make_challenge(admin)
        swim = await make_activity_type(challenge, "Swim", valid_weeks=[1])

        updated = await ActivityTypeService(test_async_db).update_activity_type(
            admin, swim.id, valid_weeks=None, name="Open Water Swim"
        )

        assert updated["valid_weeks"] == []
        assert updated["name"] == "Open Water Swim"


class TestCategoryService:
    """Test suite for CategoryService."""

    async def test_global_admin_creates_category(self, test_async_db, make_user) -> None:
        admin = await make_user("Admin", role=UserRole.ADMIN)

        category = await CategoryService(test_async_db).create_category(admin, "  Cardio ", "Heart rate up")

        assert category["name"] == "Cardio"
        assert [c["name"] for c in await CategoryService(test_async_db).list_categories()] == ["Cardio"]

    async def test_challenge_creator_is_not_enough(self, test_async_db, make_user, make_challenge) -> None:
        creator = await make_user("Creator")
        await make_challenge(creator)
        service = CategoryService(test_async_db)

        with pytest.raises(NotAuthorizedError):
            await service.create_category(creator, "Cardio")

    async def test_duplicate_name_rejected_case_insensitively(self, test_async_db, make_user) -> None:
        admin = await make_user("Admin", role=UserRole.ADMIN)
        service = CategoryService(test_async_db)
        await service.create_category(admin, "Cardio")

        with pytest.raises(ConflictError):
            await service.create_category(admin, "cardio ")

    async def test_update_requires_global_admin(self, test_async_db, make_user) -> None:
        admin = await make_user("Admin", role=UserRole.ADMIN)
        runner = await make_user("Runner")
        service = CategoryService(test_async_db)
        category = await service.create_category(admin, "Strength")

        with pytest.raises(NotAuthorizedError):
            await service.update_category(runner, category["id"], name="Lifting")

    async def test_rename_onto_existing_name_conflicts(self, test_async_db, make_user) -> None:
        # Arrange
        admin = await make_user("Admin", role=UserRole.ADMIN)
        service = CategoryService(test_async_db)
        await service.create_category(admin, "Cardio")
        strength = await service.create_category(admin, "Strength")

        # Act / Assert
        with pytest.raises(ConflictError):
            await service.update_category(admin, strength["id"], name="CARDIO")
        renamed = await service.update_category(admin, strength["id"], name="Strength Training")
        assert renamed["name"] == "Strength Training"

    async def test_blank_name_rejected(self, test_async_db, make_user) -> None:
        admin = await make_user("Admin", role=UserRole.ADMIN)

        with pytest.raises(ValidationError):
            await CategoryService(test_async_db).create_category(admin, "   ")
