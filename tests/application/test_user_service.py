"""
Test suite for UserService.

Covers profile bootstrap from token claims, profile edits and the
admin-only user listing.

System role: Verification of user use case orchestration
"""

import uuid

import pytest

from backend.application.services.user_service import UserService, username_from_email
from backend.boundary.db.CRUD.user_crud import user_crud
from backend.boundary.db.models.user_model import Gender, UserRole
from backend.core.exceptions import ConflictError, NotAuthorizedError, NotFoundError, ValidationError


class TestEnsureCurrent:
    """Test suite for UserService.ensure_current()."""

    async def test_creates_profile_on_first_sign_in(self, test_async_db) -> None:
        # Arrange
        service = UserService(test_async_db)

        # Act
        profile = await service.ensure_current({"sub": "  Jo.Runner@Example.com ", "name": "Jo Runner"})

        # Assert
        assert profile["email"] == "jo.runner@example.com"
        assert profile["name"] == "Jo Runner"
        assert profile["username"] == "jo.runner"
        assert profile["role"] == UserRole.USER

    async def test_returns_existing_profile(self, test_async_db) -> None:
        service = UserService(test_async_db)
        first = await service.ensure_current({"sub": "sam@example.com"})

        again = await service.ensure_current({"sub": "SAM@example.com", "name": "Ignored"})

        assert again["id"] == first["id"]
        assert again["name"] is None
        assert len(await user_crud.get_all(test_async_db)) == 1

    async def test_username_gets_suffix_on_collision(self, test_async_db) -> None:
        service = UserService(test_async_db)

        first = await service.ensure_current({"sub": "alex@gym.example"})
        second = await service.ensure_current({"sub": "alex@work.example"})
        third = await service.ensure_current({"sub": "alex@home.example"})

        assert [first["username"], second["username"], third["username"]] == ["alex", "alex2", "alex3"]


def test_username_from_email_strips_symbols():
    assert username_from_email("Mary+Runs@example.com") == "maryruns"
    assert username_from_email("+++@example.com") == "user"


class TestUpdateUser:
    """Test suite for UserService.update_user()."""

    async def test_updates_profile_fields(self, test_async_db, make_user) -> None:
        runner = await make_user("Runner")

        updated = await UserService(test_async_db).update_user(
            runner, name=" Speedy ", username="speedy", gender="female", age=31
        )

        assert (updated["name"], updated["username"], updated["age"]) == ("Speedy", "speedy", 31)
        assert updated["gender"] == Gender.FEMALE

    async def test_username_taken_by_someone_else(self, test_async_db, make_user) -> None:
        # Arrange
        taken = await make_user("Taken")
        runner = await make_user("Runner")

        # Act / Assert
        with pytest.raises(ConflictError, match="already taken"):
            await UserService(test_async_db).update_user(runner, username=taken.username)

    async def test_keeping_own_username_is_allowed(self, test_async_db, make_user) -> None:
        runner = await make_user("Runner")

        updated = await UserService(test_async_db).update_user(runner, username=runner.username)

        assert updated["username"] == runner.username

    @pytest.mark.parametrize(
        "changes",
        [{"username": "x"}, {"username": "has space"}, {"age": 200}, {"gender": "other"}],
    )
    async def test_rejects_malformed_values(self, test_async_db, make_user, changes) -> None:
        runner = await make_user("Runner")

        with pytest.raises(ValidationError):
            await UserService(test_async_db).update_user(runner, **changes)

    async def test_clear_gender(self, test_async_db, make_user) -> None:
        runner = await make_user("Runner", gender=Gender.MALE)

        updated = await UserService(test_async_db).update_user(runner, clear_gender=True)

        assert updated["gender"] is None


class TestUserLookups:
    """Test suite for get_user() and list_users()."""

    async def test_get_user_missing(self, test_async_db) -> None:
        with pytest.raises(NotFoundError):
            await UserService(test_async_db).get_user(uuid.uuid4())

    async def test_list_users_requires_global_admin(self, test_async_db, make_user) -> None:
        runner = await make_user("Runner")

        with pytest.raises(NotAuthorizedError):
            await UserService(test_async_db).list_users(runner)

    async def test_admin_lists_and_searches(self, test_async_db, make_user) -> None:
        admin = await make_user("Admin", role=UserRole.ADMIN)
        await make_user("Dana")
        await make_user("Eli")
        service = UserService(test_async_db)

        everyone = await service.list_users(admin)
        found = await service.list_users(admin, search="DAN")

        assert len(everyone) == 3
        assert [u["name"] for u in found] == ["Dana"]
