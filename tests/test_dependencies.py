"""
Test suite for dependency injection container.

Tests factory functions for service creation, the cached media client
and bearer token authentication.

System role: Verification of DI container
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from backend.api.deps.dependencies import (
    ServiceCache,
    get_activity_service,
    get_current_user,
    get_forum_service,
    get_leaderboard_service,
    get_mini_game_service,
    get_token_identity,
)
from backend.application.services import (
    ActivityService,
    ForumService,
    LeaderboardService,
    MiniGameService,
)
from backend.core.security import create_access_token


@pytest.fixture
def mock_db_session() -> AsyncSession:
    """Provide mock async database session."""
    return AsyncMock(spec=AsyncSession)


class TestServiceFactories:
    """Test suite for per-request service factories."""

    @pytest.mark.parametrize(
        "factory, service_type",
        [
            (get_leaderboard_service, LeaderboardService),
            (get_mini_game_service, MiniGameService),
            (get_forum_service, ForumService),
        ],
    )
    def test_factory_binds_session(self, mock_db_session, factory, service_type) -> None:
        service = factory(db=mock_db_session)

        assert isinstance(service, service_type)
        assert service.db is mock_db_session

    def test_activity_service_gets_media_client(self, mock_db_session) -> None:
        media_client = MagicMock()

        service = get_activity_service(db=mock_db_session, media_client=media_client)

        assert isinstance(service, ActivityService)
        assert service.media_client is media_client


class TestServiceCache:
    """Test suite for the cached S3 media client."""

    def test_media_client_created_once(self) -> None:
        # Arrange
        cache = ServiceCache()
        with patch("backend.api.deps.dependencies.S3MediaClient") as mock_client_class:
            # Act
            first = cache.media_client
            second = cache.media_client

            # Assert
            assert first is second
            mock_client_class.assert_called_once()
            assert "bucket" in mock_client_class.call_args.kwargs

    def test_clear_drops_client(self) -> None:
        cache = ServiceCache()
        with patch("backend.api.deps.dependencies.S3MediaClient") as mock_client_class:
            cache.media_client
            cache.clear()
            cache.media_client

            assert mock_client_class.call_count == 2


class TestAuthentication:
    """Test suite for token and user resolution."""

    def test_token_identity_from_header(self) -> None:
        token = create_access_token("runner@example.com", name="Runner")

        identity = get_token_identity(authorization=f"Bearer {token}")

        assert identity["sub"] == "runner@example.com"
        assert identity["name"] == "Runner"

    @pytest.mark.parametrize("header", [None, "", "Basic abc", "Bearer"])
    def test_missing_bearer_token(self, header) -> None:
        with pytest.raises(HTTPException) as exc_info:
            get_token_identity(authorization=header)

        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == "Not authenticated"

    def test_expired_token(self) -> None:
        token = create_access_token("runner@example.com", ttl_seconds=-60)

        with pytest.raises(HTTPException) as exc_info:
            get_token_identity(authorization=f"Bearer {token}")

        assert exc_info.value.status_code == 401

    async def test_unknown_user_is_unauthorized(self) -> None:
        user_service = AsyncMock()
        user_service.get_by_email.return_value = None

        with pytest.raises(HTTPException) as exc_info:
            await get_current_user(identity={"sub": "ghost@example.com"}, user_service=user_service)

        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == "User not found"

    async def test_known_user_resolved(self) -> None:
        user = MagicMock()
        user_service = AsyncMock()
        user_service.get_by_email.return_value = user

        resolved = await get_current_user(identity={"sub": "runner@example.com"}, user_service=user_service)

        assert resolved is user
        user_service.get_by_email.assert_awaited_once_with("runner@example.com")
