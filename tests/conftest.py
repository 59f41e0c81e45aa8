"""
Shared test fixtures and configuration for entire test suite.

Provides: In-memory SQLite session, user/challenge/activity-type factories,
mocked services and a FastAPI test client with dependency overrides
Dependencies: pytest, pytest-asyncio, sqlalchemy, aiosqlite, fastapi
System role: Test infrastructure and fixture management
"""

import uuid
from datetime import date, datetime, timezone
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient


@pytest.fixture
async def test_async_db():
    """
    Create in-memory SQLite async database for testing.

    Yields:
        AsyncSession: Test database session with cleanup (lazy imported to avoid settings issues)
    """
    from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
    from sqlalchemy.pool import StaticPool
    from backend.boundary.db.base import Base
    import backend.boundary.db.models  # noqa: F401  (registers every table)

    # Use SQLite in-memory database for tests
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    # Create session factory
    async_session = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    # Create session for test
    async with async_session() as session:
        yield session
        await session.rollback()

    # Cleanup
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def make_user(test_async_db):
    """
    Factory for persisted users.

    Returns:
        Callable: async (name, role, gender) -> UserModel
    """
    from backend.boundary.db.CRUD.user_crud import user_crud
    from backend.boundary.db.models.user_model import UserRole

    async def _make_user(name: str = "Runner", role=UserRole.USER, gender=None):
        suffix = uuid.uuid4().hex[:8]
        return await user_crud.create(
            test_async_db,
            email=f"{name.lower()}-{suffix}@example.com",
            name=name,
            username=f"{name.lower()}_{suffix}",
            role=role,
            gender=gender,
        )

    return _make_user


@pytest.fixture
def make_challenge(test_async_db):
    """
    Factory for challenges created through ChallengeService.

    The creator is enrolled as the challenge admin. Defaults to a public
    March 2026 challenge.

    Returns:
        Callable: async (creator, **fields) -> ChallengeModel
    """
    from backend.application.services.challenge_service import ChallengeService
    from backend.boundary.db.CRUD.challenge_crud import challenge_crud

    async def _make_challenge(creator, **fields):
        fields.setdefault("name", "March Fitness")
        fields.setdefault("start_date", date(2026, 3, 1))
        fields.setdefault("end_date", date(2026, 3, 31))
        created = await ChallengeService(test_async_db).create_challenge(creator, **fields)
        return await challenge_crud.get_by_id(test_async_db, created["id"])

    return _make_challenge


@pytest.fixture
def make_activity_type(test_async_db):
    """
    Factory for activity types attached to a challenge.

    Returns:
        Callable: async (challenge, name, scoring_config, **fields) -> ActivityTypeModel
    """
    from backend.boundary.db.CRUD.activity_type_crud import activity_type_crud

    async def _make_activity_type(challenge, name: str = "Running", scoring_config=None, **fields):
        return await activity_type_crud.create(
            test_async_db,
            challenge_id=challenge.id,
            name=name,
            scoring_config=scoring_config or {"unit": "miles", "pointsPerUnit": 1},
            **fields,
        )

    return _make_activity_type


@pytest.fixture
def join(test_async_db):
    """
    Enroll a user in a challenge through ParticipationService.

    Returns:
        Callable: async (user, challenge, **kwargs) -> dict
    """
    from backend.application.services.participation_service import ParticipationService

    async def _join(user, challenge, **kwargs):
        return await ParticipationService(test_async_db).join(user, challenge.id, **kwargs)

    return _join


@pytest.fixture
def current_user():
    """Stand-in for the authenticated user in API tests."""
    from backend.boundary.db.models.user_model import UserModel, UserRole

    return UserModel(
        id=uuid.uuid4(),
        email="runner@example.com",
        name="Runner",
        username="runner",
        role=UserRole.USER,
        created_at=datetime(2026, 2, 20, tzinfo=timezone.utc),
    )


@pytest.fixture
def api_client(current_user):
    """
    TestClient whose requests are authenticated as `current_user`.

    Service dependencies still need overriding per test.
    """
    from backend.api.deps.dependencies import get_current_user
    from backend.api.main import create_app

    client = TestClient(create_app())
    client.app.dependency_overrides[get_current_user] = lambda: current_user
    yield client
    client.app.dependency_overrides.clear()


@pytest.fixture
def mock_service():
    """
    Create a bare AsyncMock standing in for any application service.

    Returns:
        AsyncMock: Service mock; configure return values per test
    """
    return AsyncMock()
