"""
Test suite for challenge, membership and standings endpoints.

Services are replaced with AsyncMocks; these tests cover request
validation, response mapping and domain error translation.

System role: Verification of the challenge HTTP API
"""

import uuid
from datetime import date, datetime, timezone

from backend.api.deps.dependencies import (
    get_challenge_service,
    get_leaderboard_service,
    get_participation_service,
)
from backend.core.exceptions import ConflictError, NotAuthorizedError, NotFoundError

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def challenge_dict(**overrides) -> dict:
    data = {
        "id": uuid.uuid4(),
        "name": "March Fitness",
        "description": None,
        "creator_id": uuid.uuid4(),
        "start_date": date(2026, 3, 1),
        "end_date": date(2026, 3, 31),
        "duration_days": 31,
        "streak_min_points": 0.0,
        "week_calc_method": "from_start",
        "auto_flag_rules": None,
        "visibility": "public",
        "payment_required": False,
        "announcement": None,
        "announcement_updated_at": None,
        "participant_count": 1,
        "created_at": NOW,
        "updated_at": NOW,
    }
    data.update(overrides)
    return data


class TestChallengeEndpoints:
    """Test suite for /challenges."""

    def test_create_challenge(self, api_client, mock_service, current_user):
        # Arrange
        mock_service.create_challenge.return_value = challenge_dict(creator_id=current_user.id)
        api_client.app.dependency_overrides[get_challenge_service] = lambda: mock_service

        # Act
        response = api_client.post(
            "/api/v1/challenges",
            json={"name": " March Fitness ", "start_date": "2026-03-01", "end_date": "2026-03-31"},
        )

        # Assert
        assert response.status_code == 201
        assert response.json()["name"] == "March Fitness"
        assert response.json()["duration_days"] == 31
        kwargs = mock_service.create_challenge.await_args.kwargs
        assert kwargs["name"] == "March Fitness"
        assert kwargs["visibility"] == "public"

    def test_blank_name_is_bad_request(self, api_client, mock_service):
        api_client.app.dependency_overrides[get_challenge_service] = lambda: mock_service

        response = api_client.post(
            "/api/v1/challenges",
            json={"name": "   ", "start_date": "2026-03-01", "end_date": "2026-03-31"},
        )

        assert response.status_code == 400
        mock_service.create_challenge.assert_not_awaited()

    def test_unknown_visibility_is_unprocessable(self, api_client, mock_service):
        api_client.app.dependency_overrides[get_challenge_service] = lambda: mock_service

        response = api_client.post(
            "/api/v1/challenges",
            json={"name": "X", "start_date": "2026-03-01", "end_date": "2026-03-31", "visibility": "secret"},
        )

        assert response.status_code == 422

    def test_empty_update_is_bad_request(self, api_client, mock_service):
        api_client.app.dependency_overrides[get_challenge_service] = lambda: mock_service

        response = api_client.patch(f"/api/v1/challenges/{uuid.uuid4()}", json={})

        assert response.status_code == 400
        assert "At least one field" in response.json()["detail"]

    def test_update_passes_only_sent_fields(self, api_client, mock_service):
        challenge_id = uuid.uuid4()
        mock_service.update_challenge.return_value = challenge_dict(id=challenge_id, announcement=None)
        api_client.app.dependency_overrides[get_challenge_service] = lambda: mock_service

        response = api_client.patch(f"/api/v1/challenges/{challenge_id}", json={"announcement": None})

        assert response.status_code == 200
        assert mock_service.update_challenge.await_args.kwargs == {"announcement": None}

    def test_forbidden_update(self, api_client, mock_service):
        mock_service.update_challenge.side_effect = NotAuthorizedError("Challenge admin access required")
        api_client.app.dependency_overrides[get_challenge_service] = lambda: mock_service

        response = api_client.patch(f"/api/v1/challenges/{uuid.uuid4()}", json={"name": "Mine"})

        assert response.status_code == 403
        assert response.json()["detail"] == "Challenge admin access required"

    def test_missing_challenge(self, api_client, mock_service):
        missing = uuid.uuid4()
        mock_service.get_challenge.side_effect = NotFoundError("Challenge", missing)
        api_client.app.dependency_overrides[get_challenge_service] = lambda: mock_service

        response = api_client.get(f"/api/v1/challenges/{missing}")

        assert response.status_code == 404

    def test_unexpected_failure_is_hidden(self, api_client, mock_service):
        mock_service.list_for_user.side_effect = RuntimeError("connection pool exhausted")
        api_client.app.dependency_overrides[get_challenge_service] = lambda: mock_service

        response = api_client.get("/api/v1/challenges/mine")

        assert response.status_code == 500
        assert response.json()["detail"] == "An internal error occurred"


class TestMembershipEndpoints:
    """Test suite for joining challenges."""

    def test_join_without_body(self, api_client, mock_service, current_user):
        challenge_id = uuid.uuid4()
        mock_service.join.return_value = {
            "id": uuid.uuid4(),
            "user_id": current_user.id,
            "challenge_id": challenge_id,
            "role": "member",
            "total_points": 0.0,
            "current_streak": 0,
            "last_streak_day": None,
            "modifier_factor": 1.0,
            "payment_status": "paid",
            "invited_by_user_id": None,
            "dismissed_announcement_at": None,
            "joined_at": NOW,
        }
        api_client.app.dependency_overrides[get_participation_service] = lambda: mock_service

        response = api_client.post(f"/api/v1/challenges/{challenge_id}/join")

        assert response.status_code == 201
        assert response.json()["role"] == "member"
        assert mock_service.join.await_args.kwargs["invite_code"] is None

    def test_join_twice_conflicts(self, api_client, mock_service):
        mock_service.join.side_effect = ConflictError("Already participating in this challenge")
        api_client.app.dependency_overrides[get_participation_service] = lambda: mock_service

        response = api_client.post(f"/api/v1/challenges/{uuid.uuid4()}/join", json={"invite_code": "ABCD1234"})

        assert response.status_code == 409


class TestStandingsEndpoints:
    def test_leaderboard_page(self, api_client, mock_service):
        user_id = uuid.uuid4()
        mock_service.get_leaderboard.return_value = {
            "items": [
                {
                    "rank": 1,
                    "user": {"id": user_id, "name": "Alice", "username": "alice", "avatar_url": None},
                    "total_points": 42.0,
                    "current_streak": 3,
                }
            ],
            "next_cursor": 1,
            "is_done": False,
        }
        api_client.app.dependency_overrides[get_leaderboard_service] = lambda: mock_service

        response = api_client.get(f"/api/v1/challenges/{uuid.uuid4()}/leaderboard?limit=1")

        assert response.status_code == 200
        body = response.json()
        assert body["items"][0]["user"]["id"] == str(user_id)
        assert body["next_cursor"] == 1
        assert mock_service.get_leaderboard.await_args.kwargs == {"limit": 1, "cursor": None}

    def test_week_number_must_be_positive(self, api_client, mock_service):
        api_client.app.dependency_overrides[get_leaderboard_service] = lambda: mock_service

        response = api_client.get(
            f"/api/v1/challenges/{uuid.uuid4()}/leaderboard/weekly-categories?week_number=0"
        )

        assert response.status_code == 400
        mock_service.get_weekly_category_leaderboard.assert_not_awaited()

    def test_weekly_board_for_missing_challenge(self, api_client, mock_service):
        mock_service.get_weekly_category_leaderboard.return_value = None
        api_client.app.dependency_overrides[get_leaderboard_service] = lambda: mock_service

        response = api_client.get(f"/api/v1/challenges/{uuid.uuid4()}/leaderboard/weekly-categories")

        assert response.status_code == 404
        assert response.json()["detail"] == "Challenge not found"
