"""
Test suite for bearer tokens and the domain exception hierarchy.

System role: Verification of authentication primitives and error context
"""

import uuid

import jwt
import pytest

from backend.configs import get_settings
from backend.core.exceptions import (
    FitnessChallengeError,
    InvalidStateError,
    NotAuthenticatedError,
    NotAuthorizedError,
    NotFoundError,
    ValidationError,
)
from backend.core.security import create_access_token, decode_access_token, get_bearer_token


class TestTokens:
    """Test suite for token creation and validation."""

    def test_round_trip_claims(self) -> None:
        token = create_access_token("runner@example.com", name="Runner")

        claims = decode_access_token(token)

        assert claims["sub"] == "runner@example.com"
        assert claims["name"] == "Runner"

    def test_expired_token(self) -> None:
        token = create_access_token("runner@example.com", ttl_seconds=-60)

        with pytest.raises(NotAuthenticatedError, match="Token expired"):
            decode_access_token(token)

    def test_wrong_signature(self) -> None:
        auth = get_settings().auth
        token = jwt.encode(
            {"sub": "runner@example.com", "exp": 9999999999},
            "another-secret-that-is-long-enough-for-hs256",
            algorithm=auth.algorithm,
        )

        with pytest.raises(NotAuthenticatedError, match="Invalid token"):
            decode_access_token(token)

    def test_missing_subject(self) -> None:
        auth = get_settings().auth
        token = jwt.encode({"exp": 9999999999}, auth.secret_key, algorithm=auth.algorithm)

        with pytest.raises(NotAuthenticatedError):
            decode_access_token(token)

    @pytest.mark.parametrize(
        "header,expected",
        [("Bearer abc", "abc"), ("bearer abc", "abc"), ("Token abc", None), (None, None), ("Bearer", None)],
    )
    def test_get_bearer_token(self, header, expected) -> None:
        assert get_bearer_token(header) == expected


class TestExceptions:
    """Test suite for exception messages and details."""

    def test_not_found_default_message(self) -> None:
        activity_id = uuid.uuid4()

        error = NotFoundError("Activity", activity_id)

        assert str(error) == "Activity not found"
        assert error.details == {"resource": "Activity", "resource_id": str(activity_id)}

    def test_not_found_custom_message(self) -> None:
        assert NotFoundError("Participation", message="Participation not found").message == (
            "Participation not found"
        )

    def test_validation_error_records_field(self) -> None:
        error = ValidationError("Bad date", field="logged_date")

        assert error.field == "logged_date"
        assert error.details["field"] == "logged_date"

    def test_invalid_state_records_current_state(self) -> None:
        error = InvalidStateError("Only draft mini-games can be started", current_state="active")

        assert error.details == {"current_state": "active"}

    def test_not_authorized_default(self) -> None:
        error = NotAuthorizedError()

        assert isinstance(error, FitnessChallengeError)
        assert error.message == "Not authorized - challenge admin required"
