"""
Challenge validation utilities.

Request rules not covered by the Pydantic models.

Dependencies: backend.models.challenge
System role: Challenge request validation
"""

from backend.models.challenge import CreateChallengeRequest, UpdateChallengeRequest


class ChallengeValidationError(ValueError):
    """Raised when a challenge request fails validation."""


def validate_challenge_creation(request: CreateChallengeRequest) -> None:
    """
    Validate challenge creation request.

    Raises:
        ChallengeValidationError: If the name or week method is blank
    """
    if not request.name.strip():
        raise ChallengeValidationError("Challenge name cannot be empty or whitespace-only")
    if not request.week_calc_method.strip():
        raise ChallengeValidationError("week_calc_method cannot be empty")


def validate_challenge_update(request: UpdateChallengeRequest) -> None:
    if not request.model_fields_set:
        raise ChallengeValidationError("At least one field must be provided for update")
    if request.name is not None and not request.name.strip():
        raise ChallengeValidationError("Challenge name cannot be empty or whitespace-only")


def validate_week_number(week_number: int | None) -> None:
    if week_number is not None and week_number < 1:
        raise ChallengeValidationError("week_number must be 1 or greater")
