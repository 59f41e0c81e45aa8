"""
Core business logic module.

Contains domain business logic, exception hierarchy, and the pure rule
modules (scoring, streaks, weeks, achievements, mini-games).
All business rules and domain-specific logic reside here.
"""

from backend.core.exceptions import (
    FitnessChallengeError,
    NotAuthenticatedError,
    NotAuthorizedError,
    NotFoundError,
    ValidationError,
    ConflictError,
    InvalidStateError,
)

__all__ = [
    # Exceptions
    "FitnessChallengeError",
    "NotAuthenticatedError",
    "NotAuthorizedError",
    "NotFoundError",
    "ValidationError",
    "ConflictError",
    "InvalidStateError",
]
