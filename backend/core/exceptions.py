"""
Exception hierarchy for the fitness challenge application.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and debugging.
Messages are human-readable and safe to show to participants.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class FitnessChallengeError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return the human-readable message."""
        return self.message


class NotAuthenticatedError(FitnessChallengeError):
    """Raised when a request carries no valid identity."""

    def __init__(self, message: str = "Not authenticated") -> None:
        super().__init__(message)


class NotAuthorizedError(FitnessChallengeError):
    """Raised when the caller lacks the role required for an operation."""

    def __init__(
        self,
        message: str = "Not authorized - challenge admin required",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)


class NotFoundError(FitnessChallengeError):
    """Raised when a referenced record does not exist (or is soft-deleted)."""

    def __init__(
        self,
        resource: str,
        resource_id: Any | None = None,
        message: str | None = None,
    ) -> None:
        """
        Initialize not found error.

        Args:
            resource: Human name of the missing record ("Activity", "Challenge")
            resource_id: ID that was looked up
            message: Override for the default "<resource> not found" text
        """
        details = {"resource": resource}
        if resource_id is not None:
            details["resource_id"] = str(resource_id)
        super().__init__(message or f"{resource} not found", details)
        self.resource = resource
        self.resource_id = resource_id


class ValidationError(FitnessChallengeError):
    """Raised when input violates a business rule."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Field name that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)
        self.field = field


class ConflictError(FitnessChallengeError):
    """Raised when an operation would duplicate a unique record."""

    pass


class InvalidStateError(FitnessChallengeError):
    """Raised when a state machine transition is not allowed."""

    def __init__(
        self,
        message: str,
        current_state: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if current_state:
            details["current_state"] = current_state
        super().__init__(message, details)
