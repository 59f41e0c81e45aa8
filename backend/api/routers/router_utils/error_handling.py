"""
Domain error handling for routers.

Provides a decorator that maps the FitnessChallengeError hierarchy (and
stray ValueErrors) onto HTTP responses for every endpoint.

Dependencies: fastapi, backend.core.exceptions
System role: Uniform error-to-HTTP mapping
"""

import functools
import logging
from typing import Any, Callable, TypeVar

from fastapi import HTTPException, status
from pydantic import ValidationError as PydanticValidationError

from backend.core.exceptions import (
    ConflictError,
    FitnessChallengeError,
    InvalidStateError,
    NotAuthenticatedError,
    NotAuthorizedError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Type for the decorated function
F = TypeVar("F", bound=Callable[..., Any])

_STATUS_BY_ERROR: tuple[tuple[type[FitnessChallengeError], int], ...] = (
    (NotAuthenticatedError, status.HTTP_401_UNAUTHORIZED),
    (NotAuthorizedError, status.HTTP_403_FORBIDDEN),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (ConflictError, status.HTTP_409_CONFLICT),
    (InvalidStateError, status.HTTP_409_CONFLICT),
)


def status_for(error: FitnessChallengeError) -> int:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return status_code
    return status.HTTP_400_BAD_REQUEST


def handle_domain_errors(func: F) -> F:
    """
    Decorator to handle domain errors and transform them into HTTPExceptions.

    This centralizes:
    - Logging of errors with context
    - Mapping specific exceptions to HTTP status codes
    - Ensuring uniform error response formats
    """
    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)

        except HTTPException:
            raise

        except FitnessChallengeError as e:
            status_code = status_for(e)
            logger.warning(
                "Request rejected",
                extra={
                    "endpoint": func.__name__,
                    "status_code": status_code,
                    "error": e.message,
                    "error_type": type(e).__name__,
                },
            )
            raise HTTPException(status_code=status_code, detail=e.message)

        except PydanticValidationError as e:
            logger.warning("Pydantic validation error", extra={"error": str(e)})
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=e.errors(),
            )

        except ValueError as e:
            # Generic ValueErrors from lower layers map to 404/400 by message
            msg = str(e).lower()
            if "not found" in msg or "does not exist" in msg:
                logger.warning("Resource not found (ValueError)", extra={"error": str(e)})
                raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
            logger.warning("Invalid request (ValueError)", extra={"error": str(e)})
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

        except Exception as e:
            logger.exception(
                "Unexpected failure in request",
                extra={"endpoint": func.__name__, "error": str(e)},
            )
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="An internal error occurred",
            )

    return wrapper  # type: ignore
