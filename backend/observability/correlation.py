"""
Correlation ID context.

Each request runs with a correlation ID held in a contextvar so log lines
from routers, services and the DB layer can be tied back to the request
that produced them. Clients may supply their own ID via
`X-Correlation-ID`; anything that does not look like an opaque token is
replaced with a fresh UUID before it can reach the logs.

Dependencies: contextvars
System role: Request tracing across service boundaries
"""

import re
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator

correlation_id_ctx: ContextVar[str] = ContextVar("correlation_id", default="")

_ACCEPTED_ID = re.compile(r"^[A-Za-z0-9._:-]{1,128}$")


def normalize_correlation_id(candidate: str | None) -> str:
    """Return `candidate` if it is a safe token, otherwise a new UUID4 string."""
    if candidate and _ACCEPTED_ID.match(candidate.strip()):
        return candidate.strip()
    return str(uuid.uuid4())


def set_correlation_id(correlation_id: str | None = None) -> str:
    """
    Set correlation ID in context.

    Args:
        correlation_id: Inbound ID (generated when missing or malformed)

    Returns:
        str: The correlation ID that was set
    """
    value = normalize_correlation_id(correlation_id)
    correlation_id_ctx.set(value)
    return value


def get_correlation_id() -> str:
    """Current correlation ID, or an empty string outside a request."""
    return correlation_id_ctx.get()


def clear_correlation_id() -> None:
    correlation_id_ctx.set("")


@contextmanager
def correlation_scope(correlation_id: str | None = None) -> Iterator[str]:
    """
    Bind a correlation ID for the duration of a block.

    The previous value is restored on exit, so nested scopes (for example
    a background task started from a request) do not leak into each other.

    Yields:
        str: The active correlation ID
    """
    value = normalize_correlation_id(correlation_id)
    token = correlation_id_ctx.set(value)
    try:
        yield value
    finally:
        correlation_id_ctx.reset(token)
