"""
FastAPI middleware for observability.

CorrelationMiddleware binds the request's correlation ID and echoes it in
the response; RequestLoggingMiddleware writes one access line per request
with timing. Registration order in `create_app` puts correlation outermost
so access lines carry the ID.

Dependencies: fastapi, starlette, backend.observability, backend.configs
System role: Request/response observability injection
"""

import logging
import time

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from backend.configs import get_settings
from backend.observability.correlation import correlation_scope

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Access logging with slow-request and quiet-path levels."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        settings = get_settings().observability
        if not settings.log_requests:
            return await call_next(request)

        method, path = request.method, request.url.path
        user_agent = request.headers.get("user-agent")
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as e:
            logger.exception(
                f"{method} {path} failed after {_elapsed_ms(started)}ms",
                extra={"method": method, "path": path, "error_type": type(e).__name__},
            )
            raise

        elapsed = _elapsed_ms(started)
        if elapsed > settings.slow_request_ms:
            level = logging.WARNING
        elif path in settings.quiet_paths and response.status_code < 400:
            level = logging.DEBUG
        else:
            level = logging.INFO

        logger.log(
            level,
            f"{method} {path} -> {response.status_code} ({elapsed}ms)",
            extra={
                "method": method,
                "path": path,
                "status_code": response.status_code,
                "process_time_ms": elapsed,
                "client_host": request.client.host if request.client else None,
                "user_agent": user_agent,
            },
        )
        return response


class CorrelationMiddleware(BaseHTTPMiddleware):
    """Bind `X-Correlation-ID` for the request and echo it back."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        with correlation_scope(request.headers.get(CORRELATION_HEADER)) as correlation_id:
            response = await call_next(request)
        response.headers[CORRELATION_HEADER] = correlation_id
        return response
