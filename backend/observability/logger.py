"""
Logger configuration.

Root logging goes to stdout with the request correlation ID on every
line. Modules log through `logging.getLogger(__name__)`.

Dependencies: logging (stdlib), backend.configs
System role: Centralized logging configuration
"""

import logging
import logging.config

from backend.observability.correlation import get_correlation_id

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(correlation_id)s] %(message)s"

# Third-party loggers that are chatty at INFO.
NOISY_LOGGERS = ("botocore", "boto3", "urllib3", "sqlalchemy.engine", "uvicorn.access")


class CorrelationIdFilter(logging.Filter):
    """Attach the active request correlation ID to every record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = get_correlation_id() or "-"
        return True


def configure_logging(level: str | None = None) -> None:
    """
    Install the stdout handler on the root logger.

    Safe to call more than once; each call replaces the previous handlers.

    Args:
        level: Root log level name; defaults to the LOG_LEVEL setting
    """
    if level is None:
        from backend.configs import get_settings

        level = get_settings().log_level

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "filters": {"correlation": {"()": CorrelationIdFilter}},
            "formatters": {
                "default": {"format": LOG_FORMAT, "datefmt": "%Y-%m-%dT%H:%M:%S%z"},
            },
            "handlers": {
                "stdout": {
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stdout",
                    "formatter": "default",
                    "filters": ["correlation"],
                },
            },
            "root": {"level": level.upper(), "handlers": ["stdout"]},
            "loggers": {name: {"level": "WARNING"} for name in NOISY_LOGGERS},
        }
    )
