"""
Router utility functions.

Contains helper functions extracted from router endpoints to keep them clean.
"""

from backend.api.routers.router_utils.error_handling import handle_domain_errors
from backend.api.routers.router_utils.presigned_url_utils import (
    FilenameValidationError,
    generate_media_s3_key,
    validate_filename,
)

__all__ = [
    "FilenameValidationError",
    "generate_media_s3_key",
    "handle_domain_errors",
    "validate_filename",
]
