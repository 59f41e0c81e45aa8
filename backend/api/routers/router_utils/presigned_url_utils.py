"""
Presigned URL utilities.

Checks the filename and content type a client wants to upload and turns
them into an S3 key under `activity-media/{user_id}/`.

Dependencies: backend.core.media_keys
System role: Presigned URL request validation
"""

import re
import uuid
from typing import Iterable

from backend.core.media_keys import user_media_prefix

MEDIA_CONTENT_TYPES = ("image/", "video/")

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_-]")


class FilenameValidationError(ValueError):
    """Raised when an upload filename or content type is rejected."""


def split_extension(filename: str) -> tuple[str, str]:
    """Split into (stem, lowercase extension without the dot)."""
    stem, dot, ext = filename.rpartition(".")
    if not dot:
        return filename, ""
    return stem, ext.lower()


def validate_filename(
    filename: str,
    allowed_extensions: Iterable[str],
    content_type: str | None = None,
) -> str:
    """
    Reject filenames that are unsafe or not a supported media type.

    Args:
        filename: Original filename from the client
        allowed_extensions: Accepted extensions without the dot
        content_type: Declared MIME type; must be image/* or video/* when given

    Returns:
        str: The normalized extension

    Raises:
        FilenameValidationError: Invalid filename, extension or content type
    """
    if not filename or len(filename) > 255:
        raise FilenameValidationError("Invalid filename length")
    if ".." in filename or "/" in filename or "\\" in filename:
        raise FilenameValidationError("Invalid filename: path traversal detected")

    _, ext = split_extension(filename)
    if not ext:
        raise FilenameValidationError("File must have an extension")

    allowed = sorted(e.lower() for e in allowed_extensions)
    if ext not in allowed:
        raise FilenameValidationError(
            f"File type '.{ext}' not allowed. Allowed: {', '.join(allowed)}"
        )

    if content_type is not None and not content_type.lower().startswith(MEDIA_CONTENT_TYPES):
        raise FilenameValidationError(f"Content type '{content_type}' is not an image or video")
    return ext


def generate_media_s3_key(user_id: str, filename: str) -> str:
    """
    Build a collision-free object key for an upload.

    Format: activity-media/{user_id}/{8 hex}-{sanitized stem}.{ext}
    """
    stem, ext = split_extension(filename)
    safe_stem = _UNSAFE_CHARS.sub("", stem) or "media"
    suffix = f".{ext}" if ext else ""
    return f"{user_media_prefix(user_id)}{uuid.uuid4().hex[:8]}-{safe_stem}{suffix}"
