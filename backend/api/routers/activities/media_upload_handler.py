"""
Media upload URL handler.

Encapsulates filename validation and S3 key generation for activity
photo uploads.

Dependencies: backend.api.routers.router_utils.presigned_url_utils, backend.boundary.aws.s3_client
System role: Presigned media URL request handling
"""

import logging
from uuid import UUID

from backend.api.routers.router_utils.presigned_url_utils import (
    generate_media_s3_key,
    validate_filename,
)
from backend.boundary.aws.s3_client import S3MediaClient
from backend.configs.s3_media import S3MediaSettings
from backend.models.activity import MediaUploadRequest, MediaUploadResponse

logger = logging.getLogger(__name__)


class MediaUploadError(Exception):
    """Raised when a presigned upload URL cannot be generated."""


def handle_media_upload_request(
    user_id: UUID,
    request: MediaUploadRequest,
    media_client: S3MediaClient,
    media_settings: S3MediaSettings,
) -> MediaUploadResponse:
    """
    Generate presigned URL for a direct S3 media upload.

    The returned s3_key is what clients send back in an activity's
    media_keys.

    Args:
        user_id: Uploading user's UUID
        request: MediaUploadRequest with filename and content_type
        media_client: S3MediaClient for URL generation
        media_settings: Allowed extensions and URL expiry

    Returns:
        MediaUploadResponse: Presigned URL, s3_key and expiry

    Raises:
        FilenameValidationError: Invalid filename or extension
        MediaUploadError: Failed to generate presigned URL
    """
    logger.info(
        "Processing media upload request",
        extra={"user_id": str(user_id), "file_name": request.filename},
    )

    validate_filename(request.filename, media_settings.allowed_extensions, request.content_type)
    s3_key = generate_media_s3_key(str(user_id), request.filename)

    try:
        upload_url, expires_at = media_client.generate_upload_url(
            s3_key=s3_key,
            content_type=request.content_type,
            expires_in=media_settings.presigned_url_expiry,
        )
    except Exception as e:
        logger.error(
            "Failed to generate presigned media URL",
            extra={"user_id": str(user_id), "s3_key": s3_key, "error": str(e)},
        )
        raise MediaUploadError(f"Failed to generate upload URL: {e}") from e

    logger.info("Media upload URL generated", extra={"user_id": str(user_id), "s3_key": s3_key})
    return MediaUploadResponse(upload_url=upload_url, s3_key=s3_key, expires_at=expires_at)
