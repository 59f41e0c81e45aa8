"""
S3 client for the activity media bucket.

Workout photos and videos never pass through the API: browsers PUT them
straight to S3 with a presigned URL and the feed renders them through
short-lived presigned GET URLs.

Dependencies: boto3
System role: API-level S3 operations for presigned URLs
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Iterable

import boto3

logger = logging.getLogger(__name__)


class S3MediaClient:
    """Presigned URL issuer for one media bucket."""

    def __init__(self, bucket: str, region: str = "us-east-1", default_expiry: int = 3600) -> None:
        """
        Args:
            bucket: S3 bucket holding activity media
            region: AWS region of the bucket
            default_expiry: Lifetime in seconds for URLs when callers do not pass one
        """
        self.bucket = bucket
        self.default_expiry = default_expiry
        self._s3 = boto3.client("s3", region_name=region)

    def _presign(self, client_method: str, params: dict[str, Any], expires_in: int | None) -> str:
        return self._s3.generate_presigned_url(
            ClientMethod=client_method,
            Params={"Bucket": self.bucket, **params},
            ExpiresIn=expires_in or self.default_expiry,
        )

    def generate_upload_url(
        self,
        s3_key: str,
        content_type: str = "application/octet-stream",
        expires_in: int | None = None,
    ) -> tuple[str, datetime]:
        """
        Presign a PUT for one object.

        The signature covers Content-Type, so the browser must send the
        same header it declared when asking for the URL.

        Returns:
            tuple[str, datetime]: (presigned_url, expires_at in UTC)

        Raises:
            botocore.exceptions.ClientError: If signing fails
        """
        lifetime = expires_in or self.default_expiry
        url = self._presign("put_object", {"Key": s3_key, "ContentType": content_type}, lifetime)
        return url, datetime.now(timezone.utc) + timedelta(seconds=lifetime)

    def generate_view_url(self, s3_key: str, expires_in: int | None = None) -> str:
        """Presign a GET for displaying one object."""
        return self._presign("get_object", {"Key": s3_key}, expires_in)

    def generate_view_urls(self, s3_keys: Iterable[str]) -> list[str]:
        """
        Presign GETs for an activity's media, skipping keys that fail.

        A single unsignable key should not blank out the rest of a feed
        card, so failures are logged and dropped.
        """
        urls = []
        for key in s3_keys:
            try:
                urls.append(self.generate_view_url(key))
            except Exception as e:
                logger.warning(
                    "Failed to presign media view URL",
                    extra={"s3_key": key, "error": str(e)},
                )
        return urls
