"""
Activity media key ownership.

Uploads land under `activity-media/{user_id}/`; an activity may only
reference objects inside its author's prefix.

Dependencies: None
System role: Media key rules shared by upload URLs and activity logging
"""

from typing import Iterable
from uuid import UUID

MEDIA_PREFIX = "activity-media"


def user_media_prefix(user_id: UUID | str) -> str:
    return f"{MEDIA_PREFIX}/{user_id}/"


def foreign_media_keys(user_id: UUID | str, keys: Iterable[str]) -> list[str]:
    """Keys that are not plain objects inside the user's own upload prefix."""
    prefix = user_media_prefix(user_id)
    return [
        key
        for key in keys
        if not isinstance(key, str)
        or not key.startswith(prefix)
        or len(key) == len(prefix)
        or ".." in key
    ]
