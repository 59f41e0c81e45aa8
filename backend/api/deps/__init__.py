"""API-specific dependencies."""

# Re-export common dependencies
from .dependencies import (
    get_current_user,
    get_media_client,
    get_settings_dependency,
    get_token_identity,
)

__all__ = [
    "get_current_user",
    "get_media_client",
    "get_settings_dependency",
    "get_token_identity",
]
