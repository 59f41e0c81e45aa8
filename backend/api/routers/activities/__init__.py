"""
Activities router package.

Exports the router for activity logging, viewing and media upload endpoints.
"""

from .activities_router import router

__all__ = ["router"]
