"""
Database boundary layer: ORM models, CRUD operations, and connection management.

Exports:
  - Base, UUIDMixin, TimestampMixin, UTCDateTime: Model building blocks
  - get_async_engine(), get_async_session_factory(), get_async_db(): Async connection management
  - BaseCRUD: Generic CRUD base class

Models live in backend.boundary.db.models and CRUD singletons in
backend.boundary.db.CRUD.

Dependencies: sqlalchemy, backend.configs
System role: Database adapter providing persistent storage for users,
challenges, activities and everything built on them.
"""

from backend.boundary.db.base import Base, TimestampMixin, UTCDateTime, UUIDMixin
from backend.boundary.db.connection import (
    get_async_db,
    get_async_engine,
    get_async_session_factory,
)
from backend.boundary.db.CRUD.base_crud import BaseCRUD

__all__ = [
    # Base classes
    "Base",
    "TimestampMixin",
    "UTCDateTime",
    "UUIDMixin",
    # Connection
    "get_async_db",
    "get_async_engine",
    "get_async_session_factory",
    # CRUD
    "BaseCRUD",
]
