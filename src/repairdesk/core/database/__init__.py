"""Database layer - pool lifecycle, base models, and driver error helpers."""

from repairdesk.core.database.base import Base, StringIdMixin, TimestampMixin, new_id
from repairdesk.core.database.session import Database, get_database, get_db


__all__ = [
    "Base",
    "Database",
    "StringIdMixin",
    "TimestampMixin",
    "get_database",
    "get_db",
    "new_id",
]
