"""SQLAlchemy declarative base and common mixins for global tables.

Per-tenant tables are not declarative models: their names are only known
at runtime, so they are built as Core tables in
``repairdesk.core.tenancy.schema``.
"""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from repairdesk.core.constants import MAX_ID_LENGTH


def new_id() -> str:
    """Generate a string primary key."""
    return str(uuid4())


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class StringIdMixin:
    """Mixin that adds a VARCHAR(36) UUID primary key."""

    id: Mapped[str] = mapped_column(
        String(MAX_ID_LENGTH),
        primary_key=True,
        default=new_id,
    )


class TimestampMixin:
    """Mixin that adds createdAt and updatedAt timestamps."""

    created_at: Mapped[datetime] = mapped_column(
        "createdAt",
        DateTime,
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        "updatedAt",
        DateTime,
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
