"""
ORM foundation for the résumé content and knowledge tables.

Declares the shared metadata registry plus the two column mixins every
table uses: an opaque string primary key and UTC created/updated stamps.

Dependencies: sqlalchemy
System role: Foundation for all database models
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Metadata registry; `create_tables` builds whatever subclasses it."""


def new_id() -> str:
    """Fresh opaque id for a row created without one."""
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class IdMixin:
    """
    String primary key.

    Generated ids are UUID4 strings, but nothing outside this module
    relies on that shape: fixtures and upstream callers pass their own.
    """

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)


class TimestampMixin:
    """
    created_at / updated_at columns, both timezone aware.

    updated_at moves on every ORM-level UPDATE of the row.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False
    )
