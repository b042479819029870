"""
Database boundary layer: ORM models, CRUD operations, and connection management.

Exports:
  - Base, IdMixin, TimestampMixin: Model building blocks
  - get_async_engine(), get_async_session_factory(), create_tables(): Connection management

Dependencies: sqlalchemy, resume_knowledge.configs
System role: Persistent storage for résumé content and the knowledge index
"""

from resume_knowledge.boundary.db.base import Base, IdMixin, TimestampMixin
from resume_knowledge.boundary.db.connection import (
    create_tables,
    get_async_engine,
    get_async_session_factory,
)

__all__ = [
    "Base",
    "IdMixin",
    "TimestampMixin",
    "create_tables",
    "get_async_engine",
    "get_async_session_factory",
]
