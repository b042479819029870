"""
Engine and session factory construction.

Retrieval components receive an `async_sessionmaker` rather than a
session, because the lexical and vector searches run concurrently and
each needs its own connection.

Dependencies: sqlalchemy, resume_knowledge.configs
System role: Database connection lifecycle management
"""

from typing import Any

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from resume_knowledge.boundary.db.base import Base
from resume_knowledge.configs import get_settings
from resume_knowledge.configs.database import DatabaseSettings


def _engine_options(config: DatabaseSettings, url: str) -> dict[str, Any]:
    options: dict[str, Any] = {"echo": config.echo_sql}
    if url.startswith("sqlite"):
        # aiosqlite rejects QueuePool sizing arguments
        return options
    options.update(
        pool_size=config.pool_size,
        max_overflow=config.max_overflow,
        pool_timeout=config.pool_timeout,
        pool_pre_ping=True,
    )
    return options


def get_async_engine(url: str | None = None, config: DatabaseSettings | None = None) -> AsyncEngine:
    """
    Build an async engine for `url`, or for the configured URL when omitted.

    Echo and pool options come from `config` (the configured database
    section if None).

    Example:
        engine = get_async_engine("sqlite+aiosqlite:///./local.db")
    """
    config = config or get_settings().database
    database_url = url or config.url
    return create_async_engine(database_url, **_engine_options(config, database_url))


def get_async_session_factory(engine: AsyncEngine | None = None) -> async_sessionmaker[AsyncSession]:
    """
    Session factory bound to `engine`.

    Sessions neither autoflush nor expire on commit; the knowledge store
    commits explicitly and hits are built from rows after the commit.
    """
    return async_sessionmaker(
        bind=engine if engine is not None else get_async_engine(),
        autoflush=False,
        expire_on_commit=False,
    )


async def create_tables(engine: AsyncEngine) -> None:
    """Create every registered table that does not exist yet."""
    import resume_knowledge.boundary.db.models  # noqa: F401  (registers tables)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
