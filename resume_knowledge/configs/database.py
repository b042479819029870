"""
Database configuration settings.

Manages the async SQLAlchemy connection URL for the knowledge store and
the content tables it joins against. SQLite (aiosqlite) is the local
default; production points the URL at Postgres (asyncpg).

Dependencies: pydantic, pydantic_settings
System role: Database connection configuration for ORM
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from resume_knowledge.configs.base import BaseSettings


class DatabaseSettings(BaseSettings):
    """Async database configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="DATABASE_",
        case_sensitive=False,
        extra="ignore",
    )

    url: str = Field(
        default="sqlite+aiosqlite:///./resume_knowledge.db",
        description="Async SQLAlchemy URL (sqlite+aiosqlite or postgresql+asyncpg)",
    )
    echo_sql: bool = Field(default=False, description="Echo SQL statements to logs")

    pool_size: int = Field(default=10, description="Connection pool size")
    max_overflow: int = Field(default=20, description="Maximum overflow connections")
    pool_timeout: int = Field(default=30, description="Connection pool timeout in seconds")

    @property
    def is_sqlite(self) -> bool:
        """SQLite engines reject pool sizing arguments."""
        return self.url.startswith("sqlite")
