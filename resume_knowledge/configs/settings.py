"""
Unified application settings.

Aggregates the per-concern settings into one object handed to the
service container. Each section reads its own env prefix (DATABASE_,
EMBEDDING_, SEARCH_, VECTOR_STORE_).

Dependencies: pydantic, all config modules
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from pydantic import Field

from resume_knowledge.configs.base import BaseSettings
from resume_knowledge.configs.database import DatabaseSettings
from resume_knowledge.configs.embedding import EmbeddingSettings
from resume_knowledge.configs.search import SearchSettings
from resume_knowledge.configs.vector_store import VectorStoreSettings


class Settings(BaseSettings):
    """Application settings, one section per concern."""

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    embedding: EmbeddingSettings = Field(default_factory=EmbeddingSettings)
    search: SearchSettings = Field(default_factory=SearchSettings)
    vector_store: VectorStoreSettings = Field(default_factory=VectorStoreSettings)


@lru_cache
def get_settings() -> Settings:
    """
    Process-wide settings, read from the environment once.

    Tests and embedding applications pass explicit Settings to
    ServiceCache instead of mutating this instance.
    """
    return Settings()
