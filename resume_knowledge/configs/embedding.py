"""
Embedding configuration settings.

Provider, model and chunking parameters for the embedding generator.

Dependencies: pydantic, pydantic_settings
System role: Embedding provider and chunking configuration
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from resume_knowledge.configs.base import BaseSettings


class EmbeddingSettings(BaseSettings):
    """Embedding provider and chunking configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="EMBEDDING_",
        case_sensitive=False,
        extra="ignore",
    )

    provider: str = Field(
        default="openai",
        description="Embedding provider: 'openai' or 'google'",
    )
    model: str = Field(
        default="text-embedding-3-small",
        description="Embedding model identifier",
    )
    dimension: int = Field(
        default=1536,
        description="Output dimensionality requested from the provider",
    )
    api_key: str | None = Field(
        default=None,
        description="Provider API key (falls back to the provider's own env var)",
    )

    chunk_size: int = Field(
        default=2400,
        description="Approximate chunk size in characters (floor 256)",
    )
    chunk_overlap: int = Field(
        default=300,
        description="Overlap between consecutive chunks in characters",
    )
    normalize_whitespace: bool = Field(
        default=True,
        description="Collapse runs of whitespace inside paragraphs before chunking",
    )
