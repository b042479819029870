"""
Vector store configuration settings.

Selects the nearest-neighbour implementation used by vector search.

Dependencies: pydantic, pydantic_settings
System role: Vector search backend configuration
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from resume_knowledge.configs.base import BaseSettings


class VectorStoreSettings(BaseSettings):
    """Nearest-neighbour backend selection."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="VECTOR_STORE_",
        case_sensitive=False,
        extra="ignore",
    )

    store_type: str = Field(
        default="faiss",
        description="'faiss' for the native inner-product index, 'scan' for a batched full scan",
    )
