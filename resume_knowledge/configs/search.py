"""
Search configuration settings.

Fusion weights, similarity threshold and candidate pool sizing for the
hybrid ranker. The weights and min_score are empirical defaults and can be
overridden per ranker or per request.

Dependencies: pydantic, pydantic_settings
System role: Retrieval tuning configuration
"""

from pydantic import Field, model_validator
from pydantic_settings import SettingsConfigDict

from resume_knowledge.configs.base import BaseSettings


class SearchSettings(BaseSettings):
    """Hybrid retrieval configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="SEARCH_",
        case_sensitive=False,
        extra="ignore",
    )

    vector_weight: float = Field(default=0.7, ge=0.0, le=1.0, description="Weight of normalized vector score")
    lexical_weight: float = Field(default=0.3, ge=0.0, le=1.0, description="Weight of lexical overlap score")
    min_score: float = Field(
        default=0.1,
        ge=-1.0,
        le=1.0,
        description="Minimum raw cosine similarity for vector candidates",
    )
    default_limit: int = Field(default=10, description="Results returned when no limit is given")
    candidate_floor: int = Field(
        default=25,
        description="Minimum candidate pool per sub-search before fusion",
    )
    lexical_overfetch: int = Field(
        default=50,
        description="Lexical pool size when filtering source types in memory",
    )
    scan_batch_size: int = Field(
        default=512,
        description="Vectors scored per batch before yielding to the event loop",
    )
    timeout_seconds: float | None = Field(
        default=None,
        description="Overall search timeout; None disables it",
    )
    supported_dimensions: list[int] = Field(
        default=[1536, 3072],
        description="Embedding dimensionalities that have a vector index",
    )

    @model_validator(mode="after")
    def _weights_not_both_zero(self) -> "SearchSettings":
        if self.vector_weight == 0.0 and self.lexical_weight == 0.0:
            raise ValueError("vector_weight and lexical_weight cannot both be 0")
        return self
