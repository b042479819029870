"""
Search domain models and schemas.

Hits, per-call options and response envelopes for lexical, vector and
hybrid retrieval.

Dependencies: pydantic
System role: Retrieval API contracts
"""

from pydantic import BaseModel, Field

from resume_knowledge.models.common import SourceType
from resume_knowledge.models.metadata import ChunkMetadata


class SearchHit(BaseModel):
    """A single retrieved chunk."""

    chunk_id: str
    source_type: SourceType
    source_id: str
    text: str
    chunk_index: int
    score: float = Field(description="Fused relevance score in [0, 1]")
    vector_score: float = Field(default=0.0, description="Raw cosine similarity, 0 when absent")
    lexical_score: float = Field(default=0.0, description="Query token overlap ratio")
    metadata: ChunkMetadata | None = None


class SearchOptions(BaseModel):
    """Per-request retrieval options."""

    limit: int | None = Field(default=None, description="Maximum results (configured default if None)")
    source_types: list[SourceType] | None = Field(
        default=None,
        description="Restrict results to these source kinds",
    )
    min_score: float | None = Field(
        default=None,
        description="Minimum raw cosine similarity (configured default if None)",
    )


class VectorSearchOutcome(BaseModel):
    """Vector search results with the counters of what was filtered away."""

    results: list[SearchHit] = Field(default_factory=list)
    filtered_by_score: int = 0
    filtered_by_type: int = 0


class SearchResponse(BaseModel):
    """Hybrid search response envelope."""

    results: list[SearchHit] = Field(default_factory=list)
    total_results: int = 0
    filtered_by_score: int = 0
    filtered_by_type: int = 0
    query_embedding_ms: float = 0.0
    search_ms: float = 0.0
