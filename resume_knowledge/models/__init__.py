"""
Domain models package.

Pydantic schemas for chunks, search results, enrichment metadata and
citation aliases.
"""

from resume_knowledge.models.common import SourceType
from resume_knowledge.models.chunk import ChunkEmbedding, EmbeddingOptions
from resume_knowledge.models.metadata import (
    AudioSummaryMetadata,
    BranchMetadata,
    BulletPointMetadata,
    ChunkMetadata,
    PageMetadata,
    ProjectMetadata,
)
from resume_knowledge.models.search import (
    SearchHit,
    SearchOptions,
    SearchResponse,
    VectorSearchOutcome,
)
from resume_knowledge.models.citation import (
    AliasSource,
    BranchNode,
    BulletNode,
    CitationReference,
    CitationResolution,
    IdMap,
    PageNode,
    ProjectNode,
)

__all__ = [
    "SourceType",
    "ChunkEmbedding",
    "EmbeddingOptions",
    "AudioSummaryMetadata",
    "BranchMetadata",
    "BulletPointMetadata",
    "ChunkMetadata",
    "PageMetadata",
    "ProjectMetadata",
    "SearchHit",
    "SearchOptions",
    "SearchResponse",
    "VectorSearchOutcome",
    "AliasSource",
    "BranchNode",
    "BulletNode",
    "CitationReference",
    "CitationResolution",
    "IdMap",
    "PageNode",
    "ProjectNode",
]
