"""
Core retrieval and citation logic.

Exports:
  - EmbeddingGenerator: Chunk + embed text
  - KnowledgeStore: Chunk replacement per source
  - LexicalSearch, VectorSearch, HybridRanker: Retrieval
  - MetadataEnricher, DanglingChunkQueue: Post-ranking enrichment
  - build_aliases, resolve_citations, validate_citations, CitationMonitor: Citations
"""

from resume_knowledge.core.embedding_generator import EmbeddingGenerator
from resume_knowledge.core.knowledge_store import KnowledgeStore
from resume_knowledge.core.lexical_search import LexicalSearch
from resume_knowledge.core.vector_search import VectorSearch
from resume_knowledge.core.hybrid_ranker import HybridRanker
from resume_knowledge.core.metadata_enricher import DanglingChunkQueue, MetadataEnricher
from resume_knowledge.core.id_mapper import annotate_resume_context, build_aliases
from resume_knowledge.core.citation_grammar import format_citation_marker
from resume_knowledge.core.citation_resolver import (
    CitationMonitor,
    resolve_citations,
    validate_citations,
)
from resume_knowledge.core.source_locks import SourceLockRegistry

__all__ = [
    "EmbeddingGenerator",
    "KnowledgeStore",
    "LexicalSearch",
    "VectorSearch",
    "HybridRanker",
    "MetadataEnricher",
    "DanglingChunkQueue",
    "annotate_resume_context",
    "build_aliases",
    "format_citation_marker",
    "CitationMonitor",
    "resolve_citations",
    "validate_citations",
    "SourceLockRegistry",
]
