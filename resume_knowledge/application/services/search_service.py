"""
Knowledge search service.

Query entry point: applies configured defaults to per-request options
and delegates to the hybrid ranker.

Dependencies: resume_knowledge.core, resume_knowledge.configs
System role: Read-side orchestration of the knowledge index
"""

import logging

from resume_knowledge.configs.search import SearchSettings
from resume_knowledge.core.hybrid_ranker import HybridRanker
from resume_knowledge.models.search import SearchOptions, SearchResponse

logger = logging.getLogger(__name__)


class KnowledgeSearchService:
    """Hybrid search over a résumé's indexed content."""

    def __init__(self, ranker: HybridRanker, settings: SearchSettings) -> None:
        self._ranker = ranker
        self._settings = settings

    async def search(
        self,
        resume_id: str,
        query: str,
        options: SearchOptions | None = None,
    ) -> SearchResponse:
        """
        Search one résumé.

        Args:
            resume_id: Résumé to search
            query: Free-text query
            options: Limit, source types and minimum score

        Returns:
            SearchResponse: Ranked, enriched hits

        Raises:
            EmbeddingProviderError: Query embedding failed
            RetrievalError: Sub-search failed or timed out
        """
        options = options or SearchOptions()
        limit = options.limit if options.limit is not None else self._settings.default_limit
        return await self._ranker.search(
            resume_id,
            query,
            limit,
            source_types=options.source_types,
            min_score=options.min_score,
        )
