"""
Hybrid fusion ranker.

Embeds the query, runs lexical and vector search concurrently, fuses
their scores onto [0, 1] and re-ranks:

    fused = vector_weight * (clamp(cosine, -1, 1) + 1) / 2
          + lexical_weight * |query tokens ∩ chunk tokens| / |query tokens|

A chunk found by either search appears once. If either sub-search fails
or the search times out, the other is cancelled and RetrievalError is
raised; partial results are never returned.

Dependencies: asyncio, resume_knowledge.core
System role: Query-time orchestration of hybrid retrieval
"""

import asyncio
import logging
import time
from typing import Sequence

from resume_knowledge.core.embedding_generator import EmbeddingGenerator
from resume_knowledge.core.exceptions import RetrievalError
from resume_knowledge.core.lexical_search import LexicalSearch
from resume_knowledge.core.metadata_enricher import MetadataEnricher
from resume_knowledge.core.scoring import fuse_scores, lexical_overlap
from resume_knowledge.core.vector_search import VectorSearch
from resume_knowledge.models.common import SourceType
from resume_knowledge.models.search import SearchHit, SearchResponse, VectorSearchOutcome
from resume_knowledge.observability import correlation_scope, log_with_context

logger = logging.getLogger(__name__)


class HybridRanker:
    """Fused lexical + vector retrieval with enrichment."""

    def __init__(
        self,
        generator: EmbeddingGenerator,
        lexical: LexicalSearch,
        vector: VectorSearch,
        enricher: MetadataEnricher,
        vector_weight: float = 0.7,
        lexical_weight: float = 0.3,
        min_score: float = 0.1,
        candidate_floor: int = 25,
        timeout_seconds: float | None = None,
    ) -> None:
        """
        Initialize the ranker.

        Args:
            generator: Embeds the query
            lexical: Keyword search
            vector: Semantic search
            enricher: Attaches metadata to the final hits
            vector_weight: Weight of the normalized cosine
            lexical_weight: Weight of the token overlap ratio
            min_score: Default minimum raw cosine for vector candidates
            candidate_floor: Minimum candidate pool per sub-search
            timeout_seconds: Limit on the concurrent sub-searches (None disables)
        """
        self._generator = generator
        self._lexical = lexical
        self._vector = vector
        self._enricher = enricher
        self.vector_weight = vector_weight
        self.lexical_weight = lexical_weight
        self.min_score = min_score
        self._candidate_floor = candidate_floor
        self._timeout = timeout_seconds

    async def search(
        self,
        resume_id: str,
        query: str,
        limit: int,
        source_types: Sequence[SourceType] | None = None,
        min_score: float | None = None,
        vector_weight: float | None = None,
        lexical_weight: float | None = None,
    ) -> SearchResponse:
        """
        Hybrid search over one résumé.

        Args:
            resume_id: Résumé to search
            query: Free-text query
            limit: Maximum results; <= 0 returns an empty response
            source_types: Restrict results to these kinds
            min_score: Override of the minimum raw cosine
            vector_weight: Override of the vector weight
            lexical_weight: Override of the lexical weight

        Returns:
            SearchResponse: Ranked, enriched hits with timing and counters

        Raises:
            EmbeddingProviderError: Query embedding failed
            RetrievalError: A sub-search failed or timed out
        """
        if not query.strip() or limit <= 0:
            return SearchResponse()

        with correlation_scope():
            return await self._search(
                resume_id,
                query,
                limit,
                source_types,
                self.min_score if min_score is None else min_score,
                self.vector_weight if vector_weight is None else vector_weight,
                self.lexical_weight if lexical_weight is None else lexical_weight,
            )

    async def _search(
        self,
        resume_id: str,
        query: str,
        limit: int,
        source_types: Sequence[SourceType] | None,
        min_score: float,
        vector_weight: float,
        lexical_weight: float,
    ) -> SearchResponse:
        embed_start = time.perf_counter()
        query_embedding = await self._generator.embed_query(query)
        query_embedding_ms = (time.perf_counter() - embed_start) * 1000
        if query_embedding is None:
            return SearchResponse(query_embedding_ms=query_embedding_ms)

        candidate_limit = max(limit, self._candidate_floor)
        search_start = time.perf_counter()
        lexical_hits, vector_outcome = await self._run_sub_searches(
            resume_id,
            query,
            query_embedding.embedding,
            query_embedding.model,
            candidate_limit,
            source_types,
            min_score,
        )

        fused = self.fuse(
            query,
            vector_outcome.results,
            lexical_hits,
            vector_weight,
            lexical_weight,
        )[:limit]
        results = await self._enricher.enrich_many(fused)
        search_ms = (time.perf_counter() - search_start) * 1000

        log_with_context(
            logger,
            logging.INFO,
            "Hybrid search complete",
            resume_id=resume_id,
            results=len(results),
            lexical_candidates=len(lexical_hits),
            vector_candidates=len(vector_outcome.results),
            filtered_by_score=vector_outcome.filtered_by_score,
            filtered_by_type=vector_outcome.filtered_by_type,
            query_embedding_ms=round(query_embedding_ms, 2),
            search_ms=round(search_ms, 2),
        )
        return SearchResponse(
            results=results,
            total_results=len(results),
            filtered_by_score=vector_outcome.filtered_by_score,
            filtered_by_type=vector_outcome.filtered_by_type,
            query_embedding_ms=query_embedding_ms,
            search_ms=search_ms,
        )

    async def _run_sub_searches(
        self,
        resume_id: str,
        query: str,
        query_vector: list[float],
        model: str,
        candidate_limit: int,
        source_types: Sequence[SourceType] | None,
        min_score: float,
    ) -> tuple[list[SearchHit], VectorSearchOutcome]:
        lexical_task = asyncio.create_task(
            self._lexical.search(resume_id, query, candidate_limit, source_types)
        )
        vector_task = asyncio.create_task(
            self._vector.search(
                resume_id,
                query_vector,
                candidate_limit,
                model,
                source_types=source_types,
                min_score=min_score,
            )
        )
        tasks = (lexical_task, vector_task)

        try:
            lexical_hits, vector_outcome = await asyncio.wait_for(
                asyncio.gather(*tasks),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError as e:
            await self._cancel(tasks)
            logger.warning(f"{__name__}:search - Timed out after {self._timeout}s for resume {resume_id}")
            raise RetrievalError(
                "Search timed out",
                resume_id=resume_id,
                details={"timeout_seconds": self._timeout},
            ) from e
        except asyncio.CancelledError:
            await self._cancel(tasks)
            raise
        except Exception as e:
            await self._cancel(tasks)
            logger.error(f"{__name__}:search - Sub-search failed: {type(e).__name__}: {e}")
            raise RetrievalError(
                f"Sub-search failed: {e}",
                resume_id=resume_id,
                details={"error_type": type(e).__name__},
            ) from e

        return lexical_hits, vector_outcome

    @staticmethod
    async def _cancel(tasks: Sequence[asyncio.Task]) -> None:
        for task in tasks:
            if not task.done():
                task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    @staticmethod
    def fuse(
        query: str,
        vector_hits: Sequence[SearchHit],
        lexical_hits: Sequence[SearchHit],
        vector_weight: float,
        lexical_weight: float,
    ) -> list[SearchHit]:
        """
        Merge both candidate lists into one ranked list.

        A chunk returned by both searches is scored once with both terms.
        A chunk missing from one list gets 0 for that list's term; the
        lexical overlap is only computed for chunks the lexical search
        actually matched.

        Returns:
            Hits ordered by fused score descending, ties by chunk id
        """
        similarities: dict[str, float | None] = {}
        hits: dict[str, SearchHit] = {}
        lexical_ids = {hit.chunk_id for hit in lexical_hits}
        for hit in vector_hits:
            similarities[hit.chunk_id] = hit.vector_score
            hits[hit.chunk_id] = hit
        for hit in lexical_hits:
            if hit.chunk_id not in hits:
                similarities[hit.chunk_id] = None
                hits[hit.chunk_id] = hit

        fused = []
        for chunk_id, hit in hits.items():
            similarity = similarities[chunk_id]
            overlap = lexical_overlap(query, hit.text) if chunk_id in lexical_ids else 0.0
            score = fuse_scores(similarity, overlap, vector_weight, lexical_weight)
            fused.append(
                hit.model_copy(
                    update={
                        "score": min(1.0, max(0.0, score)),
                        "vector_score": similarity or 0.0,
                        "lexical_score": overlap,
                    }
                )
            )

        fused.sort(key=lambda h: (-h.score, h.chunk_id))
        return fused
