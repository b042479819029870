"""
Vector search with exact re-scoring and filter accounting.

Candidates come from a nearest-neighbour backend scoped to one résumé,
model and dimensionality. Each candidate is joined with its chunk,
filtered by source type, re-scored with exact cosine similarity and
filtered by the minimum score; both filters are counted.

Dependencies: numpy, sqlalchemy, resume_knowledge.boundary
System role: Semantic half of hybrid retrieval
"""

import logging
from typing import Sequence

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from resume_knowledge.boundary.db.CRUD import knowledge_chunk_crud, vector_crud
from resume_knowledge.boundary.vdb.nearest_neighbor import NearestNeighborSearch
from resume_knowledge.boundary.vdb.vector_schemas import NeighborQuery
from resume_knowledge.core.exceptions import UnsupportedDimensionError
from resume_knowledge.core.scoring import cosine_similarity
from resume_knowledge.models.common import SourceType
from resume_knowledge.models.search import SearchHit, VectorSearchOutcome
from resume_knowledge.observability import log_with_context

logger = logging.getLogger(__name__)


class VectorSearch:
    """Nearest-neighbour retrieval over stored chunk vectors."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        neighbors: NearestNeighborSearch,
        supported_dimensions: Sequence[int] = (1536, 3072),
        candidate_floor: int = 25,
    ) -> None:
        self._session_factory = session_factory
        self._neighbors = neighbors
        self._supported = set(supported_dimensions)
        self._candidate_floor = candidate_floor

    async def search(
        self,
        resume_id: str,
        query_vector: Sequence[float],
        limit: int,
        model: str,
        source_types: Sequence[SourceType] | None = None,
        min_score: float = 0.1,
    ) -> VectorSearchOutcome:
        """
        Rank a résumé's chunks by cosine similarity to a query vector.

        Args:
            resume_id: Résumé to search
            query_vector: Query embedding
            limit: Maximum results
            model: Embedding model the query vector came from
            source_types: Restrict results to these kinds
            min_score: Minimum raw cosine similarity

        Returns:
            VectorSearchOutcome: Results plus filter counters. An
            unsupported dimensionality yields an empty outcome.
        """
        dim = len(query_vector)
        if dim not in self._supported:
            warning = UnsupportedDimensionError(dim, sorted(self._supported))
            log_with_context(logger, logging.INFO, warning.message, **warning.details)
            return VectorSearchOutcome()
        if limit <= 0:
            return VectorSearchOutcome()

        candidates = await self._neighbors.search(
            NeighborQuery(
                resume_id=resume_id,
                model=model,
                dim=dim,
                vector=list(query_vector),
                k=max(limit, self._candidate_floor),
            )
        )
        if not candidates:
            return VectorSearchOutcome()

        candidate_ids = [c.chunk_id for c in candidates]
        async with self._session_factory() as session:
            chunks = {c.id: c for c in await knowledge_chunk_crud.get_by_ids(session, candidate_ids)}
            vectors = {
                v.chunk_id: v
                for v in await vector_crud.get_by_chunk_ids(session, candidate_ids, model)
            }

        wanted = {SourceType(t).value for t in source_types} if source_types else None
        filtered_by_type = 0
        filtered_by_score = 0
        hits: list[SearchHit] = []

        for chunk_id in candidate_ids:
            chunk = chunks.get(chunk_id)
            vector = vectors.get(chunk_id)
            # Deleted between candidate lookup and join
            if chunk is None or vector is None or vector.dim != dim:
                continue
            if wanted is not None and chunk.source_type not in wanted:
                filtered_by_type += 1
                continue

            similarity = cosine_similarity(query_vector, vector.embedding)
            if similarity < min_score:
                filtered_by_score += 1
                continue

            hits.append(
                SearchHit(
                    chunk_id=chunk.id,
                    source_type=chunk.source_type,
                    source_id=chunk.source_id,
                    text=chunk.text,
                    chunk_index=chunk.chunk_index,
                    score=similarity,
                    vector_score=similarity,
                )
            )

        hits.sort(key=lambda h: (-h.score, h.chunk_id))
        log_with_context(
            logger,
            logging.DEBUG,
            "Vector search complete",
            resume_id=resume_id,
            candidates=len(candidate_ids),
            returned=min(len(hits), limit),
            filtered_by_type=filtered_by_type,
            filtered_by_score=filtered_by_score,
        )
        return VectorSearchOutcome(
            results=hits[:limit],
            filtered_by_score=filtered_by_score,
            filtered_by_type=filtered_by_type,
        )
