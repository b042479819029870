"""
Nearest-neighbour search interface.

Backends return candidate chunk ids for a (résumé, model, dim) scope.
Their scores are only used for candidate selection; vector search
recomputes exact cosine similarity on the candidates.

Dependencies: numpy, sqlalchemy, resume_knowledge.boundary.db
System role: Abstraction over native index and full-scan candidate retrieval
"""

import logging
from abc import ABC, abstractmethod

import numpy as np
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from resume_knowledge.boundary.db.CRUD.vector_crud import vector_crud
from resume_knowledge.boundary.vdb.vector_schemas import NeighborCandidate, NeighborQuery

logger = logging.getLogger(__name__)


def l2_normalize(matrix: np.ndarray) -> np.ndarray:
    """Row-normalize a 2-D array; zero rows stay zero."""
    norms = np.linalg.norm(matrix, axis=1, keepdims=True)
    norms[norms == 0.0] = 1.0
    return matrix / norms


class NearestNeighborSearch(ABC):
    """
    Base class for nearest-neighbour backends.

    Subclasses implement `_rank` over the scope's vectors; loading the
    scope from storage is shared.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def search(self, query: NeighborQuery) -> list[NeighborCandidate]:
        """
        Top-k candidates for a query within its scope.

        Returns:
            Candidates ordered by descending score, ties by chunk id
        """
        async with self._session_factory() as session:
            rows = await vector_crud.get_scope(session, query.resume_id, query.model, query.dim)

        if not rows:
            return []

        chunk_ids = [chunk_id for chunk_id, _ in rows]
        matrix = np.asarray([embedding for _, embedding in rows], dtype=np.float32)
        query_vector = np.asarray(query.vector, dtype=np.float32)

        candidates = await self._rank(chunk_ids, matrix, query_vector, min(query.k, len(chunk_ids)))
        candidates.sort(key=lambda c: (-c.score, c.chunk_id))
        logger.debug(
            f"{__name__}:search - {type(self).__name__} scanned={len(chunk_ids)} "
            f"returned={len(candidates)}"
        )
        return candidates

    @abstractmethod
    async def _rank(
        self,
        chunk_ids: list[str],
        matrix: np.ndarray,
        query_vector: np.ndarray,
        k: int,
    ) -> list[NeighborCandidate]:
        """Return up to k candidates from `matrix` (one row per chunk id)."""
