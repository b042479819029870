"""
Full-scan nearest-neighbour backend.

Scores every vector in the scope with numpy, a batch at a time, yielding
to the event loop between batches so large scopes do not stall other
requests.

Dependencies: numpy
System role: Portable nearest-neighbour fallback
"""

import asyncio

import numpy as np
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from resume_knowledge.boundary.vdb.nearest_neighbor import NearestNeighborSearch, l2_normalize
from resume_knowledge.boundary.vdb.vector_schemas import NeighborCandidate


class ScanNearestNeighborSearch(NearestNeighborSearch):
    """Exact cosine over all vectors of the scope."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        batch_size: int = 512,
    ) -> None:
        super().__init__(session_factory)
        self._batch_size = max(1, batch_size)

    async def _rank(
        self,
        chunk_ids: list[str],
        matrix: np.ndarray,
        query_vector: np.ndarray,
        k: int,
    ) -> list[NeighborCandidate]:
        query_unit = l2_normalize(query_vector.reshape(1, -1))[0]
        scores = np.empty(len(chunk_ids), dtype=np.float32)

        for start in range(0, len(chunk_ids), self._batch_size):
            batch = l2_normalize(matrix[start:start + self._batch_size])
            scores[start:start + len(batch)] = batch @ query_unit
            await asyncio.sleep(0)

        # argpartition finds the top k without a full sort
        top = np.argpartition(-scores, k - 1)[:k] if k < len(scores) else np.arange(len(scores))
        return [NeighborCandidate(chunk_id=chunk_ids[i], score=float(scores[i])) for i in top]
