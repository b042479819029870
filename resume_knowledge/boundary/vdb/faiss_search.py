"""
FAISS nearest-neighbour backend.

Builds an inner-product index over L2-normalized vectors for the query
scope, which makes inner product equal to cosine similarity. Index
construction and search are CPU-bound and run in a worker thread.

The index is rebuilt from the scope's stored vectors on every query and
nothing is kept between queries, so writes never leave a stale index
behind. Both backends therefore load the same rows; they differ in the
ranking kernel (FAISS flat inner product versus batched numpy dot
products that yield to the event loop). Scopes are a single résumé's
chunks for one model.

Dependencies: faiss, numpy
System role: Native nearest-neighbour index
"""

import asyncio

import faiss
import numpy as np

from resume_knowledge.boundary.vdb.nearest_neighbor import NearestNeighborSearch, l2_normalize
from resume_knowledge.boundary.vdb.vector_schemas import NeighborCandidate


class FaissNearestNeighborSearch(NearestNeighborSearch):
    """Flat inner-product FAISS index built per query scope."""

    async def _rank(
        self,
        chunk_ids: list[str],
        matrix: np.ndarray,
        query_vector: np.ndarray,
        k: int,
    ) -> list[NeighborCandidate]:
        scores, indices = await asyncio.to_thread(self._search_index, matrix, query_vector, k)
        return [
            NeighborCandidate(chunk_id=chunk_ids[int(i)], score=float(s))
            for s, i in zip(scores[0], indices[0])
            if i >= 0
        ]

    @staticmethod
    def _search_index(
        matrix: np.ndarray,
        query_vector: np.ndarray,
        k: int,
    ) -> tuple[np.ndarray, np.ndarray]:
        vectors = np.ascontiguousarray(l2_normalize(matrix), dtype=np.float32)
        query = np.ascontiguousarray(l2_normalize(query_vector.reshape(1, -1)), dtype=np.float32)

        index = faiss.IndexFlatIP(vectors.shape[1])
        index.add(vectors)
        return index.search(query, k)
