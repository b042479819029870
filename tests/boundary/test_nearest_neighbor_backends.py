"""
Test suite for the nearest-neighbour backends.

FAISS and the full scan must agree on candidate ranking for the same
scope, and both must respect résumé, model and dimension scoping.
"""

import random

import numpy as np
import pytest

from conftest import TEST_DIM, TEST_MODEL, SeededResume, unit_embedding
from resume_knowledge.boundary.vdb import (
    FaissNearestNeighborSearch,
    ScanNearestNeighborSearch,
    get_nearest_neighbor_search,
)
from resume_knowledge.boundary.vdb.nearest_neighbor import l2_normalize
from resume_knowledge.boundary.vdb.vector_schemas import NeighborQuery
from resume_knowledge.configs import Settings
from resume_knowledge.configs.search import SearchSettings
from resume_knowledge.configs.vector_store import VectorStoreSettings
from resume_knowledge.core.knowledge_store import KnowledgeStore

SOURCES = [
    ("bullet_point", "bullet-1"),
    ("bullet_point", "bullet-2"),
    ("bullet_point", "bullet-3"),
    ("project", "project-1"),
    ("project", "project-2"),
    ("branch", "branch-1"),
    ("page", "page-1"),
]


@pytest.fixture
async def random_index(store: KnowledgeStore, seeded: SeededResume) -> list[float]:
    """Store random vectors for every seeded source and return a query vector."""
    rng = random.Random(7)
    for source_type, source_id in SOURCES:
        components = {rng.randrange(16): rng.uniform(0.1, 1.0) for _ in range(6)}
        await store.replace_chunks_for_source(
            seeded.resume_id, source_type, source_id, [unit_embedding(0, components)]
        )
    query = [0.0] * TEST_DIM
    for position in range(16):
        query[position] = rng.uniform(-1.0, 1.0)
    return query


def make_query(vector: list[float], k: int, resume_id: str = "resume-1") -> NeighborQuery:
    return NeighborQuery(resume_id=resume_id, model=TEST_MODEL, dim=len(vector), vector=vector, k=k)


class TestBackendsAgree:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("k", [1, 3, 25])
    async def test_faiss_and_scan_rank_identically(
        self, session_factory, random_index: list[float], k: int
    ) -> None:
        # Arrange
        faiss_backend = FaissNearestNeighborSearch(session_factory)
        scan_backend = ScanNearestNeighborSearch(session_factory, batch_size=3)

        # Act
        from_faiss = await faiss_backend.search(make_query(random_index, k))
        from_scan = await scan_backend.search(make_query(random_index, k))

        # Assert
        assert [c.chunk_id for c in from_faiss] == [c.chunk_id for c in from_scan]
        assert len(from_scan) == min(k, len(SOURCES))
        for a, b in zip(from_faiss, from_scan):
            assert a.score == pytest.approx(b.score, abs=1e-5)

    @pytest.mark.asyncio
    async def test_faiss_sees_a_replaced_source_on_the_next_query(
        self, session_factory, store: KnowledgeStore, seeded: SeededResume, random_index: list[float]
    ) -> None:
        # Arrange
        backend = FaissNearestNeighborSearch(session_factory)
        before = await backend.search(make_query(random_index, 25))
        components = {position: value for position, value in enumerate(random_index) if value}
        await store.replace_chunks_for_source(
            seeded.resume_id, "bullet_point", "bullet-1", [unit_embedding(0, components)]
        )

        # Act
        after = await backend.search(make_query(random_index, 25))

        # Assert
        assert after[0].chunk_id not in {c.chunk_id for c in before}
        assert after[0].score == pytest.approx(1.0, abs=1e-5)
        assert len(after) == len(before)

    @pytest.mark.asyncio
    async def test_candidates_are_sorted_by_score(self, session_factory, random_index: list[float]) -> None:
        candidates = await ScanNearestNeighborSearch(session_factory).search(make_query(random_index, 25))

        scores = [c.score for c in candidates]
        assert scores == sorted(scores, reverse=True)


class TestScoping:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("backend_cls", [FaissNearestNeighborSearch, ScanNearestNeighborSearch])
    async def test_empty_scope_returns_no_candidates(
        self, session_factory, random_index: list[float], backend_cls
    ) -> None:
        backend = backend_cls(session_factory)

        assert await backend.search(make_query(random_index, 5, resume_id="resume-2")) == []
        assert await backend.search(make_query([1.0] * 3072, 5)) == []


class TestFactory:
    def test_factory_selects_backend_by_name(self, session_factory) -> None:
        assert isinstance(get_nearest_neighbor_search(session_factory, "faiss"), FaissNearestNeighborSearch)
        assert isinstance(get_nearest_neighbor_search(session_factory, "SCAN"), ScanNearestNeighborSearch)

    def test_factory_rejects_unknown_backend(self, session_factory) -> None:
        with pytest.raises(ValueError, match="VECTOR_STORE_STORE_TYPE"):
            get_nearest_neighbor_search(session_factory, "annoy")


def test_l2_normalize_keeps_zero_rows() -> None:
    matrix = np.array([[3.0, 4.0], [0.0, 0.0]], dtype=np.float32)

    normalized = l2_normalize(matrix)

    assert normalized[0] == pytest.approx([0.6, 0.8])
    assert normalized[1] == pytest.approx([0.0, 0.0])

    def test_factory_reads_the_given_settings(self, session_factory) -> None:
        settings = Settings(
            vector_store=VectorStoreSettings(store_type="scan"),
            search=SearchSettings(scan_batch_size=64),
        )

        backend = get_nearest_neighbor_search(session_factory, settings=settings)

        assert isinstance(backend, ScanNearestNeighborSearch)
        assert backend._batch_size == 64
