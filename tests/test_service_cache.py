"""
Test suite for the dependency injection container.

Verifies lazy construction, instance reuse and settings wiring of
ServiceCache and the FastAPI dependency functions.
"""

from unittest.mock import MagicMock, patch

import pytest
from langchain_openai import OpenAIEmbeddings

from conftest import HashingEmbeddings
from resume_knowledge.api.deps import (
    ServiceCache,
    get_chat_context_service,
    get_indexing_service,
    get_search_service,
    get_service_cache,
)
from resume_knowledge.application.services import (
    ChatContextService,
    IndexingService,
    KnowledgeSearchService,
)
from resume_knowledge.boundary.vdb import ScanNearestNeighborSearch
from resume_knowledge.configs import Settings
from resume_knowledge.configs.embedding import EmbeddingSettings
from resume_knowledge.configs.search import SearchSettings
from resume_knowledge.configs.vector_store import VectorStoreSettings


@pytest.fixture
def cache(session_factory) -> ServiceCache:
    settings = Settings(search=SearchSettings(vector_weight=0.6, lexical_weight=0.4, min_score=0.2))
    return ServiceCache(settings=settings, session_factory=session_factory, embeddings=HashingEmbeddings())


@pytest.fixture
def request_for(cache: ServiceCache) -> MagicMock:
    request = MagicMock()
    request.app.state.service_cache = cache
    return request


class TestServiceCache:
    def test_components_are_built_once(self, cache: ServiceCache) -> None:
        assert cache.ranker is cache.ranker
        assert cache.store is cache.store
        assert cache.generator is cache.generator

    def test_ranker_uses_configured_weights(self, cache: ServiceCache) -> None:
        ranker = cache.ranker

        assert ranker.vector_weight == 0.6
        assert ranker.lexical_weight == 0.4
        assert ranker.min_score == 0.2

    def test_generator_uses_configured_model(self, cache: ServiceCache) -> None:
        assert cache.generator.model == cache.settings.embedding.model
        assert cache.generator.dimension == cache.settings.embedding.dimension

    @pytest.mark.asyncio
    async def test_shutdown_drops_cached_components(self, cache: ServiceCache) -> None:
        first = cache.ranker

        await cache.shutdown()

        assert cache.ranker is not first

    def test_embeddings_are_built_from_injected_settings(self, session_factory, monkeypatch) -> None:
        # Arrange
        monkeypatch.setenv("EMBEDDING_PROVIDER", "nonsense")
        settings = Settings(embedding=EmbeddingSettings(provider="openai", api_key="sk-test"))
        cache = ServiceCache(settings=settings, session_factory=session_factory)

        # Act
        client = cache.embeddings

        # Assert
        assert isinstance(client, OpenAIEmbeddings)
        assert client.model == cache.generator.model
        assert client.dimensions == cache.generator.dimension

    def test_generator_does_not_read_process_settings(self, cache: ServiceCache) -> None:
        with patch(
            "resume_knowledge.core.embedding_generator.get_settings",
            side_effect=AssertionError("process settings read"),
        ):
            generator = cache.generator

        assert generator.model == cache.settings.embedding.model

    def test_scan_backend_uses_injected_batch_size(self, session_factory) -> None:
        settings = Settings(
            vector_store=VectorStoreSettings(store_type="scan"),
            search=SearchSettings(scan_batch_size=32),
        )
        cache = ServiceCache(settings=settings, session_factory=session_factory, embeddings=HashingEmbeddings())

        backend = cache.ranker._vector._neighbors

        assert isinstance(backend, ScanNearestNeighborSearch)
        assert backend._batch_size == 32


class TestDependencies:
    def test_get_service_cache_reads_app_state(self, request_for: MagicMock, cache: ServiceCache) -> None:
        assert get_service_cache(request_for) is cache

    def test_service_factories(self, request_for: MagicMock) -> None:
        assert isinstance(get_search_service(request_for), KnowledgeSearchService)
        assert isinstance(get_indexing_service(request_for), IndexingService)
        assert isinstance(get_chat_context_service(request_for), ChatContextService)
