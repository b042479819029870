"""
Dependency injection container.

Lazily builds the knowledge services once per application and exposes
them as FastAPI dependencies. The cache lives on `app.state`, so each
application (and each test client) gets its own instances.

Dependencies: fastapi, resume_knowledge.configs, resume_knowledge.application, resume_knowledge.boundary
System role: DI container for service injection
"""

import logging

from fastapi import Request
from langchain_core.embeddings import Embeddings
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from resume_knowledge.application.services import (
    ChatContextService,
    IndexingService,
    KnowledgeSearchService,
)
from resume_knowledge.boundary.db import create_tables, get_async_engine, get_async_session_factory
from resume_knowledge.boundary.vdb import get_embeddings, get_nearest_neighbor_search
from resume_knowledge.configs import Settings, get_settings
from resume_knowledge.core import (
    EmbeddingGenerator,
    HybridRanker,
    KnowledgeStore,
    LexicalSearch,
    MetadataEnricher,
    SourceLockRegistry,
    VectorSearch,
)

logger = logging.getLogger(__name__)


class ServiceCache:
    """
    Container for cached service instances.

    Args:
        settings: Application settings (configured singleton if None)
        session_factory: Prebuilt session factory; an engine is created from
            settings when omitted
        embeddings: Prebuilt embeddings client; built from settings when omitted
    """

    def __init__(
        self,
        settings: Settings | None = None,
        session_factory: async_sessionmaker[AsyncSession] | None = None,
        embeddings: Embeddings | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self._engine: AsyncEngine | None = None
        self._session_factory = session_factory
        self._embeddings = embeddings
        self._locks = SourceLockRegistry()
        self._generator: EmbeddingGenerator | None = None
        self._store: KnowledgeStore | None = None
        self._enricher: MetadataEnricher | None = None
        self._ranker: HybridRanker | None = None

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        """Get cached session factory."""
        if self._session_factory is None:
            self._engine = get_async_engine(self.settings.database.url, self.settings.database)
            self._session_factory = get_async_session_factory(self._engine)
        return self._session_factory

    @property
    def embeddings(self) -> Embeddings:
        """Get cached embeddings client."""
        if self._embeddings is None:
            self._embeddings = get_embeddings(self.settings.embedding)
        return self._embeddings

    @property
    def generator(self) -> EmbeddingGenerator:
        """Get cached embedding generator."""
        if self._generator is None:
            config = self.settings.embedding
            self._generator = EmbeddingGenerator(
                self.embeddings,
                model=config.model,
                dimension=config.dimension,
                chunk_size=config.chunk_size,
                chunk_overlap=config.chunk_overlap,
                normalize_whitespace=config.normalize_whitespace,
            )
        return self._generator

    @property
    def store(self) -> KnowledgeStore:
        """Get cached knowledge store."""
        if self._store is None:
            self._store = KnowledgeStore(self.session_factory, self._locks)
        return self._store

    @property
    def enricher(self) -> MetadataEnricher:
        """Get cached metadata enricher."""
        if self._enricher is None:
            self._enricher = MetadataEnricher(self.session_factory)
        return self._enricher

    @property
    def ranker(self) -> HybridRanker:
        """Get cached hybrid ranker."""
        if self._ranker is None:
            search = self.settings.search
            self._ranker = HybridRanker(
                self.generator,
                LexicalSearch(self.session_factory, overfetch=search.lexical_overfetch),
                VectorSearch(
                    self.session_factory,
                    get_nearest_neighbor_search(self.session_factory, settings=self.settings),
                    supported_dimensions=search.supported_dimensions,
                    candidate_floor=search.candidate_floor,
                ),
                self.enricher,
                vector_weight=search.vector_weight,
                lexical_weight=search.lexical_weight,
                min_score=search.min_score,
                candidate_floor=search.candidate_floor,
                timeout_seconds=search.timeout_seconds,
            )
        return self._ranker

    async def startup(self) -> None:
        """Create tables on an owned SQLite database."""
        _ = self.session_factory
        if self._engine is not None and self.settings.database.is_sqlite:
            await create_tables(self._engine)
            logger.info(f"{__name__}:startup - SQLite schema ensured")

    async def shutdown(self) -> None:
        """Dispose the owned engine and drop cached instances."""
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None
        self._generator = None
        self._store = None
        self._enricher = None
        self._ranker = None


def get_service_cache(request: Request) -> ServiceCache:
    """Get the application's service cache."""
    return request.app.state.service_cache


def get_settings_dependency(request: Request) -> Settings:
    """Get settings of the running application."""
    return get_service_cache(request).settings


def get_search_service(request: Request) -> KnowledgeSearchService:
    """
    Get knowledge search service instance.

    Returns:
        KnowledgeSearchService: Search service backed by the cached ranker
    """
    cache = get_service_cache(request)
    return KnowledgeSearchService(cache.ranker, cache.settings.search)


def get_indexing_service(request: Request) -> IndexingService:
    """
    Get indexing service instance.

    Returns:
        IndexingService: Indexing service sharing the cached store and locks
    """
    cache = get_service_cache(request)
    return IndexingService(cache.session_factory, cache.generator, cache.store)


def get_chat_context_service(request: Request) -> ChatContextService:
    """Get chat context service instance."""
    return ChatContextService(get_service_cache(request).session_factory)
