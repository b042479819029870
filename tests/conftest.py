"""
Shared test fixtures and configuration for entire test suite.

Provides: file-backed SQLite async database, deterministic embeddings,
seeded résumé content, wired core components
Dependencies: pytest, pytest-asyncio, sqlalchemy, aiosqlite, langchain_core
System role: Test infrastructure and fixture management
"""

import hashlib
from dataclasses import dataclass

import pytest
from langchain_core.embeddings import Embeddings
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from resume_knowledge.boundary.db.base import Base
from resume_knowledge.boundary.db.models import (
    AudioTranscriptionModel,
    BranchModel,
    BulletPointModel,
    PageModel,
    ProjectModel,
    ResumeModel,
)
from resume_knowledge.boundary.vdb.scan_search import ScanNearestNeighborSearch
from resume_knowledge.core.embedding_generator import EmbeddingGenerator
from resume_knowledge.core.hybrid_ranker import HybridRanker
from resume_knowledge.core.knowledge_store import KnowledgeStore
from resume_knowledge.core.lexical_search import LexicalSearch
from resume_knowledge.core.metadata_enricher import MetadataEnricher
from resume_knowledge.core.scoring import tokenize
from resume_knowledge.core.vector_search import VectorSearch
from resume_knowledge.models.chunk import ChunkEmbedding

TEST_MODEL = "text-embedding-3-small"
TEST_DIM = 1536


class HashingEmbeddings(Embeddings):
    """
    Deterministic bag-of-words embeddings.

    Each token increments one bucket chosen by a stable hash, so texts
    sharing words have positive cosine similarity.
    """

    def __init__(self, dim: int = TEST_DIM) -> None:
        self.dim = dim
        self.calls: list[list[str]] = []

    def _vector(self, text: str) -> list[float]:
        vector = [0.0] * self.dim
        for token in tokenize(text):
            bucket = int(hashlib.md5(token.encode("utf-8")).hexdigest(), 16) % self.dim
            vector[bucket] += 1.0
        return vector

    def embed_documents(self, texts: list[str]) -> list[list[float]]:
        self.calls.append(list(texts))
        return [self._vector(text) for text in texts]

    def embed_query(self, text: str) -> list[float]:
        return self._vector(text)

    async def aembed_documents(self, texts: list[str]) -> list[list[float]]:
        return self.embed_documents(texts)


def unit_embedding(
    chunk_index: int,
    components: dict[int, float],
    text: str | None = None,
    dim: int = TEST_DIM,
    model: str = TEST_MODEL,
) -> ChunkEmbedding:
    """Fabricated chunk embedding with the given sparse components."""
    vector = [0.0] * dim
    for position, value in components.items():
        vector[position] = value
    body = text if text is not None else f"chunk {chunk_index}"
    return ChunkEmbedding(
        chunk_index=chunk_index,
        text=body,
        hash=hashlib.sha256(body.encode("utf-8")).hexdigest()[:16],
        embedding=vector,
        model=model,
        dim=dim,
    )


@dataclass
class SeededResume:
    """Ids of the seeded résumé tree."""

    resume_id: str
    other_resume_id: str
    project_id: str
    second_project_id: str
    bullet_ids: list[str]
    branch_id: str
    page_id: str
    transcription_id: str
    foreign_resume_id: str
    foreign_bullet_id: str


@pytest.fixture
async def session_factory(tmp_path):
    """
    Create a file-backed SQLite async database for testing.

    A file (not :memory:) lets concurrent sessions use separate connections.

    Yields:
        async_sessionmaker: Session factory bound to a fresh schema
    """
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'knowledge.db'}")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


async def seed_resume(session_factory) -> SeededResume:
    """
    Seed one résumé with projects, bullets, a branch, a page and audio.

    resume-2 exists but is empty; resume-3 owns a single project and bullet.
    """
    async with session_factory() as session:
        resume = ResumeModel(id="resume-1", title="Data Engineer", user_id="user-1")
        other = ResumeModel(id="resume-2", title="Other", user_id="user-2")
        foreign = ResumeModel(id="resume-3", title="Product Designer", user_id="user-3")
        foreign_project = ProjectModel(id="project-20", resume_id=foreign.id, title="Checkout Redesign", position=0)
        project = ProjectModel(
            id="project-1",
            resume_id=resume.id,
            title="Payments Platform",
            description="Streaming infrastructure for card payments",
            position=0,
        )
        second_project = ProjectModel(
            id="project-2",
            resume_id=resume.id,
            title="Search Revamp",
            description=None,
            position=1,
        )
        bullets = [
            BulletPointModel(
                id="bullet-1",
                project_id=project.id,
                content="Built a real-time fraud detection pipeline using Kafka and Spark",
                position=0,
            ),
            BulletPointModel(
                id="bullet-2",
                project_id=project.id,
                content="Reduced settlement latency by 40 percent",
                position=1,
            ),
            BulletPointModel(
                id="bullet-3",
                project_id=second_project.id,
                content="Migrated ranking to learning to rank models",
                position=0,
            ),
            BulletPointModel(
                id="bullet-20",
                project_id=foreign_project.id,
                content="Prototyped a fraud review flow for support agents",
                position=0,
            ),
        ]
        branch = BranchModel(
            id="branch-1",
            bullet_point_id="bullet-1",
            content="Kafka topics were partitioned by merchant",
            branch_type="text",
            position=0,
        )
        page = PageModel(
            id="page-1",
            resume_id=resume.id,
            title="Architecture Notes",
            icon="book",
            is_public=True,
            position=0,
        )
        transcription = AudioTranscriptionModel(
            id="audio-1",
            page_id=page.id,
            file_name="interview.mp3",
            language="en",
            duration=312.5,
            summary_points=[{"text": "Discussed fraud models"}, {"text": "Explained Spark tuning"}],
        )
        session.add_all([resume, other, foreign])
        await session.flush()
        session.add_all([project, second_project, foreign_project])
        await session.flush()
        session.add_all(bullets + [page])
        await session.flush()
        session.add_all([branch, transcription])
        await session.commit()

    return SeededResume(
        resume_id="resume-1",
        other_resume_id="resume-2",
        project_id="project-1",
        second_project_id="project-2",
        bullet_ids=["bullet-1", "bullet-2", "bullet-3"],
        branch_id="branch-1",
        page_id="page-1",
        transcription_id="audio-1",
        foreign_resume_id="resume-3",
        foreign_bullet_id="bullet-20",
    )


@pytest.fixture
async def seeded(session_factory) -> SeededResume:
    return await seed_resume(session_factory)


@pytest.fixture
def embeddings() -> HashingEmbeddings:
    return HashingEmbeddings()


@pytest.fixture
def generator(embeddings) -> EmbeddingGenerator:
    return EmbeddingGenerator(embeddings, model=TEST_MODEL)


@pytest.fixture
def store(session_factory) -> KnowledgeStore:
    return KnowledgeStore(session_factory)


@pytest.fixture
def enricher(session_factory) -> MetadataEnricher:
    return MetadataEnricher(session_factory)


@pytest.fixture
def vector_search(session_factory) -> VectorSearch:
    return VectorSearch(session_factory, ScanNearestNeighborSearch(session_factory, batch_size=2))


@pytest.fixture
def lexical_search(session_factory) -> LexicalSearch:
    return LexicalSearch(session_factory)


@pytest.fixture
def ranker(generator, lexical_search, vector_search, enricher) -> HybridRanker:
    return HybridRanker(generator, lexical_search, vector_search, enricher)
