"""
Test suite for the HTTP surface.

The app runs in TestClient's own event loop, so the database is seeded
up front with asyncio.run and the app gets a NullPool engine whose
connections are opened inside that loop.
"""

import asyncio

import pytest
from fastapi.testclient import TestClient
from langchain_core.embeddings import Embeddings
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from conftest import HashingEmbeddings, seed_resume
from resume_knowledge.api.deps import ServiceCache
from resume_knowledge.api.main import create_app
from resume_knowledge.boundary.db.base import Base


class FailingEmbeddings(Embeddings):
    def embed_documents(self, texts: list[str]) -> list[list[float]]:
        raise RuntimeError("provider down")

    def embed_query(self, text: str) -> list[float]:
        raise RuntimeError("provider down")


def prepare_database(url: str) -> None:
    async def prepare() -> None:
        engine = create_async_engine(url)
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        await seed_resume(async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False))
        await engine.dispose()

    asyncio.run(prepare())


def make_client(url: str, embeddings: Embeddings) -> TestClient:
    engine = create_async_engine(url, poolclass=NullPool)
    cache = ServiceCache(
        session_factory=async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False),
        embeddings=embeddings,
    )
    return TestClient(create_app(cache))


@pytest.fixture
def database_url(tmp_path) -> str:
    url = f"sqlite+aiosqlite:///{tmp_path / 'api.db'}"
    prepare_database(url)
    return url


@pytest.fixture
def client(database_url: str):
    with make_client(database_url, HashingEmbeddings()) as test_client:
        yield test_client


def index(client: TestClient, source_type: str, source_id: str, text: str, resume_id: str = "resume-1"):
    return client.put(
        f"/api/v1/resumes/{resume_id}/sources/{source_type}/{source_id}",
        json={"text": text},
    )


class TestHealth:
    def test_health_check(self, client: TestClient) -> None:
        response = client.get("/api/v1/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert "embedding model" in body["message"]

    def test_health_check_db(self, client: TestClient) -> None:
        response = client.get("/api/v1/health/db")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "message": "Knowledge database reachable"}

    def test_correlation_id_is_echoed(self, client: TestClient) -> None:
        response = client.get("/api/v1/health", headers={"X-Correlation-ID": "req-42"})

        assert response.headers["X-Correlation-ID"] == "req-42"


class TestSources:
    def test_index_source(self, client: TestClient) -> None:
        response = index(client, "bullet_point", "bullet-1", "Built a fraud detection pipeline")

        assert response.status_code == 200
        assert response.json() == {"source_type": "bullet_point", "source_id": "bullet-1", "chunks": 1}

    def test_missing_entity_is_404(self, client: TestClient) -> None:
        response = index(client, "project", "project-404", "text")

        assert response.status_code == 404

    def test_unknown_source_type_is_422(self, client: TestClient) -> None:
        response = index(client, "tweet", "t-1", "text")

        assert response.status_code == 422

    def test_provider_failure_is_503(self, database_url: str) -> None:
        with make_client(database_url, FailingEmbeddings()) as failing_client:
            response = index(failing_client, "bullet_point", "bullet-1", "text")

        assert response.status_code == 503
        assert "searchable" in response.json()["detail"]

    def test_delete_source(self, client: TestClient) -> None:
        index(client, "branch", "branch-1", "Kafka topics were partitioned by merchant")

        response = client.delete("/api/v1/resumes/resume-1/sources/branch/branch-1")

        assert response.status_code == 200
        assert response.json()["removed"] == 1

    def test_source_of_another_resume_is_404(self, client: TestClient) -> None:
        response = index(client, "bullet_point", "bullet-1", "Built a fraud detection pipeline", resume_id="resume-2")

        assert response.status_code == 404
        search = client.post("/api/v1/resumes/resume-2/search", json={"query": "fraud pipeline"})
        assert search.json()["results"] == []

    def test_delete_under_another_resume_is_404(self, client: TestClient) -> None:
        index(client, "branch", "branch-1", "Kafka topics were partitioned by merchant")

        response = client.delete("/api/v1/resumes/resume-2/sources/branch/branch-1")

        assert response.status_code == 404
        again = client.delete("/api/v1/resumes/resume-1/sources/branch/branch-1")
        assert again.json()["removed"] == 1


class TestSearch:
    def test_search_returns_enriched_hits(self, client: TestClient) -> None:
        # Arrange
        index(client, "bullet_point", "bullet-1", "Built a real-time fraud detection pipeline using Kafka and Spark")
        index(client, "bullet_point", "bullet-2", "Reduced settlement latency by 40 percent")

        # Act
        response = client.post(
            "/api/v1/resumes/resume-1/search",
            json={"query": "fraud detection pipeline", "limit": 3},
        )

        # Assert
        assert response.status_code == 200
        body = response.json()
        assert body["results"][0]["source_id"] == "bullet-1"
        assert body["results"][0]["score"] > 0.3
        assert body["results"][0]["metadata"]["type"] == "bullet_point"
        assert body["total_results"] == len(body["results"])

    def test_search_of_empty_resume(self, client: TestClient) -> None:
        response = client.post("/api/v1/resumes/resume-2/search", json={"query": "fraud"})

        assert response.status_code == 200
        assert response.json()["results"] == []

    def test_context_includes_aliases_and_sources(self, client: TestClient) -> None:
        index(client, "bullet_point", "bullet-3", "Migrated ranking to learning to rank models")

        response = client.post("/api/v1/resumes/resume-1/context", json={"query": "ranking"})

        assert response.status_code == 200
        body = response.json()
        assert body["id_map"]["reverse"]["B3"] == "bullet-3"
        assert body["sources"][0]["id"] == "B3"


class TestCitations:
    def test_resolve(self, client: TestClient) -> None:
        response = client.post(
            "/api/v1/citations/resolve",
            json={
                "text": 'See [Bullet:"fraud"]{B3} and [Bullet:"x"]{B999}',
                "id_map": {"forward": {"bullet_xyz": "B3"}, "reverse": {"B3": "bullet_xyz"}},
            },
        )

        assert response.status_code == 200
        references = response.json()["references"]
        assert [r["convexId"] for r in references] == ["bullet_xyz"]
        assert references[0]["simpleId"] == "B3"

    def test_validate(self, client: TestClient) -> None:
        response = client.post("/api/v1/citations/validate", json={"text": '[Bullet:"x"]{Z1}'})

        assert response.status_code == 200
        assert response.json()["valid"] is False
        assert response.json()["problems"][0]["kind"] == "invalid_id"
