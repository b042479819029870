"""
Test suite for KnowledgeStore.

Covers idempotent replacement, shrinking replacement, missing or foreign sources,
rollback on storage failure and serialization of same-source writes.
"""

import asyncio
from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from conftest import SeededResume, unit_embedding
from resume_knowledge.boundary.db.CRUD import knowledge_chunk_crud
from resume_knowledge.core.exceptions import SourceNotFoundError, ValidationError, VectorStoreError
from resume_knowledge.core.knowledge_store import KnowledgeStore
from resume_knowledge.models.common import SourceType


class TestReplaceChunksForSource:
    @pytest.mark.asyncio
    async def test_replacing_twice_with_same_input_is_idempotent(
        self, store: KnowledgeStore, seeded: SeededResume, session_factory
    ) -> None:
        # Arrange
        embeddings = [unit_embedding(i, {i: 1.0}) for i in range(2)]

        # Act
        await store.replace_chunks_for_source(seeded.resume_id, "bullet_point", "bullet-1", embeddings)
        async with session_factory() as session:
            first = [(c.text, c.chunk_index, c.hash) for c in await knowledge_chunk_crud.get_by_source(session, "bullet_point", "bullet-1")]
        await store.replace_chunks_for_source(seeded.resume_id, "bullet_point", "bullet-1", embeddings)
        async with session_factory() as session:
            second = [(c.text, c.chunk_index, c.hash) for c in await knowledge_chunk_crud.get_by_source(session, "bullet_point", "bullet-1")]

        # Assert
        assert first == second
        assert await store.count_for_source("bullet_point", "bullet-1") == (2, 2)

    @pytest.mark.asyncio
    async def test_page_shrinking_from_three_chunks_to_one_leaves_no_orphans(
        self, store: KnowledgeStore, seeded: SeededResume
    ) -> None:
        # Arrange
        three = [unit_embedding(i, {i: 1.0}) for i in range(3)]
        one = [unit_embedding(0, {0: 1.0}, text="only chunk")]

        # Act
        await store.replace_chunks_for_source(seeded.resume_id, SourceType.PAGE, seeded.page_id, three)
        assert await store.count_for_source(SourceType.PAGE, seeded.page_id) == (3, 3)
        await store.replace_chunks_for_source(seeded.resume_id, SourceType.PAGE, seeded.page_id, one)

        # Assert
        assert await store.count_for_source(SourceType.PAGE, seeded.page_id) == (1, 1)

    @pytest.mark.asyncio
    async def test_missing_source_aborts_before_deleting_anything(
        self, store: KnowledgeStore, seeded: SeededResume
    ) -> None:
        # Arrange
        await store.replace_chunks_for_source(
            seeded.resume_id, "project", seeded.project_id, [unit_embedding(0, {0: 1.0})]
        )

        # Act / Assert
        with pytest.raises(SourceNotFoundError) as exc_info:
            await store.replace_chunks_for_source(
                seeded.resume_id, "project", "project-missing", [unit_embedding(0, {0: 1.0})]
            )
        assert exc_info.value.source_id == "project-missing"
        assert await store.count_for_source("project", seeded.project_id) == (1, 1)
        assert await store.count_for_source("project", "project-missing") == (0, 0)

    @pytest.mark.asyncio
    async def test_source_of_another_resume_is_not_found(
        self, store: KnowledgeStore, seeded: SeededResume, session_factory
    ) -> None:
        # Arrange
        await store.replace_chunks_for_source(
            seeded.resume_id, "bullet_point", "bullet-1", [unit_embedding(0, {0: 1.0})]
        )

        # Act / Assert
        with pytest.raises(SourceNotFoundError) as exc_info:
            await store.replace_chunks_for_source(
                seeded.other_resume_id, "bullet_point", "bullet-1", [unit_embedding(0, {1: 1.0})]
            )
        assert exc_info.value.details["resume_id"] == seeded.other_resume_id
        async with session_factory() as session:
            chunks = await knowledge_chunk_crud.get_by_source(session, "bullet_point", "bullet-1")
        assert [c.resume_id for c in chunks] == [seeded.resume_id]

    @pytest.mark.asyncio
    async def test_delete_scoped_to_another_resume_is_rejected(
        self, store: KnowledgeStore, seeded: SeededResume
    ) -> None:
        # Arrange
        await store.replace_chunks_for_source(
            seeded.resume_id, "branch", seeded.branch_id, [unit_embedding(0, {0: 1.0})]
        )

        # Act / Assert
        with pytest.raises(SourceNotFoundError):
            await store.delete_chunks_for_source("branch", seeded.branch_id, seeded.other_resume_id)
        assert await store.count_for_source("branch", seeded.branch_id) == (1, 1)

        removed = await store.delete_chunks_for_source("branch", seeded.branch_id, seeded.resume_id)
        assert removed == 1
        assert await store.count_for_source("branch", seeded.branch_id) == (0, 0)

    @pytest.mark.asyncio
    async def test_unknown_source_type_is_a_validation_error(
        self, store: KnowledgeStore, seeded: SeededResume
    ) -> None:
        with pytest.raises(ValidationError):
            await store.replace_chunks_for_source(seeded.resume_id, "tweet", "t-1", [])

    @pytest.mark.asyncio
    async def test_storage_failure_rolls_back_and_keeps_previous_chunks(
        self, store: KnowledgeStore, seeded: SeededResume
    ) -> None:
        # Arrange
        await store.replace_chunks_for_source(
            seeded.resume_id, "bullet_point", "bullet-2", [unit_embedding(0, {0: 1.0})]
        )
        failure = OperationalError("INSERT", {}, Exception("disk full"))

        # Act
        with patch(
            "resume_knowledge.core.knowledge_store.knowledge_chunk_crud.delete_by_source",
            side_effect=failure,
        ):
            with pytest.raises(VectorStoreError):
                await store.replace_chunks_for_source(
                    seeded.resume_id,
                    "bullet_point",
                    "bullet-2",
                    [unit_embedding(i, {i: 1.0}) for i in range(3)],
                )

        # Assert
        assert await store.count_for_source("bullet_point", "bullet-2") == (1, 1)

    @pytest.mark.asyncio
    async def test_concurrent_replacements_of_one_source_never_interleave(
        self, store: KnowledgeStore, seeded: SeededResume
    ) -> None:
        # Arrange
        sets = [
            [unit_embedding(i, {i: 1.0}, text=f"set {n} chunk {i}") for i in range(n)]
            for n in (1, 2, 3, 4)
        ]

        # Act
        await asyncio.gather(
            *(
                store.replace_chunks_for_source(seeded.resume_id, "branch", seeded.branch_id, s)
                for s in sets
            )
        )

        # Assert
        chunks, vectors = await store.count_for_source("branch", seeded.branch_id)
        assert chunks == vectors
        assert chunks in (1, 2, 3, 4)


class TestDeleteAndPurge:
    @pytest.mark.asyncio
    async def test_delete_removes_chunks_even_without_entity(
        self, store: KnowledgeStore, seeded: SeededResume
    ) -> None:
        await store.replace_chunks_for_source(
            seeded.resume_id, "bullet_point", "bullet-3", [unit_embedding(0, {0: 1.0})]
        )

        removed = await store.delete_chunks_for_source("bullet_point", "bullet-3")

        assert removed == 1
        assert await store.count_for_source("bullet_point", "bullet-3") == (0, 0)

    @pytest.mark.asyncio
    async def test_purge_only_removes_sources_without_entity(
        self, store: KnowledgeStore, seeded: SeededResume, session_factory
    ) -> None:
        # Arrange
        from resume_knowledge.boundary.db.CRUD import bullet_point_crud

        await store.replace_chunks_for_source(
            seeded.resume_id, "bullet_point", "bullet-2", [unit_embedding(0, {0: 1.0})]
        )
        await store.replace_chunks_for_source(
            seeded.resume_id, "bullet_point", "bullet-3", [unit_embedding(0, {1: 1.0})]
        )
        async with session_factory() as session:
            await bullet_point_crud.delete_by_id(session, "bullet-3")
            await session.commit()

        # Act
        removed = await store.purge_dangling([("bullet_point", "bullet-2"), ("bullet_point", "bullet-3")])

        # Assert
        assert removed == 1
        assert await store.count_for_source("bullet_point", "bullet-2") == (1, 1)
        assert await store.count_for_source("bullet_point", "bullet-3") == (0, 0)
