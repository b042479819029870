"""
Knowledge store: chunk lifecycle for one source at a time.

Replacement is delete-then-insert inside a single transaction, guarded
by an ownership check (the entity exists and belongs to the résumé) and
a per-source lock. After
a successful replacement the source has exactly one chunk (and one
vector) per supplied embedding.

Dependencies: sqlalchemy, resume_knowledge.boundary.db
System role: Write path of the knowledge index
"""

import logging
from typing import Iterable, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from resume_knowledge.boundary.db.base import new_id
from resume_knowledge.boundary.db.CRUD import knowledge_chunk_crud, source_exists, source_resume_id, vector_crud
from resume_knowledge.boundary.db.models import KnowledgeChunkModel, VectorModel
from resume_knowledge.core.exceptions import SourceNotFoundError, ValidationError, VectorStoreError
from resume_knowledge.core.source_locks import SourceLockRegistry
from resume_knowledge.models.chunk import ChunkEmbedding
from resume_knowledge.models.common import SourceType

logger = logging.getLogger(__name__)


def parse_source_type(source_type: str | SourceType) -> SourceType:
    """
    Coerce a source type string to the enum.

    Raises:
        ValidationError: If the value is not a known source kind
    """
    try:
        return SourceType(source_type)
    except ValueError as e:
        raise ValidationError(
            f"Unknown source type: {source_type}",
            field="source_type",
            details={"allowed": [t.value for t in SourceType]},
        ) from e


class KnowledgeStore:
    """Replace, delete and count knowledge chunks per source."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        locks: SourceLockRegistry | None = None,
    ) -> None:
        """
        Initialize the store.

        Args:
            session_factory: Factory for per-operation sessions
            locks: Shared lock registry (a private one if None)
        """
        self._session_factory = session_factory
        self._locks = locks or SourceLockRegistry()

    async def replace_chunks_for_source(
        self,
        resume_id: str,
        source_type: str | SourceType,
        source_id: str,
        embeddings: Sequence[ChunkEmbedding],
    ) -> None:
        """
        Atomically replace every chunk and vector of a source.

        Args:
            resume_id: Résumé the chunks are scoped to
            source_type: Kind of the owning entity
            source_id: Owning entity id
            embeddings: New chunks with vectors (empty clears the source)

        Raises:
            ValidationError: Unknown source type or inconsistent embeddings
            SourceNotFoundError: Owning entity does not exist or belongs to
                another résumé (nothing changed)
            VectorStoreError: Storage failure (transaction rolled back)
        """
        kind = parse_source_type(source_type)
        self._check_embeddings(embeddings)

        async with self._locks.hold(kind.value, source_id):
            async with self._session_factory() as session:
                owner = await source_resume_id(session, kind.value, source_id)
                if owner != resume_id:
                    logger.warning(
                        f"{__name__}:replace_chunks_for_source - {kind.value}/{source_id} "
                        f"not found in resume {resume_id} (owner: {owner})"
                    )
                    raise SourceNotFoundError(kind.value, source_id, details={"resume_id": resume_id})

                try:
                    removed = await self._delete_source(session, kind.value, source_id)
                    chunks = []
                    for item in embeddings:
                        chunk = KnowledgeChunkModel(
                            id=new_id(),
                            resume_id=resume_id,
                            source_type=kind.value,
                            source_id=source_id,
                            text=item.text,
                            chunk_index=item.chunk_index,
                            hash=item.hash,
                        )
                        chunks.append(chunk)
                    session.add_all(chunks)
                    await session.flush()
                    session.add_all(
                        VectorModel(
                            resume_id=resume_id,
                            chunk_id=chunk.id,
                            model=item.model,
                            dim=item.dim,
                            embedding=list(item.embedding),
                        )
                        for chunk, item in zip(chunks, embeddings)
                    )
                    await session.commit()
                except SQLAlchemyError as e:
                    await session.rollback()
                    logger.error(
                        f"{__name__}:replace_chunks_for_source - Rolled back {kind.value}/{source_id}: {e}"
                    )
                    raise VectorStoreError(
                        f"Failed to replace chunks: {e}",
                        operation="replace",
                        details={"source_type": kind.value, "source_id": source_id},
                    ) from e

        logger.info(
            f"{__name__}:replace_chunks_for_source - {kind.value}/{source_id} "
            f"replaced {removed} chunks with {len(embeddings)}"
        )

    async def delete_chunks_for_source(
        self,
        source_type: str | SourceType,
        source_id: str,
        resume_id: str | None = None,
    ) -> int:
        """
        Delete every chunk and vector of a source.

        Does not require the owning entity to exist, so it also cleans up
        after entity deletion. With `resume_id`, only that résumé's chunks
        are removed, and an entity that still exists under another résumé
        is treated as missing.

        Returns:
            Number of chunks deleted

        Raises:
            SourceNotFoundError: The entity belongs to another résumé
            VectorStoreError: Storage failure (transaction rolled back)
        """
        kind = parse_source_type(source_type)
        async with self._locks.hold(kind.value, source_id):
            async with self._session_factory() as session:
                if resume_id is not None:
                    owner = await source_resume_id(session, kind.value, source_id)
                    if owner is not None and owner != resume_id:
                        raise SourceNotFoundError(kind.value, source_id, details={"resume_id": resume_id})
                try:
                    removed = await self._delete_source(session, kind.value, source_id, resume_id)
                    await session.commit()
                except SQLAlchemyError as e:
                    await session.rollback()
                    raise VectorStoreError(
                        f"Failed to delete chunks: {e}",
                        operation="delete",
                        details={"source_type": kind.value, "source_id": source_id},
                    ) from e

        logger.info(f"{__name__}:delete_chunks_for_source - {kind.value}/{source_id} removed {removed}")
        return removed

    async def count_for_source(self, source_type: str | SourceType, source_id: str) -> tuple[int, int]:
        """
        Returns:
            (chunk count, vector count) for the source
        """
        kind = parse_source_type(source_type)
        async with self._session_factory() as session:
            chunks = await knowledge_chunk_crud.count_by_source(session, kind.value, source_id)
            vectors = await vector_crud.count_by_source(session, kind.value, source_id)
        return chunks, vectors

    async def purge_dangling(self, candidates: Iterable[tuple[str, str]]) -> int:
        """
        Delete chunks of sources whose owning entity no longer exists.

        Candidates whose entity exists again are left alone.

        Returns:
            Number of chunks deleted
        """
        removed = 0
        for source_type, source_id in set(candidates):
            async with self._session_factory() as session:
                if await source_exists(session, source_type, source_id):
                    continue
            removed += await self.delete_chunks_for_source(source_type, source_id)
        return removed

    @staticmethod
    async def _delete_source(
        session: AsyncSession,
        source_type: str,
        source_id: str,
        resume_id: str | None = None,
    ) -> int:
        chunk_ids = await knowledge_chunk_crud.get_ids_by_source(session, source_type, source_id, resume_id)
        if not chunk_ids:
            return 0
        await vector_crud.delete_by_chunk_ids(session, chunk_ids)
        await knowledge_chunk_crud.delete_by_source(session, source_type, source_id, resume_id)
        return len(chunk_ids)

    @staticmethod
    def _check_embeddings(embeddings: Sequence[ChunkEmbedding]) -> None:
        for item in embeddings:
            if len(item.embedding) != item.dim:
                raise ValidationError(
                    "Embedding length does not match its declared dimension",
                    field="embeddings",
                    details={"chunk_index": item.chunk_index, "dim": item.dim, "got": len(item.embedding)},
                )
        indices = [item.chunk_index for item in embeddings]
        if len(set(indices)) != len(indices):
            raise ValidationError("Duplicate chunk_index in embeddings", field="embeddings")
