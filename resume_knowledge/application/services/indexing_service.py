"""
Indexing service for résumé content.

Entry point for content mutations: turns an entity's current text into
chunks and vectors and replaces whatever was indexed for it before.
Blank text clears the source.

Dependencies: resume_knowledge.core, resume_knowledge.boundary.db
System role: Write-side orchestration of the knowledge index
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from resume_knowledge.boundary.db.CRUD import (
    audio_transcription_crud,
    branch_crud,
    bullet_point_crud,
    page_crud,
    project_crud,
)
from resume_knowledge.core.embedding_generator import EmbeddingGenerator
from resume_knowledge.core.exceptions import SourceNotFoundError
from resume_knowledge.core.knowledge_store import KnowledgeStore, parse_source_type
from resume_knowledge.models.chunk import EmbeddingOptions
from resume_knowledge.models.common import SourceType

logger = logging.getLogger(__name__)


def project_text(title: str, description: str | None) -> str:
    """Indexed text of a project: title, blank line, description."""
    return f"{title}\n\n{description}" if description else title


class IndexingService:
    """
    Keeps the knowledge index in step with résumé content.

    Each `index_*` helper loads the entity, derives its text and résumé,
    and delegates to `index_source`.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        generator: EmbeddingGenerator,
        store: KnowledgeStore,
    ) -> None:
        """
        Initialize indexing service.

        Args:
            session_factory: Factory for entity lookups
            generator: Chunks and embeds text
            store: Replaces chunks per source
        """
        self._session_factory = session_factory
        self._generator = generator
        self._store = store

    async def index_source(
        self,
        resume_id: str,
        source_type: str | SourceType,
        source_id: str,
        text: str,
        options: EmbeddingOptions | None = None,
    ) -> int:
        """
        Replace the indexed chunks of one source with chunks of `text`.

        Embedding happens before any write, so a provider failure leaves
        the previous chunks in place.

        Returns:
            int: Number of chunks now indexed for the source

        Raises:
            ValidationError: Unknown source type
            EmbeddingProviderError: Embedding failed (nothing written)
            SourceNotFoundError: Owning entity does not exist or belongs to
                another résumé
            VectorStoreError: Storage failure
        """
        kind = parse_source_type(source_type)
        if not text or not text.strip():
            await self._store.delete_chunks_for_source(kind, source_id, resume_id)
            return 0

        embeddings = await self._generator.generate_embeddings(text, options)
        await self._store.replace_chunks_for_source(resume_id, kind, source_id, embeddings)
        logger.info(
            f"{__name__}:index_source - Indexed {kind.value}/{source_id} as {len(embeddings)} chunks"
        )
        return len(embeddings)

    async def index_project(self, project_id: str) -> int:
        async with self._session_factory() as session:
            project = await project_crud.get_by_id(session, project_id)
        if project is None:
            raise SourceNotFoundError(SourceType.PROJECT.value, project_id)
        return await self.index_source(
            project.resume_id,
            SourceType.PROJECT,
            project.id,
            project_text(project.title, project.description),
        )

    async def index_bullet_point(self, bullet_id: str) -> int:
        async with self._session_factory() as session:
            row = await bullet_point_crud.get_with_project(session, bullet_id)
        if row is None:
            raise SourceNotFoundError(SourceType.BULLET_POINT.value, bullet_id)
        bullet, project = row
        return await self.index_source(project.resume_id, SourceType.BULLET_POINT, bullet.id, bullet.content)

    async def index_branch(self, branch_id: str) -> int:
        async with self._session_factory() as session:
            row = await branch_crud.get_with_ancestors(session, branch_id)
        if row is None:
            raise SourceNotFoundError(SourceType.BRANCH.value, branch_id)
        branch, _, project = row
        return await self.index_source(project.resume_id, SourceType.BRANCH, branch.id, branch.content)

    async def index_page(self, page_id: str, content: str) -> int:
        """
        Index a page's document content.

        Page bodies live outside this service, so the caller supplies the
        extracted text. The page title is indexed with it.
        """
        async with self._session_factory() as session:
            page = await page_crud.get_by_id(session, page_id)
        if page is None:
            raise SourceNotFoundError(SourceType.PAGE.value, page_id)
        if not content.strip():
            return await self.index_source(page.resume_id, SourceType.PAGE, page.id, "")
        return await self.index_source(
            page.resume_id,
            SourceType.PAGE,
            page.id,
            f"{page.title}\n\n{content}",
        )

    async def index_audio_summary(self, transcription_id: str) -> int:
        """
        Index an audio transcription's summary, one chunk per point.

        Returns:
            int: Number of summary points indexed
        """
        async with self._session_factory() as session:
            row = await audio_transcription_crud.get_with_page(session, transcription_id)
        if row is None:
            raise SourceNotFoundError(SourceType.AUDIO_SUMMARY.value, transcription_id)
        transcription, page = row

        points = [
            point.get("text", "") if isinstance(point, dict) else str(point)
            for point in transcription.summary_points or []
        ]
        embeddings = await self._generator.embed_summary_points(points)
        if not embeddings:
            await self._store.delete_chunks_for_source(SourceType.AUDIO_SUMMARY, transcription.id)
            return 0

        await self._store.replace_chunks_for_source(
            page.resume_id,
            SourceType.AUDIO_SUMMARY,
            transcription.id,
            embeddings,
        )
        logger.info(
            f"{__name__}:index_audio_summary - Indexed {len(embeddings)} summary points "
            f"for {transcription.id}"
        )
        return len(embeddings)

    async def remove_source(
        self,
        source_type: str | SourceType,
        source_id: str,
        resume_id: str | None = None,
    ) -> int:
        """
        Drop every chunk of a source, typically after the entity is deleted.

        Args:
            resume_id: Restrict removal to this résumé's chunks

        Returns:
            int: Number of chunks removed

        Raises:
            SourceNotFoundError: The entity exists under another résumé
        """
        return await self._store.delete_chunks_for_source(source_type, source_id, resume_id)
