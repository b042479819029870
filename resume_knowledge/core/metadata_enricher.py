"""
Metadata enricher for search hits.

Attaches display context for the owning entity of each hit. A hit whose
owner has been deleted keeps `metadata=None` and its source is queued
for cleanup; ids that are not valid entity ids are never looked up.

Dependencies: sqlalchemy, resume_knowledge.boundary.db
System role: Post-ranking enrichment of search results
"""

import logging
import re
from collections import deque
from typing import Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from resume_knowledge.boundary.db.CRUD import (
    audio_transcription_crud,
    branch_crud,
    bullet_point_crud,
    page_crud,
    project_crud,
)
from resume_knowledge.core.exceptions import DanglingReferenceWarning
from resume_knowledge.models.common import SourceType
from resume_knowledge.models.metadata import (
    AudioSummaryMetadata,
    BranchMetadata,
    BulletPointMetadata,
    ChunkMetadata,
    PageMetadata,
    ProjectMetadata,
)
from resume_knowledge.models.search import SearchHit
from resume_knowledge.observability import log_with_context

logger = logging.getLogger(__name__)

ENTITY_ID_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_-]{0,63}$")


def is_entity_id(value: str) -> bool:
    """Whether `value` can name a stored entity (synthetic ids like "test:1" cannot)."""
    return bool(ENTITY_ID_PATTERN.match(value))


class DanglingChunkQueue:
    """
    Bounded FIFO of sources whose chunks outlived their owning entity.

    Duplicates are ignored while queued. Drained by
    KnowledgeStore.purge_dangling.
    """

    def __init__(self, maxlen: int = 1000) -> None:
        self._items: deque[tuple[str, str]] = deque(maxlen=maxlen)

    def push(self, source_type: str, source_id: str) -> None:
        item = (source_type, source_id)
        if item not in self._items:
            self._items.append(item)

    def drain(self) -> list[tuple[str, str]]:
        items = list(self._items)
        self._items.clear()
        return items

    def __len__(self) -> int:
        return len(self._items)


class MetadataEnricher:
    """Look up owning entities and attach tagged metadata to hits."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        dangling: DanglingChunkQueue | None = None,
    ) -> None:
        self._session_factory = session_factory
        self.dangling = dangling if dangling is not None else DanglingChunkQueue()

    async def enrich(self, hit: SearchHit) -> SearchHit:
        """Return a copy of `hit` with metadata attached (or None)."""
        async with self._session_factory() as session:
            return await self._enrich(session, hit)

    async def enrich_many(self, hits: Sequence[SearchHit]) -> list[SearchHit]:
        """Enrich hits in order using one session."""
        if not hits:
            return []
        async with self._session_factory() as session:
            return [await self._enrich(session, hit) for hit in hits]

    async def _enrich(self, session: AsyncSession, hit: SearchHit) -> SearchHit:
        if not is_entity_id(hit.source_id):
            return hit.model_copy(update={"metadata": None})

        try:
            metadata = await self.lookup(session, SourceType(hit.source_type), hit.source_id)
        except SQLAlchemyError as e:
            logger.error(f"{__name__}:_enrich - Metadata lookup failed for {hit.source_id}: {e}")
            return hit.model_copy(update={"metadata": None})

        if metadata is None:
            warning = DanglingReferenceWarning(SourceType(hit.source_type).value, hit.source_id)
            log_with_context(logger, logging.DEBUG, warning.message, **warning.details)
            self.dangling.push(SourceType(hit.source_type).value, hit.source_id)

        return hit.model_copy(update={"metadata": metadata})

    @staticmethod
    async def lookup(
        session: AsyncSession,
        source_type: SourceType,
        source_id: str,
    ) -> ChunkMetadata | None:
        """
        Build metadata for one source, None when the entity is missing.
        """
        if source_type is SourceType.BULLET_POINT:
            row = await bullet_point_crud.get_with_project(session, source_id)
            if row is None:
                return None
            bullet, project = row
            return BulletPointMetadata(
                content=bullet.content,
                position=bullet.position,
                project_title=project.title,
                project_id=project.id,
            )

        if source_type is SourceType.PROJECT:
            project = await project_crud.get_by_id(session, source_id)
            if project is None:
                return None
            return ProjectMetadata(
                title=project.title,
                description=project.description,
                position=project.position,
            )

        if source_type is SourceType.BRANCH:
            row = await branch_crud.get_with_ancestors(session, source_id)
            if row is None:
                return None
            branch, bullet, project = row
            return BranchMetadata(
                content=branch.content,
                branch_type=branch.branch_type,
                position=branch.position,
                bullet_content=bullet.content,
                project_title=project.title,
            )

        if source_type is SourceType.PAGE:
            page = await page_crud.get_by_id(session, source_id)
            if page is None:
                return None
            return PageMetadata(
                title=page.title,
                icon=page.icon,
                is_public=page.is_public,
                position=page.position,
                page_id=page.id,
            )

        row = await audio_transcription_crud.get_with_page(session, source_id)
        if row is None:
            return None
        transcription, page = row
        return AudioSummaryMetadata(
            file_name=transcription.file_name,
            language=transcription.language,
            duration=transcription.duration,
            page_title=page.title,
            page_id=page.id,
            summary_points_count=len(transcription.summary_points or []),
        )
