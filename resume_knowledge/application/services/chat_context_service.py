"""
Chat context service.

Prepares one chat turn for the external answer generator and resolves
its answer afterwards. Each turn gets a fresh alias map built from the
résumé's current structure; the caller keeps that map to resolve the
answer and may merge it into session state.

Dependencies: sqlalchemy, resume_knowledge.core, resume_knowledge.boundary.db
System role: Alias construction and citation resolution around answer generation
"""

import logging
from typing import Any, Sequence

from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from resume_knowledge.boundary.db.CRUD import audio_transcription_crud, resume_crud
from resume_knowledge.core.citation_resolver import resolve_citations
from resume_knowledge.core.id_mapper import annotate_resume_context, build_aliases
from resume_knowledge.models.citation import (
    AliasSource,
    BranchNode,
    BulletNode,
    CitationResolution,
    IdMap,
    PageNode,
    ProjectNode,
)
from resume_knowledge.models.common import SourceType
from resume_knowledge.models.search import SearchHit

logger = logging.getLogger(__name__)


class TurnContext(BaseModel):
    """Everything the answer generator needs for one turn."""

    id_map: IdMap
    resume: dict[str, Any] = Field(description="Alias-tagged résumé structure")
    sources: list[dict[str, Any]] = Field(
        default_factory=list,
        description="Alias-tagged retrieved chunks, best first",
    )


class ChatContextService:
    """Build per-turn alias context and resolve generated citations."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def load_alias_source(self, resume_id: str) -> AliasSource:
        """Ordered pages and project tree of a résumé."""
        async with self._session_factory() as session:
            pages, projects = await resume_crud.get_structure(session, resume_id)
            return AliasSource(
                pages=[PageNode(id=page.id, title=page.title) for page in pages],
                projects=[
                    ProjectNode(
                        id=project.id,
                        title=project.title,
                        description=project.description,
                        bullets=[
                            BulletNode(
                                id=bullet.id,
                                content=bullet.content,
                                branches=[
                                    BranchNode(id=branch.id, content=branch.content)
                                    for branch in bullet.branches
                                ],
                            )
                            for bullet in project.bullet_points
                        ],
                    )
                    for project in projects
                ],
            )

    async def build_turn_context(
        self,
        resume_id: str,
        hits: Sequence[SearchHit] = (),
    ) -> TurnContext:
        """
        Assign this turn's aliases and tag the résumé and retrieved hits.

        Args:
            resume_id: Résumé the turn is about
            hits: Search results to pass along as sources

        Returns:
            TurnContext: Alias map plus alias-tagged context
        """
        source = await self.load_alias_source(resume_id)
        id_map = build_aliases(source)
        sources = await self._tag_hits(hits, id_map)
        logger.info(
            f"{__name__}:build_turn_context - resume={resume_id} aliases={len(id_map)} "
            f"sources={len(sources)}"
        )
        return TurnContext(
            id_map=id_map,
            resume=annotate_resume_context(source, id_map),
            sources=sources,
        )

    def resolve_answer(self, answer_text: str, id_map: IdMap) -> CitationResolution:
        """Resolve the citation markers of a generated answer."""
        return resolve_citations(answer_text, id_map)

    async def _tag_hits(self, hits: Sequence[SearchHit], id_map: IdMap) -> list[dict[str, Any]]:
        tagged = []
        for hit in hits:
            owner_id = hit.source_id
            # Audio summaries are cited through the page they are attached to
            if hit.source_type == SourceType.AUDIO_SUMMARY:
                owner_id = await self._audio_page_id(hit.source_id)
            alias = id_map.alias_for(owner_id) if owner_id else None
            if alias is None:
                continue
            tagged.append(
                {
                    "id": alias,
                    "source_type": SourceType(hit.source_type).value,
                    "text": hit.text,
                    "score": round(hit.score, 4),
                }
            )
        return tagged

    async def _audio_page_id(self, transcription_id: str) -> str | None:
        async with self._session_factory() as session:
            transcription = await audio_transcription_crud.get_by_id(session, transcription_id)
        return transcription.page_id if transcription else None
