"""
Knowledge chunk CRUD operations.

Source-scoped queries for chunk replacement and the token OR-match used
by lexical search.

Dependencies: sqlalchemy, resume_knowledge.boundary.db.models
System role: Knowledge chunk persistence operations
"""

from typing import Sequence

from sqlalchemy import delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from resume_knowledge.boundary.db.models.knowledge_model import KnowledgeChunkModel
from resume_knowledge.boundary.db.CRUD.base_crud import BaseCRUD


def _source_clause(source_type: str, source_id: str, resume_id: str | None) -> list:
    clause = [
        KnowledgeChunkModel.source_type == source_type,
        KnowledgeChunkModel.source_id == source_id,
    ]
    if resume_id is not None:
        clause.append(KnowledgeChunkModel.resume_id == resume_id)
    return clause


class KnowledgeChunkCRUD(BaseCRUD[KnowledgeChunkModel]):
    """
    CRUD operations for KnowledgeChunkModel.

    Extends BaseCRUD with queries keyed by (source_type, source_id) and
    by résumé.
    """

    def __init__(self) -> None:
        """Initialize KnowledgeChunkCRUD with KnowledgeChunkModel."""
        super().__init__(KnowledgeChunkModel)

    async def get_by_source(
        self,
        session: AsyncSession,
        source_type: str,
        source_id: str,
    ) -> Sequence[KnowledgeChunkModel]:
        """Chunks of one source ordered by chunk_index."""
        stmt = (
            select(KnowledgeChunkModel)
            .where(
                KnowledgeChunkModel.source_type == source_type,
                KnowledgeChunkModel.source_id == source_id,
            )
            .order_by(KnowledgeChunkModel.chunk_index)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def get_ids_by_source(
        self,
        session: AsyncSession,
        source_type: str,
        source_id: str,
        resume_id: str | None = None,
    ) -> list[str]:
        stmt = select(KnowledgeChunkModel.id).where(*_source_clause(source_type, source_id, resume_id))
        result = await session.execute(stmt)
        return list(result.scalars().all())

    async def delete_by_source(
        self,
        session: AsyncSession,
        source_type: str,
        source_id: str,
        resume_id: str | None = None,
    ) -> int:
        """
        Delete every chunk of one source, optionally only under `resume_id`.

        Returns:
            Number of chunks deleted
        """
        stmt = delete(KnowledgeChunkModel).where(*_source_clause(source_type, source_id, resume_id))
        result = await session.execute(stmt)
        return result.rowcount

    async def count_by_source(
        self,
        session: AsyncSession,
        source_type: str,
        source_id: str,
    ) -> int:
        stmt = (
            select(func.count())
            .select_from(KnowledgeChunkModel)
            .where(
                KnowledgeChunkModel.source_type == source_type,
                KnowledgeChunkModel.source_id == source_id,
            )
        )
        result = await session.execute(stmt)
        return result.scalar_one()

    async def match_tokens(
        self,
        session: AsyncSession,
        resume_id: str,
        tokens: Sequence[str],
    ) -> Sequence[KnowledgeChunkModel]:
        """
        Chunks of a résumé whose lower-cased text contains any of `tokens`.

        Substring containment, so ranking is refined in memory by the
        caller. Returns an empty sequence when `tokens` is empty.
        """
        if not tokens:
            return []
        lowered = func.lower(KnowledgeChunkModel.text)
        stmt = select(KnowledgeChunkModel).where(
            KnowledgeChunkModel.resume_id == resume_id,
            or_(*(lowered.contains(token, autoescape=True) for token in tokens)),
        )
        result = await session.execute(stmt)
        return result.scalars().all()


knowledge_chunk_crud = KnowledgeChunkCRUD()
