"""
Vector CRUD operations.

Dependencies: sqlalchemy, resume_knowledge.boundary.db.models
System role: Embedding vector persistence operations
"""

from typing import Sequence

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from resume_knowledge.boundary.db.models.knowledge_model import KnowledgeChunkModel, VectorModel
from resume_knowledge.boundary.db.CRUD.base_crud import BaseCRUD


class VectorCRUD(BaseCRUD[VectorModel]):
    """
    CRUD operations for VectorModel.

    Extends BaseCRUD with chunk-scoped deletes and the (resume, model, dim)
    scope that nearest-neighbour backends read from.
    """

    def __init__(self) -> None:
        """Initialize VectorCRUD with VectorModel."""
        super().__init__(VectorModel)

    async def delete_by_chunk_ids(self, session: AsyncSession, chunk_ids: Sequence[str]) -> int:
        """
        Delete the vectors of the given chunks.

        Returns:
            Number of vectors deleted
        """
        if not chunk_ids:
            return 0
        stmt = delete(VectorModel).where(VectorModel.chunk_id.in_(list(chunk_ids)))
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
            .select_from(VectorModel)
            .join(KnowledgeChunkModel, KnowledgeChunkModel.id == VectorModel.chunk_id)
            .where(
                KnowledgeChunkModel.source_type == source_type,
                KnowledgeChunkModel.source_id == source_id,
            )
        )
        result = await session.execute(stmt)
        return result.scalar_one()

    async def get_scope(
        self,
        session: AsyncSession,
        resume_id: str,
        model: str,
        dim: int,
    ) -> Sequence[tuple[str, list]]:
        """
        (chunk_id, embedding) pairs for one résumé, model and dimensionality.

        Ordered by chunk_id so full scans are deterministic.
        """
        stmt = (
            select(VectorModel.chunk_id, VectorModel.embedding)
            .where(
                VectorModel.resume_id == resume_id,
                VectorModel.model == model,
                VectorModel.dim == dim,
            )
            .order_by(VectorModel.chunk_id)
        )
        result = await session.execute(stmt)
        return [(row.chunk_id, row.embedding) for row in result]

    async def get_by_chunk_ids(
        self,
        session: AsyncSession,
        chunk_ids: Sequence[str],
        model: str,
    ) -> Sequence[VectorModel]:
        """Vectors of the given chunks for one model."""
        if not chunk_ids:
            return []
        stmt = select(VectorModel).where(
            VectorModel.chunk_id.in_(list(chunk_ids)),
            VectorModel.model == model,
        )
        result = await session.execute(stmt)
        return result.scalars().all()


vector_crud = VectorCRUD()
