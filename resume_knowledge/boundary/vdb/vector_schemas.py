"""
Vector search schemas.

Pydantic models for nearest-neighbour queries and candidates.

Dependencies: pydantic
System role: Type definitions for vector operations
"""

from pydantic import BaseModel, Field


class NeighborQuery(BaseModel):
    """Scope and vector for one nearest-neighbour lookup."""

    resume_id: str = Field(description="Résumé the candidates are scoped to")
    model: str = Field(description="Embedding model the vectors were produced with")
    dim: int = Field(gt=0, description="Vector dimensionality")
    vector: list[float] = Field(description="Query embedding")
    k: int = Field(ge=1, description="Number of candidates to return")


class NeighborCandidate(BaseModel):
    """Single nearest-neighbour candidate (approximate score)."""

    chunk_id: str
    score: float = Field(description="Backend similarity score, refined by the caller")
