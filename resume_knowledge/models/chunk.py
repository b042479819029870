"""
Chunk embedding domain model.

Output of the embedding generator and input of chunk replacement.

Dependencies: pydantic
System role: Chunk + vector data structure handed between layers
"""

from pydantic import BaseModel, Field


class ChunkEmbedding(BaseModel):
    """One chunk of source text together with its embedding."""

    chunk_index: int = Field(ge=0, description="Position of the chunk within its source")
    text: str = Field(description="Chunk text")
    hash: str = Field(description="First 16 hex chars of the SHA-256 of the text")
    embedding: list[float] = Field(description="Embedding vector")
    model: str = Field(description="Embedding model that produced the vector")
    dim: int = Field(gt=0, description="Vector dimensionality")


class EmbeddingOptions(BaseModel):
    """
    Chunking options for a single generate call.

    Leaving every field unset uses the configured "natural" chunking.
    `single_chunk=True` switches to one large window per input.
    """

    chunk_size: int | None = Field(default=None, description="Approximate chunk size in characters")
    overlap: int | None = Field(default=None, description="Overlap between consecutive chunks")
    single_chunk: bool = Field(default=False, description="Embed the whole input as one chunk")
