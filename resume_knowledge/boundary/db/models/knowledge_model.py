"""
Knowledge chunk and vector ORM models.

A chunk is a piece of text derived from one source entity; a vector is
its embedding under one model. Chunks of a source are replaced as a set
whenever the source changes.

Dependencies: sqlalchemy, resume_knowledge.boundary.db.base
System role: Unified lexical + vector index storage
"""

from sqlalchemy import ForeignKey, Index, Integer, JSON, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from resume_knowledge.boundary.db.base import Base, IdMixin, TimestampMixin


class KnowledgeChunkModel(Base, IdMixin, TimestampMixin):
    """
    Knowledge chunk ORM model.

    `source_id` is polymorphic over the content tables, so it carries no
    foreign key; existence is checked before every replacement.

    Attributes:
        resume_id: Résumé the chunk is scoped to
        source_type: bullet_point, project, branch, page or audio_summary
        source_id: Opaque id of the owning entity
        text: Chunk text
        chunk_index: Position within the source
        hash: Content hash of the text
    """

    __tablename__ = "knowledge_chunks"
    __table_args__ = (
        Index("ix_knowledge_chunks_source", "source_type", "source_id"),
    )

    resume_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("resumes.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    source_type: Mapped[str] = mapped_column(String(32), nullable=False)
    source_id: Mapped[str] = mapped_column(String(64), nullable=False)
    text: Mapped[str] = mapped_column(Text, nullable=False)
    chunk_index: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    hash: Mapped[str] = mapped_column(String(64), nullable=False)

    vectors = relationship(
        "VectorModel",
        back_populates="chunk",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class VectorModel(Base, IdMixin, TimestampMixin):
    """
    Embedding vector ORM model.

    At most one vector per chunk per model. `dim` is stored so searches can
    scope to one dimensionality without inspecting the payload.

    Attributes:
        chunk_id: Owning chunk (cascade delete)
        model: Embedding model identifier
        dim: Vector dimensionality
        embedding: JSON array of floats
    """

    __tablename__ = "knowledge_vectors"
    __table_args__ = (
        UniqueConstraint("chunk_id", "model", name="uq_knowledge_vectors_chunk_model"),
        Index("ix_knowledge_vectors_scope", "resume_id", "model", "dim"),
    )

    resume_id: Mapped[str] = mapped_column(String(64), nullable=False)
    chunk_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("knowledge_chunks.id", ondelete="CASCADE"),
        nullable=False,
    )
    model: Mapped[str] = mapped_column(String(128), nullable=False)
    dim: Mapped[int] = mapped_column(Integer, nullable=False)
    embedding: Mapped[list] = mapped_column(JSON, nullable=False)

    chunk = relationship("KnowledgeChunkModel", back_populates="vectors")
