"""
Résumé content ORM models.

The entities knowledge chunks are derived from: résumés, projects,
bullet points, branches, pages and audio transcriptions. Ordering within
a parent is by `position`.

Dependencies: sqlalchemy, resume_knowledge.boundary.db.base
System role: Content persistence joined by enrichment and alias building
"""

from sqlalchemy import Boolean, Float, ForeignKey, Integer, JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from resume_knowledge.boundary.db.base import Base, IdMixin, TimestampMixin


class ResumeModel(Base, IdMixin, TimestampMixin):
    """
    Résumé ORM model; root of all content and knowledge chunks.

    Attributes:
        title: Résumé title
        user_id: Owning user identifier (opaque)
        is_public: Whether the résumé is publicly visible
    """

    __tablename__ = "resumes"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    user_id: Mapped[str | None] = mapped_column(String(64), nullable=True, default=None)
    is_public: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    projects = relationship(
        "ProjectModel",
        back_populates="resume",
        cascade="all, delete-orphan",
        order_by="ProjectModel.position",
    )
    pages = relationship(
        "PageModel",
        back_populates="resume",
        cascade="all, delete-orphan",
        order_by="PageModel.position",
    )


class ProjectModel(Base, IdMixin, TimestampMixin):
    """Project section of a résumé."""

    __tablename__ = "projects"

    resume_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("resumes.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    resume = relationship("ResumeModel", back_populates="projects")
    bullet_points = relationship(
        "BulletPointModel",
        back_populates="project",
        cascade="all, delete-orphan",
        order_by="BulletPointModel.position",
    )


class BulletPointModel(Base, IdMixin, TimestampMixin):
    """Bullet point inside a project."""

    __tablename__ = "bullet_points"

    project_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    project = relationship("ProjectModel", back_populates="bullet_points")
    branches = relationship(
        "BranchModel",
        back_populates="bullet_point",
        cascade="all, delete-orphan",
        order_by="BranchModel.position",
    )


class BranchModel(Base, IdMixin, TimestampMixin):
    """
    Supporting detail expanding a bullet point.

    Attributes:
        branch_type: One of text, audio, video
    """

    __tablename__ = "branches"

    bullet_point_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("bullet_points.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    branch_type: Mapped[str] = mapped_column(String(16), nullable=False, default="text")
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    bullet_point = relationship("BulletPointModel", back_populates="branches")


class PageModel(Base, IdMixin, TimestampMixin):
    """Free-form document page attached to a résumé."""

    __tablename__ = "pages"

    resume_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("resumes.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    icon: Mapped[str | None] = mapped_column(String(64), nullable=True, default=None)
    is_public: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    resume = relationship("ResumeModel", back_populates="pages")
    audio_transcriptions = relationship(
        "AudioTranscriptionModel",
        back_populates="page",
        cascade="all, delete-orphan",
    )


class AudioTranscriptionModel(Base, IdMixin, TimestampMixin):
    """
    Audio transcription attached to a page.

    The transcription pipeline is external; only its summary output is
    indexed.

    Attributes:
        summary_points: JSON list of {"text": ...} objects
        status: Pipeline status reported by the producer
    """

    __tablename__ = "audio_transcriptions"

    page_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("pages.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    file_name: Mapped[str] = mapped_column(String(255), nullable=False)
    language: Mapped[str | None] = mapped_column(String(16), nullable=True, default=None)
    duration: Mapped[float | None] = mapped_column(Float, nullable=True, default=None)
    summary_points: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    status: Mapped[str] = mapped_column(String(32), nullable=False, default="completed")

    page = relationship("PageModel", back_populates="audio_transcriptions")
