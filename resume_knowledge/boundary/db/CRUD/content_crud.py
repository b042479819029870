"""
Résumé content CRUD operations.

Per-entity CRUD classes for the content tables plus the lookups used by
metadata enrichment (entity joined with its parents) and alias building
(the ordered résumé tree).

Dependencies: sqlalchemy, resume_knowledge.boundary.db.models
System role: Content persistence operations
"""

from typing import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from resume_knowledge.boundary.db.models.resume_model import (
    AudioTranscriptionModel,
    BranchModel,
    BulletPointModel,
    PageModel,
    ProjectModel,
    ResumeModel,
)
from resume_knowledge.boundary.db.CRUD.base_crud import BaseCRUD


class ResumeCRUD(BaseCRUD[ResumeModel]):
    """CRUD operations for ResumeModel."""

    def __init__(self) -> None:
        super().__init__(ResumeModel)

    async def get_structure(
        self,
        session: AsyncSession,
        resume_id: str,
    ) -> tuple[Sequence[PageModel], Sequence[ProjectModel]]:
        """
        Pages and projects of a résumé with bullets and branches loaded.

        Every level is ordered by position, then id for stable ties.

        Returns:
            (pages, projects); both empty when the résumé has no content
        """
        pages_stmt = (
            select(PageModel)
            .where(PageModel.resume_id == resume_id)
            .order_by(PageModel.position, PageModel.id)
        )
        projects_stmt = (
            select(ProjectModel)
            .where(ProjectModel.resume_id == resume_id)
            .options(
                selectinload(ProjectModel.bullet_points).selectinload(BulletPointModel.branches)
            )
            .order_by(ProjectModel.position, ProjectModel.id)
        )
        pages = (await session.execute(pages_stmt)).scalars().all()
        projects = (await session.execute(projects_stmt)).scalars().all()
        return pages, projects


class ProjectCRUD(BaseCRUD[ProjectModel]):
    """CRUD operations for ProjectModel."""

    def __init__(self) -> None:
        super().__init__(ProjectModel)


class BulletPointCRUD(BaseCRUD[BulletPointModel]):
    """CRUD operations for BulletPointModel."""

    def __init__(self) -> None:
        super().__init__(BulletPointModel)

    async def get_with_project(
        self,
        session: AsyncSession,
        bullet_id: str,
    ) -> tuple[BulletPointModel, ProjectModel] | None:
        """Bullet point joined with its project, None when either is missing."""
        stmt = (
            select(BulletPointModel, ProjectModel)
            .join(ProjectModel, ProjectModel.id == BulletPointModel.project_id)
            .where(BulletPointModel.id == bullet_id)
        )
        row = (await session.execute(stmt)).first()
        return (row[0], row[1]) if row else None


class BranchCRUD(BaseCRUD[BranchModel]):
    """CRUD operations for BranchModel."""

    def __init__(self) -> None:
        super().__init__(BranchModel)

    async def get_with_ancestors(
        self,
        session: AsyncSession,
        branch_id: str,
    ) -> tuple[BranchModel, BulletPointModel, ProjectModel] | None:
        """Branch joined with its bullet point and project."""
        stmt = (
            select(BranchModel, BulletPointModel, ProjectModel)
            .join(BulletPointModel, BulletPointModel.id == BranchModel.bullet_point_id)
            .join(ProjectModel, ProjectModel.id == BulletPointModel.project_id)
            .where(BranchModel.id == branch_id)
        )
        row = (await session.execute(stmt)).first()
        return (row[0], row[1], row[2]) if row else None


class PageCRUD(BaseCRUD[PageModel]):
    """CRUD operations for PageModel."""

    def __init__(self) -> None:
        super().__init__(PageModel)


class AudioTranscriptionCRUD(BaseCRUD[AudioTranscriptionModel]):
    """CRUD operations for AudioTranscriptionModel."""

    def __init__(self) -> None:
        super().__init__(AudioTranscriptionModel)

    async def get_with_page(
        self,
        session: AsyncSession,
        transcription_id: str,
    ) -> tuple[AudioTranscriptionModel, PageModel] | None:
        """Transcription joined with the page it is attached to."""
        stmt = (
            select(AudioTranscriptionModel, PageModel)
            .join(PageModel, PageModel.id == AudioTranscriptionModel.page_id)
            .where(AudioTranscriptionModel.id == transcription_id)
        )
        row = (await session.execute(stmt)).first()
        return (row[0], row[1]) if row else None


resume_crud = ResumeCRUD()
project_crud = ProjectCRUD()
bullet_point_crud = BulletPointCRUD()
branch_crud = BranchCRUD()
page_crud = PageCRUD()
audio_transcription_crud = AudioTranscriptionCRUD()

SOURCE_CRUDS: dict[str, BaseCRUD] = {
    "bullet_point": bullet_point_crud,
    "project": project_crud,
    "branch": branch_crud,
    "page": page_crud,
    "audio_summary": audio_transcription_crud,
}


async def source_exists(session: AsyncSession, source_type: str, source_id: str) -> bool:
    """
    Check whether the entity owning a knowledge source exists.

    Raises:
        KeyError: If source_type is not a known source kind
    """
    return await SOURCE_CRUDS[source_type].exists(session, source_id)


async def source_resume_id(session: AsyncSession, source_type: str, source_id: str) -> str | None:
    """
    Résumé that owns a knowledge source, following the parent chain.

    Returns:
        The owning résumé id, or None when the entity (or a parent) is missing

    Raises:
        KeyError: If source_type is not a known source kind
    """
    if source_type == "project":
        stmt = select(ProjectModel.resume_id).where(ProjectModel.id == source_id)
    elif source_type == "bullet_point":
        stmt = (
            select(ProjectModel.resume_id)
            .join(BulletPointModel, BulletPointModel.project_id == ProjectModel.id)
            .where(BulletPointModel.id == source_id)
        )
    elif source_type == "branch":
        stmt = (
            select(ProjectModel.resume_id)
            .join(BulletPointModel, BulletPointModel.project_id == ProjectModel.id)
            .join(BranchModel, BranchModel.bullet_point_id == BulletPointModel.id)
            .where(BranchModel.id == source_id)
        )
    elif source_type == "page":
        stmt = select(PageModel.resume_id).where(PageModel.id == source_id)
    elif source_type == "audio_summary":
        stmt = (
            select(PageModel.resume_id)
            .join(AudioTranscriptionModel, AudioTranscriptionModel.page_id == PageModel.id)
            .where(AudioTranscriptionModel.id == source_id)
        )
    else:
        raise KeyError(source_type)
    return (await session.execute(stmt)).scalar_one_or_none()
