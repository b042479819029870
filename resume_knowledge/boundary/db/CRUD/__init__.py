"""
CRUD operations package.

Exports:
  - BaseCRUD: Generic CRUD base
  - KnowledgeChunkCRUD, VectorCRUD: Knowledge index operations
  - Content CRUD classes and singletons for résumé entities
  - source_exists, source_resume_id: Existence and ownership checks keyed by source type
"""

from resume_knowledge.boundary.db.CRUD.base_crud import BaseCRUD
from resume_knowledge.boundary.db.CRUD.knowledge_chunk_crud import KnowledgeChunkCRUD, knowledge_chunk_crud
from resume_knowledge.boundary.db.CRUD.vector_crud import VectorCRUD, vector_crud
from resume_knowledge.boundary.db.CRUD.content_crud import (
    AudioTranscriptionCRUD,
    BranchCRUD,
    BulletPointCRUD,
    PageCRUD,
    ProjectCRUD,
    ResumeCRUD,
    audio_transcription_crud,
    branch_crud,
    bullet_point_crud,
    page_crud,
    project_crud,
    resume_crud,
    source_exists,
    source_resume_id,
)

__all__ = [
    "BaseCRUD",
    "KnowledgeChunkCRUD",
    "VectorCRUD",
    "ResumeCRUD",
    "ProjectCRUD",
    "BulletPointCRUD",
    "BranchCRUD",
    "PageCRUD",
    "AudioTranscriptionCRUD",
    "knowledge_chunk_crud",
    "vector_crud",
    "resume_crud",
    "project_crud",
    "bullet_point_crud",
    "branch_crud",
    "page_crud",
    "audio_transcription_crud",
    "source_exists",
    "source_resume_id",
]
