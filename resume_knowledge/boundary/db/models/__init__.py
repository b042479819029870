"""
Database models package.

Exports:
  - ResumeModel, ProjectModel, BulletPointModel, BranchModel, PageModel,
    AudioTranscriptionModel: Résumé content entities
  - KnowledgeChunkModel, VectorModel: Knowledge index storage

Dependencies: sqlalchemy, resume_knowledge.boundary.db.base
System role: Database model definitions for domain entities
"""

from resume_knowledge.boundary.db.models.resume_model import (
    AudioTranscriptionModel,
    BranchModel,
    BulletPointModel,
    PageModel,
    ProjectModel,
    ResumeModel,
)
from resume_knowledge.boundary.db.models.knowledge_model import KnowledgeChunkModel, VectorModel

__all__ = [
    "ResumeModel",
    "ProjectModel",
    "BulletPointModel",
    "BranchModel",
    "PageModel",
    "AudioTranscriptionModel",
    "KnowledgeChunkModel",
    "VectorModel",
]
