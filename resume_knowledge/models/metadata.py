"""
Enrichment metadata models.

Tagged union keyed by `type`; each variant mirrors one source kind.

Dependencies: pydantic
System role: Display context attached to search hits
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field


class BulletPointMetadata(BaseModel):
    type: Literal["bullet_point"] = "bullet_point"
    content: str
    position: int
    project_title: str
    project_id: str


class ProjectMetadata(BaseModel):
    type: Literal["project"] = "project"
    title: str
    description: str | None = None
    position: int


class BranchMetadata(BaseModel):
    type: Literal["branch"] = "branch"
    content: str
    branch_type: str
    position: int
    bullet_content: str
    project_title: str


class PageMetadata(BaseModel):
    type: Literal["page"] = "page"
    title: str
    icon: str | None = None
    is_public: bool
    position: int
    page_id: str


class AudioSummaryMetadata(BaseModel):
    type: Literal["audio_summary"] = "audio_summary"
    file_name: str
    language: str | None = None
    duration: float | None = None
    page_title: str
    page_id: str
    summary_points_count: int


ChunkMetadata = Annotated[
    Union[
        BulletPointMetadata,
        ProjectMetadata,
        BranchMetadata,
        PageMetadata,
        AudioSummaryMetadata,
    ],
    Field(discriminator="type"),
]
