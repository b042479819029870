"""
Knowledge source API endpoints.

Routes:
- PUT /resumes/{resume_id}/sources/{source_type}/{source_id} - (Re)index a source's text
- DELETE /resumes/{resume_id}/sources/{source_type}/{source_id} - Drop a source's chunks

Dependencies: resume_knowledge.application.services
System role: Indexing HTTP API
"""

import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from resume_knowledge.api.deps import get_indexing_service
from resume_knowledge.api.routers.router_utils import to_http_exception
from resume_knowledge.application.services import IndexingService
from resume_knowledge.core.exceptions import ResumeKnowledgeException
from resume_knowledge.models.chunk import EmbeddingOptions
from resume_knowledge.models.common import SourceType

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/resumes", tags=["sources"])


class IndexSourceRequest(BaseModel):
    """Request schema for indexing a source."""

    text: str = Field(description="Current text of the source; blank clears it")
    single_chunk: bool = Field(default=False, description="Embed the whole text as one chunk")


class IndexSourceResponse(BaseModel):
    source_type: SourceType
    source_id: str
    chunks: int


class RemoveSourceResponse(BaseModel):
    source_type: SourceType
    source_id: str
    removed: int


@router.put("/{resume_id}/sources/{source_type}/{source_id}", response_model=IndexSourceResponse)
async def index_source(
    resume_id: str,
    source_type: SourceType,
    source_id: str,
    request: IndexSourceRequest,
    indexing_service: IndexingService = Depends(get_indexing_service),
) -> IndexSourceResponse:
    """
    Replace the indexed chunks of a source.

    Raises:
        HTTPException(404): Owning entity does not exist in this résumé
        HTTPException(503): Embedding failed; the previous chunks are kept
    """
    try:
        chunks = await indexing_service.index_source(
            resume_id,
            source_type,
            source_id,
            request.text,
            EmbeddingOptions(single_chunk=request.single_chunk),
        )
    except ResumeKnowledgeException as e:
        raise to_http_exception(e)
    return IndexSourceResponse(source_type=source_type, source_id=source_id, chunks=chunks)


@router.delete("/{resume_id}/sources/{source_type}/{source_id}", response_model=RemoveSourceResponse)
async def remove_source(
    resume_id: str,
    source_type: SourceType,
    source_id: str,
    indexing_service: IndexingService = Depends(get_indexing_service),
) -> RemoveSourceResponse:
    """Delete every chunk and vector of a source; 404 when the entity belongs to another résumé."""
    try:
        removed = await indexing_service.remove_source(source_type, source_id, resume_id)
    except ResumeKnowledgeException as e:
        raise to_http_exception(e)
    return RemoveSourceResponse(source_type=source_type, source_id=source_id, removed=removed)
