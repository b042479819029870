"""
Search API endpoints.

Routes:
- POST /resumes/{resume_id}/search - Hybrid search over a résumé
- POST /resumes/{resume_id}/context - Search plus alias-tagged turn context

Dependencies: resume_knowledge.application.services, resume_knowledge.models
System role: Query HTTP API
"""

import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from resume_knowledge.api.deps import get_chat_context_service, get_search_service
from resume_knowledge.api.routers.router_utils import to_http_exception
from resume_knowledge.application.services import ChatContextService, KnowledgeSearchService, TurnContext
from resume_knowledge.core.exceptions import ResumeKnowledgeException
from resume_knowledge.models.common import SourceType
from resume_knowledge.models.search import SearchOptions, SearchResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/resumes", tags=["search"])


class SearchRequest(BaseModel):
    """Request schema for hybrid search."""

    query: str = Field(description="Free-text query")
    limit: int | None = Field(default=None, description="Maximum results")
    source_types: list[SourceType] | None = Field(default=None, description="Restrict to these kinds")
    min_score: float | None = Field(default=None, description="Minimum raw cosine similarity")

    def to_options(self) -> SearchOptions:
        return SearchOptions(limit=self.limit, source_types=self.source_types, min_score=self.min_score)


@router.post("/{resume_id}/search", response_model=SearchResponse)
async def search_resume(
    resume_id: str,
    request: SearchRequest,
    search_service: KnowledgeSearchService = Depends(get_search_service),
) -> SearchResponse:
    """
    Hybrid search over one résumé.

    Raises:
        HTTPException(503): Query could not be embedded
        HTTPException(504): Search failed or timed out
    """
    try:
        return await search_service.search(resume_id, request.query, request.to_options())
    except ResumeKnowledgeException as e:
        raise to_http_exception(e)


@router.post("/{resume_id}/context", response_model=TurnContext)
async def build_context(
    resume_id: str,
    request: SearchRequest,
    search_service: KnowledgeSearchService = Depends(get_search_service),
    context_service: ChatContextService = Depends(get_chat_context_service),
) -> TurnContext:
    """
    Search, then build this turn's aliases and alias-tagged context.

    The returned id_map must be sent back with the answer for resolution.
    """
    try:
        response = await search_service.search(resume_id, request.query, request.to_options())
        return await context_service.build_turn_context(resume_id, response.results)
    except ResumeKnowledgeException as e:
        raise to_http_exception(e)
