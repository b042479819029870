"""
Citation API endpoints.

Routes:
- POST /citations/resolve - Resolve alias markers in an answer
- POST /citations/validate - Report defects in an answer's markers

Dependencies: resume_knowledge.core.citation_resolver
System role: Citation resolution HTTP API
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from resume_knowledge.api.deps import get_chat_context_service
from resume_knowledge.application.services import ChatContextService
from resume_knowledge.core.citation_resolver import CitationProblem, validate_citations
from resume_knowledge.models.citation import CitationResolution, IdMap

router = APIRouter(prefix="/citations", tags=["citations"])


class CitationRequest(BaseModel):
    """Answer text with the alias map of the turn that produced it."""

    text: str
    id_map: IdMap = Field(default_factory=IdMap)


class ValidationResponse(BaseModel):
    valid: bool
    problems: list[CitationProblem]


@router.post("/resolve", response_model=CitationResolution)
async def resolve(
    request: CitationRequest,
    context_service: ChatContextService = Depends(get_chat_context_service),
) -> CitationResolution:
    """Resolve citation markers to entity ids; unknown aliases are dropped."""
    return context_service.resolve_answer(request.text, request.id_map)


@router.post("/validate", response_model=ValidationResponse)
async def validate(request: CitationRequest) -> ValidationResponse:
    """Check marker syntax, alias shape and alias membership."""
    problems = validate_citations(request.text, request.id_map)
    return ValidationResponse(valid=not problems, problems=problems)
