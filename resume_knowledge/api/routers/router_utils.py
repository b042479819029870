"""
Shared error mapping for routers.

Dependencies: fastapi, resume_knowledge.core.exceptions
System role: Domain exception to HTTP status translation
"""

import logging

from fastapi import HTTPException

from resume_knowledge.core.exceptions import (
    EmbeddingProviderError,
    ResumeKnowledgeException,
    RetrievalError,
    SourceNotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def to_http_exception(error: ResumeKnowledgeException) -> HTTPException:
    """
    Map a domain exception to an HTTPException.

    SourceNotFoundError -> 404, ValidationError -> 422,
    EmbeddingProviderError -> 503, RetrievalError -> 504, anything else -> 500.
    """
    if isinstance(error, SourceNotFoundError):
        return HTTPException(status_code=404, detail=error.message)
    if isinstance(error, ValidationError):
        return HTTPException(status_code=422, detail=error.message)
    if isinstance(error, EmbeddingProviderError):
        return HTTPException(
            status_code=503,
            detail="Embedding provider unavailable; the item isn't searchable yet",
        )
    if isinstance(error, RetrievalError):
        return HTTPException(status_code=504, detail=error.message)

    logger.error(f"{__name__}:to_http_exception - Unmapped error: {error}")
    return HTTPException(status_code=500, detail=error.message)
