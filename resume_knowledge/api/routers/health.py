"""
Liveness and database readiness checks.

Routes: GET /health, GET /health/db

Dependencies: resume_knowledge.api.deps
System role: Health check HTTP API
"""

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from resume_knowledge.api.deps import ServiceCache, get_service_cache


class HealthResponse(BaseModel):
    """Health check result."""

    status: str
    message: str


router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse)
async def health_check(cache: ServiceCache = Depends(get_service_cache)) -> HealthResponse:
    """Process is up; reports the configured embedding model."""
    model = cache.settings.embedding.model
    return HealthResponse(status="healthy", message=f"Knowledge service up (embedding model {model})")


@router.get("/db", response_model=HealthResponse)
async def health_check_db(cache: ServiceCache = Depends(get_service_cache)) -> HealthResponse:
    """Round-trip a trivial query through the knowledge database."""
    try:
        async with cache.session_factory() as session:
            await session.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        raise HTTPException(status_code=503, detail=f"Knowledge database unreachable: {e}") from e
    return HealthResponse(status="healthy", message="Knowledge database reachable")
