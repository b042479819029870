"""
FastAPI application factory.

Mounts the health, search, source-indexing and citation routers under
/api/v1 and ties the service container's lifetime to the app's.

Dependencies: fastapi, uvicorn, resume_knowledge.api.routers
System role: API entry point with router assembly and server launch
"""

from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from resume_knowledge import __version__
from resume_knowledge.api.deps.dependencies import ServiceCache
from resume_knowledge.observability import configure_logging, get_logger
from resume_knowledge.observability.middleware import CorrelationMiddleware, RequestLoggingMiddleware

from .routers import (
    citations_router,
    health_router,
    search_router,
    sources_router,
)

API_PREFIX = "/api/v1"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Configure logging, warm up the service container, dispose it on exit."""
    cache: ServiceCache = app.state.service_cache
    configure_logging(cache.settings.log_level)
    logger = get_logger(__name__)

    await cache.startup()
    logger.info(
        f"{__name__}:lifespan - Knowledge services ready "
        f"(environment={cache.settings.environment}, backend={cache.settings.vector_store.store_type})"
    )
    yield
    await cache.shutdown()
    logger.info(f"{__name__}:lifespan - Knowledge services shut down")


def create_app(service_cache: ServiceCache | None = None) -> FastAPI:
    """
    Build the application.

    Args:
        service_cache: Prebuilt service container; one is built from the
            environment settings when omitted

    Returns:
        FastAPI: Application with routers and middleware registered
    """
    app = FastAPI(
        title="Résumé Knowledge API",
        description="Hybrid retrieval and citation resolution over résumé content",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.service_cache = service_cache or ServiceCache()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["*"],
        expose_headers=["X-Correlation-ID"],
    )
    # Added last so it runs first and the access log sees the correlation id
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationMiddleware)

    for router in (health_router, search_router, sources_router, citations_router):
        app.include_router(router, prefix=API_PREFIX)

    return app


if __name__ == "__main__":
    uvicorn.run(
        "resume_knowledge.api.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
    )
