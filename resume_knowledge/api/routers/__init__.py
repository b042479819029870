"""API routers."""

from .citations import router as citations_router
from .health import router as health_router
from .search import router as search_router
from .sources import router as sources_router

__all__ = [
    "citations_router",
    "health_router",
    "search_router",
    "sources_router",
]
