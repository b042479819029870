"""
Nearest-neighbour backend factory.

Selects FAISS (native index) or full scan from VECTOR_STORE_STORE_TYPE.
Both expose the NearestNeighborSearch interface.

Dependencies: resume_knowledge.boundary.vdb, resume_knowledge.configs
System role: Nearest-neighbour backend instantiation and selection
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from resume_knowledge.boundary.vdb.nearest_neighbor import NearestNeighborSearch
from resume_knowledge.boundary.vdb.faiss_search import FaissNearestNeighborSearch
from resume_knowledge.boundary.vdb.scan_search import ScanNearestNeighborSearch
from resume_knowledge.configs import Settings, get_settings

logger = logging.getLogger(__name__)


def get_nearest_neighbor_search(
    session_factory: async_sessionmaker[AsyncSession],
    store_type: str | None = None,
    settings: Settings | None = None,
) -> NearestNeighborSearch:
    """
    Factory function to get the nearest-neighbour backend from configuration.

    Args:
        session_factory: Session factory the backend reads vectors with
        store_type: Optional override of the configured backend
        settings: Settings to read the backend and scan batch size from
            (the configured singleton if None)

    Returns:
        NearestNeighborSearch: FAISS or full-scan backend

    Raises:
        ValueError: If the store type is invalid
    """
    settings = settings or get_settings()
    store_type = (store_type or settings.vector_store.store_type).lower()

    if store_type == "faiss":
        logger.info(f"{__name__}:get_nearest_neighbor_search - Using FAISS index backend")
        return FaissNearestNeighborSearch(session_factory)

    elif store_type == "scan":
        batch_size = settings.search.scan_batch_size
        logger.info(f"{__name__}:get_nearest_neighbor_search - Using full-scan backend (batch {batch_size})")
        return ScanNearestNeighborSearch(session_factory, batch_size=batch_size)

    else:
        raise ValueError(
            f"Invalid VECTOR_STORE_STORE_TYPE: {store_type}. "
            f"Must be 'faiss' or 'scan'."
        )
