"""
Vector boundary layer: nearest-neighbour backends and embedding clients.

Exports:
  - NearestNeighborSearch: Backend interface
  - FaissNearestNeighborSearch, ScanNearestNeighborSearch: Implementations
  - get_nearest_neighbor_search(): Backend selection from configuration
  - get_embeddings(): Embedding client selection from configuration
"""

from resume_knowledge.boundary.vdb.nearest_neighbor import NearestNeighborSearch
from resume_knowledge.boundary.vdb.faiss_search import FaissNearestNeighborSearch
from resume_knowledge.boundary.vdb.scan_search import ScanNearestNeighborSearch
from resume_knowledge.boundary.vdb.vector_store_factory import get_nearest_neighbor_search
from resume_knowledge.boundary.vdb.embeddings_factory import get_embeddings
from resume_knowledge.boundary.vdb.vector_schemas import NeighborCandidate, NeighborQuery

__all__ = [
    "NearestNeighborSearch",
    "FaissNearestNeighborSearch",
    "ScanNearestNeighborSearch",
    "get_nearest_neighbor_search",
    "get_embeddings",
    "NeighborCandidate",
    "NeighborQuery",
]
