"""
Application services: orchestration over the core and boundary layers.
"""

from resume_knowledge.application.services.indexing_service import IndexingService
from resume_knowledge.application.services.search_service import KnowledgeSearchService
from resume_knowledge.application.services.chat_context_service import ChatContextService, TurnContext

__all__ = [
    "IndexingService",
    "KnowledgeSearchService",
    "ChatContextService",
    "TurnContext",
]
