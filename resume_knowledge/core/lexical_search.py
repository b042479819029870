"""
Lexical search over knowledge chunk text.

Token OR-match scoped to one résumé. Storage does a substring prefilter;
relevance is the number of distinct query tokens found among the chunk's
own tokens, ties broken by chunk id.

Dependencies: sqlalchemy, resume_knowledge.boundary.db
System role: Keyword half of hybrid retrieval
"""

import logging
from typing import Sequence

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from resume_knowledge.boundary.db.CRUD import knowledge_chunk_crud
from resume_knowledge.core.scoring import distinct_tokens, tokenize
from resume_knowledge.models.common import SourceType
from resume_knowledge.models.search import SearchHit

logger = logging.getLogger(__name__)


class LexicalSearch:
    """Keyword search over chunk text."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        overfetch: int = 50,
    ) -> None:
        """
        Args:
            session_factory: Factory for the per-search session
            overfetch: Pool size kept before filtering by source type
        """
        self._session_factory = session_factory
        self._overfetch = overfetch

    async def search(
        self,
        resume_id: str,
        query: str,
        limit: int,
        source_types: Sequence[SourceType] | None = None,
    ) -> list[SearchHit]:
        """
        Chunks of a résumé matching any query token.

        With `source_types`, the top max(limit, overfetch) matches are
        filtered in memory, so a filtered search can miss matches ranked
        below that pool.

        Returns:
            Hits ordered by relevance; `score` is the token overlap ratio
        """
        tokens = distinct_tokens(query)
        if not tokens or limit <= 0:
            return []

        async with self._session_factory() as session:
            rows = await knowledge_chunk_crud.match_tokens(session, resume_id, tokens)

        ranked = []
        for row in rows:
            matched = len(set(tokens) & set(tokenize(row.text)))
            if matched:
                ranked.append((matched, row))
        ranked.sort(key=lambda pair: (-pair[0], pair[1].id))

        if source_types:
            wanted = {SourceType(t).value for t in source_types}
            pool = ranked[:max(limit, self._overfetch)]
            ranked = [pair for pair in pool if pair[1].source_type in wanted]

        hits = [
            SearchHit(
                chunk_id=row.id,
                source_type=row.source_type,
                source_id=row.source_id,
                text=row.text,
                chunk_index=row.chunk_index,
                score=matched / len(tokens),
                lexical_score=matched / len(tokens),
            )
            for matched, row in ranked[:limit]
        ]
        logger.debug(
            f"{__name__}:search - resume={resume_id} tokens={len(tokens)} "
            f"prefiltered={len(rows)} returned={len(hits)}"
        )
        return hits
