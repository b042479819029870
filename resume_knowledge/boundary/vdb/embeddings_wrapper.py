"""
Gemini embeddings pinned to the index's dimensionality.

Vectors are stored and searched per (model, dim), so a provider that
silently returns its native size would produce vectors the dimension
gate rejects. gemini-embedding-001 answers with 3072 components unless
each request names a smaller size, and GoogleGenerativeAIEmbeddings only
takes that size per call.

Dependencies: langchain_google_genai
System role: Embedding dimension consistency for the knowledge index
"""

import logging
from typing import Any

from langchain_google_genai import GoogleGenerativeAIEmbeddings

logger = logging.getLogger(__name__)

GEMINI_EMBEDDING_MODEL = "models/gemini-embedding-001"


class FixedDimensionEmbeddings(GoogleGenerativeAIEmbeddings):
    """
    GoogleGenerativeAIEmbeddings that always requests `dimension` components.

    Every entry point, sync and async, fills in output_dimensionality when
    the caller leaves it out. The embedding generator goes through
    `aembed_documents`.
    """

    _dimension: int = 1536

    def __init__(self, model: str = GEMINI_EMBEDDING_MODEL, dimension: int = 1536, **kwargs: Any) -> None:
        if dimension <= 0:
            raise ValueError(f"dimension must be positive, got {dimension}")
        super().__init__(model=model, **kwargs)
        self._dimension = dimension
        logger.info(f"{__name__}:__init__ - {model} pinned to {dimension} dims")

    def _pinned(self, kwargs: dict[str, Any]) -> dict[str, Any]:
        if not kwargs.get("output_dimensionality"):
            kwargs["output_dimensionality"] = self._dimension
        return kwargs

    def embed_documents(self, texts: list[str], **kwargs: Any) -> list[list[float]]:
        return super().embed_documents(texts, **self._pinned(kwargs))

    def embed_query(self, text: str, **kwargs: Any) -> list[float]:
        return super().embed_query(text, **self._pinned(kwargs))

    async def aembed_documents(self, texts: list[str], **kwargs: Any) -> list[list[float]]:
        return await super().aembed_documents(texts, **self._pinned(kwargs))

    async def aembed_query(self, text: str, **kwargs: Any) -> list[float]:
        return await super().aembed_query(text, **self._pinned(kwargs))
