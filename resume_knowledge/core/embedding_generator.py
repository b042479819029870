"""
Embedding generator for résumé content.

Normalizes text, splits it into overlapping paragraph-aware chunks and
embeds every chunk in a single provider call. Output is validated as a
whole: either every chunk comes back with a well-formed vector of the
model's declared dimensionality, or EmbeddingProviderError is raised and
nothing is returned.

Dependencies: langchain_core, langchain_text_splitters, hashlib
System role: First stage of the knowledge indexing pipeline
"""

import hashlib
import logging
import math
import re
from numbers import Real

from langchain_core.embeddings import Embeddings
from langchain_text_splitters import RecursiveCharacterTextSplitter

from resume_knowledge.configs import get_settings
from resume_knowledge.core.exceptions import EmbeddingProviderError
from resume_knowledge.models.chunk import ChunkEmbedding, EmbeddingOptions

logger = logging.getLogger(__name__)

MODEL_DIMENSIONS: dict[str, int] = {
    "text-embedding-3-small": 1536,
    "text-embedding-3-large": 3072,
    "text-embedding-ada-002": 1536,
    # Native size; the configured dimension overrides it when smaller vectors are requested
    "models/gemini-embedding-001": 3072,
    "gemini-embedding-001": 3072,
}

MIN_CHUNK_SIZE = 256
SINGLE_CHUNK_SIZE = 8192

_PARAGRAPH_BREAK = re.compile(r"\n\s*\n")
_WHITESPACE = re.compile(r"\s+")


def content_hash(text: str) -> str:
    """First 16 hex characters of the SHA-256 of `text`."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()[:16]


def normalize_text(text: str, collapse_whitespace: bool = True) -> str:
    """
    Trim text and optionally collapse whitespace inside paragraphs.

    Paragraph breaks (blank lines) survive as a single blank line.
    """
    text = text.strip()
    if not collapse_whitespace:
        return text
    paragraphs = (_WHITESPACE.sub(" ", p).strip() for p in _PARAGRAPH_BREAK.split(text))
    return "\n\n".join(p for p in paragraphs if p)


class EmbeddingGenerator:
    """Chunk and embed text with a LangChain Embeddings client."""

    def __init__(
        self,
        embeddings: Embeddings,
        model: str,
        dimension: int | None = None,
        chunk_size: int | None = None,
        chunk_overlap: int | None = None,
        normalize_whitespace: bool | None = None,
    ) -> None:
        """
        Initialize the generator.

        Args:
            embeddings: LangChain embeddings client
            model: Model identifier recorded on every vector
            dimension: Declared dimensionality (looked up for known models if None)
            chunk_size: Natural chunk size (configured default if None; the
                global settings are only read when one of the chunking
                arguments is missing)
            chunk_overlap: Natural overlap (configured default if None)
            normalize_whitespace: Collapse intra-paragraph whitespace

        Raises:
            ValueError: When the model has no declared dimensionality
        """
        declared = dimension if dimension is not None else MODEL_DIMENSIONS.get(model)
        if declared is None or declared <= 0:
            raise ValueError(f"No declared dimensionality for model {model}")

        if None in (chunk_size, chunk_overlap, normalize_whitespace):
            config = get_settings().embedding
            chunk_size = config.chunk_size if chunk_size is None else chunk_size
            chunk_overlap = config.chunk_overlap if chunk_overlap is None else chunk_overlap
            if normalize_whitespace is None:
                normalize_whitespace = config.normalize_whitespace

        self._embeddings = embeddings
        self.model = model
        self.dimension = declared
        self._chunk_size = chunk_size
        self._chunk_overlap = chunk_overlap
        self._normalize = normalize_whitespace

    def split(self, text: str, options: EmbeddingOptions | None = None) -> list[str]:
        """
        Split normalized text into chunk texts.

        Empty or whitespace-only input yields no chunks.
        """
        options = options or EmbeddingOptions()
        normalized = normalize_text(text, self._normalize)
        if not normalized:
            return []

        if options.single_chunk:
            size, overlap = SINGLE_CHUNK_SIZE, 0
        else:
            size = options.chunk_size if options.chunk_size is not None else self._chunk_size
            overlap = options.overlap if options.overlap is not None else self._chunk_overlap
        size = max(MIN_CHUNK_SIZE, size)
        overlap = min(max(0, overlap), size - 1)

        splitter = RecursiveCharacterTextSplitter(
            chunk_size=size,
            chunk_overlap=overlap,
            separators=["\n\n", "\n", ". ", " ", ""],
            length_function=len,
        )
        return [chunk for chunk in splitter.split_text(normalized) if chunk.strip()]

    async def generate_embeddings(
        self,
        text: str,
        options: EmbeddingOptions | None = None,
    ) -> list[ChunkEmbedding]:
        """
        Chunk and embed text.

        Args:
            text: Source text
            options: Chunking options (natural chunking if None)

        Returns:
            list[ChunkEmbedding]: One entry per chunk, empty for blank text

        Raises:
            EmbeddingProviderError: Provider failure or malformed output
        """
        chunks = self.split(text, options)
        if not chunks:
            return []

        vectors = await self._embed(chunks)
        return [
            ChunkEmbedding(
                chunk_index=index,
                text=chunk,
                hash=content_hash(chunk),
                embedding=vector,
                model=self.model,
                dim=self.dimension,
            )
            for index, (chunk, vector) in enumerate(zip(chunks, vectors))
        ]

    async def embed_query(self, text: str) -> ChunkEmbedding | None:
        """Embedding of the first chunk of a query, None for a blank query."""
        chunks = await self.generate_embeddings(text)
        return chunks[0] if chunks else None

    async def embed_summary_points(self, points: list[str]) -> list[ChunkEmbedding]:
        """
        Embed audio summary points, one vector per point.

        Each point keeps its position in `points` as chunk_index, so blank
        points leave gaps rather than shifting later indices.
        """
        entries = [
            (index, normalize_text(point, self._normalize))
            for index, point in enumerate(points)
        ]
        entries = [(index, point) for index, point in entries if point]
        if not entries:
            return []

        vectors = await self._embed([point for _, point in entries])
        return [
            ChunkEmbedding(
                chunk_index=index,
                text=point,
                hash=content_hash(point),
                embedding=vector,
                model=self.model,
                dim=self.dimension,
            )
            for (index, point), vector in zip(entries, vectors)
        ]

    async def _embed(self, texts: list[str]) -> list[list[float]]:
        """Call the provider once and validate the whole batch."""
        try:
            vectors = await self._embeddings.aembed_documents(texts)
        except Exception as e:
            logger.error(f"{__name__}:_embed - Provider call failed: {type(e).__name__}: {e}")
            raise EmbeddingProviderError(
                f"Embedding provider call failed: {e}",
                model=self.model,
                details={"chunks": len(texts)},
            ) from e

        self._validate(vectors, len(texts))
        logger.debug(f"{__name__}:_embed - Embedded {len(texts)} chunks with {self.model}")
        return [[float(x) for x in vector] for vector in vectors]

    def _validate(self, vectors: object, expected: int) -> None:
        if not isinstance(vectors, list) or len(vectors) != expected:
            got = len(vectors) if isinstance(vectors, list) else type(vectors).__name__
            raise EmbeddingProviderError(
                "Embedding count does not match chunk count",
                model=self.model,
                details={"expected": expected, "got": got},
            )

        for position, vector in enumerate(vectors):
            if not isinstance(vector, (list, tuple)) or len(vector) == 0:
                raise EmbeddingProviderError(
                    "Provider returned an empty embedding",
                    model=self.model,
                    details={"position": position},
                )
            if len(vector) != self.dimension:
                raise EmbeddingProviderError(
                    "Embedding dimensionality does not match the model",
                    model=self.model,
                    details={"position": position, "expected": self.dimension, "got": len(vector)},
                )
            if not all(
                isinstance(x, Real) and not isinstance(x, bool) and math.isfinite(x) for x in vector
            ):
                raise EmbeddingProviderError(
                    "Provider returned non-numeric embedding values",
                    model=self.model,
                    details={"position": position},
                )
