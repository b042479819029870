"""
Similarity and overlap scoring primitives.

Pure functions shared by vector search, lexical search and the fusion
ranker so every stage agrees on tokenization and normalization.

Dependencies: numpy, re
System role: Scoring maths for hybrid retrieval
"""

import re
from typing import Sequence

import numpy as np

_NON_ALNUM = re.compile(r"[^a-z0-9\s]")


def tokenize(text: str) -> list[str]:
    """
    Split text into lower-case alphanumeric tokens.

    Punctuation becomes whitespace, so "fraud-detection" yields
    ["fraud", "detection"].
    """
    return _NON_ALNUM.sub(" ", text.lower()).split()


def distinct_tokens(text: str) -> list[str]:
    """Tokens of `text` in first-seen order without repeats."""
    return list(dict.fromkeys(tokenize(text)))


def cosine_similarity(a: Sequence[float] | np.ndarray, b: Sequence[float] | np.ndarray) -> float:
    """
    Cosine similarity of two equal-length vectors.

    Returns 0.0 when either vector has zero norm.

    Raises:
        ValueError: If the vectors differ in length
    """
    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)
    if va.shape != vb.shape:
        raise ValueError(f"Vector length mismatch: {va.shape[0]} != {vb.shape[0]}")

    norm_a = float(np.linalg.norm(va))
    norm_b = float(np.linalg.norm(vb))
    if norm_a == 0.0 or norm_b == 0.0:
        return 0.0

    similarity = float(np.dot(va, vb) / (norm_a * norm_b))
    return max(-1.0, min(1.0, similarity))


def normalize_cosine(similarity: float) -> float:
    """Map a cosine similarity from [-1, 1] onto [0, 1]."""
    clamped = max(-1.0, min(1.0, similarity))
    return (clamped + 1.0) / 2.0


def lexical_overlap(query: str, text: str) -> float:
    """
    Fraction of distinct query tokens that appear in `text`.

    Returns 0.0 for a query without tokens.
    """
    query_tokens = set(tokenize(query))
    if not query_tokens:
        return 0.0
    text_tokens = set(tokenize(text))
    return len(query_tokens & text_tokens) / len(query_tokens)


def fuse_scores(
    vector_similarity: float | None,
    lexical_score: float,
    vector_weight: float,
    lexical_weight: float,
) -> float:
    """
    Weighted fusion of a raw cosine similarity and a lexical overlap ratio.

    The cosine is normalized first. A chunk the vector search never returned
    (`vector_similarity` is None) contributes 0 for the vector component.
    The result stays in [0, 1] whenever the weights sum to at most 1.
    """
    vector_component = 0.0 if vector_similarity is None else normalize_cosine(vector_similarity)
    return vector_weight * vector_component + lexical_weight * lexical_score
