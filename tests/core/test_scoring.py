"""
Test suite for scoring primitives.

Covers tokenization, cosine bounds, normalization, lexical overlap and
fusion monotonicity.
"""

import random

import pytest

from resume_knowledge.core.scoring import (
    cosine_similarity,
    fuse_scores,
    lexical_overlap,
    normalize_cosine,
    tokenize,
)


class TestTokenize:
    def test_lowercases_and_splits_on_punctuation(self) -> None:
        assert tokenize("Real-time FRAUD, detection!") == ["real", "time", "fraud", "detection"]

    def test_empty_and_symbol_only_text_has_no_tokens(self) -> None:
        assert tokenize("") == []
        assert tokenize("--- !!! ...") == []


class TestCosineSimilarity:
    def test_self_similarity_is_one(self) -> None:
        vector = [0.3, -1.2, 4.0, 0.0]
        assert cosine_similarity(vector, vector) == pytest.approx(1.0)

    def test_opposite_vectors_score_minus_one(self) -> None:
        assert cosine_similarity([1.0, 2.0], [-1.0, -2.0]) == pytest.approx(-1.0)

    def test_zero_vector_scores_zero(self) -> None:
        assert cosine_similarity([0.0, 0.0, 0.0], [1.0, 2.0, 3.0]) == 0.0
        assert cosine_similarity([1.0, 2.0, 3.0], [0.0, 0.0, 0.0]) == 0.0

    def test_random_vectors_stay_in_bounds(self) -> None:
        rng = random.Random(7)
        for _ in range(50):
            a = [rng.uniform(-5, 5) for _ in range(16)]
            b = [rng.uniform(-5, 5) for _ in range(16)]
            assert -1.0 <= cosine_similarity(a, b) <= 1.0

    def test_length_mismatch_raises(self) -> None:
        with pytest.raises(ValueError):
            cosine_similarity([1.0, 2.0], [1.0, 2.0, 3.0])


class TestNormalizeCosine:
    @pytest.mark.parametrize(
        "similarity, expected",
        [(-1.0, 0.0), (0.0, 0.5), (1.0, 1.0), (3.0, 1.0), (-7.0, 0.0)],
    )
    def test_maps_onto_unit_interval(self, similarity: float, expected: float) -> None:
        assert normalize_cosine(similarity) == pytest.approx(expected)


class TestLexicalOverlap:
    def test_ratio_of_query_tokens_found(self) -> None:
        text = "Built a real-time fraud detection pipeline using Kafka and Spark"
        assert lexical_overlap("streaming fraud pipeline", text) == pytest.approx(2 / 3)

    def test_query_without_tokens_scores_zero(self) -> None:
        assert lexical_overlap("?!", "anything at all") == 0.0

    def test_full_match_is_one(self) -> None:
        assert lexical_overlap("Kafka SPARK", "spark and kafka") == 1.0


class TestFuseScores:
    def test_default_weights(self) -> None:
        fused = fuse_scores(0.5, 0.5, 0.7, 0.3)
        assert fused == pytest.approx(0.7 * 0.75 + 0.3 * 0.5)

    def test_lexical_only_chunk_gets_no_vector_component(self) -> None:
        assert fuse_scores(None, 1.0, 0.7, 0.3) == pytest.approx(0.3)

    def test_positive_lexical_overlap_never_lowers_score(self) -> None:
        rng = random.Random(11)
        for _ in range(100):
            similarity = rng.uniform(-1, 1)
            overlap = rng.uniform(0.01, 1)
            assert fuse_scores(similarity, overlap, 0.7, 0.3) >= fuse_scores(similarity, 0.0, 0.7, 0.3)

    def test_result_stays_in_unit_interval(self) -> None:
        for similarity in (-1.0, -0.2, 0.0, 0.4, 1.0):
            for overlap in (0.0, 0.5, 1.0):
                fused = fuse_scores(similarity, overlap, 0.7, 0.3)
                assert 0.0 <= fused <= 1.0 + 1e-12
