"""Tests for the in-memory similarity index."""
import math

import pytest

from copilot.errors import DimensionMismatch, DuplicateKey, InvalidInput
from copilot.vector.index import IndexRecord, SimilarityIndex


def record(record_id: str, vector, **payload) -> IndexRecord:
    return IndexRecord(id=record_id, vector=vector, payload=payload)


@pytest.fixture
def abc_index() -> SimilarityIndex:
    """A=(1,0), B=(0.8,0.6), C=(0,1)."""
    index = SimilarityIndex()
    index.insert(record("A", [1.0, 0.0]))
    index.insert(record("B", [0.8, 0.6]))
    index.insert(record("C", [0.0, 1.0]))
    return index


class TestQuery:
    """Ranking, thresholds and result caps."""

    def test_threshold_and_order(self, abc_index):
        results = abc_index.query([1.0, 0.0], max_results=0, min_score=0.5)

        assert [r.record.id for r in results] == ["A", "B"]
        assert results[0].score == pytest.approx(1.0)
        assert results[1].score == pytest.approx(0.8)

    def test_scored_records_scenario(self):
        index = SimilarityIndex()
        for record_id, score in (("A", 0.95), ("B", 0.82), ("C", 0.5)):
            index.insert(record(record_id, [score, math.sqrt(1 - score * score)]))

        top = index.query([1.0, 0.0], max_results=1, min_score=0.8)
        everything = index.query([1.0, 0.0], max_results=0, min_score=0.8)

        assert [r.record.id for r in top] == ["A"]
        assert [r.record.id for r in everything] == ["A", "B"]
        assert everything[1].score == pytest.approx(0.82)

    def test_max_results_caps(self, abc_index):
        results = abc_index.query([1.0, 0.0], max_results=1, min_score=0.0)

        assert [r.record.id for r in results] == ["A"]

    def test_zero_max_results_is_unbounded(self, abc_index):
        results = abc_index.query([1.0, 0.0], max_results=0, min_score=-1.0)

        assert [r.record.id for r in results] == ["A", "B", "C"]

    def test_negative_max_results_is_unbounded(self, abc_index):
        results = abc_index.query([1.0, 0.0], max_results=-3, min_score=-1.0)

        assert len(results) == 3

    def test_threshold_above_all_scores_returns_empty(self, abc_index):
        assert abc_index.query([-1.0, -1.0], max_results=0, min_score=0.5) == []

    def test_scores_non_increasing_and_above_threshold(self):
        index = SimilarityIndex()
        vectors = [[math.cos(a / 10), math.sin(a / 10)] for a in range(15)]
        for i, vector in enumerate(vectors):
            index.insert(record(str(i), vector))

        results = index.query([1.0, 0.0], max_results=0, min_score=0.3)

        scores = [r.score for r in results]
        assert scores == sorted(scores, reverse=True)
        assert all(score >= 0.3 - 1e-9 for score in scores)
        assert all(-1.0 <= score <= 1.0 for score in scores)

    def test_ties_broken_by_insertion_order(self):
        index = SimilarityIndex()
        index.insert(record("first", [2.0, 0.0]))
        index.insert(record("second", [1.0, 0.0]))
        index.insert(record("third", [5.0, 0.0]))

        results = index.query([1.0, 0.0], max_results=0, min_score=0.9)

        assert [r.record.id for r in results] == ["first", "second", "third"]

    def test_self_similarity_clears_threshold_of_one(self):
        index = SimilarityIndex()
        vector = [0.1, 0.7, 0.3]
        index.insert(record("self", vector))

        results = index.query(vector, max_results=0, min_score=1.0)

        assert len(results) == 1
        assert results[0].score == pytest.approx(1.0)

    def test_zero_norm_record_never_matches(self):
        index = SimilarityIndex()
        index.insert(record("zero", [0.0, 0.0]))
        index.insert(record("unit", [1.0, 0.0]))

        results = index.query([1.0, 0.0], max_results=0, min_score=-1.0)

        assert [r.record.id for r in results] == ["unit"]

    def test_zero_norm_query_returns_empty(self, abc_index):
        assert abc_index.query([0.0, 0.0], max_results=0, min_score=-1.0) == []

    def test_empty_index_returns_empty(self):
        assert SimilarityIndex(dimension=2).query([1.0, 0.0]) == []

    def test_query_dimension_mismatch(self, abc_index):
        with pytest.raises(DimensionMismatch):
            abc_index.query([1.0, 0.0, 0.0])

    def test_payload_returned_with_record(self):
        index = SimilarityIndex()
        index.insert(record("r1", [1.0, 0.0], room=101, details="Leaky faucet"))

        result = index.query([1.0, 0.0])[0]

        assert result.record.payload == {"room": 101, "details": "Leaky faucet"}

    def test_query_repeatable(self, abc_index):
        first = abc_index.query([0.6, 0.8], max_results=0, min_score=0.0)
        second = abc_index.query([0.6, 0.8], max_results=0, min_score=0.0)

        assert first == second


class TestInsert:
    """Insertion rules."""

    def test_duplicate_id_rejected(self, abc_index):
        with pytest.raises(DuplicateKey):
            abc_index.insert(record("A", [0.5, 0.5]))

        assert len(abc_index) == 3

    def test_dimension_fixed_by_first_insert(self):
        index = SimilarityIndex()
        index.insert(record("a", [1.0, 0.0, 0.0]))

        assert index.dimension == 3
        with pytest.raises(DimensionMismatch):
            index.insert(record("b", [1.0, 0.0]))

    def test_configured_dimension_enforced(self):
        index = SimilarityIndex(dimension=4)

        with pytest.raises(DimensionMismatch):
            index.insert(record("a", [1.0, 0.0]))
        assert len(index) == 0

    def test_non_finite_vector_rejected(self):
        index = SimilarityIndex()

        with pytest.raises(InvalidInput):
            index.insert(record("nan", [float("nan"), 1.0]))

    def test_lookup(self, abc_index):
        assert "B" in abc_index
        assert "Z" not in abc_index
        assert abc_index.get("B").vector == [0.8, 0.6]
        assert abc_index.get("Z") is None

    def test_insert_many_counts(self):
        index = SimilarityIndex()

        count = index.insert_many(record(str(i), [float(i + 1), 1.0]) for i in range(4))

        assert count == 4
        assert len(index) == 4
