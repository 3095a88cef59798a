"""
In-memory similarity index over embedding vectors.

Records are ranked by cosine similarity against a query vector. Scoring is
done in Python rather than in the database so that the threshold and the
tie-break on insertion order are exact and identical for every backend.
"""
import logging
import math
import threading
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from copilot.errors import DimensionMismatch, DuplicateKey
from copilot.utils.validation import validate_embedding_vector

logger = logging.getLogger(__name__)

# Floating point slack when comparing a score against the threshold, so a
# vector compared with itself still clears min_score=1.0.
SCORE_TOLERANCE = 1e-9


class IndexRecord(BaseModel):
    """One indexed item: identifier, vector and opaque payload."""

    model_config = ConfigDict(frozen=True)

    id: str
    vector: List[float]
    payload: Dict[str, Any] = Field(default_factory=dict)


class SearchResult(BaseModel):
    """A record matched by a query, with its cosine similarity in [-1, 1]."""

    model_config = ConfigDict(frozen=True)

    record: IndexRecord
    score: float


@dataclass(frozen=True)
class _Entry:
    record: IndexRecord
    norm: float
    sequence: int


def _norm(vector: List[float]) -> float:
    return math.sqrt(sum(value * value for value in vector))


class SimilarityIndex:
    """
    Collection of IndexRecords supporting insert and ranked nearest-neighbour query.

    Queries read a snapshot of the record list and may run concurrently.
    Inserts are serialized by a lock and publish each record in one step,
    fully formed, so a query never observes a partial record.
    """

    def __init__(self, dimension: Optional[int] = None):
        """
        Args:
            dimension: Fixed vector dimension. When None it is taken from the
                first inserted record.
        """
        self.dimension = dimension
        self._lock = threading.Lock()
        self._entries: List[_Entry] = []
        self._by_id: Dict[str, _Entry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, record_id: str) -> bool:
        return record_id in self._by_id

    def get(self, record_id: str) -> Optional[IndexRecord]:
        entry = self._by_id.get(record_id)
        return entry.record if entry else None

    def insert(self, record: IndexRecord) -> None:
        """
        Add a record.

        Raises:
            DuplicateKey: If a record with the same id exists
            DimensionMismatch: If the vector length differs from the index dimension
        """
        vector = validate_embedding_vector(record.vector)
        norm = _norm(vector)

        with self._lock:
            if record.id in self._by_id:
                raise DuplicateKey(f"Record '{record.id}' is already indexed")

            if self.dimension is None:
                self.dimension = len(vector)
            elif len(vector) != self.dimension:
                raise DimensionMismatch(
                    f"Record '{record.id}' has dimension {len(vector)}, "
                    f"index dimension is {self.dimension}"
                )

            if norm == 0:
                logger.warning(f"Record '{record.id}' has a zero-norm vector and will never match")

            entry = _Entry(record=record, norm=norm, sequence=len(self._entries))
            self._by_id[record.id] = entry
            self._entries.append(entry)

    def insert_many(self, records: Iterable[IndexRecord]) -> int:
        """Insert records in order. Stops at the first failure."""
        count = 0
        for record in records:
            self.insert(record)
            count += 1
        return count

    def query(
        self,
        vector: List[float],
        max_results: int = 0,
        min_score: float = 0.8,
    ) -> List[SearchResult]:
        """
        Rank stored records by cosine similarity to `vector`.

        Records with zero-norm vectors are skipped. Results with a score below
        `min_score` are dropped; the rest are sorted by score descending, ties
        broken by insertion order (earlier first).

        `max_results <= 0` means unbounded: every record scoring at least
        `min_score` is returned. Otherwise at most `max_results` are returned.

        Raises:
            DimensionMismatch: If the query vector length differs from the index
        """
        vector = validate_embedding_vector(vector)
        entries = self._entries[:]

        if self.dimension is not None and len(vector) != self.dimension:
            raise DimensionMismatch(
                f"Query vector has dimension {len(vector)}, "
                f"index dimension is {self.dimension}"
            )

        query_norm = _norm(vector)
        if query_norm == 0:
            return []

        scored = []
        for entry in entries:
            if entry.norm == 0:
                continue
            dot = sum(x * y for x, y in zip(vector, entry.record.vector))
            score = max(-1.0, min(1.0, dot / (query_norm * entry.norm)))
            if score < min_score - SCORE_TOLERANCE:
                continue
            scored.append((score, entry.sequence, entry.record))

        scored.sort(key=lambda item: (-item[0], item[1]))

        if max_results > 0:
            scored = scored[:max_results]

        return [SearchResult(record=record, score=score) for score, _, record in scored]
