"""
Vector search service.

Orchestrates the embedding provider and the similarity index: vectorize text,
search by vector under a threshold and result cap, and index new text.
"""
import logging
import time
from typing import Any, Dict, Iterable, List, Optional

import backoff

from copilot.config import settings
from copilot.errors import ProviderUnavailable
from copilot.observability import create_span, record_search_metrics
from copilot.utils.validation import validate_similarity_threshold
from copilot.vector.embedding_cache import CachedEmbeddingProvider, EmbeddingProvider
from copilot.vector.embedding_client import get_embedding_client
from copilot.vector.index import IndexRecord, SearchResult, SimilarityIndex

logger = logging.getLogger(__name__)


class VectorSearchService:
    """Embeds text and answers ranked similarity queries over indexed records."""

    def __init__(
        self,
        provider: EmbeddingProvider,
        index: Optional[SimilarityIndex] = None,
        max_retries: Optional[int] = None,
    ):
        self.provider = provider
        self.index = index if index is not None else SimilarityIndex(dimension=provider.dimension)
        self.max_retries = max_retries or settings.EMBEDDING_MAX_RETRIES

    async def vectorize(self, text: str) -> List[float]:
        """Embed text. Provider failures pass through unchanged."""
        return await self.provider.embed(text)

    def search(
        self,
        query_vector: List[float],
        max_results: int = 0,
        min_score: float = 0.8,
    ) -> List[SearchResult]:
        """
        Rank indexed records against a query vector.

        `max_results <= 0` returns every record scoring at least `min_score`.
        """
        min_score = validate_similarity_threshold(min_score)

        span = create_span(
            name="vector.search",
            attributes={"max_results": max_results, "min_score": min_score},
        )
        start_time = time.time()
        try:
            results = self.index.query(query_vector, max_results=max_results, min_score=min_score)
            span.set_attribute("search.results_count", len(results))
        finally:
            span.end()

        record_search_metrics(
            results_count=len(results),
            search_time=time.time() - start_time,
            threshold=min_score,
        )
        logger.debug(
            f"Vector search returned {len(results)} results "
            f"(max_results={max_results}, min_score={min_score})"
        )
        return results

    async def search_text(
        self,
        text: str,
        max_results: int = 0,
        min_score: float = 0.8,
    ) -> List[SearchResult]:
        """Vectorize text, then search with it."""
        query_vector = await self.vectorize(text)
        return self.search(query_vector, max_results=max_results, min_score=min_score)

    async def embed_with_retry(self, text: str) -> List[float]:
        """Embed text, retrying transient provider failures with exponential backoff."""

        @backoff.on_exception(
            backoff.expo,
            ProviderUnavailable,
            max_tries=self.max_retries,
            jitter=backoff.full_jitter,
            on_backoff=lambda details: logger.warning(
                f"Embedding attempt {details['tries']} failed, retrying in {details['wait']:.1f}s"
            ),
        )
        async def _embed() -> List[float]:
            return await self.provider.embed(text)

        return await _embed()

    async def index_text(
        self,
        record_id: str,
        text: str,
        payload: Optional[Dict[str, Any]] = None,
    ) -> IndexRecord:
        """Embed text and insert it into the index under `record_id`."""
        vector = await self.embed_with_retry(text)
        record = IndexRecord(id=record_id, vector=vector, payload=payload or {})
        self.index.insert(record)
        return record

    def load_records(self, records: Iterable[IndexRecord]) -> int:
        """Bulk-insert already embedded records, e.g. when hydrating from the store."""
        count = self.index.insert_many(records)
        logger.info(f"Loaded {count} records into the similarity index")
        return count

    async def health_check(self) -> bool:
        return await self.provider.health_check()


# Singleton instance for convenience
_vector_search_service: Optional[VectorSearchService] = None


def get_vector_search_service() -> VectorSearchService:
    """
    Get or create the singleton vector search service.

    The embedding client is wrapped in the LRU cache when caching is enabled.
    """
    global _vector_search_service
    if _vector_search_service is None:
        provider: EmbeddingProvider = get_embedding_client()
        if settings.ENABLE_EMBEDDING_CACHE:
            provider = CachedEmbeddingProvider(provider)
        _vector_search_service = VectorSearchService(provider)
    return _vector_search_service
