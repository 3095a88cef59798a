"""
Transparent LRU cache in front of an embedding provider.

Identical text with the same provider configuration always yields the same
vector, so caching never changes results, only the number of outbound calls.
"""
import hashlib
import logging
from typing import Any, Dict, List, Optional, Protocol

from cachetools import LRUCache

from copilot.config import settings
from copilot.utils.validation import validate_text

logger = logging.getLogger(__name__)


class EmbeddingProvider(Protocol):
    """Anything that turns text into a fixed-dimension vector."""

    dimension: int

    async def embed(self, text: str) -> List[float]:
        ...

    async def health_check(self) -> bool:
        ...


def get_cache_key(text: str, model: str = "") -> str:
    """Generate cache key for text under a given model."""
    return hashlib.md5(f"{model}\x00{text}".encode()).hexdigest()


class CachedEmbeddingProvider:
    """
    Wraps an EmbeddingProvider with an LRU cache.

    Failures are never cached; a failed embed propagates unchanged and the
    next call goes back to the provider.
    """

    def __init__(self, provider: EmbeddingProvider, max_size: Optional[int] = None):
        self.provider = provider
        self.dimension = provider.dimension
        self.cache: LRUCache = LRUCache(maxsize=max_size or settings.EMBEDDING_CACHE_SIZE)
        self._stats = {"hits": 0, "misses": 0}

    @property
    def _model(self) -> str:
        return getattr(self.provider, "model", "")

    async def embed(self, text: str) -> List[float]:
        validate_text(text)

        cache_key = get_cache_key(text, self._model)
        cached = self.cache.get(cache_key)
        if cached is not None:
            self._stats["hits"] += 1
            logger.debug(f"Cache hit for text: {text[:50]}...")
            return list(cached)

        self._stats["misses"] += 1
        embedding = await self.provider.embed(text)
        # Stored as a tuple so callers mutating their copy can't poison the cache
        self.cache[cache_key] = tuple(embedding)
        return embedding

    async def health_check(self) -> bool:
        return await self.provider.health_check()

    def get_cache_stats(self) -> Dict[str, Any]:
        """Get cache performance statistics."""
        total = self._stats["hits"] + self._stats["misses"]
        return {
            **self._stats,
            "total_requests": total,
            "hit_rate": self._stats["hits"] / total if total else 0.0,
            "cache_size": len(self.cache),
            "cache_max_size": self.cache.maxsize,
        }

    def clear_cache(self) -> None:
        """Clear the embedding cache."""
        self.cache.clear()
        logger.info("Embedding cache cleared")
