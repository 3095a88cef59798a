"""Embedding and similarity search components."""

from copilot.vector.embedding_client import EmbeddingClient, get_embedding_client
from copilot.vector.embedding_cache import CachedEmbeddingProvider, EmbeddingProvider
from copilot.vector.index import IndexRecord, SearchResult, SimilarityIndex
from copilot.vector.search_service import VectorSearchService, get_vector_search_service

__all__ = [
    "EmbeddingClient",
    "get_embedding_client",
    "CachedEmbeddingProvider",
    "EmbeddingProvider",
    "IndexRecord",
    "SearchResult",
    "SimilarityIndex",
    "VectorSearchService",
    "get_vector_search_service",
]
