"""Tests for the embedding cache and VectorSearchService."""
import pytest

from copilot.errors import DimensionMismatch, InvalidInput, ProviderUnavailable
from copilot.vector.embedding_cache import CachedEmbeddingProvider, get_cache_key
from copilot.vector.index import IndexRecord, SimilarityIndex
from copilot.vector.search_service import VectorSearchService


class TestCachedEmbeddingProvider:
    """LRU cache in front of the provider."""

    def test_cache_key_depends_on_model(self):
        assert get_cache_key("hello", "m1") == get_cache_key("hello", "m1")
        assert get_cache_key("hello", "m1") != get_cache_key("hello", "m2")
        assert get_cache_key("hello", "m1") != get_cache_key("world", "m1")

    @pytest.mark.asyncio
    async def test_second_call_served_from_cache(self, mock_embedding_client):
        provider = CachedEmbeddingProvider(mock_embedding_client, max_size=10)

        first = await provider.embed("Broken AC")
        second = await provider.embed("Broken AC")

        assert first == second == [1.0, 0.0, 0.0]
        assert mock_embedding_client.embed.await_count == 1
        stats = provider.get_cache_stats()
        assert stats["hits"] == 1
        assert stats["misses"] == 1

    @pytest.mark.asyncio
    async def test_mutating_result_does_not_poison_cache(self, mock_embedding_client):
        provider = CachedEmbeddingProvider(mock_embedding_client, max_size=10)

        first = await provider.embed("Broken AC")
        first[0] = 99.0

        assert await provider.embed("Broken AC") == [1.0, 0.0, 0.0]

    @pytest.mark.asyncio
    async def test_failures_not_cached(self, mock_embedding_client):
        mock_embedding_client.embed.side_effect = [
            ProviderUnavailable("down"),
            [0.0, 1.0, 0.0],
        ]
        provider = CachedEmbeddingProvider(mock_embedding_client, max_size=10)

        with pytest.raises(ProviderUnavailable):
            await provider.embed("Broken AC")
        assert await provider.embed("Broken AC") == [0.0, 1.0, 0.0]

    @pytest.mark.asyncio
    async def test_clear_cache(self, mock_embedding_client):
        provider = CachedEmbeddingProvider(mock_embedding_client, max_size=10)
        await provider.embed("Broken AC")

        provider.clear_cache()
        await provider.embed("Broken AC")

        assert mock_embedding_client.embed.await_count == 2
        assert provider.get_cache_stats()["cache_size"] == 1

    @pytest.mark.asyncio
    async def test_empty_text_rejected(self, mock_embedding_client):
        provider = CachedEmbeddingProvider(mock_embedding_client, max_size=10)

        with pytest.raises(InvalidInput):
            await provider.embed("  ")
        mock_embedding_client.embed.assert_not_called()


class TestVectorSearchService:
    """Search orchestration over the index."""

    def test_index_takes_provider_dimension(self, search_service):
        assert search_service.index.dimension == 3

    def test_search_uses_defaults(self, search_service):
        search_service.load_records([
            IndexRecord(id="1", vector=[1.0, 0.0, 0.0], payload={"details": "Broken AC"}),
            IndexRecord(id="2", vector=[0.0, 1.0, 0.0], payload={"details": "Leaky faucet"}),
        ])

        results = search_service.search([0.9, 0.1, 0.0])

        assert [r.record.id for r in results] == ["1"]

    def test_search_rejects_out_of_range_threshold(self, search_service):
        with pytest.raises(InvalidInput):
            search_service.search([1.0, 0.0, 0.0], min_score=1.5)

    def test_search_dimension_mismatch(self, search_service):
        with pytest.raises(DimensionMismatch):
            search_service.search([1.0, 0.0])

    @pytest.mark.asyncio
    async def test_search_text_embeds_query(self, search_service, mock_embedding_client):
        await search_service.index_text("7", "Broken AC", {"room": 7})

        results = await search_service.search_text("air conditioning", max_results=5, min_score=0.5)

        assert results[0].record.payload == {"room": 7}
        mock_embedding_client.embed.assert_awaited_with("air conditioning")

    @pytest.mark.asyncio
    async def test_vectorize_passes_provider_errors_through(self, search_service, mock_embedding_client):
        mock_embedding_client.embed.side_effect = ProviderUnavailable("down")

        with pytest.raises(ProviderUnavailable):
            await search_service.vectorize("hello")

    @pytest.mark.asyncio
    async def test_embed_with_retry_recovers(self, mock_embedding_client):
        mock_embedding_client.embed.side_effect = [
            ProviderUnavailable("blip"),
            [0.0, 0.0, 1.0],
        ]
        service = VectorSearchService(mock_embedding_client, max_retries=3)

        assert await service.embed_with_retry("hello") == [0.0, 0.0, 1.0]
        assert mock_embedding_client.embed.await_count == 2

    @pytest.mark.asyncio
    async def test_embed_with_retry_gives_up(self, mock_embedding_client):
        mock_embedding_client.embed.side_effect = ProviderUnavailable("down")
        service = VectorSearchService(mock_embedding_client, max_retries=2)

        with pytest.raises(ProviderUnavailable):
            await service.embed_with_retry("hello")
        assert mock_embedding_client.embed.await_count == 2

    @pytest.mark.asyncio
    async def test_embed_with_retry_does_not_retry_invalid_input(self, mock_embedding_client):
        mock_embedding_client.embed.side_effect = InvalidInput("empty")
        service = VectorSearchService(mock_embedding_client, max_retries=3)

        with pytest.raises(InvalidInput):
            await service.embed_with_retry("")
        assert mock_embedding_client.embed.await_count == 1

    @pytest.mark.asyncio
    async def test_health_check_delegates(self, search_service, mock_embedding_client):
        assert await search_service.health_check() is True
        mock_embedding_client.health_check.return_value = False
        assert await search_service.health_check() is False

    def test_uses_given_empty_index(self, mock_embedding_client):
        index = SimilarityIndex(dimension=3)
        service = VectorSearchService(mock_embedding_client, index=index)

        assert service.index is index
