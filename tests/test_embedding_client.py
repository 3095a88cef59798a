"""Tests for EmbeddingClient and the HTTP helpers it uses."""
from unittest.mock import AsyncMock, Mock, patch

import httpx
import pytest

from copilot.errors import DimensionMismatch, InvalidInput, ProviderUnavailable
from copilot.utils.http import build_auth_headers
from copilot.vector.embedding_client import EmbeddingClient


def mock_http_response(body):
    response = AsyncMock(status_code=200, json=lambda: body)
    response.raise_for_status = Mock()
    return response


@pytest.fixture
def client():
    return EmbeddingClient(
        endpoint_url="http://embeddings.test/v1/embeddings",
        api_key="secret",
        model="text-embedding-ada-002",
        dimension=3,
        timeout=5.0,
    )


class TestEmbed:
    """Single-text embedding."""

    @pytest.mark.asyncio
    async def test_openai_response_format(self, client):
        body = {"data": [{"embedding": [0.1, 0.2, 0.3], "index": 0}]}

        with patch.object(httpx.AsyncClient, "post") as mock_post:
            mock_post.return_value = mock_http_response(body)

            embedding = await client.embed("Leaky faucet in room 101")

            assert embedding == [0.1, 0.2, 0.3]
            sent = mock_post.call_args.kwargs
            assert sent["json"] == {"input": "Leaky faucet in room 101", "model": "text-embedding-ada-002"}
            assert sent["headers"]["Authorization"] == "Bearer secret"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [
        {"embedding": [1, 2, 3]},
        {"embeddings": [[1, 2, 3]]},
        [1, 2, 3],
    ])
    async def test_alternate_response_formats(self, client, body):
        with patch.object(httpx.AsyncClient, "post") as mock_post:
            mock_post.return_value = mock_http_response(body)

            assert await client.embed("hello") == [1.0, 2.0, 3.0]

    @pytest.mark.asyncio
    async def test_wrong_dimension(self, client):
        with patch.object(httpx.AsyncClient, "post") as mock_post:
            mock_post.return_value = mock_http_response({"embedding": [0.1, 0.2]})

            with pytest.raises(DimensionMismatch):
                await client.embed("hello")

    @pytest.mark.asyncio
    async def test_unrecognized_body(self, client):
        with patch.object(httpx.AsyncClient, "post") as mock_post:
            mock_post.return_value = mock_http_response({"result": "nope"})

            with pytest.raises(ProviderUnavailable):
                await client.embed("hello")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["", "   \n\t"])
    async def test_empty_text_rejected_without_call(self, client, text):
        with patch.object(httpx.AsyncClient, "post") as mock_post:
            with pytest.raises(InvalidInput):
                await client.embed(text)

            mock_post.assert_not_called()

    @pytest.mark.asyncio
    async def test_timeout_maps_to_provider_unavailable(self, client):
        with patch.object(httpx.AsyncClient, "post") as mock_post:
            mock_post.side_effect = httpx.ReadTimeout("timed out")

            with pytest.raises(ProviderUnavailable) as exc_info:
                await client.embed("hello")

            assert "timed out" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_http_error_status_maps_to_provider_unavailable(self, client):
        with patch.object(httpx.AsyncClient, "post") as mock_post:
            response = AsyncMock(status_code=500)
            response.raise_for_status = Mock(
                side_effect=httpx.HTTPStatusError(
                    "server error", request=Mock(), response=Mock(status_code=500)
                )
            )
            mock_post.return_value = response

            with pytest.raises(ProviderUnavailable) as exc_info:
                await client.embed("hello")

            assert "500" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_health_check_false_on_failure(self, client):
        with patch.object(httpx.AsyncClient, "post") as mock_post:
            mock_post.side_effect = httpx.ConnectError("refused")

            assert await client.health_check() is False


class TestAuthHeaders:
    """Bearer vs Azure api-key headers."""

    def test_bearer(self):
        headers = build_auth_headers("k", "Authorization")
        assert headers["Authorization"] == "Bearer k"

    def test_azure_api_key(self):
        headers = build_auth_headers("k", "api-key")
        assert headers["api-key"] == "k"
        assert "Authorization" not in headers

    def test_no_key(self):
        assert build_auth_headers(None) == {"Content-Type": "application/json"}
