"""
Client for interacting with the external embedding service.

Turns text into a fixed-length vector via an OpenAI-compatible endpoint.
"""
from typing import Any, List, Optional

from copilot.config import settings
from copilot.errors import DimensionMismatch, ProviderUnavailable
from copilot.utils.http import build_auth_headers, post_json
from copilot.utils.validation import validate_embedding_vector, validate_text


class EmbeddingClient:
    """
    Client for generating text embeddings via external API.

    Every vector it returns has exactly `dimension` elements. The client makes
    one outbound call per `embed` and never retries; retry policy belongs to
    the caller.
    """

    def __init__(
        self,
        endpoint_url: Optional[str] = None,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        dimension: Optional[int] = None,
        timeout: Optional[float] = None,
        api_key_header: Optional[str] = None,
    ):
        """
        Initialize embedding client.

        Args:
            endpoint_url: Override default embedding endpoint URL
            api_key: Override default API key
            model: Override the embedding model / deployment name
            dimension: Override the expected vector dimension
            timeout: Request timeout in seconds
            api_key_header: "Authorization" for bearer tokens, "api-key" for Azure
        """
        self.endpoint_url = endpoint_url or settings.EMBEDDING_ENDPOINT_URL
        self.api_key = api_key or settings.EMBEDDING_API_KEY
        self.model = model or settings.EMBEDDING_MODEL
        self.dimension = dimension or settings.EMBEDDING_DIMENSION
        self.timeout = timeout or settings.EMBEDDING_TIMEOUT
        self.api_key_header = api_key_header or settings.API_KEY_HEADER

    async def embed(self, text: str) -> List[float]:
        """
        Generate the embedding for a single text.

        Args:
            text: Non-empty text to embed

        Returns:
            Embedding vector of the configured dimension

        Raises:
            InvalidInput: If the text is empty or whitespace only
            ProviderUnavailable: On transport errors, timeouts or bad responses
            DimensionMismatch: If the service returns a vector of the wrong size
        """
        validate_text(text)

        payload = {"input": text, "model": self.model}
        data = await post_json(
            self.endpoint_url,
            payload,
            headers=build_auth_headers(self.api_key, self.api_key_header),
            timeout=self.timeout,
            service="embedding service",
        )

        embedding = self._extract_embedding(data)
        return validate_embedding_vector(embedding, dimension=self.dimension)

    def _extract_embedding(self, data: Any) -> List[float]:
        """
        Extract the embedding from a response.

        Handles:
        - OpenAI / Azure format: {"data": [{"embedding": [...], "index": 0}]}
        - Simple format: {"embedding": [...]}
        - Batch format: {"embeddings": [[...]]}
        - Bare array: [...]
        """
        if isinstance(data, list):
            return data

        if not isinstance(data, dict):
            raise ProviderUnavailable("Embedding service returned an unexpected body")

        if "data" in data and isinstance(data["data"], list) and len(data["data"]) > 0:
            embedding = data["data"][0].get("embedding")

        elif "embedding" in data:
            embedding = data["embedding"]

        elif "embeddings" in data and isinstance(data["embeddings"], list) and data["embeddings"]:
            embedding = data["embeddings"][0]

        else:
            raise ProviderUnavailable(
                f"Cannot extract embedding from response. "
                f"Expected 'data', 'embedding', or 'embeddings' field. "
                f"Got keys: {list(data.keys())}"
            )

        if not isinstance(embedding, list):
            raise ProviderUnavailable("Embedding service returned a non-list embedding")

        return embedding

    async def health_check(self) -> bool:
        """
        Check if the embedding service is available.

        Returns:
            True if service is healthy, False otherwise
        """
        try:
            await self.embed("health check")
            return True
        except (ProviderUnavailable, DimensionMismatch):
            return False


# Singleton instance for convenience
_embedding_client: Optional[EmbeddingClient] = None


def get_embedding_client() -> EmbeddingClient:
    """
    Get or create the singleton embedding client instance.

    Returns:
        EmbeddingClient instance
    """
    global _embedding_client
    if _embedding_client is None:
        _embedding_client = EmbeddingClient()
    return _embedding_client
