"""
Embedding collaborator tests (Gemini client mocked).
"""

import math
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from tenacity import wait_none

from propmatch.analysis import EmbeddingGenerator, RetryingEmbedder, cosine_similarity
from propmatch.exceptions import EmbeddingServiceError


def fake_genai_client(values=None, error=None) -> MagicMock:
    client = MagicMock()
    response = SimpleNamespace(embeddings=[SimpleNamespace(values=values or [])])
    client.aio.models.embed_content = AsyncMock(return_value=response, side_effect=error)
    return client


class TestCosineSimilarity:

    def test_self_similarity_is_one(self):
        v = [0.3, -1.2, 4.0]
        assert cosine_similarity(v, v) == pytest.approx(1.0)

    def test_symmetric(self):
        a, b = [1.0, 2.0, 3.0], [-2.0, 0.5, 1.0]
        assert cosine_similarity(a, b) == pytest.approx(cosine_similarity(b, a))

    def test_orthogonal_and_opposite(self):
        assert cosine_similarity([1.0, 0.0], [0.0, 1.0]) == 0.0
        assert cosine_similarity([1.0, 0.0], [-1.0, 0.0]) == pytest.approx(-1.0)

    def test_zero_vector(self):
        assert cosine_similarity([0.0, 0.0], [1.0, 1.0]) == 0.0
        assert cosine_similarity([0.0, 0.0], [0.0, 0.0]) == 0.0

    def test_known_value(self):
        assert cosine_similarity([1.0, 0.0], [1.0, 1.0]) == pytest.approx(1 / math.sqrt(2))

    def test_length_mismatch(self):
        with pytest.raises(ValueError):
            cosine_similarity([1.0, 0.0, 0.0], [1.0, 0.0])


class TestEmbeddingGenerator:

    async def test_embed_calls_gemini(self):
        client = fake_genai_client(values=[0.1, 0.2, 0.3])
        generator = EmbeddingGenerator(
            client=client, model_name="gemini-embedding-001", output_dim=3
        )

        embedding = await generator.embed("Villa property in Dubai Hills")

        assert embedding == [0.1, 0.2, 0.3]
        kwargs = client.aio.models.embed_content.call_args.kwargs
        assert kwargs["model"] == "gemini-embedding-001"
        assert kwargs["contents"] == "Villa property in Dubai Hills"
        assert kwargs["config"].output_dimensionality == 3

    async def test_failure_is_wrapped(self):
        client = fake_genai_client(error=RuntimeError("429 RESOURCE_EXHAUSTED"))
        generator = EmbeddingGenerator(client=client)

        with pytest.raises(EmbeddingServiceError) as exc_info:
            await generator.embed("anything")

        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert client.aio.models.embed_content.await_count == 1

    def test_requires_api_key_without_client(self, monkeypatch):
        settings = SimpleNamespace(
            gemini_api_key=None, embedding_model="gemini-embedding-001", embedding_dim=768
        )
        monkeypatch.setattr("propmatch.analysis.embeddings.get_settings", lambda: settings)

        with pytest.raises(ValueError):
            EmbeddingGenerator()


class CountingEmbedder:
    def __init__(self, failures: int, error: Exception):
        self.failures = failures
        self.error = error
        self.calls = 0

    async def embed(self, text: str) -> list[float]:
        self.calls += 1
        if self.calls <= self.failures:
            raise self.error
        return [1.0, 0.0]


class TestRetryingEmbedder:

    async def test_retries_until_success(self):
        inner = CountingEmbedder(failures=2, error=EmbeddingServiceError("timeout"))
        embedder = RetryingEmbedder(inner, attempts=3, wait=wait_none())

        assert await embedder.embed("text") == [1.0, 0.0]
        assert inner.calls == 3

    async def test_gives_up_after_last_attempt(self):
        inner = CountingEmbedder(failures=5, error=EmbeddingServiceError("timeout"))
        embedder = RetryingEmbedder(inner, attempts=2, wait=wait_none())

        with pytest.raises(EmbeddingServiceError):
            await embedder.embed("text")
        assert inner.calls == 2

    async def test_other_errors_are_not_retried(self):
        inner = CountingEmbedder(failures=1, error=ValueError("bad input"))
        embedder = RetryingEmbedder(inner, attempts=3, wait=wait_none())

        with pytest.raises(ValueError):
            await embedder.embed("text")
        assert inner.calls == 1
