"""
Embedding generation for semantic search.

Uses Google's gemini-embedding-001 model. The generator itself never
retries: a failed call surfaces as EmbeddingServiceError and the caller
decides the retry policy (see RetryingEmbedder).
"""

import math
from typing import Optional, Protocol

import structlog
from google import genai
from google.genai import types
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)
from tenacity.wait import wait_base

from propmatch.config import get_settings
from propmatch.exceptions import EmbeddingServiceError

logger = structlog.get_logger()


class Embedder(Protocol):
    """Opaque text -> fixed-length vector function."""

    async def embed(self, text: str) -> list[float]:
        ...


class EmbeddingGenerator:
    """
    Generates embeddings with Google's gemini-embedding-001.

    Embeddings are used for:
    - The canonical text blob of every ingested property
    - The query built from the user's preferences
    """

    # Vector size (gemini-embedding-001 supports 768, 1536, 3072)
    EMBEDDING_DIM = 768

    def __init__(
        self,
        api_key: Optional[str] = None,
        model_name: Optional[str] = None,
        output_dim: Optional[int] = None,
        client: Optional[genai.Client] = None,
    ):
        settings = get_settings()
        self.model_name = model_name or settings.embedding_model
        self.output_dim = output_dim or settings.embedding_dim or self.EMBEDDING_DIM

        if client is None:
            api_key = api_key or settings.gemini_api_key
            if not api_key:
                raise ValueError("GEMINI_API_KEY is required for embeddings.")
            client = genai.Client(api_key=api_key)

        self.client = client
        logger.info("Embedding generator initialized", model=self.model_name, dim=self.output_dim)

    async def embed(self, text: str) -> list[float]:
        """
        Embeds a text.

        Args:
            text: Canonical property blob or preference query

        Returns:
            Vector of output_dim floats

        Raises:
            EmbeddingServiceError: If the embedding request fails
        """
        try:
            response = await self.client.aio.models.embed_content(
                model=self.model_name,
                contents=text,
                config=types.EmbedContentConfig(output_dimensionality=self.output_dim),
            )
            embedding = list(response.embeddings[0].values)
        except Exception as e:
            logger.error(
                "Error generating embedding",
                text=text[:50],
                error=str(e),
            )
            raise EmbeddingServiceError(f"Embedding request failed: {e}") from e

        logger.debug(
            "Embedding generated",
            text_length=len(text),
            embedding_dim=len(embedding),
        )
        return embedding


class RetryingEmbedder:
    """
    Caller-side retry around another embedder.

    Only EmbeddingServiceError is retried; after the last attempt the
    error is re-raised unchanged.
    """

    def __init__(
        self,
        embedder: Embedder,
        attempts: int = 3,
        wait: Optional[wait_base] = None,
    ):
        self.embedder = embedder
        self.attempts = attempts
        self.wait = wait or wait_exponential(multiplier=1, min=2, max=10)

    async def embed(self, text: str) -> list[float]:
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self.attempts),
            wait=self.wait,
            retry=retry_if_exception_type(EmbeddingServiceError),
            reraise=True,
        ):
            with attempt:
                return await self.embedder.embed(text)


def cosine_similarity(vec1: list[float], vec2: list[float]) -> float:
    """
    Cosine similarity between two vectors.

    Returns:
        Dot product over the product of the norms, in [-1, 1];
        0.0 when either vector has zero norm

    Raises:
        ValueError: If the vectors have different lengths
    """
    if len(vec1) != len(vec2):
        raise ValueError(
            f"Vectors have different lengths ({len(vec1)} and {len(vec2)})"
        )

    dot_product = sum(a * b for a, b in zip(vec1, vec2))
    norm1 = math.sqrt(sum(a * a for a in vec1))
    norm2 = math.sqrt(sum(b * b for b in vec2))

    if norm1 == 0 or norm2 == 0:
        return 0.0

    return dot_product / (norm1 * norm2)
