"""
Embeddings module.

Provides the embedding collaborator and vector similarity.
"""

from propmatch.analysis.embeddings import (
    Embedder,
    EmbeddingGenerator,
    RetryingEmbedder,
    cosine_similarity,
)

__all__ = [
    "Embedder",
    "EmbeddingGenerator",
    "RetryingEmbedder",
    "cosine_similarity",
]
