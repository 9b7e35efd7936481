"""
Indexing module.

Embeds extracted records for the persisted corpus.
"""

from propmatch.indexing.indexer import EmbeddingIndexer, IndexingResult, build_content

__all__ = [
    "EmbeddingIndexer",
    "IndexingResult",
    "build_content",
]
