"""
Shared fixtures.

The embedder and corpus store used here are in-memory stand-ins for the
Gemini API and the persisted corpus, so no test touches the network.
"""

import math
import re
import zlib
from typing import Sequence

import pytest

from propmatch.database import CorpusStore
from propmatch.exceptions import EmbeddingServiceError
from propmatch.models import EmbeddingRecord, PropertyRecord


class HashingEmbedder:
    """Deterministic bag-of-words embedder: one hashed bucket per token."""

    def __init__(self, dim: int = 64):
        self.dim = dim
        self.calls: list[str] = []

    async def embed(self, text: str) -> list[float]:
        self.calls.append(text)
        vector = [0.0] * self.dim
        for token in re.findall(r"[a-z0-9]+", text.lower()):
            vector[zlib.crc32(token.encode()) % self.dim] += 1.0
        norm = math.sqrt(sum(v * v for v in vector))
        return [v / norm for v in vector] if norm else vector


class StaticEmbedder:
    """Returns the same vector for every text."""

    def __init__(self, vector: list[float]):
        self.vector = vector
        self.calls: list[str] = []

    async def embed(self, text: str) -> list[float]:
        self.calls.append(text)
        return list(self.vector)


class FlakyEmbedder:
    """Fails with EmbeddingServiceError for texts containing a marker word."""

    def __init__(self, fail_on: str, inner=None):
        self.fail_on = fail_on
        self.inner = inner or HashingEmbedder()

    async def embed(self, text: str) -> list[float]:
        if self.fail_on in text:
            raise EmbeddingServiceError(f"quota exceeded for '{self.fail_on}'")
        return await self.inner.embed(text)


class InMemoryCorpusStore(CorpusStore):
    def __init__(self, data: dict[str, list[EmbeddingRecord]] = None):
        self.data: dict[str, list[EmbeddingRecord]] = dict(data or {})

    def load(self) -> list[EmbeddingRecord]:
        return [record for records in self.data.values() for record in records]

    def replace(self, source_id: str, records: Sequence[EmbeddingRecord]) -> None:
        self.data[source_id] = list(records)

    def append(self, source_id: str, records: Sequence[EmbeddingRecord]) -> None:
        self.data.setdefault(source_id, []).extend(records)

    def sources(self) -> list[str]:
        return list(self.data)


def make_record(**overrides) -> PropertyRecord:
    fields = {
        "name": "Rosehill",
        "type": "Apartment",
        "description": "2BHK apartment in Dubai Hills with premium amenities.",
        "price_range": "AED 2,310,000",
        "size": "1,419 sqft",
        "size_sqft": 1419,
        "location": "Dubai Hills",
        "amenities": ["Swimming Pool", "Gym"],
        "near": ["School", "Mall"],
        "bedrooms": 2,
        "price_min": 2_310_000,
        "price_max": 2_310_000,
    }
    fields.update(overrides)
    return PropertyRecord(**fields)


def make_embedding_record(embedding: list[float], **overrides) -> EmbeddingRecord:
    record = make_record(**overrides)
    return EmbeddingRecord(content=record.name, embedding=embedding, metadata=record)


@pytest.fixture
def embedder():
    return HashingEmbedder()


@pytest.fixture
def store():
    return InMemoryCorpusStore()


@pytest.fixture
def rosehill_text():
    return (
        "Project Rosehill\n"
        "Luxury apartments in Dubai Hills Estate.\n"
        "Starting from AED 2,310,000\n"
        "Size: 1,419 sq ft\n"
        "2 BHK with swimming pool, gym and covered parking.\n"
        "Close to schools and Dubai Hills Mall.\n"
    )
