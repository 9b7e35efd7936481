"""
Embedding indexer.

Turns extracted PropertyRecords into EmbeddingRecords by embedding a
canonical text blob per record, and writes them to the corpus store.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Iterable, Optional

import structlog

from propmatch.analysis.embeddings import Embedder
from propmatch.database.corpus_store import CorpusStore
from propmatch.exceptions import PropMatchError
from propmatch.models import EmbeddingRecord, PropertyRecord

logger = structlog.get_logger()


def build_content(record: PropertyRecord) -> str:
    """
    Canonical text blob embedded for a record.

    Name, type, description, location and amenities joined by spaces.
    """
    parts = [
        record.name,
        record.type,
        record.description,
        record.location,
        *record.amenities,
    ]
    return " ".join(part for part in parts if part)


@dataclass
class IndexingResult:
    """Outcome of indexing a batch; records keep the input order."""

    records: list[EmbeddingRecord] = field(default_factory=list)
    succeeded: int = 0
    failed: int = 0
    errors: dict[int, Exception] = field(default_factory=dict)


class EmbeddingIndexer:
    """
    Embeds property records.

    A record whose embedding fails is skipped and counted; the rest of
    the batch is still indexed.
    """

    def __init__(
        self,
        embedder: Embedder,
        store: Optional[CorpusStore] = None,
        concurrency: int = 1,
    ):
        if concurrency < 1:
            raise ValueError("concurrency must be at least 1")
        self.embedder = embedder
        self.store = store
        self.concurrency = concurrency

    async def index_record(self, record: PropertyRecord) -> EmbeddingRecord:
        """
        Embeds one record.

        Raises:
            EmbeddingServiceError: If the embedder fails
        """
        content = build_content(record)
        embedding = await self.embedder.embed(content)
        return EmbeddingRecord(content=content, embedding=embedding, metadata=record)

    async def index_records(self, records: Iterable[PropertyRecord]) -> IndexingResult:
        """Embeds a batch with at most `concurrency` requests in flight."""
        records = list(records)
        semaphore = asyncio.Semaphore(self.concurrency)

        async def _index(position: int, record: PropertyRecord):
            async with semaphore:
                try:
                    return await self.index_record(record)
                except PropMatchError as e:
                    logger.error(
                        "Error indexing record",
                        position=position,
                        name=record.name,
                        error=str(e),
                    )
                    return e

        outcomes = await asyncio.gather(
            *(_index(i, record) for i, record in enumerate(records))
        )

        result = IndexingResult()
        for position, outcome in enumerate(outcomes):
            if isinstance(outcome, EmbeddingRecord):
                result.records.append(outcome)
                result.succeeded += 1
            else:
                result.errors[position] = outcome
                result.failed += 1

        logger.info(
            "Records indexed",
            total=len(records),
            succeeded=result.succeeded,
            failed=result.failed,
        )
        return result

    async def index_source(
        self, source_id: str, records: Iterable[PropertyRecord]
    ) -> IndexingResult:
        """
        Indexes the records of one document and replaces that document's
        entries in the store.

        When every record fails to embed the store is left untouched, so
        the entries of a previous run survive an embedding outage.
        """
        if self.store is None:
            raise ValueError("EmbeddingIndexer has no corpus store configured")

        records = list(records)
        result = await self.index_records(records)

        if records and result.succeeded == 0:
            logger.warning(
                "No record indexed, keeping previous corpus entries",
                source_id=source_id,
                failed=result.failed,
            )
            return result

        self.store.replace(source_id, result.records)
        return result
