"""
Persisted corpus of embedding records.

Records are grouped by source document so that re-ingesting a document
replaces its previous records wholesale. Two backends: a JSON flat file
and a Supabase table.
"""

import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Sequence, Union

import structlog

from propmatch.config import Settings, get_settings
from propmatch.database.supabase_client import SupabaseClient, get_supabase_client
from propmatch.models import EmbeddingRecord

logger = structlog.get_logger()


class CorpusStore(ABC):
    """Persisted sequence of EmbeddingRecords grouped by source."""

    @abstractmethod
    def load(self) -> list[EmbeddingRecord]:
        """All records: sources in insertion order, records in document order."""

    @abstractmethod
    def replace(self, source_id: str, records: Sequence[EmbeddingRecord]) -> None:
        """Replaces every record of a source."""

    @abstractmethod
    def append(self, source_id: str, records: Sequence[EmbeddingRecord]) -> None:
        """Adds records after the existing records of a source."""

    @abstractmethod
    def sources(self) -> list[str]:
        """Known source ids."""


class JsonCorpusStore(CorpusStore):
    """
    Corpus kept in a single JSON file.

    Layout: {"<source_id>": [<EmbeddingRecord>, ...], ...}
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def _read(self) -> dict[str, list[dict]]:
        if not self.path.exists():
            return {}
        with self.path.open(encoding="utf-8") as f:
            return json.load(f)

    def _write(self, data: dict[str, list[dict]]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with tmp_path.open("w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False)
        tmp_path.replace(self.path)

    def load(self) -> list[EmbeddingRecord]:
        data = self._read()
        records = [
            EmbeddingRecord.model_validate(item)
            for items in data.values()
            for item in items
        ]
        logger.debug("Corpus loaded", path=str(self.path), records=len(records))
        return records

    def replace(self, source_id: str, records: Sequence[EmbeddingRecord]) -> None:
        data = self._read()
        data[source_id] = [record.to_db_dict() for record in records]
        self._write(data)
        logger.info("Corpus source replaced", source_id=source_id, records=len(records))

    def append(self, source_id: str, records: Sequence[EmbeddingRecord]) -> None:
        data = self._read()
        data.setdefault(source_id, []).extend(record.to_db_dict() for record in records)
        self._write(data)
        logger.info("Corpus source extended", source_id=source_id, records=len(records))

    def sources(self) -> list[str]:
        return list(self._read().keys())


class SupabaseCorpusStore(CorpusStore):
    """Corpus kept in the document_embeddings table."""

    TABLE = "document_embeddings"

    def __init__(self, client: Optional[SupabaseClient] = None):
        self._client = client or get_supabase_client()

    @property
    def client(self) -> SupabaseClient:
        return self._client

    def load(self) -> list[EmbeddingRecord]:
        response = (
            self.client.table(self.TABLE)
            .select("source_id, position, content, embedding, metadata")
            .order("id")
            .execute()
        )
        rows = response.data or []

        # Group by source keeping first-seen order, then order by position
        grouped: dict[str, list[dict]] = {}
        for row in rows:
            grouped.setdefault(row["source_id"], []).append(row)

        records = []
        for source_rows in grouped.values():
            for row in sorted(source_rows, key=lambda r: r["position"]):
                embedding = row["embedding"]
                # pgvector columns come back as a "[0.1,0.2,...]" string
                if isinstance(embedding, str):
                    embedding = json.loads(embedding)
                records.append(
                    EmbeddingRecord(
                        content=row["content"],
                        embedding=embedding,
                        metadata=row["metadata"],
                    )
                )
        return records

    def _rows(
        self, source_id: str, records: Sequence[EmbeddingRecord], start: int = 0
    ) -> list[dict]:
        return [
            {"source_id": source_id, "position": start + i, **record.to_db_dict()}
            for i, record in enumerate(records)
        ]

    def replace(self, source_id: str, records: Sequence[EmbeddingRecord]) -> None:
        """
        Inserts the new rows before deleting the old ones by id, so a
        failed insert leaves the previous rows of the source in place.
        """
        response = (
            self.client.table(self.TABLE)
            .select("id")
            .eq("source_id", source_id)
            .execute()
        )
        old_ids = [row["id"] for row in response.data or []]

        if records:
            self.client.table(self.TABLE).insert(self._rows(source_id, records)).execute()
        if old_ids:
            self.client.table(self.TABLE).delete().in_("id", old_ids).execute()

        logger.info(
            "Corpus source replaced",
            source_id=source_id,
            records=len(records),
            removed=len(old_ids),
        )

    def append(self, source_id: str, records: Sequence[EmbeddingRecord]) -> None:
        if not records:
            return
        response = (
            self.client.table(self.TABLE)
            .select("position")
            .eq("source_id", source_id)
            .order("position", desc=True)
            .limit(1)
            .execute()
        )
        start = response.data[0]["position"] + 1 if response.data else 0
        self.client.table(self.TABLE).insert(self._rows(source_id, records, start)).execute()
        logger.info("Corpus source extended", source_id=source_id, records=len(records))

    def sources(self) -> list[str]:
        response = self.client.table(self.TABLE).select("source_id").order("id").execute()
        seen: dict[str, None] = {}
        for row in response.data or []:
            seen.setdefault(row["source_id"], None)
        return list(seen)


def get_corpus_store(settings: Optional[Settings] = None) -> CorpusStore:
    """
    Builds the configured corpus store.

    Raises:
        ValueError: If corpus_backend is not 'json' or 'supabase'
    """
    settings = settings or get_settings()
    backend = settings.corpus_backend.lower()

    if backend == "json":
        return JsonCorpusStore(settings.corpus_path)
    if backend == "supabase":
        return SupabaseCorpusStore()

    raise ValueError(f"Unknown corpus backend: {settings.corpus_backend}")
