"""
Corpus store tests: JSON file and Supabase table (client mocked).
"""

import json
from unittest.mock import MagicMock

import pytest

from conftest import make_embedding_record
from propmatch.config import Settings
from propmatch.database import (
    JsonCorpusStore,
    SupabaseCorpusStore,
    get_corpus_store,
)


class TestJsonCorpusStore:

    def test_missing_file_is_an_empty_corpus(self, tmp_path):
        store = JsonCorpusStore(tmp_path / "embeddings.json")
        assert store.load() == []
        assert store.sources() == []

    def test_replace_and_load(self, tmp_path):
        store = JsonCorpusStore(tmp_path / "data" / "embeddings.json")
        rosehill = make_embedding_record([1.0, 0.0], name="Rosehill")
        acacia = make_embedding_record([0.0, 1.0], name="Acacia")

        store.replace("dubai-hills", [rosehill, acacia])

        assert store.load() == [rosehill, acacia]
        assert store.sources() == ["dubai-hills"]

    def test_replace_drops_previous_records_of_the_source(self, tmp_path):
        store = JsonCorpusStore(tmp_path / "embeddings.json")
        store.replace("a", [make_embedding_record([1.0], name="Old")])
        store.replace("b", [make_embedding_record([1.0], name="Other")])

        store.replace("a", [make_embedding_record([1.0], name="New")])

        assert [r.metadata.name for r in store.load()] == ["New", "Other"]

    def test_append(self, tmp_path):
        store = JsonCorpusStore(tmp_path / "embeddings.json")
        store.append("a", [make_embedding_record([1.0], name="First")])
        store.append("a", [make_embedding_record([1.0], name="Second")])

        assert [r.metadata.name for r in store.load()] == ["First", "Second"]

    def test_file_layout(self, tmp_path):
        path = tmp_path / "embeddings.json"
        JsonCorpusStore(path).replace("a", [make_embedding_record([0.5, 0.5])])

        data = json.loads(path.read_text(encoding="utf-8"))
        assert list(data) == ["a"]
        assert set(data["a"][0]) == {"content", "embedding", "metadata"}
        assert data["a"][0]["metadata"]["name"] == "Rosehill"


def supabase_row(source_id, position, name, embedding):
    record = make_embedding_record(embedding, name=name)
    return {"source_id": source_id, "position": position, **record.to_db_dict()}


class TestSupabaseCorpusStore:

    @pytest.fixture
    def client(self):
        return MagicMock()

    def test_load_orders_by_source_then_position(self, client):
        rows = [
            supabase_row("a", 1, "A2", [0.0, 1.0]),
            supabase_row("b", 0, "B1", [1.0, 1.0]),
            supabase_row("a", 0, "A1", [1.0, 0.0]),
        ]
        # pgvector columns come back serialized
        rows[2]["embedding"] = "[1.0,0.0]"
        table = client.table.return_value
        table.select.return_value.order.return_value.execute.return_value.data = rows

        records = SupabaseCorpusStore(client).load()

        assert [r.metadata.name for r in records] == ["A1", "A2", "B1"]
        assert records[0].embedding == [1.0, 0.0]
        client.table.assert_called_with("document_embeddings")

    @staticmethod
    def existing_ids(client, ids):
        table = client.table.return_value
        table.select.return_value.eq.return_value.execute.return_value.data = [
            {"id": i} for i in ids
        ]
        return table

    def test_replace_inserts_then_deletes_old_rows(self, client):
        table = self.existing_ids(client, [7, 8])
        executed = []
        table.insert.return_value.execute.side_effect = lambda: executed.append("insert")
        table.delete.return_value.in_.return_value.execute.side_effect = (
            lambda: executed.append("delete")
        )
        records = [
            make_embedding_record([1.0], name="Rosehill"),
            make_embedding_record([1.0], name="Acacia"),
        ]

        SupabaseCorpusStore(client).replace("dubai-hills", records)

        table.select.return_value.eq.assert_called_once_with("source_id", "dubai-hills")
        table.delete.return_value.in_.assert_called_once_with("id", [7, 8])
        assert executed == ["insert", "delete"]
        inserted = table.insert.call_args.args[0]
        assert [row["position"] for row in inserted] == [0, 1]
        assert [row["metadata"]["name"] for row in inserted] == ["Rosehill", "Acacia"]
        assert all(row["source_id"] == "dubai-hills" for row in inserted)

    def test_failed_insert_keeps_old_rows(self, client):
        table = self.existing_ids(client, [7])
        table.insert.return_value.execute.side_effect = RuntimeError("payload too large")

        with pytest.raises(RuntimeError):
            SupabaseCorpusStore(client).replace(
                "dubai-hills", [make_embedding_record([1.0])]
            )

        table.delete.assert_not_called()

    def test_replace_with_nothing_only_deletes(self, client):
        table = self.existing_ids(client, [7])

        SupabaseCorpusStore(client).replace("dubai-hills", [])

        table.delete.return_value.in_.assert_called_once_with("id", [7])
        table.insert.assert_not_called()

    def test_new_source_deletes_nothing(self, client):
        table = self.existing_ids(client, [])

        SupabaseCorpusStore(client).replace("dubai-hills", [make_embedding_record([1.0])])

        table.insert.assert_called_once()
        table.delete.assert_not_called()

    def test_append_continues_positions(self, client):
        table = client.table.return_value
        latest = table.select.return_value.eq.return_value.order.return_value.limit.return_value
        latest.execute.return_value.data = [{"position": 4}]

        SupabaseCorpusStore(client).append("a", [make_embedding_record([1.0])])

        inserted = table.insert.call_args.args[0]
        assert inserted[0]["position"] == 5

    def test_sources_keep_first_seen_order(self, client):
        table = client.table.return_value
        table.select.return_value.order.return_value.execute.return_value.data = [
            {"source_id": "b"},
            {"source_id": "a"},
            {"source_id": "b"},
        ]

        assert SupabaseCorpusStore(client).sources() == ["b", "a"]


class TestGetCorpusStore:

    def test_json_backend(self, tmp_path):
        settings = Settings(
            _env_file=None, corpus_backend="json", corpus_path=tmp_path / "c.json"
        )
        store = get_corpus_store(settings)

        assert isinstance(store, JsonCorpusStore)
        assert store.path == tmp_path / "c.json"

    def test_unknown_backend(self):
        with pytest.raises(ValueError):
            get_corpus_store(Settings(_env_file=None, corpus_backend="redis"))
