"""
Unit tests for snippet persistence.

Copyright (c) 2025 Goncharenko Anton aka alienxs2
License: MIT
"""

import errno
import json
from unittest.mock import MagicMock, patch

import pytest

from clipanchor_db.exceptions import StorageError, StorageQuotaError
from clipanchor_db.models import SCHEMA_VERSION
from clipanchor_db.snippet_store import (
    STORAGE_KEY,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    SnippetRepository,
)


class TestSnippetRepository:
    """Test load/save against an in-memory store."""

    def test_requires_store(self):
        with pytest.raises(ValueError):
            SnippetRepository(None)

    def test_empty_store_loads_empty(self):
        assert SnippetRepository(InMemoryKeyValueStore()).load_snippets() == []

    def test_save_then_load(self, make_snippet):
        store = InMemoryKeyValueStore()
        repo = SnippetRepository(store)
        items = [make_snippet(snippet_id="a"), make_snippet(text="other", snippet_id="b")]

        repo.save_snippets(items)

        stored = store.get(STORAGE_KEY)
        assert stored["schemaVersion"] == SCHEMA_VERSION
        assert [row["id"] for row in stored["items"]] == ["a", "b"]
        assert repo.load_snippets() == items

    @pytest.mark.parametrize(
        "payload",
        [
            {"schemaVersion": 99, "items": [{"id": "a", "text": "x"}]},
            {"items": [{"id": "a", "text": "x"}]},
            [{"id": "a", "text": "x"}],
            {"schemaVersion": SCHEMA_VERSION, "items": "nope"},
            "garbage",
        ],
    )
    def test_unexpected_payload_loads_empty(self, payload):
        store = InMemoryKeyValueStore({STORAGE_KEY: payload})
        assert SnippetRepository(store).load_snippets() == []

    def test_invalid_rows_skipped(self):
        store = InMemoryKeyValueStore(
            {
                STORAGE_KEY: {
                    "schemaVersion": SCHEMA_VERSION,
                    "items": [{"id": "a", "text": "ok"}, {"id": "", "text": "bad"}, 5],
                }
            }
        )
        items = SnippetRepository(store).load_snippets()
        assert [s.id for s in items] == ["a"]

    def test_load_swallows_store_errors(self):
        store = MagicMock()
        store.get.side_effect = StorageError("unreadable")
        assert SnippetRepository(store).load_snippets() == []

    def test_save_propagates_quota_error(self, make_snippet):
        store = MagicMock()
        store.set.side_effect = StorageQuotaError()

        with pytest.raises(StorageQuotaError) as exc_info:
            SnippetRepository(store).save_snippets([make_snippet()])
        assert "quota" in str(exc_info.value).lower()


class TestJsonFileKeyValueStore:
    """Test the file-backed store."""

    def test_missing_file_reads_none(self, tmp_path):
        store = JsonFileKeyValueStore(tmp_path / "missing.json")
        assert store.get("anything") is None

    def test_set_creates_parent_and_keeps_other_keys(self, tmp_path):
        path = tmp_path / "nested" / "store.json"
        store = JsonFileKeyValueStore(path)

        store.set("one", 1)
        store.set("two", {"x": [1, 2]})

        assert json.loads(path.read_text(encoding="utf-8")) == {"one": 1, "two": {"x": [1, 2]}}
        assert list(path.parent.glob("*.tmp")) == []

    def test_corrupt_file_raises_storage_error(self, tmp_path):
        path = tmp_path / "store.json"
        path.write_text("{broken", encoding="utf-8")
        with pytest.raises(StorageError):
            JsonFileKeyValueStore(path).get("snippets")

    def test_non_object_file_raises_storage_error(self, tmp_path):
        path = tmp_path / "store.json"
        path.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(StorageError):
            JsonFileKeyValueStore(path).get("snippets")

    def test_disk_full_raises_quota_error(self, tmp_path):
        store = JsonFileKeyValueStore(tmp_path / "store.json")
        with patch(
            "clipanchor_db.snippet_store.os.replace",
            side_effect=OSError(errno.ENOSPC, "No space left on device"),
        ):
            with pytest.raises(StorageQuotaError):
                store.set("snippets", {})
        assert list(tmp_path.glob("*.tmp")) == []

    def test_other_write_failure_raises_storage_error(self, tmp_path):
        store = JsonFileKeyValueStore(tmp_path / "store.json")
        with patch(
            "clipanchor_db.snippet_store.os.replace",
            side_effect=OSError(errno.EACCES, "Permission denied"),
        ):
            with pytest.raises(StorageError) as exc_info:
                store.set("snippets", {})
        assert not isinstance(exc_info.value, StorageQuotaError)

    def test_repository_round_trip_on_disk(self, tmp_path, make_snippet):
        repo = SnippetRepository(JsonFileKeyValueStore(tmp_path / "snippets.json"))
        items = [make_snippet()]
        repo.save_snippets(items)
        assert repo.load_snippets() == items
