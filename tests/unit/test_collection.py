"""
Unit tests for collection filtering and transfer.

Copyright (c) 2025 Goncharenko Anton aka alienxs2
License: MIT
"""

from clipanchor_core.collection import filter_snippets, transfer_snippets


class TestFilterSnippets:
    def test_scope_and_order(self, make_snippet):
        items = [
            make_snippet(snippet_id="a", collection_id="c1", created_at=1),
            make_snippet(snippet_id="b", collection_id="c2", created_at=2),
            make_snippet(snippet_id="c", collection_id="c1", created_at=3),
        ]

        assert [s.id for s in filter_snippets(items, "c1")] == ["c", "a"]
        assert [s.id for s in filter_snippets(items, "c1", newest_first=False)] == ["a", "c"]

    def test_no_scope_keeps_all(self, make_snippet):
        items = [make_snippet(snippet_id="a"), make_snippet(snippet_id="b", collection_id="c9")]
        assert len(filter_snippets(items)) == 2

    def test_query_case_insensitive(self, make_snippet):
        items = [
            make_snippet(text="Alpha beta", snippet_id="a"),
            make_snippet(text="gamma", snippet_id="b"),
        ]
        assert [s.id for s in filter_snippets(items, query="  ALPHA ")] == ["a"]


class TestTransferSnippets:
    """Test copying a collection's snippets after a branch."""

    def test_copies_with_fresh_ids(self, make_snippet):
        items = [
            make_snippet(snippet_id="a", collection_id="c1"),
            make_snippet(text="other", snippet_id="b", collection_id="c1"),
        ]

        result = transfer_snippets(items, "c1", "c2")

        assert result.copied == 2
        assert len(result.items) == 4
        copies = result.items[2:]
        assert all(s.collection_id == "c2" for s in copies)
        assert all(s.transferred_from == "c1" for s in copies)
        assert {s.id for s in copies}.isdisjoint({"a", "b"})
        assert copies[0].anchor == items[0].anchor
        assert result.items[:2] == items

    def test_target_not_empty(self, make_snippet):
        items = [
            make_snippet(snippet_id="a", collection_id="c1"),
            make_snippet(snippet_id="b", collection_id="c2"),
        ]
        result = transfer_snippets(items, "c1", "c2")
        assert result.copied == 0
        assert result.items == items

    def test_same_or_missing_ids(self, make_snippet):
        items = [make_snippet(collection_id="c1")]
        assert transfer_snippets(items, "c1", "c1").copied == 0
        assert transfer_snippets(items, "", "c2").copied == 0

    def test_empty_source(self, make_snippet):
        items = [make_snippet(collection_id="c1")]
        assert transfer_snippets(items, "c5", "c2").copied == 0
