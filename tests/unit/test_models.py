"""
Unit tests for clipanchor_db models.

Copyright (c) 2025 Goncharenko Anton aka alienxs2
License: MIT
"""

import re

import pytest
from pydantic import ValidationError

from clipanchor_db.models import Anchor, ContentBlock, PassageOffsets, Snippet, generate_snippet_id


class TestSnippetModel:
    """Test Snippet validation and serialization."""

    def test_defaults(self):
        snippet = Snippet(id="s1", text="hello")
        assert snippet.collection_id is None
        assert snippet.anchor is None
        assert snippet.truncated is False
        assert snippet.duplicate_index is None
        assert snippet.created_at > 0

    def test_empty_id_rejected(self):
        with pytest.raises(ValidationError):
            Snippet(id="", text="hello")

    def test_duplicate_index_starts_at_two(self):
        with pytest.raises(ValidationError):
            Snippet(id="s1", text="hello", duplicate_index=1)

    def test_frozen(self):
        snippet = Snippet(id="s1", text="hello")
        with pytest.raises(ValidationError):
            snippet.text = "changed"

    def test_to_dict_camel_case_and_omits_unset_labels(self):
        snippet = Snippet(
            id="s1",
            text="hello",
            collection_id="c1",
            anchor=Anchor(block_id="b1", passage_offsets=PassageOffsets(start=1, end=4)),
            created_at=5,
        )

        data = snippet.to_dict()

        assert data == {
            "id": "s1",
            "text": "hello",
            "collectionId": "c1",
            "anchor": {
                "collectionId": None,
                "blockId": "b1",
                "blockFingerprint": "",
                "passagePrefix": "",
                "passageOffsets": {"start": 1, "end": 4},
            },
            "createdAt": 5,
            "truncated": False,
        }

    def test_validates_from_wire_and_python_names(self):
        wire = Snippet.model_validate({"id": "s1", "text": "t", "collectionId": "c1"})
        python = Snippet(id="s1", text="t", collection_id="c1", created_at=wire.created_at)
        assert wire == python


class TestAnchorModel:
    def test_negative_offsets_rejected(self):
        with pytest.raises(ValidationError):
            PassageOffsets(start=-1, end=2)

    def test_legacy_aliases(self):
        anchor = Anchor.model_validate({"messageId": "m1", "textHash": "ff"})
        assert anchor.block_id == "m1"
        assert anchor.block_fingerprint == "ff"


class TestContentBlock:
    def test_handle_ignored_in_equality(self):
        assert ContentBlock(text="a", block_id="b", handle=object()) == ContentBlock(
            text="a", block_id="b", handle=object()
        )


def test_generate_snippet_id_format():
    assert re.fullmatch(r"snippet_\d+_[0-9a-z]{7}", generate_snippet_id())
