"""
Unit tests for text normalization and fingerprinting.

Copyright (c) 2025 Goncharenko Anton aka alienxs2
License: MIT
"""

import pytest

from clipanchor_core.fingerprint import FINGERPRINT_DIGEST_SIZE, fingerprint, normalize_text


class TestNormalizeText:
    """Test whitespace normalization."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("  Hello   world\n", "Hello world"),
            ("a\tb\r\nc", "a b c"),
            ("already normal", "already normal"),
            (" non breaking ", "non breaking"),
            ("   ", ""),
            ("", ""),
            (None, ""),
        ],
    )
    def test_normalize(self, raw, expected):
        assert normalize_text(raw) == expected

    def test_normalize_is_idempotent(self):
        once = normalize_text("  x \n\n y  ")
        assert normalize_text(once) == once


class TestFingerprint:
    """Test fingerprint determinism and whitespace invariance."""

    def test_deterministic(self):
        assert fingerprint("same text") == fingerprint("same text")

    def test_hex_of_expected_length(self):
        value = fingerprint("some block text")
        assert len(value) == FINGERPRINT_DIGEST_SIZE * 2
        int(value, 16)

    def test_whitespace_variants_share_fingerprint(self):
        assert fingerprint("Hello   world\n") == fingerprint("Hello world")
        assert fingerprint("\tHello\nworld ") == fingerprint("Hello world")

    def test_different_text_differs(self):
        assert fingerprint("Hello world") != fingerprint("Hello World")

    @pytest.mark.parametrize("empty", ["", "   \n\t", None])
    def test_empty_input_yields_empty_fingerprint(self, empty):
        assert fingerprint(empty) == ""

    def test_unicode_text(self):
        assert fingerprint("Привет,  мир") == fingerprint("Привет, мир")
