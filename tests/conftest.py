"""
Pytest configuration and fixtures for all tests.

Provides shared setup/teardown for logging and snippet builders.

Copyright (c) 2025 Goncharenko Anton aka alienxs2
License: MIT
"""

import pytest

from clipanchor_core.anchors import build_anchor
from clipanchor_core.logging_service import LoggingService
from clipanchor_db.models import ContentBlock, Snippet


def pytest_configure(config):
    """Configure logging before any tests are collected."""
    LoggingService.configure_logging(level="DEBUG", format="json")


@pytest.fixture(autouse=True)
def reset_logging_service():
    """Reset LoggingService state before each test."""
    LoggingService._configured = False
    LoggingService._log_level = "INFO"
    LoggingService._config = None
    LoggingService._loggers = {}
    LoggingService._sensitive_keys = set()

    # Configure for tests
    LoggingService.configure_logging(level="DEBUG", format="json")

    yield

    LoggingService._configured = False
    LoggingService._loggers = {}


@pytest.fixture
def blocks():
    """A small rendered document: three blocks, the middle one with an id."""
    return [
        ContentBlock(text="Intro paragraph about anchors.", block_id=None),
        ContentBlock(
            text="The quick brown fox jumps over the lazy dog.", block_id="msg-2"
        ),
        ContentBlock(text="Closing remarks and thanks.", block_id="msg-3"),
    ]


@pytest.fixture
def make_snippet():
    """Factory for anchored snippets captured from a block."""

    def _make(
        text="quick brown fox",
        collection_id="c1",
        block_id="msg-2",
        block_text="The quick brown fox jumps over the lazy dog.",
        start=4,
        end=19,
        snippet_id="snippet_1_aaaaaaa",
        created_at=1_700_000_000_000,
        anchored=True,
    ):
        anchor = None
        if anchored:
            anchor = build_anchor(
                collection_id=collection_id,
                block_id=block_id,
                block_text=block_text,
                passage_text=text,
                start=start,
                end=end,
            )
        return Snippet(
            id=snippet_id,
            text=text,
            collection_id=collection_id,
            anchor=anchor,
            created_at=created_at,
        )

    return _make
