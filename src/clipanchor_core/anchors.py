"""
Anchor building and passage capture.

Turns a captured passage and its enclosing block into an Anchor, and wraps the
passage into a Snippet. When a passage spans several blocks the capture side
must pick one representative block (or pass block_id=None / block_text="");
nothing here reasons across blocks.

Author: Goncharenko Anton aka alienxs2
License: MIT
"""

from typing import Optional

import structlog

from clipanchor_core.config import settings
from clipanchor_core.fingerprint import fingerprint, normalize_text
from clipanchor_db.models import (
    Anchor,
    PassageOffsets,
    Snippet,
    generate_snippet_id,
    now_ms,
)

logger = structlog.get_logger(__name__)

DEFAULT_PREFIX_LENGTH = 32

# Words of the passage tried when the full passage is not found in the block
FALLBACK_WORD_COUNT = 3


def passage_prefix(passage_text: Optional[str], length: int = DEFAULT_PREFIX_LENGTH) -> str:
    """First `length` normalized characters of the passage, trimmed."""
    return normalize_text(passage_text)[:length].strip()


def build_anchor(
    collection_id: Optional[str],
    block_id: Optional[str],
    block_text: Optional[str],
    passage_text: Optional[str],
    start: int,
    end: int,
    prefix_length: int = DEFAULT_PREFIX_LENGTH,
) -> Anchor:
    """
    Build an Anchor from capture context.

    Args:
        collection_id: Identifier of the document/collection, if known
        block_id: Stable identifier of the enclosing block ("" counts as absent)
        block_text: Full text of the enclosing block
        passage_text: Captured passage
        start: Passage start offset in the block's normalized text
        end: Passage end offset in the block's normalized text
        prefix_length: Characters kept for the prefix signal

    Returns:
        Anchor with fingerprint, prefix and offsets filled in
    """
    start = max(0, int(start))
    end = max(start, int(end))
    return Anchor(
        collection_id=collection_id or None,
        block_id=block_id or None,
        block_fingerprint=fingerprint(block_text),
        passage_prefix=passage_prefix(passage_text, prefix_length),
        passage_offsets=PassageOffsets(start=start, end=end),
    )


def find_passage_offsets(
    block_text: Optional[str], passage_text: Optional[str]
) -> Optional[PassageOffsets]:
    """
    Locate a passage inside the normalized text of its block.

    Tries the whole normalized passage first, then its first three words.
    In the fallback case end is start + passage length, which may overshoot
    the real match; offsets are a hint for highlighting, not an exact range.

    Returns:
        PassageOffsets, or None when either text is empty or nothing matches
    """
    block = normalize_text(block_text)
    passage = normalize_text(passage_text)
    if not block or not passage:
        return None

    index = block.find(passage)
    if index == -1:
        leading_words = " ".join(passage.split(" ")[:FALLBACK_WORD_COUNT])
        index = block.find(leading_words)
        if index == -1:
            return None

    return PassageOffsets(start=index, end=index + len(passage))


def capture_snippet(
    passage_text: Optional[str],
    collection_id: Optional[str] = None,
    block_id: Optional[str] = None,
    block_text: Optional[str] = None,
    project_id: Optional[str] = None,
    source_url: Optional[str] = None,
    min_length: Optional[int] = None,
    max_length: Optional[int] = None,
) -> Optional[Snippet]:
    """
    Build a Snippet (with Anchor when block context exists) from a capture.

    Args:
        passage_text: Raw captured passage
        collection_id: Current collection identifier
        block_id: Enclosing block identifier, if exposed
        block_text: Enclosing block text; None/"" means no block was found
        project_id: Optional project scope of the collection
        source_url: Optional location the passage was captured from
        min_length: Shortest accepted passage (default settings.min_passage_length)
        max_length: Truncation limit (default settings.max_passage_length)

    Returns:
        Snippet, or None when the passage is too short to keep
    """
    min_length = settings.min_passage_length if min_length is None else min_length
    max_length = settings.max_passage_length if max_length is None else max_length

    text = (passage_text or "").strip()
    if len(text) < min_length:
        logger.debug("capture_rejected", reason="too_short", length=len(text))
        return None

    truncated = len(text) > max_length
    if truncated:
        text = text[:max_length]

    anchor = None
    if block_text and block_text.strip():
        offsets = find_passage_offsets(block_text, text)
        if offsets is None:
            offsets = PassageOffsets(start=0, end=len(normalize_text(text)))
        anchor = build_anchor(
            collection_id=collection_id,
            block_id=block_id,
            block_text=block_text,
            passage_text=text,
            start=offsets.start,
            end=offsets.end,
            prefix_length=settings.prefix_length,
        )

    snippet = Snippet(
        id=generate_snippet_id(),
        text=text,
        collection_id=collection_id or None,
        anchor=anchor,
        created_at=now_ms(),
        truncated=truncated,
        project_id=project_id,
        source_url=source_url,
    )
    logger.debug(
        "snippet_captured",
        snippet_id=snippet.id,
        anchored=anchor is not None,
        truncated=truncated,
    )
    return snippet
