"""
Source Resolver - tiered relocation of an anchored passage.

Given an Anchor and the blocks currently rendered by the document, finds the
block the passage was captured from. Strategies are tried strictly in order and
the first hit wins:

1. block_id     - exact stable-identifier match
2. fingerprint  - block text fingerprint equals the anchor's
3. prefix       - block text contains the passage prefix (case-insensitive)

Within a tier the first block in document order wins. Resolution is read-only
and keeps no state between calls, so it is safe to call from polling loops.

Author: Goncharenko Anton aka alienxs2
License: MIT
"""

from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Sequence, Tuple

import structlog

from clipanchor_core.fingerprint import fingerprint, normalize_text
from clipanchor_db.models import Anchor, ContentBlock, Snippet

logger = structlog.get_logger(__name__)

Matcher = Callable[[Anchor, Sequence[ContentBlock]], Optional[ContentBlock]]

REASON_NO_ANCHOR = "Snippet has no anchor information"
REASON_OTHER_COLLECTION = (
    "Source not found in current conversation. The snippet is from a different conversation."
)
REASON_NOT_LOADED = (
    "Source message not found. It may have been deleted or the page needs to be "
    "scrolled to load it."
)
REASON_NOT_FOUND = (
    "Source not found. The message may be in a different conversation or may have been deleted."
)


def match_by_block_id(anchor: Anchor, blocks: Sequence[ContentBlock]) -> Optional[ContentBlock]:
    """Return the first block whose identifier equals anchor.block_id."""
    if not anchor.block_id:
        return None
    for block in blocks:
        if block.block_id == anchor.block_id:
            return block
    return None


def match_by_fingerprint(
    anchor: Anchor, blocks: Sequence[ContentBlock]
) -> Optional[ContentBlock]:
    """Return the first block whose full-text fingerprint equals the anchor's."""
    if not anchor.block_fingerprint:
        return None
    for block in blocks:
        if fingerprint(block.text) == anchor.block_fingerprint:
            return block
    return None


def match_by_prefix(anchor: Anchor, blocks: Sequence[ContentBlock]) -> Optional[ContentBlock]:
    """Return the first block whose normalized text contains the passage prefix."""
    prefix = normalize_text(anchor.passage_prefix).lower()
    if not prefix:
        return None
    for block in blocks:
        if prefix in normalize_text(block.text).lower():
            return block
    return None


@dataclass(frozen=True)
class MatchStrategy:
    """A named resolution tier."""

    name: str
    match: Matcher


DEFAULT_STRATEGIES: Tuple[MatchStrategy, ...] = (
    MatchStrategy("block_id", match_by_block_id),
    MatchStrategy("fingerprint", match_by_fingerprint),
    MatchStrategy("prefix", match_by_prefix),
)


@dataclass(frozen=True)
class Resolution:
    """Outcome of a resolve call. block is None when nothing matched."""

    block: Optional[ContentBlock] = None
    tier: Optional[str] = None

    @property
    def found(self) -> bool:
        return self.block is not None


NOT_FOUND = Resolution()


@dataclass(frozen=True)
class NavigationOutcome:
    """Result of locating a snippet's source, with a user-facing reason on failure."""

    success: bool
    block: Optional[ContentBlock] = None
    tier: Optional[str] = None
    reason: Optional[str] = None


class SourceResolver:
    """
    Ordered cascade of match strategies.

    Example:
        ```python
        resolver = SourceResolver()
        resolution = resolver.resolve(snippet.anchor, blocks)
        if resolution.found:
            document.highlight(resolution.block.handle)
        ```
    """

    def __init__(self, strategies: Optional[Sequence[MatchStrategy]] = None) -> None:
        self.strategies: Tuple[MatchStrategy, ...] = tuple(
            DEFAULT_STRATEGIES if strategies is None else strategies
        )

    def resolve(
        self, anchor: Optional[Anchor], blocks: Iterable[ContentBlock]
    ) -> Resolution:
        """
        Find the block an anchor points at.

        Args:
            anchor: Anchor recorded at capture time (None never resolves)
            blocks: Current blocks in document order

        Returns:
            Resolution with the matched block and tier name, or NOT_FOUND
        """
        if anchor is None:
            return NOT_FOUND

        candidates = list(blocks)
        if not candidates:
            logger.debug("source_unresolved", reason="no_blocks")
            return NOT_FOUND

        for strategy in self.strategies:
            block = strategy.match(anchor, candidates)
            if block is not None:
                logger.debug(
                    "source_resolved",
                    tier=strategy.name,
                    block_id=block.block_id,
                    candidates=len(candidates),
                )
                return Resolution(block=block, tier=strategy.name)

        logger.debug("source_unresolved", reason="no_match", candidates=len(candidates))
        return NOT_FOUND


_default_resolver = SourceResolver()


def resolve(anchor: Optional[Anchor], blocks: Iterable[ContentBlock]) -> Optional[ContentBlock]:
    """Resolve with the default three tiers; None means not found."""
    return _default_resolver.resolve(anchor, blocks).block


def locate_source(
    snippet: Snippet,
    blocks: Iterable[ContentBlock],
    current_collection_id: Optional[str] = None,
    resolver: Optional[SourceResolver] = None,
) -> NavigationOutcome:
    """
    Locate the source block of a snippet in the current document.

    The tiers always run first, so a snippet copied into a branched collection
    resolves against the shared content there. Only when nothing matches is
    the failure reason chosen, by comparing the snippet's collection (its
    anchor's when unset) with the current one. Failures are always
    recoverable: the caller leaves the snippet untouched and may retry later.

    Args:
        snippet: Snippet whose anchor should be resolved
        blocks: Current blocks in document order
        current_collection_id: Collection shown by the document, if known
        resolver: Resolver to use (default three-tier resolver)

    Returns:
        NavigationOutcome
    """
    anchor = snippet.anchor
    if anchor is None:
        return NavigationOutcome(success=False, reason=REASON_NO_ANCHOR)

    resolution = (resolver or _default_resolver).resolve(anchor, blocks)
    if resolution.found:
        return NavigationOutcome(success=True, block=resolution.block, tier=resolution.tier)

    home_collection = snippet.collection_id or anchor.collection_id
    if home_collection and current_collection_id and home_collection != current_collection_id:
        logger.info(
            "source_in_other_collection",
            snippet_id=snippet.id,
            snippet_collection=home_collection,
            current_collection=current_collection_id,
        )
        return NavigationOutcome(success=False, reason=REASON_OTHER_COLLECTION)

    same_collection = bool(home_collection and home_collection == current_collection_id)
    logger.info("source_not_found", snippet_id=snippet.id, same_collection=same_collection)
    return NavigationOutcome(
        success=False,
        reason=REASON_NOT_LOADED if same_collection else REASON_NOT_FOUND,
    )
