"""
Collection-level snippet operations: scoping, search and cross-collection transfer.

Author: Goncharenko Anton aka alienxs2
License: MIT
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Optional

import structlog

from clipanchor_db.models import Snippet, generate_snippet_id

logger = structlog.get_logger(__name__)


@dataclass
class TransferResult:
    items: List[Snippet] = field(default_factory=list)
    copied: int = 0


def filter_snippets(
    items: Iterable[Snippet],
    collection_id: Optional[str] = None,
    query: str = "",
    newest_first: bool = True,
) -> List[Snippet]:
    """
    Select the snippets to show for a collection.

    Args:
        items: Full snippet collection
        collection_id: Keep only snippets of this collection (None keeps all)
        query: Case-insensitive substring filter on snippet text
        newest_first: Sort by created_at descending (ascending when False)

    Returns:
        New sorted list
    """
    selected = list(items)
    if collection_id is not None:
        selected = [s for s in selected if s.collection_id == collection_id]

    needle = query.strip().lower()
    if needle:
        selected = [s for s in selected if needle in s.text.lower()]

    return sorted(selected, key=lambda s: s.created_at, reverse=newest_first)


def transfer_snippets(
    items: Iterable[Snippet], from_collection_id: str, to_collection_id: str
) -> TransferResult:
    """
    Copy every snippet of one collection into another (e.g. after a branch).

    Copies get fresh ids, the target collection id and transferred_from set;
    their anchors are kept so they resolve against the shared content. Nothing
    is copied when the ids are missing or equal, when the source is empty, or
    when the target already has snippets.

    Returns:
        TransferResult with the new full collection and the number copied
    """
    current = list(items)
    if not from_collection_id or not to_collection_id or from_collection_id == to_collection_id:
        return TransferResult(items=current, copied=0)

    source = [s for s in current if s.collection_id == from_collection_id]
    target_has_items = any(s.collection_id == to_collection_id for s in current)
    if not source or target_has_items:
        logger.debug(
            "transfer_skipped",
            source_count=len(source),
            target_has_items=target_has_items,
        )
        return TransferResult(items=current, copied=0)

    copies = [
        s.model_copy(
            update={
                "id": generate_snippet_id(),
                "collection_id": to_collection_id,
                "transferred_from": from_collection_id,
            }
        )
        for s in source
    ]
    logger.info(
        "snippets_transferred",
        from_collection=from_collection_id,
        to_collection=to_collection_id,
        copied=len(copies),
    )
    return TransferResult(items=current + copies, copied=len(copies))
