"""
Identity & Merge Engine.

Computes a content-addressed IdentityKey per snippet and uses it to label
repeats inside one capture stream and to reconcile two independent snippet
collections (local state vs. an imported file) without losing user data.

All functions take and return new lists; nothing is mutated in place. The
caller owns the single mutable reference to its collection and assigns the
result back.

Author: Goncharenko Anton aka alienxs2
License: MIT
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, NamedTuple, Optional, Set, Union

import structlog

from clipanchor_core.exceptions import IdentityError, ValidationError
from clipanchor_core.fingerprint import fingerprint
from clipanchor_db.models import Snippet, generate_snippet_id

logger = structlog.get_logger(__name__)


class IdentityKey(NamedTuple):
    """Snippets with equal keys are the same capture, whatever their ids."""

    text_fingerprint: str
    collection_id: str
    block_fingerprint: str
    start: Optional[int]
    end: Optional[int]

    def __str__(self) -> str:
        return "|".join("" if part is None else str(part) for part in self)


class ImportMode(str, Enum):
    """How an incoming collection is applied. There is no default."""

    MERGE = "merge"
    REPLACE = "replace"


@dataclass
class DedupResult:
    items: List[Snippet] = field(default_factory=list)
    duplicates: int = 0


@dataclass
class MergeResult:
    items: List[Snippet] = field(default_factory=list)
    added: int = 0
    skipped: int = 0


def compute_identity_key(snippet: Snippet) -> IdentityKey:
    """
    Compute the IdentityKey of a snippet.

    Key = fingerprint(text) + collection id + anchor block fingerprint +
    anchor passage offsets. Unanchored snippets use empty/None anchor parts.

    Raises:
        IdentityError: If the object carries no text (contract violation)
    """
    text = getattr(snippet, "text", None)
    if not isinstance(text, str):
        raise IdentityError(
            message="Snippet is missing required identity field 'text'",
            error_code="IDENT_001" if hasattr(snippet, "text") else "IDENT_002",
            details={
                "snippet_id": getattr(snippet, "id", None),
                "type": type(snippet).__name__,
            },
        )

    anchor = getattr(snippet, "anchor", None)
    if anchor is None:
        block_fingerprint, start, end = "", None, None
    else:
        offsets = anchor.passage_offsets
        block_fingerprint = anchor.block_fingerprint or ""
        start, end = offsets.start, offsets.end

    return IdentityKey(
        text_fingerprint=fingerprint(text),
        collection_id=getattr(snippet, "collection_id", None) or "",
        block_fingerprint=block_fingerprint,
        start=start,
        end=end,
    )


def deduplicate_with_labels(snippets: Iterable[Snippet]) -> DedupResult:
    """
    Label repeated captures instead of dropping them.

    The first occurrence of each key is kept as is. Every later occurrence is
    kept too, with duplicate_index 2, 3, ... and a fresh id. Output length
    always equals input length.
    """
    seen: Dict[IdentityKey, int] = {}
    items: List[Snippet] = []
    duplicates = 0

    for snippet in snippets:
        key = compute_identity_key(snippet)
        count = seen.get(key, 0)
        if count == 0:
            items.append(snippet)
        else:
            items.append(
                snippet.model_copy(
                    update={"id": generate_snippet_id(), "duplicate_index": count + 1}
                )
            )
            duplicates += 1
        seen[key] = count + 1

    if duplicates:
        logger.debug("duplicates_labelled", total=len(items), duplicates=duplicates)
    return DedupResult(items=items, duplicates=duplicates)


def deduplicate(snippets: Iterable[Snippet]) -> DedupResult:
    """Drop repeated captures, keeping the first occurrence of each key."""
    seen: Set[IdentityKey] = set()
    items: List[Snippet] = []
    duplicates = 0

    for snippet in snippets:
        key = compute_identity_key(snippet)
        if key in seen:
            duplicates += 1
            continue
        seen.add(key)
        items.append(snippet)

    return DedupResult(items=items, duplicates=duplicates)


def merge(existing: Iterable[Snippet], incoming: Iterable[Snippet]) -> MergeResult:
    """
    Reconcile incoming snippets into an existing collection.

    Existing data wins ties: an incoming snippet whose key already exists is
    dropped and counted as skipped, and the existing copies are kept with their
    ids untouched. Repeats of a key inside incoming are skipped as well. No
    existing snippet is ever lost.

    Result order: incoming order (existing copies standing in for matched
    keys), then the remaining existing snippets in their original order.
    """
    keyed_existing = [(compute_identity_key(snippet), snippet) for snippet in existing]
    existing_by_key: Dict[IdentityKey, List[Snippet]] = {}
    for key, snippet in keyed_existing:
        existing_by_key.setdefault(key, []).append(snippet)

    seen_incoming: Set[IdentityKey] = set()
    items: List[Snippet] = []
    added = 0
    skipped = 0

    for snippet in incoming:
        key = compute_identity_key(snippet)
        if key in seen_incoming:
            skipped += 1
            continue
        seen_incoming.add(key)

        if key in existing_by_key:
            skipped += 1
            items.extend(existing_by_key[key])
            continue

        items.append(snippet)
        added += 1

    items.extend(snippet for key, snippet in keyed_existing if key not in seen_incoming)

    logger.debug("collections_merged", total=len(items), added=added, skipped=skipped)
    return MergeResult(items=items, added=added, skipped=skipped)


def replace(incoming: Iterable[Snippet]) -> List[Snippet]:
    """Discard the prior collection entirely; the result is the incoming list."""
    return list(incoming)


def apply_import(
    existing: Iterable[Snippet],
    incoming: Iterable[Snippet],
    mode: Union[ImportMode, str],
) -> MergeResult:
    """
    Apply an incoming collection with an explicitly chosen mode.

    Raises:
        ValidationError: If mode is not "merge" or "replace"
    """
    try:
        mode = ImportMode(mode)
    except ValueError as e:
        raise ValidationError(
            message=f"Import mode must be 'merge' or 'replace', got {mode!r}",
            error_code="VAL_002",
            original_exception=e,
        ) from e

    if mode is ImportMode.REPLACE:
        items = replace(incoming)
        return MergeResult(items=items, added=len(items), skipped=0)

    return merge(existing, incoming)
