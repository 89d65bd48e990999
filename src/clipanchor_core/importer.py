"""
Snippet import/export boundary.

Import documents are JSON: either a bare array of snippet-like objects or an
object with an "items" array. Rows are coerced one by one; a row that cannot
become a snippet (no usable text, not an object) is dropped and counted, never
raised. Only a document that is not JSON at all, or has no item array, raises
ImportFormatError.

Author: Goncharenko Anton aka alienxs2
License: MIT
"""

import json
import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Union

import structlog
from pydantic import ValidationError as PydanticValidationError

from clipanchor_core.exceptions import ImportFormatError
from clipanchor_core.identity import ImportMode, apply_import, deduplicate_with_labels
from clipanchor_db.models import (
    SCHEMA_VERSION,
    Anchor,
    Snippet,
    generate_snippet_id,
    now_ms,
)

logger = structlog.get_logger(__name__)


@dataclass
class ImportBatch:
    """Normalized import rows plus the count of rows that were dropped."""

    items: List[Snippet] = field(default_factory=list)
    invalid: int = 0


@dataclass
class ImportPlan:
    """What applying an import would produce; also the applied result."""

    mode: ImportMode
    items: List[Snippet] = field(default_factory=list)
    added: int = 0
    skipped: int = 0
    duplicates: int = 0
    invalid: int = 0
    replaced: int = 0

    def summary(self) -> str:
        if self.mode is ImportMode.REPLACE:
            text = f"{len(self.items)} snippet(s) will replace {self.replaced}."
        else:
            text = (
                f"Add {self.added} new, skip {self.skipped} duplicate(s). "
                f"Total after import: {len(self.items)}."
            )
        if self.duplicates:
            text += f" {self.duplicates} duplicate(s) in file will be labeled."
        if self.invalid:
            text += f" {self.invalid} invalid row(s) ignored."
        return text


def _optional_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value else None


def _finite_number(value: Any) -> Optional[int]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if not math.isfinite(value):
        return None
    return int(value)


def _coerce_anchor(raw: Any) -> Optional[Anchor]:
    if not isinstance(raw, dict):
        return None
    try:
        return Anchor.model_validate(raw)
    except PydanticValidationError as e:
        logger.debug("import_anchor_dropped", errors=e.error_count())
        return None


def normalize_imported_item(raw: Any) -> Optional[Snippet]:
    """
    Coerce one imported row into a Snippet.

    text must be a string that is non-empty once trimmed; id is kept when it
    is a non-empty string and regenerated otherwise; anchor must be an object;
    createdAt (or legacy timestamp) must be a finite number, else now;
    truncated is coerced to bool. duplicateIndex labels are not imported.

    Returns:
        Snippet, or None when the row is unusable
    """
    if not isinstance(raw, dict):
        return None

    text = raw.get("text")
    if not isinstance(text, str) or not text.strip():
        return None

    created_at = _finite_number(raw.get("createdAt"))
    if created_at is None:
        created_at = _finite_number(raw.get("timestamp"))

    try:
        return Snippet(
            id=_optional_str(raw.get("id")) or generate_snippet_id(),
            text=text.strip(),
            collection_id=_optional_str(raw.get("collectionId"))
            or _optional_str(raw.get("conversationId")),
            anchor=_coerce_anchor(raw.get("anchor")),
            created_at=created_at if created_at is not None else now_ms(),
            truncated=bool(raw.get("truncated")),
            project_id=_optional_str(raw.get("projectId")),
            source_url=_optional_str(raw.get("sourceUrl")),
            transferred_from=_optional_str(raw.get("transferredFrom")),
        )
    except PydanticValidationError as e:
        logger.debug("import_row_dropped", errors=e.error_count())
        return None


def normalize_imported_items(rows: Iterable[Any]) -> ImportBatch:
    """Normalize every row, dropping and counting the unusable ones."""
    batch = ImportBatch()
    for row in rows:
        snippet = normalize_imported_item(row)
        if snippet is None:
            batch.invalid += 1
        else:
            batch.items.append(snippet)

    if batch.invalid:
        logger.info("import_rows_dropped", kept=len(batch.items), invalid=batch.invalid)
    return batch


def parse_import_payload(payload: Union[str, bytes]) -> ImportBatch:
    """
    Parse and normalize an import document.

    Raises:
        ImportFormatError: IMP_001 if not JSON, IMP_002 if there is no item array
    """
    try:
        data = json.loads(payload)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ImportFormatError(
            message="Import file is not valid JSON",
            error_code="IMP_001",
            original_exception=e,
        ) from e

    rows = data if isinstance(data, list) else None
    if rows is None and isinstance(data, dict):
        rows = data.get("items")
    if not isinstance(rows, list):
        raise ImportFormatError(
            message="Import file has no snippet array",
            error_code="IMP_002",
            details={"document_type": type(data).__name__},
        )

    return normalize_imported_items(rows)


def plan_import(
    existing: Iterable[Snippet], batch: ImportBatch, mode: Union[ImportMode, str]
) -> ImportPlan:
    """
    Compute the result of importing a batch into an existing collection.

    Repeats inside the batch are labelled first (never silently dropped),
    then the batch is merged or replaces the collection depending on `mode`.
    The returned plan carries the resulting items, so previewing and applying
    are the same call.
    """
    current = list(existing)
    labelled = deduplicate_with_labels(batch.items)
    result = apply_import(current, labelled.items, mode)
    mode = ImportMode(mode)

    plan = ImportPlan(
        mode=mode,
        items=result.items,
        added=result.added,
        skipped=result.skipped,
        duplicates=labelled.duplicates,
        invalid=batch.invalid,
        replaced=len(current) if mode is ImportMode.REPLACE else 0,
    )
    logger.debug(
        "import_planned",
        mode=mode.value,
        added=plan.added,
        skipped=plan.skipped,
        duplicates=plan.duplicates,
        invalid=plan.invalid,
    )
    return plan


def build_export_payload(items: Iterable[Snippet]) -> Dict[str, Any]:
    """Export document: {schemaVersion, exportedAt, items}."""
    return {
        "schemaVersion": SCHEMA_VERSION,
        "exportedAt": datetime.now(timezone.utc).isoformat(),
        "items": [snippet.to_dict() for snippet in items],
    }
