"""
Command implementations for the ClipAnchor CLI.

Each command loads the snippet collection from the JSON store, runs one core
operation and writes the result back when it changed. Commands return True on
success and False otherwise; not-found outcomes are reported, never raised.
"""

import json
import time
import uuid
from pathlib import Path
from typing import List, Optional

from clipanchor_core.collection import transfer_snippets
from clipanchor_core.continuity import ContinuityDetector
from clipanchor_core.exceptions import ClipAnchorError, ImportFormatError
from clipanchor_core.identity import ImportMode
from clipanchor_core.importer import build_export_payload, parse_import_payload, plan_import
from clipanchor_core.logging_service import LoggingService
from clipanchor_core.resolver import locate_source
from clipanchor_db.exceptions import StorageError
from clipanchor_db.models import ContentBlock
from clipanchor_db.snippet_store import JsonFileKeyValueStore, SnippetRepository


def open_repository(store_path: Path) -> SnippetRepository:
    return SnippetRepository(JsonFileKeyValueStore(store_path))


def load_blocks(path: Path) -> List[ContentBlock]:
    """
    Read a document snapshot: a JSON array of {"id": ..., "text": ...} objects.

    Entries without string text are ignored; "blockId" is accepted for "id".

    Raises:
        ValueError: If the file is not a JSON array
    """
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, list):
        raise ValueError(f"{path} must contain a JSON array of blocks")

    blocks: List[ContentBlock] = []
    for entry in data:
        if not isinstance(entry, dict) or not isinstance(entry.get("text"), str):
            continue
        block_id = entry.get("id", entry.get("blockId"))
        blocks.append(
            ContentBlock(
                text=entry["text"],
                block_id=block_id if isinstance(block_id, str) and block_id else None,
                handle=entry,
            )
        )
    return blocks


def import_command(store_path: Path, source: Path, mode: str, dry_run: bool = False) -> bool:
    """Merge or replace the stored collection with an import file."""
    correlation_id = str(uuid.uuid4())
    try:
        batch = parse_import_payload(source.read_bytes())
    except ImportFormatError as e:
        print(f"❌ {e.message}")
        return False
    except OSError as e:
        print(f"❌ Cannot read {source}: {e}")
        return False

    if not batch.items:
        print("❌ No valid snippets found.")
        return False

    repo = open_repository(store_path)
    existing = repo.load_snippets()
    start = time.perf_counter()
    try:
        plan = plan_import(existing, batch, mode)
    except ClipAnchorError as e:
        print(f"❌ {e.message}")
        return False
    LoggingService.log_performance(
        "plan_import",
        (time.perf_counter() - start) * 1000,
        correlation_id,
        {"existing": len(existing), "incoming": len(batch.items)},
    )

    print(f"📋 Preview: {plan.summary()}")
    if dry_run:
        return True

    try:
        repo.save_snippets(plan.items)
    except StorageError as e:
        LoggingService.log_error(e, correlation_id, {"operation": "import_snippets"})
        print(f"❌ {e}")
        return False

    LoggingService.log_operation(
        "import_snippets",
        correlation_id,
        {
            "mode": plan.mode.value,
            "added": plan.added,
            "skipped": plan.skipped,
            "duplicates": plan.duplicates,
            "invalid": plan.invalid,
        },
    )
    if plan.mode is ImportMode.REPLACE:
        print(f"✅ Imported {len(plan.items)} snippet(s).")
    else:
        suffix = f" ({plan.skipped} duplicates skipped)" if plan.skipped else ""
        print(f"✅ Imported {plan.added} new snippet(s){suffix}.")
    return True


def export_command(store_path: Path, output: Optional[Path] = None) -> bool:
    """Write the stored collection as an export document."""
    items = open_repository(store_path).load_snippets()
    if not items:
        print("❌ No snippets to export")
        return False

    text = json.dumps(build_export_payload(items), ensure_ascii=False, indent=2)
    if output is None:
        print(text)
        return True

    try:
        output.write_text(text, encoding="utf-8")
    except OSError as e:
        print(f"❌ Cannot write {output}: {e}")
        return False
    print(f"✅ Exported {len(items)} snippet(s) to {output}")
    return True


def locate_command(
    store_path: Path, snippet_id: str, blocks_path: Path, collection_id: Optional[str] = None
) -> bool:
    """Resolve a stored snippet against a document snapshot."""
    snippet = next(
        (s for s in open_repository(store_path).load_snippets() if s.id == snippet_id), None
    )
    if snippet is None:
        print(f"❌ Snippet not found: {snippet_id}")
        return False

    try:
        blocks = load_blocks(blocks_path)
    except (OSError, ValueError) as e:
        print(f"❌ {e}")
        return False

    outcome = locate_source(snippet, blocks, current_collection_id=collection_id)
    if not outcome.success:
        print(f"🔍 {outcome.reason}")
        return False

    block_label = outcome.block.block_id or f"#{blocks.index(outcome.block)}"
    print(f"✅ Found in block {block_label} (matched by {outcome.tier})")
    return True


def continuity_command(before_path: Path, after_path: Path) -> bool:
    """Report whether two document snapshots look like one continued source."""
    try:
        before = load_blocks(before_path)
        after = load_blocks(after_path)
    except (OSError, ValueError) as e:
        print(f"❌ {e}")
        return False

    verdict = ContinuityDetector().compare_blocks(before, after)
    label = "continuation" if verdict else "unrelated"
    print(
        f"{'✅' if verdict else '➖'} {label}: "
        f"{verdict.intersection_count} shared of {verdict.sample_size} sampled"
    )
    return verdict.is_continuation


def transfer_command(store_path: Path, from_collection_id: str, to_collection_id: str) -> bool:
    """Copy one collection's snippets into another."""
    repo = open_repository(store_path)
    result = transfer_snippets(repo.load_snippets(), from_collection_id, to_collection_id)
    if result.copied == 0:
        print("➖ Nothing to copy")
        return False

    try:
        repo.save_snippets(result.items)
    except StorageError as e:
        print(f"❌ {e}")
        return False
    print(f"✅ Copied {result.copied} snippet(s) from {from_collection_id}")
    return True
