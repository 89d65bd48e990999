"""
ClipAnchor CLI entry point.

Usage:
    clipanchor import FILE --mode {merge,replace} [--dry-run]
    clipanchor export [--output FILE]
    clipanchor locate SNIPPET_ID --blocks FILE [--collection ID]
    clipanchor continuity BEFORE AFTER
    clipanchor transfer FROM_ID TO_ID
    clipanchor --help
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from clipanchor_cli.commands import (
    continuity_command,
    export_command,
    import_command,
    locate_command,
    transfer_command,
)
from clipanchor_core.config import settings
from clipanchor_core.logging_service import LoggingService
from clipanchor_core.utils import configure_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="clipanchor", description="Captured snippet store and source locator"
    )
    parser.add_argument("--version", action="version", version="%(prog)s 0.3.0")
    parser.add_argument(
        "--store",
        type=Path,
        default=None,
        help="Snippet store file (default: CLIPANCHOR_STORE_PATH or ./data/snippets.json)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    import_parser = subparsers.add_parser("import", help="Import snippets from a JSON file")
    import_parser.add_argument("file", type=Path, help="JSON array or {items: [...]} document")
    import_parser.add_argument(
        "--mode",
        choices=["merge", "replace"],
        required=True,
        help="merge skips known snippets; replace discards the current collection",
    )
    import_parser.add_argument(
        "--dry-run", action="store_true", help="Show the preview without saving"
    )

    export_parser = subparsers.add_parser("export", help="Export snippets as JSON")
    export_parser.add_argument(
        "--output", type=Path, default=None, help="Output file (default: stdout)"
    )

    locate_parser = subparsers.add_parser("locate", help="Find a snippet's source block")
    locate_parser.add_argument("snippet_id", help="Stored snippet id")
    locate_parser.add_argument(
        "--blocks", type=Path, required=True, help='JSON array of {"id", "text"} blocks'
    )
    locate_parser.add_argument(
        "--collection", default=None, help="Collection currently shown by the document"
    )

    continuity_parser = subparsers.add_parser(
        "continuity", help="Check whether two block snapshots share a source"
    )
    continuity_parser.add_argument("before", type=Path, help="Blocks before navigation")
    continuity_parser.add_argument("after", type=Path, help="Blocks after navigation")

    transfer_parser = subparsers.add_parser(
        "transfer", help="Copy a collection's snippets into another collection"
    )
    transfer_parser.add_argument("from_id", help="Source collection id")
    transfer_parser.add_argument("to_id", help="Target collection id")

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if not LoggingService.is_configured():
        configure_logging()

    store_path = args.store or settings.store_path

    if args.command == "import":
        success = import_command(store_path, args.file, args.mode, dry_run=args.dry_run)
    elif args.command == "export":
        success = export_command(store_path, args.output)
    elif args.command == "locate":
        success = locate_command(store_path, args.snippet_id, args.blocks, args.collection)
    elif args.command == "continuity":
        success = continuity_command(args.before, args.after)
    else:
        success = transfer_command(store_path, args.from_id, args.to_id)

    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
