"""
Export or import a Booker collection file from the command line.

    python -m booker.jobs.transfer export [path]
    python -m booker.jobs.transfer import path [--yes]

Import shows how many items would replace the current list and asks for
confirmation unless --yes is given.
"""

import argparse
import logging
import sys
from collections.abc import Callable
from pathlib import Path

from booker.db.byte_store import SqlByteStore
from booker.db.database import init_db, session_factory
from booker.parsers.collection_import import REJECTION_MESSAGES, ImportStatus
from booker.services.record_store import RecordStore
from booker.services.session import BookerSession

logger = logging.getLogger(__name__)


def run_export(booker: BookerSession, output: Path | None = None) -> Path:
    """
    Write the collection export file.

    Args:
        booker: Session to export
        output: File or directory to write to. Defaults to the current
            directory with the standard export filename.

    Returns:
        Path of the written file.
    """
    export = booker.export()
    if output is None:
        path = Path(export.filename)
    elif output.is_dir():
        path = output / export.filename
    else:
        path = output

    path.write_text(export.content, encoding="utf-8")
    logger.info("Exported %d records to %s", len(booker.store.records), path)
    return path


def run_import(
    booker: BookerSession,
    source: Path,
    confirm: Callable[[str], bool],
) -> bool:
    """
    Import a collection file, replacing the current list on confirmation.

    Args:
        booker: Session to import into
        source: File to read
        confirm: Asked with the confirmation prompt; True replaces the list

    Returns:
        True if the collection was replaced.
    """
    try:
        text = source.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.error("Import rejected: %s (%s)", REJECTION_MESSAGES[ImportStatus.INVALID_JSON], e)
        return False

    plan = booker.begin_import(text)
    if not plan.ok:
        logger.error("Import rejected: %s", plan.message)
        return False

    receipt = booker.resolve_import(confirm(plan.message))
    logger.info(receipt.message)
    return receipt.applied


def _ask(prompt: str) -> bool:
    answer = input(f"{prompt} [y/N] ")
    return answer.strip().lower() in ("y", "yes")


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Export or import a Booker collection")
    commands = parser.add_subparsers(dest="command", required=True)

    export_parser = commands.add_parser("export", help="Write an export file")
    export_parser.add_argument(
        "output",
        type=Path,
        nargs="?",
        help="File or directory to write (default: ./Booker-export-<date>.json)",
    )

    import_parser = commands.add_parser("import", help="Replace the collection from a file")
    import_parser.add_argument("source", type=Path, help="Export file or JSON array of items")
    import_parser.add_argument(
        "--yes",
        action="store_true",
        help="Replace without asking for confirmation",
    )

    args = parser.parse_args(argv)

    init_db()
    booker = BookerSession.open(RecordStore(SqlByteStore(session_factory)))

    if args.command == "export":
        run_export(booker, args.output)
        return 0

    if not args.source.exists():
        logger.error("Import file not found: %s", args.source)
        return 1

    confirm = (lambda _prompt: True) if args.yes else _ask
    return 0 if run_import(booker, args.source, confirm) else 1


if __name__ == "__main__":
    sys.exit(main())
