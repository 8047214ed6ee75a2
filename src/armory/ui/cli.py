from __future__ import annotations

import argparse
import logging
import sys
from datetime import UTC, datetime
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from armory.app import (
    catalog_history,
    default_store,
    ingest_delta,
    initialize_catalog,
    read_delta_file,
)
from armory.config import configure_logging
from armory.domain.errors import ValidationError
from armory.domain.model import INITIAL_VERSION, CatalogVersion
from armory.domain.tags import TagRegistry

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Maintain the Armory game-item catalog")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    init = subparsers.add_parser("init", help="Create an empty catalog document")
    init.add_argument("--catalog", type=Path, help="Catalog path (defaults to config)")
    init.add_argument(
        "--version",
        type=str,
        default=INITIAL_VERSION,
        help="Initial catalog version (default: %(default)s)",
    )
    init.add_argument("--force", action="store_true", help="Overwrite an existing catalog")

    ingest = subparsers.add_parser("ingest", help="Merge an extracted delta into the catalog")
    ingest.add_argument("delta", type=Path, help="Path of the delta JSON file")
    ingest.add_argument(
        "--source",
        type=str,
        required=True,
        help="Provenance source, e.g. the transcript identifier",
    )
    ingest.add_argument("--catalog", type=Path, help="Catalog path (defaults to config)")
    ingest.add_argument(
        "--timestamp",
        type=str,
        help="ISO-8601 timestamp (UTC) recorded for the merge (defaults to now)",
    )
    ingest.add_argument(
        "--tag-registry",
        type=Path,
        help="Tag vocabulary file; tags outside it are rejected (defaults to config)",
    )

    history = subparsers.add_parser("history", help="List applied merges")
    history.add_argument("--catalog", type=Path, help="Catalog path (defaults to config)")
    history.add_argument("--limit", type=int, help="Only show the most recent N merges")

    return parser.parse_args(list(argv))


def _parse_iso_datetime(value: str) -> datetime:
    try:
        normalized = value.strip()
        if normalized.endswith("Z"):
            normalized = normalized[:-1] + "+00:00"
        dt = datetime.fromisoformat(normalized)
    except ValueError as exc:
        raise ValueError(f"Invalid ISO timestamp: {value}") from exc
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def _validate_args(args: argparse.Namespace) -> datetime | None:
    if args.command == "init":
        CatalogVersion.parse(args.version)
    if args.command == "ingest":
        if not args.source.strip():
            raise ValueError("--source must not be blank")
        if args.timestamp:
            return _parse_iso_datetime(args.timestamp)
    if args.command == "history" and args.limit is not None and args.limit < 0:
        raise ValueError("--limit must be non-negative")
    return None


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)
    try:
        timestamp = _validate_args(parsed_args)
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        store = default_store(parsed_args.catalog)
        if parsed_args.command == "init":
            catalog = initialize_catalog(
                store=store,
                version=parsed_args.version,
                force=parsed_args.force,
            )
            log.info("Catalog ready at %s (version %s)", store.path, catalog.version)
        elif parsed_args.command == "ingest":
            registry = (
                TagRegistry.from_file(parsed_args.tag_registry)
                if parsed_args.tag_registry is not None
                else None
            )
            result = ingest_delta(
                read_delta_file(parsed_args.delta),
                source=parsed_args.source,
                store=store,
                timestamp=timestamp,
                registry=registry,
            )
            log.info("Catalog %s now at version %s", store.path, result.catalog.version)
        elif parsed_args.command == "history":
            for entry in catalog_history(store=store, limit=parsed_args.limit):
                log.info(
                    "%s %s -> %s source=%s added=%s updated=%s",
                    entry.timestamp.isoformat(),
                    entry.from_version,
                    entry.to_version,
                    entry.source,
                    entry.total_added,
                    entry.total_updated,
                )
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except ValidationError as exc:
        for issue in exc.issues:
            log.error("Rejected delta: %s", issue)  # noqa: TRY400
        sys.exit(1)
    except Exception:
        log.exception("Fatal error during %s", parsed_args.command)
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
