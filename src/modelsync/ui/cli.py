from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from modelsync import __version__
from modelsync.app import export_sheet, initialise_model, sync_sheet
from modelsync.common import configure_logging
from modelsync.config import (
    ConfigurationError,
    ReconciliationConfig,
    get_reconciliation_config,
    load_reconciliation_config,
)

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    shared = argparse.ArgumentParser(add_help=False)
    shared.add_argument(
        "--config",
        type=Path,
        help="TOML or JSON file overriding the reconciliation settings",
    )
    shared.add_argument(
        "--skip-rows",
        type=int,
        help="Leading rows (title, header) to drop from the sheet (defaults to config)",
    )
    shared.add_argument(
        "--sheet-name",
        type=str,
        help="Worksheet to read from an XLSX workbook (defaults to the active sheet)",
    )
    shared.add_argument(
        "--database-uri",
        type=str,
        help="SQLAlchemy URI of the model store (defaults to DATABASE_URI or the data dir)",
    )
    shared.add_argument(
        "--verbose",
        action="store_true",
        help="Log per-node decisions",
    )

    parser = argparse.ArgumentParser(description="Reconcile capability sheets with the model")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser(
        "init",
        parents=[shared],
        help="Create the store and seed category root and taxonomy folders",
    )

    export = subparsers.add_parser(
        "export",
        parents=[shared],
        help="Reconcile a sheet against the model and write merged records",
    )
    export.add_argument("sheet", type=Path, help="CSV or XLSX sheet to reconcile")
    export.add_argument(
        "--output",
        type=Path,
        required=True,
        help="CSV file receiving the merged records",
    )

    sync = subparsers.add_parser(
        "sync",
        parents=[shared],
        help="Reconcile a sheet and write nodes, folders and views into the model",
    )
    sync.add_argument("sheet", type=Path, help="CSV or XLSX sheet to synchronise")
    sync.add_argument(
        "--output",
        type=Path,
        help="Optional CSV file receiving the merged records",
    )

    return parser.parse_args(list(argv))


def _build_config(args: argparse.Namespace) -> ReconciliationConfig:
    config = (
        load_reconciliation_config(args.config)
        if args.config is not None
        else get_reconciliation_config()
    )
    if args.skip_rows is not None:
        if args.skip_rows < 0:
            raise ValueError("--skip-rows must be non-negative")
        config = dataclasses.replace(config, skip_rows=args.skip_rows)
    return config


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    parsed_args: argparse.Namespace
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        if parsed_args.verbose:
            configure_logging(level=logging.DEBUG, force=True)
        config = _build_config(parsed_args)
    except (ValueError, ConfigurationError):
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        if parsed_args.command == "init":
            initialised = initialise_model(config=config, database_uri=parsed_args.database_uri)
            log.info(
                "Model ready: new roots=%s, folders created=%s",
                ", ".join(initialised.roots_created) or "-",
                initialised.folders.created,
            )
        elif parsed_args.command == "export":
            result = export_sheet(
                parsed_args.sheet,
                parsed_args.output,
                config=config,
                sheet_name=parsed_args.sheet_name,
                database_uri=parsed_args.database_uri,
            )
            log.info(
                "Export finished: records=%s, matched=%s, graph_only=%s",
                len(result.records),
                result.matched_rows,
                result.graph_only,
            )
        elif parsed_args.command == "sync":
            synced = sync_sheet(
                parsed_args.sheet,
                output=parsed_args.output,
                config=config,
                sheet_name=parsed_args.sheet_name,
                database_uri=parsed_args.database_uri,
            )
            summary = synced.summary
            log.info(
                "Sync finished: added=%s, updated=%s, skipped=%s, failed=%s",
                summary.added,
                summary.updated,
                summary.skipped,
                summary.failed,
            )
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except Exception:
        log.exception("Fatal error during run")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console script entry point: load ``.env`` and install the SIGINT handler."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
