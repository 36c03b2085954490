from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from stocksync.adapters.drafts import DraftFileError
from stocksync.app import sync_inventory_file
from stocksync.config import ConfigurationError, SyncConfig, configure_logging, get_sync_config

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Synchronise inventory with the store")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    inventory = subparsers.add_parser("inventory", help="Sync inventory entry drafts")
    inventory.add_argument(
        "path",
        type=Path,
        help="JSON array or JSON Lines file of inventory entry drafts",
    )
    inventory.add_argument(
        "--batch-size",
        type=int,
        default=None,
        help="Number of drafts per batch (defaults to config)",
    )
    inventory.add_argument(
        "--ensure-channels",
        action="store_true",
        default=None,
        help="Create supply channels referenced by drafts but missing in the store",
    )

    return parser.parse_args(list(argv))


def _build_sync_config(args: argparse.Namespace) -> SyncConfig:
    defaults = get_sync_config()
    batch_size = defaults.batch_size if args.batch_size is None else args.batch_size
    if batch_size < 1:
        raise ValueError("Batch size must be a positive integer")
    ensure_channels = defaults.ensure_channels if args.ensure_channels is None else True
    return SyncConfig(batch_size=batch_size, ensure_channels=ensure_channels)


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    parsed_args: argparse.Namespace
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        if parsed_args.verbose:
            configure_logging(level=logging.DEBUG, force=True)
        sync_config = _build_sync_config(parsed_args)
    except (ValueError, ConfigurationError):
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        if parsed_args.command == "inventory":
            sync_inventory_file(parsed_args.path, sync_config=sync_config)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301
    except (DraftFileError, ConfigurationError, OSError):
        log.exception("Cannot start sync")
        sys.exit(2)
    except Exception:
        log.exception("Fatal error during sync")
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
