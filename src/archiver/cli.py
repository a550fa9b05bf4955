"""
CLI interface for the archiver.

Moves completed tasks of one markdown file under its archive heading.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from .archive import Archiver
from .config import NEWEST_FIRST, NEWEST_LAST, Config, load_config
from .exceptions import ArchiverError
from .storage import Vault


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for CLI."""
    log_level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def parse_args(args: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="archiver",
        description="Archive completed tasks of a markdown outline",
    )

    parser.add_argument(
        "file",
        help="Markdown file to archive completed tasks in",
    )

    parser.add_argument(
        "--vault",
        type=str,
        help="Vault root directory (defaults to the file's directory)",
    )

    parser.add_argument(
        "--config",
        "-c",
        type=str,
        help="Config file (defaults to ~/.config/archiver/config.toml)",
    )

    destination = parser.add_mutually_exclusive_group()
    destination.add_argument(
        "--separate-file",
        action="store_true",
        dest="separate_file",
        default=None,
        help="Archive into a separate file named after archive.file_name",
    )
    destination.add_argument(
        "--same-file",
        action="store_false",
        dest="separate_file",
        default=None,
        help="Archive under a heading of the same file",
    )

    order = parser.add_mutually_exclusive_group()
    order.add_argument(
        "--newest-first",
        action="store_const",
        const=NEWEST_FIRST,
        dest="task_sort_order",
        help="Add archived tasks in reverse document order",
    )
    order.add_argument(
        "--newest-last",
        action="store_const",
        const=NEWEST_LAST,
        dest="task_sort_order",
        help="Add archived tasks in document order",
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )

    return parser.parse_args(args)


def build_config(parsed: argparse.Namespace) -> Config:
    """Config from file and environment, with CLI flags applied on top."""
    config = load_config(Path(parsed.config) if parsed.config else None)
    if parsed.separate_file is not None:
        config.archive.to_separate_file = parsed.separate_file
    if parsed.task_sort_order is not None:
        config.archive.task_sort_order = parsed.task_sort_order
    return config


def main(args: list[str] | None = None) -> int:
    """Main entry point."""
    parsed = parse_args(args)
    setup_logging(parsed.verbose)

    file_path = Path(parsed.file)
    if parsed.vault:
        vault_root = Path(parsed.vault)
        active = file_path.as_posix()
    else:
        vault_root = file_path.parent
        active = file_path.name

    try:
        archiver = Archiver(Vault(vault_root, active), build_config(parsed))
        status = asyncio.run(archiver.archive_tasks_in_active_file())
    except ArchiverError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(status)
    return 0


if __name__ == "__main__":
    sys.exit(main())
