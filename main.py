#!/usr/bin/env python3
"""Command-line entry point for the RISK lobby scanner.

Subcommands::

    init    Create the app directory and an example known-players file.
    scan    Scan the open RISK lobby and list known players that match.

Usage::

    python main.py init
    python main.py scan
    python main.py scan --known ~/blitz-app/blacklist.json -v
    python main.py scan --threshold 80 --debug

All scan errors are fatal. On failure a single line naming the failed stage
is printed and the process exits with a non-zero code.
"""

import argparse
import logging
import sys
from pathlib import Path

from blacklist import (
    load_known_entries,
    resolve_known_entries_path,
    write_default_known_entries,
)
from config import (
    APP_DIR,
    DEBUG_DIR,
    DETECTION_MODEL_DIR,
    KNOWN_ENTRIES_PATH,
    LEGACY_KNOWN_ENTRIES_PATH,
    RECOGNITION_MODEL_DIR,
    SIMILARITY_THRESHOLD,
    WINDOW_TITLE,
)
from detect import scan
from exceptions import ScanError
from parse import rank_results

logger = logging.getLogger(__name__)

# -v count -> root log level; anything above 1 means DEBUG.
_LOG_LEVELS = {0: logging.WARNING, 1: logging.INFO}


# ---------------------------------------------------------------------------
# Init subcommand
# ---------------------------------------------------------------------------

def cmd_init(args: argparse.Namespace) -> None:
    """Create the app directory and the known-players file if missing."""
    APP_DIR.mkdir(parents=True, exist_ok=True)

    if write_default_known_entries(args.known):
        print(f"Created {args.known}; add the players to flag there.")
    else:
        print(f"{args.known} already exists; left unchanged.")

    for model_dir in (args.det_model_dir, args.rec_model_dir):
        if not model_dir.is_dir():
            print(f"Missing OCR model directory: {model_dir}")


# ---------------------------------------------------------------------------
# Scan subcommand
# ---------------------------------------------------------------------------

def cmd_scan(args: argparse.Namespace) -> None:
    """Run one scan and print the ranked matches."""
    try:
        known = load_known_entries(args.known)
        results = scan(
            known,
            title=args.title,
            detection_model_dir=args.det_model_dir,
            recognition_model_dir=args.rec_model_dir,
            debug_dir=DEBUG_DIR if args.debug else None,
        )
    except ScanError as exc:
        logger.debug("Scan aborted", exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    ranked = rank_results(results, threshold=args.threshold)
    if not ranked:
        print("No known players found.")
        return

    for result in ranked:
        print(f"{result.name} ({result.similarity}%)")


def main() -> None:
    """Parse arguments and dispatch to a subcommand."""
    # Options shared by every subcommand.
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--known",
        type=Path,
        default=None,
        help=(
            f"Known-players JSON file (default: {KNOWN_ENTRIES_PATH}, or "
            f"{LEGACY_KNOWN_ENTRIES_PATH} if only that exists)"
        ),
    )
    common.add_argument(
        "--det-model-dir",
        type=Path,
        default=DETECTION_MODEL_DIR,
        help="PaddleOCR text-detection model directory",
    )
    common.add_argument(
        "--rec-model-dir",
        type=Path,
        default=RECOGNITION_MODEL_DIR,
        help="PaddleOCR text-recognition model directory",
    )
    common.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Log each stage (-v for INFO, -vv for DEBUG)",
    )

    parser = argparse.ArgumentParser(
        description="Flag known players in a RISK lobby.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command")

    # init ---
    subparsers.add_parser(
        "init",
        parents=[common],
        help="Create the app directory and an example known-players file",
    )

    # scan ---
    scan_parser = subparsers.add_parser(
        "scan",
        parents=[common],
        help="Scan the lobby and list matching known players",
        description=(
            "Capture the RISK window, read the six player cards and list the "
            "known players whose names match at or above the threshold."
        ),
    )
    scan_parser.add_argument(
        "--title",
        default=WINDOW_TITLE,
        help=f"Exact game window title (default: {WINDOW_TITLE!r})",
    )
    scan_parser.add_argument(
        "--threshold",
        type=int,
        default=SIMILARITY_THRESHOLD,
        help=f"Minimum similarity to report, 0-100 (default: {SIMILARITY_THRESHOLD})",
    )
    scan_parser.add_argument(
        "--debug",
        action="store_true",
        help=f"Save the captured frame and card crops to {DEBUG_DIR}",
    )

    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        return

    logging.basicConfig(
        level=_LOG_LEVELS.get(args.verbose, logging.DEBUG),
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
    )

    if args.command == "init":
        if args.known is None:
            args.known = KNOWN_ENTRIES_PATH
        cmd_init(args)

    elif args.command == "scan":
        if not 0 <= args.threshold <= 100:
            scan_parser.error("--threshold must be between 0 and 100")
        if args.known is None:
            args.known = resolve_known_entries_path(
                KNOWN_ENTRIES_PATH, LEGACY_KNOWN_ENTRIES_PATH,
            )
        cmd_scan(args)


if __name__ == "__main__":
    main()
