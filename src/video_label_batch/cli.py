"""Command-line entry point: ``video-label-batch labels-file <directory>``."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from .client import AnnotationClient
from .config import VALID_AGGREGATIONS, VALID_TIE_BREAKS, update_config
from .dotenv import load_dotenv
from .errors import LabelBatchError, categorize_error
from .runner import run_labels_file

logger = logging.getLogger(__name__)

LABELS_FILE_COMMAND = "labels-file"

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_CONFIG = 2

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="video-label-batch",
        description=(
            "Detect shot-level labels in every video of a directory with the "
            "Google Cloud Video Intelligence API and append one ranked summary "
            "line per file to the output log."
        ),
        epilog="Commands:\n  labels-file    label every file in <directory>",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("command", help="command to run (labels-file)")
    parser.add_argument("directory", nargs="?", default="", help="directory containing the videos")
    parser.add_argument("--output", dest="output_path", help="output log path (default: Output.txt)")
    parser.add_argument(
        "--timeout", dest="operation_timeout", type=float,
        help="seconds to wait for each annotation operation",
    )
    parser.add_argument(
        "--keep-going", dest="continue_on_error", action="store_true", default=None,
        help="record per-file failures and continue with the next file",
    )
    parser.add_argument("--aggregation", choices=sorted(VALID_AGGREGATIONS), help="rule for repeated labels")
    parser.add_argument("--tie-break", dest="tie_break", choices=sorted(VALID_TIE_BREAKS), help="order of equal confidences")
    parser.add_argument("--digits", dest="confidence_digits", type=int, help="decimal places for confidences")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


async def _run_labels_file(directory: str) -> int:
    """Run one batch, report failures, and always release the remote client."""
    try:
        result = await run_labels_file(directory)
    except LabelBatchError as exc:
        category, hint = categorize_error(exc)
        logger.exception("Exception while running [%s]: %s (%s)", category.value, exc, hint)
        return EXIT_FAILED
    except Exception as exc:
        logger.exception("Exception while running: %s", exc)
        return EXIT_FAILED
    finally:
        await AnnotationClient.close_all()

    logger.info(
        "Processed %d file(s): %d ok, %d failed, %d line(s) appended to %s",
        result.total_files, result.successful, result.failed,
        result.lines_written, result.output_path,
    )
    return EXIT_OK if result.failed == 0 else EXIT_FAILED


def main(argv: list[str] | None = None) -> int:
    """Entry-point for the ``video-label-batch`` console script."""
    argv = sys.argv[1:] if argv is None else argv
    parser = build_parser()
    if not argv:
        parser.print_help(sys.stdout)
        return EXIT_OK
    # Other commands ignore their arguments entirely.
    if argv[0] != LABELS_FILE_COMMAND:
        return EXIT_OK

    args = parser.parse_args(argv)
    injected = load_dotenv()
    try:
        cfg = update_config(
            output_path=args.output_path,
            operation_timeout=args.operation_timeout,
            continue_on_error=args.continue_on_error,
            aggregation=args.aggregation,
            tie_break=args.tie_break,
            confidence_digits=args.confidence_digits,
            log_level="DEBUG" if args.verbose else None,
        )
    except ValueError as exc:
        category, hint = categorize_error(exc)
        print(f"Invalid configuration [{category.value}]: {exc}\n{hint}", file=sys.stderr)
        return EXIT_CONFIG

    logging.basicConfig(level=cfg.log_level, format=_LOG_FORMAT)
    if injected:
        logger.info("Loaded %d var(s) from config: %s", len(injected), ", ".join(injected))
    return asyncio.run(_run_labels_file(args.directory))


if __name__ == "__main__":
    raise SystemExit(main())
