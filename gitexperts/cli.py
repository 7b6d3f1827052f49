"""
Command-line interface for git-experts.

Usage:
    git-experts src/main.py
    git-experts -L 10,40 -L 90, --weight=1,2,1,0 --no-table src/main.py
"""

import argparse
import dataclasses
import logging
import sys
from typing import List, Optional

from . import __version__
from .blame import (
    HistoryUnavailable,
    InvalidLineRange,
    InvalidWeightSpec,
    MalformedRecord,
    WeightVector,
    coerce_timestamp,
    create_analyzer,
    parse_line_range
)
from .config import load_config
from .logger import error, setup_logging
from .render import render

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="git-experts",
        description="Rank the contributors who know a file (or some of its lines) best, "
                    "from git blame and commit metadata."
    )

    parser.add_argument(
        "path",
        help="File to analyze, relative to the repository root or the current directory.")
    parser.add_argument(
        "-L",
        dest="line_ranges",
        action="append",
        default=[],
        metavar="<start>[,<end>]",
        help="Restrict to a line range; repeat to union several ranges. "
             "A missing end means the end of the file.")

    table_group = parser.add_mutually_exclusive_group()
    table_group.add_argument(
        "--table",
        dest="table",
        action="store_true",
        default=None,
        help="Render an ASCII table (default).")
    table_group.add_argument(
        "--no-table",
        dest="table",
        action="store_false",
        help="Render comma-delimited rows.")

    parser.add_argument(
        "--weight",
        metavar="<commits>,<lines>,<latest>,<earliest>",
        help="Four non-negative weights for the score (default: 1,1,1,1).")
    parser.add_argument(
        "-M",
        dest="detect_moves",
        action="store_true",
        default=None,
        help="Find line moves within and across files.")
    parser.add_argument(
        "-C",
        dest="detect_copies",
        action="store_true",
        default=None,
        help="Find line copies within and across files.")
    parser.add_argument(
        "-F",
        dest="first_parent",
        action="store_true",
        default=None,
        help="Follow only the first parent commits.")
    parser.add_argument(
        "--rev",
        help="Revision to blame (default: HEAD).")
    parser.add_argument(
        "--reference-time",
        metavar="<date>",
        help="Point in time the age of the earliest change is measured from, as an "
             "ISO-8601 date or POSIX seconds (default: now).")
    parser.add_argument(
        "--repo",
        default=".",
        metavar="DIR",
        help="Directory to discover the repository from (default: current directory).")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show debugging messages.")
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Run the CLI and return the process exit code."""
    args = build_parser().parse_args(argv)

    try:
        config = load_config()
        setup_logging("DEBUG" if args.verbose else config.log_level)
    except ValueError as e:
        error(str(e))
        return EXIT_USAGE

    overrides = {
        name: getattr(args, name)
        for name in ("table", "detect_moves", "detect_copies", "first_parent", "rev")
        if getattr(args, name) is not None
    }
    config = dataclasses.replace(config, **overrides)

    try:
        weights = WeightVector.parse(args.weight) if args.weight is not None else config.weights
        line_ranges = [parse_line_range(text) for text in args.line_ranges]
        reference_time = None
        if args.reference_time is not None:
            reference_time = coerce_timestamp(args.reference_time)
    except (InvalidWeightSpec, InvalidLineRange, MalformedRecord) as e:
        error(str(e))
        return EXIT_USAGE

    try:
        analyzer = create_analyzer(args.repo, config)
        report = analyzer.analyze(args.path, line_ranges, weights, reference_time)
    except InvalidWeightSpec as e:
        error(str(e))
        return EXIT_USAGE
    except (HistoryUnavailable, InvalidLineRange) as e:
        error(str(e))
        return EXIT_FAILURE

    logger.info("File: %s (%d line(s), weights %s)", report.path, report.record_count, weights)

    sys.stdout.write(render(report.authors, table=config.table))
    return EXIT_OK


def run() -> None:
    """Console-script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
