# main.py

"""Entry point for the crossarb scanner CLI."""

import argparse
import asyncio
import logging
import sys

from crossarb.config.logging_config import setup_logging
from crossarb.config.settings import Settings

logger = logging.getLogger("crossarb.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    valid_ids = ", ".join(p["id"] for p in Settings.PLATFORMS)

    parser = argparse.ArgumentParser(
        prog="crossarb",
        description=(
            "Cross-platform arbitrage finder over listing snapshots."
        ),
        epilog=f"Available platforms: {valid_ids}",
    )
    parser.add_argument(
        "listings",
        nargs="+",
        help="JSON file(s) holding arrays of listings.",
    )
    parser.add_argument(
        "-q",
        "--query",
        default="",
        help="Only consider listings whose title contains every query word.",
    )
    parser.add_argument(
        "-c",
        "--category",
        default=None,
        help="Only consider listings in this category.",
    )
    parser.add_argument(
        "-m",
        "--min-margin",
        type=float,
        default=Settings.DEFAULT_MIN_MARGIN_PCT,
        dest="min_margin_pct",
        help="Minimum net margin in percent (default: %(default)s).",
    )
    parser.add_argument(
        "-n",
        "--max-results",
        type=int,
        default=Settings.DEFAULT_MAX_RESULTS,
        help="Maximum opportunities to return (default: %(default)s).",
    )
    parser.add_argument(
        "-p",
        "--platforms",
        default=None,
        help="Comma-separated platform IDs (default: all loaded).",
    )
    parser.add_argument(
        "-e",
        "--exclude",
        default=None,
        help="Comma-separated negative keywords to filter out.",
    )
    parser.add_argument(
        "--matched-only",
        action="store_true",
        default=False,
        dest="matched_only",
        help="Only pair listings the matcher groups as the same product.",
    )
    parser.add_argument(
        "--match",
        action="store_true",
        default=False,
        help="Print same-product groups instead of opportunities.",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=["json", "table"],
        default="json",
        dest="output_format",
        help="Output format (default: json).",
    )
    return parser


def _run_scan(args: argparse.Namespace) -> None:
    from crossarb.cli.runner import cli_scan

    exit_code = asyncio.run(
        cli_scan(
            paths=args.listings,
            query=args.query,
            category=args.category,
            min_margin_pct=args.min_margin_pct,
            max_results=args.max_results,
            platform_csv=args.platforms,
            exclude_csv=args.exclude,
            matched_only=args.matched_only,
            output_format=args.output_format,
        )
    )
    sys.exit(exit_code)


def _run_match(args: argparse.Namespace) -> None:
    from crossarb.cli.runner import cli_match

    exit_code = cli_match(args.listings, args.output_format)
    sys.exit(exit_code)


def main() -> None:
    """Route to the matcher (--match) or a full scan."""
    log_file = setup_logging()
    logger.info("crossarb starting, log file: %s", log_file)

    parser = _build_parser()
    args = parser.parse_args()

    if args.match:
        _run_match(args)
    else:
        _run_scan(args)


if __name__ == "__main__":
    main()
