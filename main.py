# main.py

"""Entry point for the egg_compare application (TUI or headless CLI)."""

import argparse
import asyncio
import logging
import sys

from egg_compare.config.logging_config import setup_logging
from egg_compare.config.settings import Settings

logger = logging.getLogger("egg_compare.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    labels = ", ".join(s["label"] for s in Settings.AVAILABLE_SOURCES)

    parser = argparse.ArgumentParser(
        prog="egg_compare",
        description="Egg price comparison across retailers.",
        epilog=f"Retailers: {labels}",
    )
    parser.add_argument(
        "zipcode",
        nargs="?",
        default=None,
        help="Zipcode to compare prices for. Omit to launch the TUI.",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=["json", "table"],
        default="json",
        dest="output_format",
        help="Output format (default: json).",
    )
    parser.add_argument(
        "-d",
        "--history-days",
        type=int,
        default=None,
        dest="history_days",
        help="Also print the trailing N days of price history.",
    )
    parser.add_argument(
        "--health",
        action="store_true",
        default=False,
        help="Run a connectivity health check on all sources.",
    )
    return parser


def _run_tui() -> None:
    """Launch the interactive Textual TUI."""
    from egg_compare.ui.app import EggCompareApp

    try:
        app = EggCompareApp()
        app.run()
    except Exception:
        logger.critical("Fatal error during TUI run", exc_info=True)
        raise
    finally:
        logger.info("egg_compare TUI shutting down")


def _run_cli(args: argparse.Namespace) -> None:
    """Run a headless comparison and exit."""
    from egg_compare.cli.runner import cli_compare

    exit_code = asyncio.run(
        cli_compare(
            zipcode=args.zipcode,
            output_format=args.output_format,
            history_days=args.history_days,
        )
    )
    sys.exit(exit_code)


def _run_health_check() -> None:
    """Run price source connectivity health check."""
    from egg_compare.cli.runner import run_health_check

    exit_code = asyncio.run(run_health_check())
    sys.exit(exit_code)


def main() -> None:
    """Route to TUI (no zipcode) or headless CLI (zipcode provided)."""
    log_file = setup_logging()
    logger.info("egg_compare starting, log file: %s", log_file)

    parser = _build_parser()
    args = parser.parse_args()

    if args.health:
        _run_health_check()
    elif args.zipcode is None:
        _run_tui()
    else:
        _run_cli(args)


if __name__ == "__main__":
    main()
