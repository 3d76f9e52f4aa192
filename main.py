# main.py

"""Entry point for the catalog_browser application (TUI or headless CLI)."""

import argparse
import asyncio
import logging
import sys

from src.config.logging_config import setup_logging
from src.models.sort_option import SortOption

logger = logging.getLogger("catalog_browser.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    valid_sorts = ", ".join(o.value for o in SortOption)

    parser = argparse.ArgumentParser(
        prog="catalog_browser",
        description="Browse a remote product catalog.",
        epilog=f"Sort options: {valid_sorts}",
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--list",
        action="store_true",
        default=False,
        dest="list_products",
        help="List products headlessly.",
    )
    mode.add_argument(
        "--product",
        type=int,
        default=None,
        metavar="ID",
        help="Show a single product.",
    )
    mode.add_argument(
        "--categories",
        action="store_true",
        default=False,
        help="Print the category list.",
    )
    mode.add_argument(
        "--resolve",
        default=None,
        metavar="URL",
        help="Print the navigation target of a deep link.",
    )
    mode.add_argument(
        "--reminders",
        action="store_true",
        default=False,
        help="List upcoming purchase reminders.",
    )
    mode.add_argument(
        "--remove-reminder",
        default=None,
        metavar="EVENT_ID",
        dest="remove_reminder",
        help="Delete a purchase reminder.",
    )
    mode.add_argument(
        "--health",
        action="store_true",
        default=False,
        help="Run a connectivity health check on the catalog API.",
    )
    parser.add_argument(
        "--link",
        default=None,
        metavar="URL",
        help="Deep link to open when the TUI starts.",
    )
    parser.add_argument(
        "-c",
        "--category",
        default=None,
        help="Category filter for --list.",
    )
    parser.add_argument(
        "-q",
        "--search",
        default=None,
        dest="query",
        help="Search query for --list (overrides --category).",
    )
    parser.add_argument(
        "--sort",
        default=None,
        help="Sort option for --list.",
    )
    parser.add_argument(
        "--pages",
        type=int,
        default=1,
        help="Number of pages to fetch for --list (default: 1).",
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


def _run_tui(start_link: str | None) -> None:
    """Launch the interactive Textual TUI."""
    from src.ui.app import CatalogApp

    try:
        app = CatalogApp(start_link=start_link)
        app.run()
    except Exception:
        logger.critical("Fatal error during TUI run", exc_info=True)
        raise
    finally:
        logger.info("catalog_browser TUI shutting down")


def _run_cli(args: argparse.Namespace) -> int:
    """Run the selected headless command and return its exit code."""
    from src.cli import runner

    if args.list_products:
        return asyncio.run(
            runner.cli_list(
                category=args.category,
                query=args.query,
                sort=args.sort,
                pages=args.pages,
                output_format=args.output_format,
            )
        )
    if args.product is not None:
        return asyncio.run(runner.cli_show(args.product, args.output_format))
    if args.categories:
        return asyncio.run(runner.cli_categories(args.output_format))
    if args.resolve is not None:
        return runner.cli_resolve_link(args.resolve)
    if args.reminders:
        return asyncio.run(runner.run_list_reminders(args.output_format))
    if args.remove_reminder is not None:
        return asyncio.run(runner.run_remove_reminder(args.remove_reminder))
    return asyncio.run(runner.run_health_check())


def _is_headless(args: argparse.Namespace) -> bool:
    return bool(
        args.list_products
        or args.product is not None
        or args.categories
        or args.resolve is not None
        or args.reminders
        or args.remove_reminder is not None
        or args.health
    )


def main() -> None:
    """Route to the TUI (no command) or a headless CLI command."""
    parser = _build_parser()
    args = parser.parse_args()

    headless = _is_headless(args)
    log_file = setup_logging(tui=not headless)
    logger.info("catalog_browser starting, log file: %s", log_file)

    if headless:
        sys.exit(_run_cli(args))
    _run_tui(args.link)


if __name__ == "__main__":
    main()
