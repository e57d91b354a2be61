import sys
import argparse
import asyncio
from typing import List, Optional

# --- Settings/Logging ---
from goal_scraper.logging.setup import setup_logging
from goal_scraper.config.settings import settings

from loguru import logger

from goal_scraper.models.enums import FetchBackend
from goal_scraper.models.summary import RunSummary
from goal_scraper.pipeline import run_pipeline
from goal_scraper.scrapers.base_scraper import StructureError

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

console = Console()


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Scrape new goals and add them to the goal list component."
    )
    parser.add_argument(
        "--dry-run", action="store_true", help="Show new goals without writing the file."
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Debug logging and full tracebacks on error."
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Save a page screenshot and log the table structure.",
    )
    parser.add_argument(
        "--backend",
        choices=[b.value for b in FetchBackend],
        help="Override the configured fetch backend.",
    )
    parser.add_argument("--component-file", help="Override the component file path.")
    return parser.parse_args(argv)


def print_summary(summary: RunSummary) -> None:
    comparison = summary.comparison
    console.print(f"  Existing: {comparison.existing}")
    console.print(f"  New: {comparison.new}")
    console.print(f"  Total after merge: {comparison.total}")

    for warning in summary.warnings:
        console.print(f"  [yellow]Warning:[/yellow] {warning}")

    if comparison.new == 0:
        console.print("  No new goals found.")
    elif summary.dry_run:
        console.print("  [bold]DRY RUN[/bold] - would add the following goals:")
        for line in comparison.new_goals_list:
            console.print(f"    + {line}", markup=False, highlight=False)
    elif summary.written:
        for line in comparison.new_goals_list:
            console.print(f"    + {line}", markup=False, highlight=False)
        console.print(f"  [green]Successfully added {comparison.new} new goal(s)![/green]")
    else:
        console.print("  No changes needed.")


async def main(args: argparse.Namespace) -> RunSummary:
    """Main entry point for the application."""
    run_settings = settings
    if args.component_file:
        run_settings = run_settings.model_copy(update={"component_file": args.component_file})

    if args.backend:
        run_settings = run_settings.model_copy(update={"fetch_backend": FetchBackend(args.backend)})

    return await run_pipeline(run_settings, dry_run=args.dry_run, debug=args.debug)


def run(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(verbose=args.verbose)

    mode = "DRY RUN" if args.dry_run else "LIVE"
    console.print(Panel(f"Goal Scraper - Mode: {mode}", expand=False))

    try:
        summary = asyncio.run(main(args))
    except KeyboardInterrupt:
        logger.info("Execution interrupted by user (KeyboardInterrupt).")
        return 0
    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}", highlight=False)
        if isinstance(e, StructureError) and e.title:
            console.print(f"  Page title: {e.title}", markup=False)
        if args.verbose:
            console.print_exception()
        return 1

    print_summary(summary)
    console.print("=== Scraping Complete ===")
    return 0


if __name__ == "__main__":
    sys.exit(run())
