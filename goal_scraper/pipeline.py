from pathlib import Path
from typing import Optional

from loguru import logger

from goal_scraper.config.settings import AppSettings
from goal_scraper.models.summary import GoalComparison, RunSummary
from goal_scraper.normalization.normalizer import Normalizer, sort_goals_by_date
from goal_scraper.reconciliation.numbering import assign_goal_numbers, get_highest_goal_number
from goal_scraper.reconciliation.reconciler import compare_goals, find_new_goals, merge_goals
from goal_scraper.scrapers.base_scraper import BaseFetcher, create_fetcher
from goal_scraper.scrapers.goal_extractor import GoalExtractor, describe_tables
from goal_scraper.storage.component_store import ComponentStore


async def run_pipeline(
    settings: AppSettings,
    fetcher: Optional[BaseFetcher] = None,
    dry_run: bool = False,
    debug: bool = False,
) -> RunSummary:
    """Scrapes the listing and adds any new goals to the component file.

    Args:
        settings: Run configuration.
        fetcher: Fetcher to use; a fresh one for the configured backend if omitted.
        dry_run: Compute the new goals without touching the file.
        debug: Dump table structure (and a screenshot for the browser backend).

    Returns:
        Counts, new lines and whether the file was written.
    """
    store = ComponentStore(Path(settings.component_file), settings.array_name)

    logger.info("Step 1: Reading existing goals...")
    existing_goals = store.read_existing_goals()
    logger.info(f"Found {len(existing_goals)} existing goals")

    logger.info("Step 2: Scraping goals from web source...")
    fetcher = fetcher or create_fetcher(settings, debug=debug)
    async with fetcher:
        snapshot = await fetcher.fetch(str(settings.goals_url), settings.timeout_ms)
    if debug:
        logger.debug(f"Table debug info: {describe_tables(snapshot.html, settings.selectors.row_selector)}")
    scraped_goals = GoalExtractor(settings).extract(snapshot.html)
    logger.info(f"Scraped {len(scraped_goals)} goals from first page")

    logger.info("Step 3: Transforming data...")
    normalizer = Normalizer(settings)
    sorted_goals = sort_goals_by_date(normalizer.normalize_all(scraped_goals))
    logger.info(f"Transformed {len(sorted_goals)} goals")

    logger.info("Step 4: Finding new goals...")
    new_goals = find_new_goals(sorted_goals, existing_goals)
    summary = RunSummary(
        comparison=GoalComparison(existing=len(existing_goals), new=0),
        scraped=len(scraped_goals),
        dry_run=dry_run,
        warnings=list(normalizer.warnings),
    )
    if not new_goals:
        logger.info("No new goals found.")
        return summary

    logger.info("Step 5: Assigning goal numbers...")
    highest_number = get_highest_goal_number(existing_goals)
    logger.info(f"Highest existing goal number: {highest_number}")
    numbered_goals = assign_goal_numbers(new_goals, highest_number)
    summary.comparison = compare_goals(numbered_goals, existing_goals)

    if dry_run:
        logger.info("Step 6: DRY RUN - Skipping file update.")
        return summary

    logger.info("Step 6: Updating component...")
    summary.written = store.update(merge_goals(numbered_goals, existing_goals))
    if summary.written:
        logger.success(f"Added {summary.comparison.new} new goal(s)")
    return summary
