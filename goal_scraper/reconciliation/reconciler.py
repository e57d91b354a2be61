from typing import List

from loguru import logger

from goal_scraper.models.goal import CanonicalGoalRecord, PersistedGoalLine
from goal_scraper.models.summary import GoalComparison


def parse_existing_goals(existing_raw: List[str]) -> List[PersistedGoalLine]:
    return [PersistedGoalLine.from_raw(raw) for raw in existing_raw]


def find_new_goals(
    transformed_goals: List[CanonicalGoalRecord], existing_raw: List[str]
) -> List[CanonicalGoalRecord]:
    """Goals whose date, venue and minute don't appear in the persisted lines.

    The source page carries no goal numbers, and team names or types can be
    spelled differently between scrapes, so only those three fields identify
    a goal.
    """
    existing_ids = {line.identity_key for line in parse_existing_goals(existing_raw)}
    new_goals = [g for g in transformed_goals if g.identity_key not in existing_ids]
    logger.info(
        f"{len(new_goals)} of {len(transformed_goals)} scraped goals are new "
        f"({len(existing_ids)} known identities)"
    )
    return new_goals


def merge_goals(new_goals: List[CanonicalGoalRecord], existing_raw: List[str]) -> List[str]:
    """New goal lines on top, existing lines after them untouched."""
    return [g.to_line() for g in new_goals] + list(existing_raw)


def compare_goals(new_goals: List[CanonicalGoalRecord], existing_raw: List[str]) -> GoalComparison:
    return GoalComparison(
        existing=len(existing_raw),
        new=len(new_goals),
        new_goals_list=[g.to_line() for g in new_goals],
    )
