from datetime import date
from typing import List

from loguru import logger

from goal_scraper.models.enums import NON_OFFICIAL
from goal_scraper.models.goal import CanonicalGoalRecord
from goal_scraper.utils.misc_utils import minute_sort_value, parse_goal_date
from .reconciler import parse_existing_goals


def get_highest_goal_number(existing_raw: List[str]) -> int:
    """Highest official number among the persisted lines, 0 if there is none."""
    numbers = [
        line.official_number
        for line in parse_existing_goals(existing_raw)
        if line.official_number is not None
    ]
    return max(numbers, default=0)


def assign_goal_numbers(
    new_goals: List[CanonicalGoalRecord], highest_existing: int
) -> List[CanonicalGoalRecord]:
    """Numbers new official goals in chronological order.

    Args:
        new_goals: Goals not yet persisted, in any order.
        highest_existing: Highest number already used.

    Returns:
        The goals with their final number, newest first. Non-official goals
        get N.O and don't use up a number.
    """
    sorted_by_date_asc = sorted(
        new_goals,
        key=lambda g: (parse_goal_date(g.date) or date.min, minute_sort_value(g.minute)),
    )

    next_number = highest_existing + 1
    numbered: List[CanonicalGoalRecord] = []
    for goal in sorted_by_date_asc:
        if goal.is_official:
            numbered.append(goal.with_number(str(next_number)))
            next_number += 1
        else:
            numbered.append(goal.with_number(NON_OFFICIAL))

    assigned = next_number - highest_existing - 1
    if assigned:
        logger.info(
            f"Assigned numbers {highest_existing + 1}..{next_number - 1} to {assigned} official goal(s)"
        )
    numbered.reverse()
    return numbered
