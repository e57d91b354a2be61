from datetime import date
from typing import Dict, List, Optional
import re

from loguru import logger

from goal_scraper.models.enums import NON_OFFICIAL, GoalType, Venue
from goal_scraper.models.goal import CanonicalGoalRecord, RawGoalEvent
from goal_scraper.utils.misc_utils import parse_goal_date

SOURCE_DATE_RE = re.compile(r"(?<!\d)(\d{2})/(\d{2})/(\d{2})(?!\d)")
MONTH_NAME_DATE_RE = re.compile(r"([A-Za-z]+)\.?\s+(\d{1,2}),?\s+(\d{4})")
NUMERIC_DATE_RE = re.compile(r"(\d{1,2})[/.-](\d{1,2})[/.-](\d{4})")
MINUTE_STRIP_RE = re.compile(r"[^\d+']")
PERSON_NAME_RE = re.compile(r"[A-Z][a-z]+\s+[A-Z]")

MONTHS: Dict[str, int] = {
    "jan": 1,
    "feb": 2,
    "mar": 3,
    "apr": 4,
    "may": 5,
    "jun": 6,
    "jul": 7,
    "aug": 8,
    "sep": 9,
    "oct": 10,
    "nov": 11,
    "dec": 12,
}

VENUE_TOKENS: Dict[str, Venue] = {
    "h": Venue.HOME,
    "home": Venue.HOME,
    "a": Venue.AWAY,
    "away": Venue.AWAY,
    "n": Venue.NEUTRAL,
    "neutral": Venue.NEUTRAL,
}

# Checked in order after the configured mappings
GOAL_TYPE_HEURISTICS = [
    (("left",), GoalType.LEFT_FOOT),
    (("right",), GoalType.RIGHT_FOOT),
    (("head",), GoalType.HEADER),
    (("counter",), GoalType.COUNTER_ATTACK),
    (("penalty", "pen"), GoalType.PENALTY),
    (("free kick", "freekick"), GoalType.DIRECT_FREE_KICK),
]


class Normalizer:
    """Turns raw goal events into canonical goal records.

    Values that match no known format never fail the run: a default or the
    original text is used and a warning is kept in ``warnings``.
    """

    def __init__(self, settings):
        self.non_official_patterns: List[str] = [
            p.lower() for p in settings.non_official_patterns
        ]
        self.team_aliases: Dict[str, str] = dict(settings.team_mappings)
        self.goal_type_aliases: Dict[str, str] = dict(settings.goal_type_mappings)
        self.warnings: List[str] = []
        logger.debug(
            f"Normalizer initialized with {len(self.team_aliases)} team aliases "
            f"and {len(self.goal_type_aliases)} goal type keywords."
        )

    def normalize_all(self, raw_goals: List[RawGoalEvent]) -> List[CanonicalGoalRecord]:
        return [self.normalize(raw) for raw in raw_goals]

    def normalize(self, raw: RawGoalEvent) -> CanonicalGoalRecord:
        is_official = self.is_official(raw.competition)
        record = CanonicalGoalRecord(
            number=None if is_official else NON_OFFICIAL,
            date=self.transform_date(raw.date),
            venue=self.transform_venue(raw.venue),
            team=self.normalize_team_name(raw.for_team),
            opponent=self.normalize_team_name(raw.opponent),
            minute=self.transform_minute(raw.minute),
            goal_type=self.transform_goal_type(raw.goal_type),
            is_official=is_official,
            competition=raw.competition,
        )
        logger.debug(f"Normalized goal: {record.to_line()}")
        return record

    def _warn(self, message: str) -> None:
        logger.warning(message)
        self.warnings.append(message)

    def is_official(self, competition: str) -> bool:
        """Goals count as official unless the competition looks like a friendly."""
        if not competition:
            return True
        comp_lower = competition.lower()
        return not any(pattern in comp_lower for pattern in self.non_official_patterns)

    def transform_date(self, date_str: str) -> str:
        """Converts the source date (DD/MM/YY and a few fallbacks) to MM/DD/YY."""
        if not date_str:
            return ""

        match = SOURCE_DATE_RE.search(date_str)
        if match:
            day, month, year = match.groups()
            reordered = f"{month}/{day}/{year}"
            if parse_goal_date(reordered) is None:
                self._warn(f"Could not parse date: {date_str}")
                return date_str
            return reordered

        parsed = self._parse_month_name_date(date_str) or self._parse_numeric_date(date_str)
        if parsed is None:
            self._warn(f"Could not parse date: {date_str}")
            return date_str
        return parsed.strftime("%m/%d/%y")

    @staticmethod
    def _parse_month_name_date(date_str: str) -> Optional[date]:
        match = MONTH_NAME_DATE_RE.search(date_str)
        if not match:
            return None
        month_name, day, year = match.groups()
        month = MONTHS.get(month_name[:3].lower())
        if month is None:
            return None
        try:
            return date(int(year), month, int(day))
        except ValueError:
            return None

    @staticmethod
    def _parse_numeric_date(date_str: str) -> Optional[date]:
        match = NUMERIC_DATE_RE.search(date_str)
        if not match:
            return None
        day, month, year = (int(g) for g in match.groups())
        try:
            return date(year, month, day)
        except ValueError:
            return None

    def transform_venue(self, venue: str) -> Venue:
        if not venue or not venue.strip():
            return Venue.NEUTRAL

        venue_lower = venue.lower().strip()
        if venue_lower in VENUE_TOKENS:
            return VENUE_TOKENS[venue_lower]

        if "home" in venue_lower or "(h)" in venue_lower:
            return Venue.HOME
        if "away" in venue_lower or "(a)" in venue_lower:
            return Venue.AWAY

        self._warn(f"Unrecognized venue {venue!r}, using N")
        return Venue.NEUTRAL

    def normalize_team_name(self, team_name: str) -> str:
        if not team_name:
            return ""
        trimmed = team_name.strip()
        return self.team_aliases.get(trimmed, trimmed)

    @staticmethod
    def transform_minute(minute: str) -> str:
        """Keeps digits, "+" and the apostrophe, which always ends the result."""
        if not minute:
            return ""
        cleaned = MINUTE_STRIP_RE.sub("", minute)
        if not cleaned.endswith("'"):
            cleaned += "'"
        return cleaned

    def transform_goal_type(self, goal_type: str) -> str:
        if not goal_type:
            return GoalType.RIGHT_FOOT.value

        type_lower = goal_type.lower()
        for pattern, label in self.goal_type_aliases.items():
            if pattern.lower() in type_lower:
                return label

        for keywords, label in GOAL_TYPE_HEURISTICS:
            if any(k in type_lower for k in keywords):
                return label.value

        # Continuation rows sometimes yield the assist provider instead of a type
        if PERSON_NAME_RE.search(goal_type) or "í" in goal_type or "ć" in goal_type:
            return GoalType.RIGHT_FOOT.value
        if "not reported" in type_lower:
            return GoalType.RIGHT_FOOT.value

        trimmed = goal_type.strip()
        if not trimmed:
            return GoalType.RIGHT_FOOT.value
        self._warn(f"Unknown goal type {trimmed!r}, keeping as is")
        return trimmed


def sort_goals_by_date(goals: List[CanonicalGoalRecord]) -> List[CanonicalGoalRecord]:
    """Newest first. Goals with an unreadable date go last."""
    return sorted(goals, key=lambda g: parse_goal_date(g.date) or date.min, reverse=True)
