# goal_scraper/utils/misc_utils.py
import re
from datetime import date
from typing import Optional

MINUTE_TOKEN_RE = re.compile(r"^[\d+]+'$")
LEADING_DIGITS_RE = re.compile(r"^\s*(\d+)")


def normalize_for_comparison(value: str) -> str:
    """Lowercases and drops everything that is not a letter or digit."""
    return re.sub(r"[^a-z0-9]", "", (value or "").lower())


def build_identity_key(goal_date: str, venue: str, minute: str) -> str:
    """Identity of a goal across scrapes: date, venue and normalized minute."""
    return f"{goal_date}_{venue}_{normalize_for_comparison(minute)}"


def parse_goal_date(value: str) -> Optional[date]:
    """Parses a canonical MM/DD/YY date. Returns None when it isn't one."""
    parts = (value or "").split("/")
    if len(parts) != 3 or not all(p.isdigit() for p in parts):
        return None
    month, day, year = (int(p) for p in parts)
    full_year = 1900 + year if year > 50 else 2000 + year
    try:
        return date(full_year, month, day)
    except ValueError:
        return None


def minute_sort_value(minute: str) -> int:
    """Leading digits of a minute string ("90+3'" -> 90), 0 if none."""
    match = LEADING_DIGITS_RE.match(minute or "")
    return int(match.group(1)) if match else 0


def is_minute_token(token: str) -> bool:
    return bool(MINUTE_TOKEN_RE.match(token))
