# goal_scraper/scrapers/goal_extractor.py
import re
from typing import Any, Dict, List, Optional, Tuple

from bs4 import BeautifulSoup, Tag
from loguru import logger

from goal_scraper.models.goal import RawGoalEvent
from .base_scraper import StructureError

DATE_CELL_RE = re.compile(r"^\d{2}/\d{2}/\d{2}$")
VENUE_TOKENS = {"H", "A", "N"}

# Rows with fewer cells are separators or headings
MIN_CELLS = 4


def _cell_text(cell: Tag) -> str:
    return cell.get_text().strip()


class GoalExtractor:
    """Reads goal events out of the listing page markup.

    The listing has two row shapes. A full row describes a match and one goal
    in it. Further goals in the same match follow as continuation rows, whose
    match columns are collapsed into one cell with a colspan.
    """

    def __init__(self, settings):
        self.settings = settings
        self.selectors = settings.selectors

    def extract(self, html: str) -> List[RawGoalEvent]:
        """Returns the goal events of the largest table, in row order."""
        soup = BeautifulSoup(html, "html.parser")
        if soup.find("table") is None:
            title = soup.title.get_text(strip=True) if soup.title else ""
            raise StructureError("No goals table in page", title=title, snippet=html)

        table = self._find_goals_table(soup)
        if table is None:
            logger.warning("Goals table has no rows")
            return []

        goals: List[RawGoalEvent] = []
        current_match: Optional[RawGoalEvent] = None

        for row in table.select(self.selectors.row_selector):
            cells = row.select(self.selectors.cell_selector)
            if len(cells) < MIN_CELLS:
                continue

            if row.select_one("td[colspan]") is not None:
                if current_match is None:
                    logger.debug("Dropping continuation row without a preceding match")
                    continue
                goal = self._parse_continuation_row(cells, current_match)
                if goal is not None:
                    goals.append(goal)
                continue

            goal = self._parse_full_row(row, cells)
            if goal is not None:
                goals.append(goal)
                current_match = goal

        logger.info(f"Extracted {len(goals)} goals from {table.get('class') or 'table'}")
        return goals

    def _find_goals_table(self, soup: BeautifulSoup) -> Optional[Tag]:
        goals_table = None
        max_rows = 0
        for table in soup.find_all("table"):
            row_count = len(table.select(self.selectors.row_selector))
            if row_count > max_rows:
                max_rows = row_count
                goals_table = table
        return goals_table

    def _parse_continuation_row(
        self, cells: List[Tag], current_match: RawGoalEvent
    ) -> Optional[RawGoalEvent]:
        texts = [_cell_text(c) for c in cells]
        minute = next((t for t in texts if "'" in t), "")
        if not minute:
            return None

        # Last cells are: minute, score at the time, type, assist
        goal_type = ""
        for text in reversed(texts):
            if text and "'" not in text and ":" not in text and len(text) > 2:
                goal_type = text
                break

        return current_match.model_copy(update={"minute": minute, "goal_type": goal_type})

    def _parse_full_row(self, row: Tag, cells: List[Tag]) -> Optional[RawGoalEvent]:
        texts = [_cell_text(c) for c in cells]

        competition = ""
        index = self.selectors.competition_cell_index
        if index < len(cells):
            link = cells[index].find("a")
            competition = link.get_text().strip() if link else texts[index]

        date = next((t for t in texts if DATE_CELL_RE.match(t)), "")

        venue = ""
        venue_cell = row.select_one(self.selectors.venue_cell_selector)
        if venue_cell is not None and _cell_text(venue_cell) in VENUE_TOKENS:
            venue = _cell_text(venue_cell)

        for_team, opponent = self._find_teams(row)

        minute = next((t for t in texts if "'" in t and any(ch.isdigit() for ch in t)), "")
        goal_type = self._find_goal_type(texts)

        if not (date and minute):
            return None

        return RawGoalEvent(
            competition=competition,
            date=date,
            venue=venue or "N",
            for_team=for_team or self.settings.default_team,
            opponent=opponent,
            minute=minute,
            goal_type=goal_type or "Right-footed shot",
        )

    def _find_teams(self, row: Tag) -> Tuple[str, str]:
        """First titled link is the scoring side, the second is the opponent."""
        skip_classes = set(self.selectors.competition_link_cell_classes)
        teams: List[str] = []
        for link in row.select("a[title]"):
            parent = link.find_parent("td")
            if parent is None:
                continue
            if skip_classes and skip_classes.issubset(parent.get("class") or []):
                continue
            title = link.get("title", "")
            if not title or "Match" in title:
                continue
            teams.append(title)
            if len(teams) == 2:
                break
        teams += [""] * (2 - len(teams))
        return teams[0], teams[1]

    def _find_goal_type(self, texts: List[str]) -> str:
        known = [t.lower() for t in self.settings.known_goal_types]
        for text in texts:
            lowered = text.lower()
            if any(label in lowered for label in known):
                return text
        return ""


def describe_tables(html: str, row_selector: str = "tbody tr", sample_rows: int = 5) -> Dict[str, Any]:
    """Summarizes every table on the page, for tuning selectors."""
    soup = BeautifulSoup(html, "html.parser")
    tables = soup.find_all("table")
    info: Dict[str, Any] = {"table_count": len(tables), "tables": []}
    for i, table in enumerate(tables):
        rows = table.select(row_selector)
        info["tables"].append(
            {
                "index": i,
                "class_name": " ".join(table.get("class") or []),
                "row_count": len(rows),
                "sample_rows": [
                    [_cell_text(c)[:50] for c in row.find_all("td")]
                    for row in rows[:sample_rows]
                ],
            }
        )
    return info
