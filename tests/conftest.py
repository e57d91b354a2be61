from typing import List

import pytest

from goal_scraper.config.settings import AppSettings
from goal_scraper.scrapers.base_scraper import BaseFetcher, PageSnapshot
from goal_scraper.models.enums import FetchBackend


def full_row(
    date="21/03/26",
    venue="H",
    team="Al-Nassr FC",
    opponent="Al-Hilal SFC",
    minute="12'",
    goal_type="Penalty",
    competition="Saudi Pro League",
    assist="",
):
    assist_cell = f'<td><a title="{assist}" href="/p">{assist}</a></td>' if assist else "<td></td>"
    return f"""
    <tr>
      <td class="zentriert no-border-links links"><a title="{competition}" href="/c"><img alt=""></a></td>
      <td class="no-border-links links"><a title="{competition}" href="/c">{competition}</a></td>
      <td class="zentriert">25</td>
      <td class="zentriert">{date}</td>
      <td class="zentriert hauptlink">{venue}</td>
      <td class="no-border-links"><a title="{team}" href="/t1">{team.split()[0]}</a></td>
      <td class="no-border-links"><a title="{opponent}" href="/t2">{opponent.split()[0]}</a></td>
      <td class="zentriert hauptlink"><a title="Match report" href="/m">3:1</a></td>
      <td class="zentriert">CF</td>
      <td class="zentriert">{minute}</td>
      <td class="zentriert">1:0</td>
      <td>{goal_type}</td>
      {assist_cell}
    </tr>"""


def continuation_row(minute="67'", goal_type="Header", score="2:0", assist=""):
    return f"""
    <tr>
      <td colspan="9"></td>
      <td class="zentriert">{minute}</td>
      <td class="zentriert">{score}</td>
      <td>{goal_type}</td>
      <td>{assist}</td>
    </tr>"""


def section_row(text="Saudi Pro League"):
    return f'<tr><td colspan="13">{text}</td></tr>'


def listing_page(rows: List[str], title="Goals") -> str:
    return f"""<html><head><title>{title}</title></head><body>
    <table class="auflistung"><tbody><tr><td>Born</td><td>1985</td></tr></tbody></table>
    <div class="responsive-table"><table class="items">
      <thead><tr><th>Competition</th></tr></thead>
      <tbody>{"".join(rows)}</tbody>
    </table></div>
    </body></html>"""


COMPONENT_TEMPLATE = """---
import Goal from './Goal.astro';

const rawData = [
{body}];

const goals = rawData.map((line) => line.split(' '));
---
<section id="road">{{goals.length}}</section>
"""


def component_source(lines: List[str]) -> str:
    body = "".join(f'  "{line}",\n' for line in lines)
    return COMPONENT_TEMPLATE.format(body=body)


class FakeFetcher(BaseFetcher):
    """Serves canned markup instead of loading the page."""

    backend = FetchBackend.HTTP

    def __init__(self, html: str, title: str = "Goals"):
        self.html = html
        self.title = title
        self.fetch_calls = 0
        self.closed = False

    async def fetch(self, url: str, timeout_ms: int) -> PageSnapshot:
        self.fetch_calls += 1
        return PageSnapshot(url=url, html=self.html, title=self.title)

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def app_settings() -> AppSettings:
    return AppSettings(_env_file=None)


@pytest.fixture
def component_file(tmp_path, app_settings):
    """Component with three persisted goals, the newest official one being 55."""
    path = tmp_path / "RoadSection.astro"
    path.write_text(
        component_source(
            [
                "55 03/14/26 A Al-Nassr vs. Al-Ettifaq 45+2' Header",
                "N.O 03/01/26 N Al-Nassr vs. Inter Miami 30' Left-footed shot",
                "54 02/20/26 H Al-Nassr vs. Al-Fateh 77' Penalty",
            ]
        ),
        encoding="utf-8",
    )
    return path


@pytest.fixture
def run_settings(app_settings, component_file) -> AppSettings:
    return app_settings.model_copy(update={"component_file": str(component_file)})
