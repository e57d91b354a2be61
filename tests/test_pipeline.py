import asyncio

import pytest

from goal_scraper.pipeline import run_pipeline
from goal_scraper.scrapers.base_scraper import FetchError, PageSnapshot
from goal_scraper.storage.component_store import ComponentStore, MalformedArtifactError

from conftest import FakeFetcher, continuation_row, full_row, listing_page

PAGE = listing_page(
    [
        full_row(date="25/03/26", venue="N", minute="30'", competition="Club Friendlies"),
        full_row(date="21/03/26", venue="H", minute="12'"),
        continuation_row("67'", "Header"),
        # Already persisted as "55 03/14/26 A ... 45+2' Header"
        full_row(date="14/03/26", venue="A", opponent="Al-Ettifaq FC", minute="45'+2", goal_type="Header"),
    ]
)

EXPECTED_NEW = [
    "N.O 03/25/26 N Al-Nassr vs. Al-Hilal SFC 30' Penalty",
    "57 03/21/26 H Al-Nassr vs. Al-Hilal SFC 67' Header",
    "56 03/21/26 H Al-Nassr vs. Al-Hilal SFC 12' Penalty",
]


class FailingFetcher(FakeFetcher):
    async def fetch(self, url: str, timeout_ms: int) -> PageSnapshot:
        self.fetch_calls += 1
        raise FetchError(f"Timed out after {timeout_ms} ms loading {url}")


def run(settings, fetcher, dry_run=False):
    return asyncio.run(run_pipeline(settings, fetcher=fetcher, dry_run=dry_run))


def test_live_run_adds_new_goals_on_top(run_settings, component_file):
    existing = ComponentStore(component_file).read_existing_goals()
    fetcher = FakeFetcher(PAGE)

    summary = run(run_settings, fetcher)

    assert fetcher.closed is True
    assert summary.scraped == 4
    assert summary.written is True
    assert (summary.comparison.existing, summary.comparison.new, summary.comparison.total) == (3, 3, 6)
    assert summary.comparison.new_goals_list == EXPECTED_NEW
    assert ComponentStore(component_file).read_existing_goals() == EXPECTED_NEW + existing


def test_second_run_is_a_no_op(run_settings, component_file):
    run(run_settings, FakeFetcher(PAGE))
    content = component_file.read_bytes()

    summary = run(run_settings, FakeFetcher(PAGE))

    assert summary.comparison.new == 0
    assert summary.comparison.new_goals_list == []
    assert summary.written is False
    assert component_file.read_bytes() == content


def test_dry_run_never_writes(run_settings, component_file):
    content = component_file.read_bytes()

    summary = run(run_settings, FakeFetcher(PAGE), dry_run=True)

    assert summary.dry_run is True
    assert summary.written is False
    assert summary.comparison.new_goals_list == EXPECTED_NEW
    assert component_file.read_bytes() == content


def test_malformed_component_aborts_before_fetching(run_settings, component_file):
    component_file.write_text("<section>no goals here</section>\n")
    fetcher = FakeFetcher(PAGE)

    with pytest.raises(MalformedArtifactError):
        run(run_settings, fetcher)

    assert fetcher.fetch_calls == 0


def test_fetch_failure_aborts_without_writing(run_settings, component_file):
    content = component_file.read_bytes()
    fetcher = FailingFetcher(PAGE)

    with pytest.raises(FetchError):
        run(run_settings, fetcher)

    assert fetcher.closed is True
    assert component_file.read_bytes() == content


def test_soft_parse_failures_are_reported(run_settings):
    page = listing_page([full_row(date="28/03/26"), continuation_row("70'", "Header", assist="Talisca")])

    summary = run(run_settings, FakeFetcher(page), dry_run=True)

    assert summary.warnings == ["Unknown goal type 'Talisca', keeping as is"]
    assert summary.comparison.new_goals_list[0].endswith("70' Talisca")


@pytest.mark.parametrize("dry_run", [True, False])
def test_listing_without_goal_rows_finds_nothing(run_settings, component_file, dry_run):
    content = component_file.read_bytes()
    page = '<html><body><table class="items"><tbody></tbody></table></body></html>'

    summary = run(run_settings, FakeFetcher(page), dry_run=dry_run)

    assert summary.scraped == 0
    assert summary.comparison.new == 0
    assert summary.written is False
    assert component_file.read_bytes() == content
