import pytest
from pydantic import ValidationError

from goal_scraper.models.enums import NON_OFFICIAL, Venue
from goal_scraper.models.goal import CanonicalGoalRecord, PersistedGoalLine
from goal_scraper.models.summary import GoalComparison


def make_record(**overrides):
    fields = dict(
        number="57",
        date="03/21/26",
        venue="H",
        team="Al-Nassr",
        opponent="Al-Hilal",
        minute="12'",
        goal_type="Penalty",
    )
    fields.update(overrides)
    return CanonicalGoalRecord(**fields)


def test_serializes_to_canonical_line():
    assert make_record().to_line() == "57 03/21/26 H Al-Nassr vs. Al-Hilal 12' Penalty"


def test_unnumbered_official_goal_uses_placeholder():
    line = make_record(number=None).to_line()
    assert line.startswith("? 03/21/26 H ")


def test_non_official_goal_serializes_with_marker():
    record = make_record(number=NON_OFFICIAL, is_official=False, venue="N")
    assert record.to_line() == "N.O 03/21/26 N Al-Nassr vs. Al-Hilal 12' Penalty"


@pytest.mark.parametrize(
    "number,is_official",
    [(NON_OFFICIAL, True), ("12", False), (None, False), ("0", True), ("abc", True)],
)
def test_number_must_match_officiality(number, is_official):
    with pytest.raises(ValidationError):
        make_record(number=number, is_official=is_official)


def test_with_number_returns_copy():
    record = make_record(number=None)
    numbered = record.with_number("58")
    assert numbered.number == "58"
    assert record.number is None
    assert numbered.venue is Venue.HOME


def test_identity_key_ignores_team_and_type():
    a = make_record(team="Al-Nassr FC", goal_type="Header")
    b = make_record(team="al-nassr", goal_type="Penalty")
    assert a.identity_key == b.identity_key == "03/21/26_H_12"


def test_persisted_line_reads_leading_fields_and_minute():
    line = PersistedGoalLine.from_raw("55 03/14/26 A Al-Nassr vs. Al Ettifaq 45+2' Header")
    assert (line.number, line.date, line.venue, line.minute) == ("55", "03/14/26", "A", "45+2'")
    assert line.official_number == 55
    assert line.identity_key == "03/14/26_A_452"


def test_persisted_line_skips_apostrophes_in_team_names():
    line = PersistedGoalLine.from_raw("12 09/01/25 A Al-Nassr vs. Newell's 88' Header")
    assert line.minute == "88'"


def test_persisted_non_official_line_has_no_number():
    line = PersistedGoalLine.from_raw("N.O 03/01/26 N Al-Nassr vs. Inter Miami 30' Header")
    assert line.official_number is None


def test_comparison_total():
    comparison = GoalComparison(existing=3, new=2, new_goals_list=["a", "b"])
    assert comparison.total == 5
