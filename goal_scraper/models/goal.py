from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator

from goal_scraper.utils.misc_utils import build_identity_key, is_minute_token
from .enums import NON_OFFICIAL, GoalType, Venue

# Shown in place of an official number that has not been assigned yet
PENDING_NUMBER = "?"


class RawGoalEvent(BaseModel):
    """A goal as read from one listing row, before any cleanup."""

    model_config = ConfigDict(frozen=True)

    competition: str = ""
    date: str = ""  # DD/MM/YY on the source page
    venue: str = ""
    for_team: str = ""
    opponent: str = ""
    minute: str = ""
    goal_type: str = ""  # Sometimes the assist provider's name


class CanonicalGoalRecord(BaseModel):
    """A normalized goal, serialized as one canonical line."""

    model_config = ConfigDict(frozen=True)

    number: Optional[str] = None  # Unset until numbering
    date: str = Field(..., description="MM/DD/YY")
    venue: Venue = Venue.NEUTRAL
    team: str
    opponent: str
    minute: str
    goal_type: str = GoalType.RIGHT_FOOT.value
    is_official: bool = True
    competition: str = ""

    @model_validator(mode="after")
    def check_number_matches_officiality(self) -> "CanonicalGoalRecord":
        if self.is_official:
            if self.number == NON_OFFICIAL:
                raise ValueError("Official goals cannot carry the N.O marker")
            if self.number is not None and not (
                self.number.isdigit() and int(self.number) > 0
            ):
                raise ValueError(f"Invalid goal number: {self.number!r}")
        elif self.number != NON_OFFICIAL:
            raise ValueError("Non-official goals must be numbered N.O")
        return self

    @computed_field  # type: ignore[misc]
    @property
    def identity_key(self) -> str:
        return build_identity_key(self.date, self.venue.value, self.minute)

    def to_line(self) -> str:
        """Serializes to "<number> <date> <venue> <team> vs. <opponent> <minute> <type>"."""
        number = self.number if self.number is not None else PENDING_NUMBER
        return (
            f"{number} {self.date} {self.venue.value} {self.team} vs. "
            f"{self.opponent} {self.minute} {self.goal_type}"
        )

    def with_number(self, number: str) -> "CanonicalGoalRecord":
        return self.model_copy(update={"number": number})


class PersistedGoalLine(BaseModel):
    """The parts of an already persisted line needed for matching and numbering.

    Team names and goal types can't be recovered from a line reliably, so
    only the leading fields and the minute are read back.
    """

    model_config = ConfigDict(frozen=True)

    raw: str
    number: str = ""
    date: str = ""
    venue: str = ""
    minute: str = ""

    @classmethod
    def from_raw(cls, raw: str) -> "PersistedGoalLine":
        parts = raw.split()
        padded = parts + [""] * (3 - len(parts))
        # The minute sits after the team names, which may contain spaces
        minute = next((p for p in parts[3:] if is_minute_token(p)), "")
        if not minute:
            minute = next((p for p in parts if "'" in p), "")
        return cls(
            raw=raw, number=padded[0], date=padded[1], venue=padded[2], minute=minute
        )

    @property
    def identity_key(self) -> str:
        return build_identity_key(self.date, self.venue, self.minute)

    @property
    def official_number(self) -> Optional[int]:
        try:
            return int(self.number)
        except ValueError:
            return None
