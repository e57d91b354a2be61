from typing import List

from pydantic import BaseModel, Field, computed_field


class GoalComparison(BaseModel):
    """Counts of the persisted set before and after adding the new goals."""

    existing: int
    new: int
    new_goals_list: List[str] = Field(
        default_factory=list, description="Canonical lines to add, newest first."
    )

    @computed_field  # type: ignore[misc]
    @property
    def total(self) -> int:
        return self.existing + self.new


class RunSummary(BaseModel):
    """Outcome of one scrape run."""

    comparison: GoalComparison
    scraped: int = 0
    dry_run: bool = False
    written: bool = False
    warnings: List[str] = Field(default_factory=list)
