"""
Migration Statistics

Counters are plain values: each category migration returns its own
CategoryStats and the orchestrator combines them into MigrationStats.
Nothing here is shared or mutated across categories.
"""

from enum import Enum

from pydantic import BaseModel, Field

from sheets_migrator.models.records import RecordCategory


class RowOutcome(str, Enum):
    """
    Terminal state of one sheet row.

    Parsed -> KeyChecked -> SKIPPED | INSERTED | FAILED.
    REJECTED rows never reach the key check (their date did not parse).
    """
    INSERTED = "inserted"
    SKIPPED = "skipped"
    FAILED = "failed"
    REJECTED = "rejected"


class CategoryStats(BaseModel):
    """Counters for one category."""

    category: RecordCategory
    total: int = Field(default=0, ge=0, description="Non-blank data rows fetched")
    success: int = Field(default=0, ge=0, description="Rows inserted")
    errors: int = Field(default=0, ge=0, description="Rejected or failed rows")
    skipped: int = Field(default=0, ge=0, description="Rows already in storage")

    def record(self, outcome: RowOutcome) -> None:
        """Count one row outcome."""
        if outcome == RowOutcome.INSERTED:
            self.success += 1
        elif outcome == RowOutcome.SKIPPED:
            self.skipped += 1
        else:
            self.errors += 1

    def as_counts(self) -> dict[str, int]:
        return {"total": self.total, "success": self.success, "errors": self.errors}


class MigrationStats(BaseModel):
    """Combined result of one full run."""

    revenue: CategoryStats = Field(
        default_factory=lambda: CategoryStats(category=RecordCategory.REVENUE)
    )
    expenses: CategoryStats = Field(
        default_factory=lambda: CategoryStats(category=RecordCategory.EXPENSES)
    )
    salaries: CategoryStats = Field(
        default_factory=lambda: CategoryStats(category=RecordCategory.SALARIES)
    )

    @classmethod
    def combine(cls, results: list[CategoryStats]) -> "MigrationStats":
        """Build run totals from the per-category results."""
        by_category = {result.category.value: result for result in results}
        return cls(**by_category)

    def categories(self) -> list[CategoryStats]:
        return [self.revenue, self.expenses, self.salaries]

    @property
    def total_records(self) -> int:
        return sum(c.total for c in self.categories())

    @property
    def total_success(self) -> int:
        return sum(c.success for c in self.categories())

    @property
    def total_errors(self) -> int:
        return sum(c.errors for c in self.categories())

    @property
    def total_skipped(self) -> int:
        return sum(c.skipped for c in self.categories())

    @property
    def success_rate(self) -> float:
        """Inserted rows as a percentage of fetched rows."""
        if self.total_records == 0:
            return 0.0
        return self.total_success / self.total_records * 100

    @property
    def succeeded(self) -> bool:
        """True when at least one record was inserted."""
        return self.total_success > 0
