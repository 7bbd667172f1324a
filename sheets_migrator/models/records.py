"""
Dashboard Record Models

Typed versions of the three kinds of rows the dashboard stores:
daily revenue, expenses and salary payments.

DESIGN DECISION: `year` and `month` are denormalized grouping columns.
They are always derived from `date` and the models refuse values that
disagree with it, so a record can never be filed under the wrong month.

Each model knows its natural key - the fields used to detect that the
same row was already imported on a previous run.
"""

from datetime import date
from enum import Enum
from typing import ClassVar, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from sheets_migrator.parsing.values import month_label


SYSTEM_USER_ID = 1


class RecordCategory(str, Enum):
    """
    The three record families the importer knows about.

    The order of the members is the order categories are migrated in.
    """
    REVENUE = "revenue"
    EXPENSES = "expenses"
    SALARIES = "salaries"


class DatedRecord(BaseModel):
    """Fields shared by every dashboard record."""
    model_config = ConfigDict(str_strip_whitespace=True)

    category: ClassVar[RecordCategory]
    key_fields: ClassVar[tuple[str, ...]] = ("date", "year", "month")

    date: date
    year: int = Field(default=0, description="Calendar year of `date`")
    month: str = Field(default="", description="Month label of `date`, e.g. 'Jan'")
    created_by: int = Field(
        default=SYSTEM_USER_ID,
        ge=1,
        description="User id of the author (admin for imported rows)"
    )

    @model_validator(mode="before")
    @classmethod
    def derive_year_and_month(cls, data):
        """Fill year and month from the date when they are not given."""
        if isinstance(data, dict) and isinstance(data.get("date"), date):
            data = dict(data)
            data.setdefault("year", data["date"].year)
            data.setdefault("month", month_label(data["date"]))
        return data

    @model_validator(mode="after")
    def check_year_and_month(self):
        if self.year != self.date.year:
            raise ValueError(
                f"Year {self.year} does not match date {self.date.isoformat()}"
            )
        if self.month != month_label(self.date):
            raise ValueError(
                f"Month '{self.month}' does not match date {self.date.isoformat()}"
            )
        return self

    def natural_key(self) -> dict:
        """Criteria identifying this record in storage."""
        return {name: getattr(self, name) for name in self.key_fields}

    def to_row(self) -> dict:
        """Column values for storage (category metadata excluded)."""
        return self.model_dump()


class RevenueRecord(DatedRecord):
    """
    One day of revenue, split by payment channel.

    Delivery platforms appear as a gross amount, a second-location amount
    (suffix 2) and the platform fee.
    """
    category: ClassVar[RecordCategory] = RecordCategory.REVENUE

    cash_in_report: float = 0.0
    card: float = 0.0
    card2: float = 0.0
    dd: float = 0.0
    ue: float = 0.0
    gh: float = 0.0
    cn: float = 0.0
    dd2: float = 0.0
    ue2: float = 0.0
    gh2: float = 0.0
    cn2: float = 0.0
    dd_fees: float = 0.0
    ue_fees: float = 0.0
    gh_fees: float = 0.0
    catering: float = 0.0
    other_cash: float = 0.0
    foodja: float = 0.0
    foodja2: float = 0.0
    foodja_fees: float = 0.0
    zelle: float = 0.0
    relish: float = 0.0
    relish2: float = 0.0
    relish_fees: float = 0.0
    ez_cater: float = 0.0
    ez_cater2: float = 0.0
    ez_cater_fees: float = 0.0
    waiter_com: float = 0.0
    cc_fees: float = 0.0


class ExpenseRecord(DatedRecord):
    """A single expense line."""
    category: ClassVar[RecordCategory] = RecordCategory.EXPENSES
    key_fields: ClassVar[tuple[str, ...]] = (
        "date", "year", "month", "cost_type", "amount",
    )

    cost_type: str = Field(default="Other", min_length=1)
    expense_type: Optional[str] = None
    item_vendor: Optional[str] = None
    amount: float = 0.0


class SalaryRecord(DatedRecord):
    """A salary payment for one pay period."""
    category: ClassVar[RecordCategory] = RecordCategory.SALARIES
    key_fields: ClassVar[tuple[str, ...]] = (
        "date", "year", "month", "resource_name", "amount",
    )

    resource_name: str = Field(default="Unknown Employee", min_length=1)
    amount: float = 0.0
    actual_paid_date: Optional[date] = None


Record = Union[RevenueRecord, ExpenseRecord, SalaryRecord]

RECORD_TYPES: dict[RecordCategory, type[DatedRecord]] = {
    RecordCategory.REVENUE: RevenueRecord,
    RecordCategory.EXPENSES: ExpenseRecord,
    RecordCategory.SALARIES: SalaryRecord,
}


def revenue_channel_fields() -> list[str]:
    """Names of the numeric channel columns on RevenueRecord."""
    base = set(DatedRecord.model_fields)
    return [name for name in RevenueRecord.model_fields if name not in base]
