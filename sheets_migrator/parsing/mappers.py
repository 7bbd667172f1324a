"""
Record Mappers

Turn one raw sheet row (header -> cell text) into a typed record.

The sheets were edited by hand over several years, so the same logical
column shows up under slightly different headers ("Cost Type" /
"Cost type", "Ezcater" / "Ez Cater" / "EzCater"). Every field therefore
lists its candidate headers in priority order; the first one holding a
non-blank value wins.

Date handling is strict and everything else is permissive:
- no parseable date -> RowRejectedError, the row is not imported
- missing numbers -> 0.0
- missing labels -> a fixed fallback ("Other", "Unknown Employee") or None
"""

from dataclasses import dataclass
from typing import Callable, Mapping, Optional

from sheets_migrator.models.records import (
    SYSTEM_USER_ID,
    ExpenseRecord,
    Record,
    RecordCategory,
    RevenueRecord,
    SalaryRecord,
)
from sheets_migrator.parsing.values import parse_date, parse_number


RawRow = Mapping[str, str]


class RowRejectedError(ValueError):
    """A sheet row cannot become a record (its date is unreadable)."""

    def __init__(self, category: RecordCategory, row: RawRow, reason: str):
        self.category = category
        self.row = dict(row)
        self.reason = reason
        super().__init__(f"{category.value} row rejected: {reason}")


def is_blank_row(row: RawRow) -> bool:
    """True when every cell of the row is empty or whitespace."""
    return not any(str(value).strip() for value in row.values())


@dataclass(frozen=True)
class FieldColumns:
    """Candidate headers for one record field, in priority order."""
    field: str
    candidates: tuple[str, ...]
    default: Optional[str] = None

    def lookup(self, row: RawRow) -> Optional[str]:
        for header in self.candidates:
            value = row.get(header)
            if value is not None and str(value).strip():
                return str(value).strip()
        return self.default


def _number(field: str, *candidates: str) -> FieldColumns:
    return FieldColumns(field, candidates, default="0")


# =============================================================================
# COLUMN TABLES
# =============================================================================

REVENUE_DATE = FieldColumns("date", ("Column 1", "Date", "Date ", "DATE"))

REVENUE_COLUMNS = (
    _number("cash_in_report", "Cash in Report", "Cash In Report"),
    _number("card", "Card"),
    _number("card2", "Card2"),
    _number("dd", "DD"),
    _number("ue", "UE"),
    _number("gh", "GH"),
    _number("cn", "CN"),
    _number("dd2", "DD2"),
    _number("ue2", "UE2"),
    _number("gh2", "GH2"),
    _number("cn2", "CN2"),
    _number("dd_fees", "DD Fees", "DD fees"),
    _number("ue_fees", "UE Fees", "UE fees"),
    _number("gh_fees", "GH Fees", "GH fees"),
    _number("catering", "Catering"),
    _number("other_cash", "Other Cash", "Other cash"),
    _number("foodja", "Foodja", "foodja"),
    _number("foodja2", "Foodja2", "foodja2"),
    _number("foodja_fees", "Foodja Fees", "Foodja fees", "foodja fees"),
    _number("zelle", "Zelle", "zelle"),
    _number("relish", "Relish", "relish"),
    _number("relish2", "Relish2", "relish2"),
    _number("relish_fees", "Relish Fees", "Relish fees", "relish fees"),
    _number("ez_cater", "Ez Cater", "EzCater", "Ezcater"),
    _number("ez_cater2", "EzCater2", "Ezcater2"),
    _number("ez_cater_fees", "EzCater Fees", "EzCater fees", "Ezcater fees"),
    _number("waiter_com", "waiter.com", "Waiter.com"),
    _number("cc_fees", "CC Fees", "CC fees"),
)

EXPENSE_DATE = FieldColumns("date", ("Date", "DATE", "Date "))
EXPENSE_COST_TYPE = FieldColumns("cost_type", ("Cost Type", "Cost type"), default="Other")
EXPENSE_TYPE = FieldColumns("expense_type", ("Expense Type", "Expense type"))
EXPENSE_ITEM_VENDOR = FieldColumns(
    "item_vendor", ("Item (Vendor)", "Item(Vendor)", "Item Vendor")
)
EXPENSE_AMOUNT = _number("amount", "Amount")

SALARY_DATE = FieldColumns("date", ("Pay Period", "Date", "DATE", "Pay period"))
SALARY_RESOURCE_NAME = FieldColumns(
    "resource_name", ("Resource Name", "Resource name"), default="Unknown Employee"
)
SALARY_AMOUNT = _number("amount", "Amount")
SALARY_PAID_DATE = FieldColumns(
    "actual_paid_date", ("Actual Paid Date", "Actual paid date", "Actual Paid Date ")
)


def _resolve_date(columns: FieldColumns, row: RawRow, category: RecordCategory):
    raw = columns.lookup(row)
    if raw is None:
        raise RowRejectedError(category, row, "no date column")
    parsed = parse_date(raw)
    if parsed is None:
        raise RowRejectedError(category, row, f"invalid date '{raw}'")
    return parsed


# =============================================================================
# MAPPERS
# =============================================================================

def map_revenue_row(row: RawRow, created_by: int = SYSTEM_USER_ID) -> RevenueRecord:
    """Map a 'Net Sale' row to a RevenueRecord."""
    record_date = _resolve_date(REVENUE_DATE, row, RecordCategory.REVENUE)
    channels = {
        column.field: parse_number(column.lookup(row))
        for column in REVENUE_COLUMNS
    }
    return RevenueRecord(date=record_date, created_by=created_by, **channels)


def map_expense_row(row: RawRow, created_by: int = SYSTEM_USER_ID) -> ExpenseRecord:
    """Map an 'Expenses' row to an ExpenseRecord."""
    record_date = _resolve_date(EXPENSE_DATE, row, RecordCategory.EXPENSES)
    return ExpenseRecord(
        date=record_date,
        cost_type=EXPENSE_COST_TYPE.lookup(row),
        expense_type=EXPENSE_TYPE.lookup(row),
        item_vendor=EXPENSE_ITEM_VENDOR.lookup(row),
        amount=parse_number(EXPENSE_AMOUNT.lookup(row)),
        created_by=created_by,
    )


def map_salary_row(row: RawRow, created_by: int = SYSTEM_USER_ID) -> SalaryRecord:
    """
    Map a 'Salaries' row to a SalaryRecord.

    The pay period is the record date. An unreadable actual-paid date is
    stored as None rather than rejecting the row.
    """
    record_date = _resolve_date(SALARY_DATE, row, RecordCategory.SALARIES)
    return SalaryRecord(
        date=record_date,
        resource_name=SALARY_RESOURCE_NAME.lookup(row),
        amount=parse_number(SALARY_AMOUNT.lookup(row)),
        actual_paid_date=parse_date(SALARY_PAID_DATE.lookup(row)),
        created_by=created_by,
    )


RowMapper = Callable[[RawRow, int], Record]

MAPPERS: dict[RecordCategory, RowMapper] = {
    RecordCategory.REVENUE: map_revenue_row,
    RecordCategory.EXPENSES: map_expense_row,
    RecordCategory.SALARIES: map_salary_row,
}
