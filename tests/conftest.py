"""
Shared fixtures.

No test talks to Google or to a database server: the sheet source is a
static fake and storage is in-memory (or in-memory SQLite).
"""

from typing import Optional

import pytest

from sheets_migrator.config import GoogleSheetsSettings, ImporterSettings
from sheets_migrator.services.sheets import (
    DEFAULT_RANGE,
    SheetFetchResult,
    SourceConnectionError,
    TabularSourceInterface,
)
from sheets_migrator.services.storage import InMemoryRecordStorage


class StaticTabularSource(TabularSourceInterface):
    """Serves fixed cell grids keyed by sheet name."""

    def __init__(
        self,
        sheets: Optional[dict[str, list[list[str]]]] = None,
        failing_sheets: Optional[set[str]] = None,
        reachable: bool = True,
    ):
        self.sheets = sheets or {}
        self.failing_sheets = failing_sheets or set()
        self.reachable = reachable
        self.fetched: list[str] = []

    @property
    def source_id(self) -> str:
        return "test-spreadsheet"

    async def probe(self, sheet_name: str) -> str:
        if not self.reachable:
            raise SourceConnectionError("spreadsheet unreachable")
        return f"'{sheet_name}'!A1:A1"

    async def fetch_rows(self, sheet_name: str, cell_range: str = DEFAULT_RANGE) -> SheetFetchResult:
        self.fetched.append(sheet_name)
        if sheet_name in self.failing_sheets:
            return SheetFetchResult.failed(sheet_name, "HTTP 403")
        return SheetFetchResult.from_values(sheet_name, self.sheets.get(sheet_name, []))


@pytest.fixture
def sheets_settings() -> GoogleSheetsSettings:
    return GoogleSheetsSettings(spreadsheet_id="test-spreadsheet", api_key="test-key")


@pytest.fixture
def importer_settings() -> ImporterSettings:
    return ImporterSettings()


@pytest.fixture
def storage() -> InMemoryRecordStorage:
    return InMemoryRecordStorage()


@pytest.fixture
def expenses_grid() -> list[list[str]]:
    return [
        ["Date", "Cost Type", "Amount"],
        ["1/5/2024", "Rent", "$1,200.00"],
        ["not-a-date", "Bad", "10"],
    ]
