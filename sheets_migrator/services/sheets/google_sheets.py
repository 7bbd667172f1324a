"""
Google Sheets Source Implementation

Reads the dashboard workbook with gspread using API-key authentication,
which gives read-only access to the shared spreadsheet.

TRADEOFFS:
- gspread is synchronous; calls run in a worker thread so the event
  loop is never blocked
- Transport errors are retried a few times here; the importer itself
  imposes no timeouts
- A sheet that cannot be read is reported as a FAILED fetch and the run
  carries on with the next category
"""

import asyncio
from typing import Any, Optional

import gspread
from tenacity import (
    retry,
    retry_if_not_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from sheets_migrator.config import GoogleSheetsSettings
from sheets_migrator.services.sheets.interface import (
    DEFAULT_RANGE,
    SheetFetchResult,
    SourceConnectionError,
    TabularSourceInterface,
)


def a1_range(sheet_name: str, cell_range: str) -> str:
    """
    Build an A1 reference for a sheet, quoting the sheet name.

    >>> a1_range("Net Sale", "A:Z")
    "'Net Sale'!A:Z"
    """
    escaped = sheet_name.replace("'", "''")
    return f"'{escaped}'!{cell_range}"


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.

    Handles authentication and provides retry logic for API calls.
    """

    def __init__(self, settings: GoogleSheetsSettings):
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._settings = settings

    @property
    def spreadsheet_id(self) -> str:
        return self._settings.spreadsheet_id

    def connect(self) -> gspread.Client:
        """Create an API-key authenticated gspread client."""
        if self._client is None:
            try:
                self._client = gspread.api_key(self._settings.api_key)
            except Exception as e:
                raise SourceConnectionError(f"Failed to connect to Google Sheets: {e}")
        return self._client

    def get_spreadsheet(self) -> gspread.Spreadsheet:
        """Open the configured spreadsheet."""
        if self._spreadsheet is None:
            client = self.connect()
            try:
                self._spreadsheet = client.open_by_key(self._settings.spreadsheet_id)
            except gspread.SpreadsheetNotFound:
                raise SourceConnectionError(
                    f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                )
        return self._spreadsheet

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_not_exception_type(SourceConnectionError),
        reraise=True,
    )
    def values_get(self, reference: str) -> list[list[Any]]:
        """Read a range and return its cell grid (empty list when blank)."""
        response = self.get_spreadsheet().values_get(reference)
        values = response.get("values", [])
        return values if isinstance(values, list) else []


class GoogleSheetsSource(TabularSourceInterface):
    """Google Sheets implementation of the tabular source."""

    def __init__(self, client: GoogleSheetsClient):
        self._client = client

    @classmethod
    def from_settings(cls, settings: GoogleSheetsSettings) -> "GoogleSheetsSource":
        return cls(GoogleSheetsClient(settings))

    @property
    def source_id(self) -> str:
        return self._client.spreadsheet_id

    async def probe(self, sheet_name: str) -> str:
        """Read a single cell of `sheet_name`."""
        reference = a1_range(sheet_name, "A1:A1")
        try:
            await asyncio.to_thread(self._client.values_get, reference)
        except SourceConnectionError:
            raise
        except Exception as e:
            raise SourceConnectionError(
                f"Google Sheets connection test failed for {reference}: {e}"
            ) from e
        return reference

    async def fetch_rows(
        self,
        sheet_name: str,
        cell_range: str = DEFAULT_RANGE,
    ) -> SheetFetchResult:
        """Read a sheet; failures come back as a FAILED result."""
        reference = a1_range(sheet_name, cell_range)
        try:
            values = await asyncio.to_thread(self._client.values_get, reference)
        except Exception as e:
            return SheetFetchResult.failed(sheet_name, f"{type(e).__name__}: {e}")
        return SheetFetchResult.from_values(sheet_name, values)
