"""
Sheet Source Package

Abstract interface for reading spreadsheet tabs plus the Google Sheets
implementation.
"""

from sheets_migrator.services.sheets.interface import (
    DEFAULT_RANGE,
    FetchStatus,
    SheetFetchResult,
    SourceConnectionError,
    SourceError,
    TabularSourceInterface,
)
from sheets_migrator.services.sheets.google_sheets import (
    GoogleSheetsClient,
    GoogleSheetsSource,
    a1_range,
)

__all__ = [
    # Interface
    "DEFAULT_RANGE",
    "FetchStatus",
    "SheetFetchResult",
    "TabularSourceInterface",
    # Exceptions
    "SourceConnectionError",
    "SourceError",
    # Google Sheets implementation
    "GoogleSheetsClient",
    "GoogleSheetsSource",
    "a1_range",
]
