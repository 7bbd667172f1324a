"""
Abstract Tabular Source Interface

DESIGN DECISION: The importer reads sheets through a small interface so
that:
1. Google Sheets can be replaced by another spreadsheet source
2. Tests can feed fixed rows without network access

A fetch returns a tagged SheetFetchResult. "The sheet is empty" and "the
fetch failed" are different outcomes and callers can tell them apart.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Iterator, Optional

from pydantic import BaseModel, Field


DEFAULT_RANGE = "A:Z"


class FetchStatus(str, Enum):
    OK = "ok"
    EMPTY = "empty"
    FAILED = "failed"


class SheetFetchResult(BaseModel):
    """
    Outcome of reading one sheet.

    `values` holds the raw cell grid including the header row.
    """

    sheet_name: str
    status: FetchStatus
    values: list[list[str]] = Field(default_factory=list)
    error: Optional[str] = None

    @classmethod
    def from_values(cls, sheet_name: str, values: Optional[list[list]]) -> "SheetFetchResult":
        """Tag a cell grid as OK, or EMPTY when there are no data rows."""
        grid = [[("" if cell is None else str(cell)) for cell in row] for row in values or []]
        status = FetchStatus.OK if len(grid) > 1 else FetchStatus.EMPTY
        return cls(sheet_name=sheet_name, status=status, values=grid)

    @classmethod
    def failed(cls, sheet_name: str, error: str) -> "SheetFetchResult":
        return cls(sheet_name=sheet_name, status=FetchStatus.FAILED, error=error)

    @property
    def headers(self) -> list[str]:
        return self.values[0] if self.values else []

    @property
    def row_count(self) -> int:
        """Number of data rows (header excluded)."""
        return max(len(self.values) - 1, 0)

    def rows(self) -> Iterator[dict[str, str]]:
        """
        Yield each data row as a header -> cell mapping.

        Each call starts a fresh pass. Short rows are padded with "".
        """
        headers = self.headers
        for raw in self.values[1:]:
            yield {
                header: (raw[index] if index < len(raw) else "")
                for index, header in enumerate(headers)
            }


class TabularSourceInterface(ABC):
    """
    Abstract interface for reading sheet data.

    Implementations must not raise from fetch_rows; failures are
    reported through SheetFetchResult.
    """

    @property
    @abstractmethod
    def source_id(self) -> str:
        """Identifier of the source document, for logging."""
        pass

    @abstractmethod
    async def probe(self, sheet_name: str) -> str:
        """
        Make a single lightweight read to confirm the source is reachable.

        Returns:
            The A1 range that was read

        Raises:
            SourceConnectionError: If the source cannot be read
        """
        pass

    @abstractmethod
    async def fetch_rows(
        self,
        sheet_name: str,
        cell_range: str = DEFAULT_RANGE,
    ) -> SheetFetchResult:
        """
        Read all rows of a sheet.

        Args:
            sheet_name: Sheet (tab) name
            cell_range: Column range, e.g. "A:Z"

        Returns:
            Tagged result; row 0 of `values` is the header row
        """
        pass


class SourceError(Exception):
    """Base exception for tabular source operations."""
    pass


class SourceConnectionError(SourceError):
    """Could not reach the spreadsheet source."""
    pass
