"""
In-Memory Storage Implementation

Keeps records in per-category lists. Used by the test suite and handy
for a dry run against a real spreadsheet.
"""

from typing import Any, Optional

from sheets_migrator.models.records import Record, RecordCategory
from sheets_migrator.services.storage.interface import (
    RecordStorageInterface,
    StorageError,
)


class InMemoryRecordStorage(RecordStorageInterface):
    """List-backed storage; `fail_on` makes create() raise for matching records."""

    def __init__(self, fail_on=None):
        self._records: dict[RecordCategory, list[Record]] = {
            category: [] for category in RecordCategory
        }
        self._fail_on = fail_on
        self.closed = False

    async def find_first(
        self,
        category: RecordCategory,
        criteria: dict[str, Any],
    ) -> Optional[Record]:
        for record in self._records[category]:
            if all(getattr(record, name) == value for name, value in criteria.items()):
                return record
        return None

    async def create(self, record: Record) -> Record:
        if self._fail_on is not None and self._fail_on(record):
            raise StorageError(f"Insert rejected for {record.category.value} record")
        stored = record.model_copy()
        self._records[record.category].append(stored)
        return stored

    async def list_records(self, category: RecordCategory) -> list[Record]:
        return sorted(self._records[category], key=lambda r: r.date)

    async def close(self) -> None:
        self.closed = True
