"""
Reconciliation Engine

Insert-if-absent, one row at a time:

    raw row -> mapper -> natural-key lookup -> skip | insert

Row failures are isolated. A row with an unreadable date or a failed
insert is logged with its row number and contents, counted as an error,
and the loop moves on. Rows that already exist are skipped quietly: on
a rerun that is the expected outcome, not an error. Rows with every cell
blank are spacers in the sheet; they are logged at debug level and not
counted at all.
"""

from typing import Iterable

from sheets_migrator.audit import MigrationLogger
from sheets_migrator.models.records import SYSTEM_USER_ID, Record, RecordCategory
from sheets_migrator.models.stats import CategoryStats, RowOutcome
from sheets_migrator.parsing.mappers import MAPPERS, RawRow, RowRejectedError, is_blank_row
from sheets_migrator.services.storage import RecordStorageInterface


# Sheet row numbers are 1-based and row 1 is the header
FIRST_DATA_ROW = 2


class ReconciliationEngine:
    """Reconciles mapped sheet rows against stored records."""

    def __init__(
        self,
        storage: RecordStorageInterface,
        logger: MigrationLogger,
        created_by: int = SYSTEM_USER_ID,
    ):
        self._storage = storage
        self._logger = logger
        self._created_by = created_by

    async def reconcile_record(self, record: Record, row_number: int, row: RawRow) -> RowOutcome:
        """
        Insert `record` unless a record with the same natural key exists.

        Returns:
            SKIPPED, INSERTED or FAILED
        """
        category = record.category.value
        key = record.natural_key()

        try:
            existing = await self._storage.find_first(record.category, key)
            if existing is not None:
                self._logger.row_skipped(category, row_number, key)
                return RowOutcome.SKIPPED

            await self._storage.create(record)
        except Exception as e:
            self._logger.row_failed(category, row_number, row, f"{type(e).__name__}: {e}")
            return RowOutcome.FAILED

        self._logger.row_inserted(category, row_number, record.date.isoformat())
        return RowOutcome.INSERTED

    async def reconcile_row(self, category: RecordCategory, row_number: int, row: RawRow) -> RowOutcome:
        """Map one raw row and reconcile it."""
        mapper = MAPPERS[category]
        try:
            record = mapper(row, self._created_by)
        except RowRejectedError as e:
            self._logger.row_rejected(category.value, row_number, row, e.reason)
            return RowOutcome.REJECTED
        except ValueError as e:
            # pydantic rejected the mapped values
            self._logger.row_rejected(category.value, row_number, row, str(e))
            return RowOutcome.REJECTED

        return await self.reconcile_record(record, row_number, row)

    async def migrate_rows(
        self,
        category: RecordCategory,
        rows: Iterable[RawRow],
    ) -> CategoryStats:
        """
        Reconcile every row of a category, in source order.

        Returns:
            Fresh counters for this category
        """
        stats = CategoryStats(category=category)

        for row_number, row in enumerate(rows, start=FIRST_DATA_ROW):
            if is_blank_row(row):
                self._logger.row_blank(category.value, row_number)
                continue

            stats.total += 1
            outcome = await self.reconcile_row(category, row_number, row)
            stats.record(outcome)

        self._logger.category_completed(category.value, stats.model_dump(mode="json"))
        return stats
