"""
Main Orchestrator for Sheets Migrator

Ties the source, the reconciliation engine and storage together into a
single import run:

1. Probe the spreadsheet (fatal if unreachable)
2. Migrate revenue -> expenses -> salaries, one after another
3. Combine the per-category counters and summarize

DESIGN DECISION: Categories run sequentially even though they are
independent. This bounds load on the Sheets API and keeps the log in a
fixed order, which the tests rely on.

The orchestrator never reads the environment. Settings, ports and the
clock are passed in by the entry point (or by a test).
"""

from datetime import datetime, timezone
from typing import Callable, Optional

from sheets_migrator.audit import MigrationLogger
from sheets_migrator.config import GoogleSheetsSettings, ImporterSettings
from sheets_migrator.models.records import RecordCategory
from sheets_migrator.models.stats import CategoryStats, MigrationStats
from sheets_migrator.reconciliation import ReconciliationEngine
from sheets_migrator.services.sheets import (
    FetchStatus,
    SourceConnectionError,
    TabularSourceInterface,
)
from sheets_migrator.services.storage import RecordStorageInterface


Clock = Callable[[], datetime]

CATEGORY_LABELS = {
    RecordCategory.REVENUE: "Revenue",
    RecordCategory.EXPENSES: "Expenses",
    RecordCategory.SALARIES: "Salaries",
}


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class MigrationOrchestrator:
    """
    Orchestrates one full import run.

    Flow:
    1. Probe -> one-cell read of the revenue sheet
    2. Fetch -> read a category's sheet (tagged ok / empty / failed)
    3. Reconcile -> every row, in order, via ReconciliationEngine
    4. Combine -> MigrationStats for the whole run
    """

    def __init__(
        self,
        sheets_settings: GoogleSheetsSettings,
        source: TabularSourceInterface,
        storage: RecordStorageInterface,
        importer_settings: Optional[ImporterSettings] = None,
        logger: Optional[MigrationLogger] = None,
        clock: Clock = utc_now,
    ):
        self._sheets_settings = sheets_settings
        self._importer_settings = importer_settings or ImporterSettings()
        self._source = source
        self._storage = storage
        self._logger = logger or MigrationLogger()
        self._clock = clock
        self._engine = ReconciliationEngine(
            storage=storage,
            logger=self._logger,
            created_by=self._importer_settings.created_by,
        )

    @property
    def logger(self) -> MigrationLogger:
        return self._logger

    def sheet_name_for(self, category: RecordCategory) -> str:
        return {
            RecordCategory.REVENUE: self._sheets_settings.revenue_sheet_name,
            RecordCategory.EXPENSES: self._sheets_settings.expenses_sheet_name,
            RecordCategory.SALARIES: self._sheets_settings.salaries_sheet_name,
        }[category]

    async def check_connection(self) -> None:
        """
        Probe the source before touching any rows.

        Raises:
            SourceConnectionError: The run must abort
        """
        try:
            probe_range = await self._source.probe(self.sheet_name_for(RecordCategory.REVENUE))
        except SourceConnectionError as e:
            self._logger.run_aborted(str(e))
            raise
        self._logger.source_connected(probe_range)

    async def migrate_category(self, category: RecordCategory) -> CategoryStats:
        """Fetch one category's sheet and reconcile its rows."""
        sheet_name = self.sheet_name_for(category)
        result = await self._source.fetch_rows(sheet_name, self._sheets_settings.cell_range)

        if result.status == FetchStatus.FAILED:
            self._logger.sheet_fetch_failed(category.value, sheet_name, result.error or "unknown error")
            return CategoryStats(category=category)

        if result.status == FetchStatus.EMPTY:
            self._logger.sheet_empty(category.value, sheet_name)
            return CategoryStats(category=category)

        self._logger.sheet_fetched(category.value, sheet_name, result.row_count)
        return await self._engine.migrate_rows(category, result.rows())

    async def run(self) -> MigrationStats:
        """
        Run the full import.

        Returns:
            Combined counters for all three categories

        Raises:
            SourceConnectionError: If the spreadsheet cannot be reached
        """
        started_at = self._clock()
        self._logger.run_started(self._source.source_id, started_at)

        await self.check_connection()

        results = []
        for category in RecordCategory:
            results.append(await self.migrate_category(category))

        stats = MigrationStats.combine(results)

        duration = (self._clock() - started_at).total_seconds()
        self._logger.run_completed(
            {
                "total": stats.total_records,
                "success": stats.total_success,
                "errors": stats.total_errors,
                "skipped": stats.total_skipped,
            },
            duration,
        )
        return stats

    def summary(self, stats: MigrationStats) -> str:
        return format_summary(stats, self._importer_settings.low_success_rate_percent)


def format_summary(stats: MigrationStats, low_success_rate_percent: float = 90.0) -> str:
    """
    Render the end-of-run tally for the console.

    Always lists every category, so partial success stays visible.
    """
    lines = ["", "📊 Migration Summary:", "=" * 50]

    for category_stats in stats.categories():
        label = CATEGORY_LABELS[category_stats.category]
        lines.append(
            f"{label}: {category_stats.success}/{category_stats.total} "
            f"({category_stats.errors} errors, {category_stats.skipped} already imported)"
        )

    lines.append("=" * 50)
    lines.append(
        f"Total: {stats.total_success}/{stats.total_records} records migrated successfully"
    )

    if stats.succeeded:
        lines.append("")
        lines.append("✅ Migration completed successfully!")
        lines.append(f"📈 Success Rate: {stats.success_rate:.1f}%")
        if stats.success_rate < low_success_rate_percent:
            lines.append("")
            lines.append("⚠️ Some records failed to migrate. Check the log above for details.")
    else:
        lines.append("")
        lines.append("⚠️ No data was migrated. Please check your Google Sheets configuration.")

    return "\n".join(lines)
