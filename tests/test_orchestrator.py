"""Integration tests for the full import run (fake source, in-memory storage)."""

import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from conftest import StaticTabularSource
from sheets_migrator.audit import MigrationLogger
from sheets_migrator.config import get_settings
from sheets_migrator.main import EXIT_FATAL, EXIT_OK, main, run_migration
from sheets_migrator.models.events import MigrationEventType
from sheets_migrator.models.records import RecordCategory
from sheets_migrator.models.stats import CategoryStats, MigrationStats
from sheets_migrator.orchestrator import MigrationOrchestrator, format_summary
from sheets_migrator.services.sheets import SourceConnectionError


class FakeClock:
    """Advances one second per call."""

    def __init__(self):
        self.now = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self):
        current = self.now
        self.now += timedelta(seconds=1)
        return current


@pytest.fixture
def workbook(expenses_grid):
    return {
        "Net Sale": [
            ["Column 1", "Card", "DD", "DD Fees"],
            ["1/1/2024", "$500.00", "120", "18"],
            ["1/2/2024", "$450.00", "", ""],
        ],
        "Expenses": expenses_grid,
        "Salaries": [
            ["Pay Period", "Resource Name", "Amount", "Actual Paid Date"],
            ["1/15/2024", "Ana", "1,500", "1/16/2024"],
        ],
    }


def _orchestrator(sheets_settings, source, storage, logger=None, clock=None):
    return MigrationOrchestrator(
        sheets_settings=sheets_settings,
        source=source,
        storage=storage,
        logger=logger or MigrationLogger(),
        clock=clock or FakeClock(),
    )


class TestMigrationRun:
    """Tests for MigrationOrchestrator.run."""

    def test_full_run(self, sheets_settings, storage, workbook):
        source = StaticTabularSource(workbook)
        stats = asyncio.run(_orchestrator(sheets_settings, source, storage).run())

        assert stats.revenue.as_counts() == {"total": 2, "success": 2, "errors": 0}
        assert stats.expenses.as_counts() == {"total": 2, "success": 1, "errors": 1}
        assert stats.salaries.as_counts() == {"total": 1, "success": 1, "errors": 0}
        assert stats.total_success == 4
        assert stats.succeeded is True

    def test_categories_run_in_fixed_order(self, sheets_settings, storage, workbook):
        source = StaticTabularSource(workbook)
        logger = MigrationLogger()
        asyncio.run(_orchestrator(sheets_settings, source, storage, logger).run())

        assert source.fetched == ["Net Sale", "Expenses", "Salaries"]
        completed = logger.events_of(MigrationEventType.CATEGORY_COMPLETED)
        assert [e.category for e in completed] == ["revenue", "expenses", "salaries"]
        assert logger.events[0].event_type == MigrationEventType.RUN_STARTED
        assert logger.events[-1].event_type == MigrationEventType.RUN_COMPLETED

    def test_rerun_inserts_nothing(self, sheets_settings, storage, workbook):
        source = StaticTabularSource(workbook)
        asyncio.run(_orchestrator(sheets_settings, source, storage).run())
        counts = [asyncio.run(storage.count(c)) for c in RecordCategory]

        stats = asyncio.run(_orchestrator(sheets_settings, source, storage).run())

        assert stats.total_success == 0
        assert stats.total_skipped == 4
        assert stats.succeeded is False
        assert [asyncio.run(storage.count(c)) for c in RecordCategory] == counts

    def test_duration_uses_injected_clock(self, sheets_settings, storage, workbook):
        logger = MigrationLogger()
        asyncio.run(
            _orchestrator(sheets_settings, StaticTabularSource(workbook), storage, logger).run()
        )
        (completed,) = logger.events_of(MigrationEventType.RUN_COMPLETED)
        assert completed.details["duration_seconds"] == 1.0

    def test_unreachable_source_aborts_before_rows(self, sheets_settings, storage, workbook):
        source = StaticTabularSource(workbook, reachable=False)
        logger = MigrationLogger()

        with pytest.raises(SourceConnectionError):
            asyncio.run(_orchestrator(sheets_settings, source, storage, logger).run())

        assert source.fetched == []
        assert logger.events_of(MigrationEventType.RUN_ABORTED)

    def test_failed_fetch_is_not_fatal(self, sheets_settings, storage, workbook):
        source = StaticTabularSource(workbook, failing_sheets={"Expenses"})
        logger = MigrationLogger()

        stats = asyncio.run(_orchestrator(sheets_settings, source, storage, logger).run())

        assert stats.expenses.total == 0
        assert stats.salaries.success == 1
        (failed,) = logger.events_of(MigrationEventType.SHEET_FETCH_FAILED)
        assert failed.category == "expenses"
        assert not logger.events_of(MigrationEventType.SHEET_EMPTY)

    def test_empty_sheet_is_warning(self, sheets_settings, storage, workbook):
        workbook["Salaries"] = [["Pay Period", "Amount"]]
        logger = MigrationLogger()

        stats = asyncio.run(
            _orchestrator(sheets_settings, StaticTabularSource(workbook), storage, logger).run()
        )

        assert stats.salaries.total == 0
        (empty,) = logger.events_of(MigrationEventType.SHEET_EMPTY)
        assert empty.category == "salaries"

    def test_custom_sheet_names(self, storage, workbook):
        from sheets_migrator.config import GoogleSheetsSettings

        settings = GoogleSheetsSettings(
            spreadsheet_id="x", api_key="y", revenue_sheet_name="Sales 2024"
        )
        workbook["Sales 2024"] = workbook.pop("Net Sale")
        source = StaticTabularSource(workbook)

        stats = asyncio.run(_orchestrator(settings, source, storage).run())

        assert source.fetched[0] == "Sales 2024"
        assert stats.revenue.success == 2


class TestSummary:
    """Tests for format_summary."""

    def test_lists_every_category(self):
        stats = MigrationStats.combine([
            CategoryStats(category=RecordCategory.REVENUE, total=10, success=10),
            CategoryStats(category=RecordCategory.EXPENSES, total=2, success=1, errors=1),
            CategoryStats(category=RecordCategory.SALARIES),
        ])
        summary = format_summary(stats)

        assert "Revenue: 10/10 (0 errors, 0 already imported)" in summary
        assert "Expenses: 1/2 (1 errors, 0 already imported)" in summary
        assert "Salaries: 0/0" in summary
        assert "Total: 11/12" in summary
        assert "Success Rate: 91.7%" in summary
        assert "Some records failed" not in summary

    def test_low_success_rate_warning(self):
        stats = MigrationStats.combine([
            CategoryStats(category=RecordCategory.EXPENSES, total=4, success=1, errors=3),
        ])
        assert "Some records failed to migrate" in format_summary(stats)

    def test_nothing_migrated_warning(self):
        assert "No data was migrated" in format_summary(MigrationStats())


class TestRunMigration:
    """Tests for the entry point's async runner."""

    def test_success_exit_and_storage_closed(self, sheets_settings, storage, workbook, capsys):
        code = asyncio.run(run_migration(sheets_settings, StaticTabularSource(workbook), storage))

        assert code == EXIT_OK
        assert storage.closed is True
        assert "Migration Summary" in capsys.readouterr().out

    def test_nothing_new_still_exits_ok(self, sheets_settings, storage, capsys):
        code = asyncio.run(run_migration(sheets_settings, StaticTabularSource({}), storage))

        assert code == EXIT_OK
        assert "No data was migrated" in capsys.readouterr().out

    def test_unreachable_source_exits_fatal_and_closes(self, sheets_settings, storage, capsys):
        source = StaticTabularSource(reachable=False)

        code = asyncio.run(run_migration(sheets_settings, source, storage))

        assert code == EXIT_FATAL
        assert storage.closed is True
        assert "Migration failed" in capsys.readouterr().err


class TestMain:
    """Tests for the sheets-migrate process entry point."""

    @pytest.fixture(autouse=True)
    def empty_environment(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        for name in (
            "GOOGLE_SHEETS_SPREADSHEET_ID",
            "GOOGLE_SHEETS_API_KEY",
            "IMPORTER_LOG_FORMAT",
        ):
            monkeypatch.delenv(name, raising=False)
        get_settings.cache_clear()
        yield
        get_settings.cache_clear()

    def test_missing_sheets_config_is_fatal(self, capsys):
        assert main() == EXIT_FATAL

        err = capsys.readouterr().err
        assert "GOOGLE_SHEETS_SPREADSHEET_ID" in err
        assert "GOOGLE_SHEETS_API_KEY" in err

    def test_invalid_importer_config_is_fatal(self, monkeypatch, capsys):
        monkeypatch.setenv("IMPORTER_LOG_FORMAT", "xml")

        assert main() == EXIT_FATAL
        assert "Invalid importer configuration" in capsys.readouterr().err
