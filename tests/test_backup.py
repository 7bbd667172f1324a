"""Tests for the database backup command."""

import asyncio
import json
from datetime import date, datetime, timezone

from sheets_migrator.backup import _run, collect_backup, create_backup
from sheets_migrator.models.records import ExpenseRecord, RevenueRecord, SalaryRecord
from sheets_migrator.services.storage import InMemoryRecordStorage, StorageError


def fixed_clock():
    return datetime(2024, 7, 4, 9, 30, tzinfo=timezone.utc)


def _seeded_storage():
    storage = InMemoryRecordStorage()

    async def seed():
        await storage.create(RevenueRecord(date=date(2024, 1, 1), card=500))
        await storage.create(ExpenseRecord(date=date(2024, 1, 5), cost_type="Rent", amount=1200))
        await storage.create(ExpenseRecord(date=date(2024, 1, 6), cost_type="Gas", amount=40))
        await storage.create(
            SalaryRecord(date=date(2024, 1, 15), resource_name="Ana", amount=1500)
        )

    asyncio.run(seed())
    return storage


class TestBackup:
    def test_collect_backup(self):
        backup = asyncio.run(collect_backup(_seeded_storage(), fixed_clock))

        assert len(backup["revenue"]) == 1
        assert len(backup["expenses"]) == 2
        assert len(backup["salaries"]) == 1
        assert backup["revenue"][0]["date"] == "2024-01-01"
        assert backup["timestamp"] == "2024-07-04T09:30:00+00:00"

    def test_create_backup_writes_dated_file(self, tmp_path, capsys):
        path = asyncio.run(create_backup(_seeded_storage(), tmp_path / "backups", fixed_clock))

        assert path == tmp_path / "backups" / "backup-2024-07-04.json"
        document = json.loads(path.read_text(encoding="utf-8"))
        assert document["expenses"][0]["cost_type"] == "Rent"
        assert document["salaries"][0]["resource_name"] == "Ana"
        assert "Expenses: 2" in capsys.readouterr().out

    def test_storage_failure_exit_code(self, tmp_path, capsys):
        class BrokenStorage(InMemoryRecordStorage):
            async def list_records(self, category):
                raise StorageError("no such table")

        storage = BrokenStorage()

        assert asyncio.run(_run(storage, tmp_path)) == 1
        assert storage.closed is True
        assert "Backup failed" in capsys.readouterr().err
