"""Tests for the storage implementations."""

import asyncio
from datetime import date

import pytest

from sheets_migrator.config import DatabaseSettings
from sheets_migrator.models.records import (
    ExpenseRecord,
    RecordCategory,
    RevenueRecord,
    SalaryRecord,
)
from sheets_migrator.services.storage import (
    InMemoryRecordStorage,
    SQLAlchemyRecordStorage,
    StorageError,
)


def _memory_storage():
    return InMemoryRecordStorage()


def _sqlite_storage():
    return SQLAlchemyRecordStorage.from_settings(DatabaseSettings(url="sqlite://"))


@pytest.fixture(params=[_memory_storage, _sqlite_storage], ids=["memory", "sqlite"])
def any_storage(request):
    return request.param()


class TestStorageContract:
    """Both implementations honour the same find_first / create contract."""

    def test_find_first_empty(self, any_storage):
        record = ExpenseRecord(date=date(2024, 1, 5), cost_type="Rent", amount=1200)
        found = asyncio.run(any_storage.find_first(RecordCategory.EXPENSES, record.natural_key()))
        assert found is None

    def test_create_then_find(self, any_storage):
        record = ExpenseRecord(
            date=date(2024, 1, 5), cost_type="Rent", item_vendor="Landlord", amount=1200
        )

        async def scenario():
            await any_storage.create(record)
            return await any_storage.find_first(RecordCategory.EXPENSES, record.natural_key())

        found = asyncio.run(scenario())
        assert found == record

    def test_key_mismatch_not_found(self, any_storage):
        async def scenario():
            await any_storage.create(
                SalaryRecord(date=date(2024, 1, 5), resource_name="Ana", amount=900)
            )
            other = SalaryRecord(date=date(2024, 1, 5), resource_name="Ana", amount=950)
            return await any_storage.find_first(RecordCategory.SALARIES, other.natural_key())

        assert asyncio.run(scenario()) is None

    def test_categories_are_separate(self, any_storage):
        async def scenario():
            await any_storage.create(RevenueRecord(date=date(2024, 1, 5), card=10))
            key = {"date": date(2024, 1, 5), "year": 2024, "month": "Jan"}
            return (
                await any_storage.find_first(RecordCategory.REVENUE, key),
                await any_storage.find_first(RecordCategory.EXPENSES, key),
            )

        revenue, expense = asyncio.run(scenario())
        assert revenue.card == 10.0
        assert expense is None

    def test_list_records_sorted_by_date(self, any_storage):
        async def scenario():
            await any_storage.create(SalaryRecord(date=date(2024, 2, 1), resource_name="B"))
            await any_storage.create(
                SalaryRecord(
                    date=date(2024, 1, 1),
                    resource_name="A",
                    actual_paid_date=date(2024, 1, 3),
                )
            )
            return await any_storage.list_records(RecordCategory.SALARIES)

        records = asyncio.run(scenario())
        assert [r.resource_name for r in records] == ["A", "B"]
        assert records[0].actual_paid_date == date(2024, 1, 3)

    def test_count(self, any_storage):
        async def scenario():
            await any_storage.create(ExpenseRecord(date=date(2024, 1, 1)))
            return await any_storage.count(RecordCategory.EXPENSES)

        assert asyncio.run(scenario()) == 1


class TestInMemoryStorage:
    def test_fail_on_raises_storage_error(self):
        storage = InMemoryRecordStorage(fail_on=lambda record: record.amount < 0)
        with pytest.raises(StorageError):
            asyncio.run(storage.create(ExpenseRecord(date=date(2024, 1, 1), amount=-1)))

    def test_close(self):
        storage = InMemoryRecordStorage()
        asyncio.run(storage.close())
        assert storage.closed is True


class TestSQLAlchemyStorage:
    def test_revenue_round_trip_keeps_channels(self):
        storage = _sqlite_storage()
        record = RevenueRecord(date=date(2024, 3, 1), cash_in_report=100.5, ez_cater_fees=3.25)

        async def scenario():
            await storage.create(record)
            records = await storage.list_records(RecordCategory.REVENUE)
            await storage.close()
            return records

        (stored,) = asyncio.run(scenario())
        assert stored.cash_in_report == 100.5
        assert stored.ez_cater_fees == 3.25
        assert stored.month == "Mar"

    def test_database_error_wrapped(self):
        storage = _sqlite_storage()
        storage._initialized = True  # tables were never created

        with pytest.raises(StorageError):
            asyncio.run(storage.find_first(RecordCategory.EXPENSES, {"amount": 1.0}))
