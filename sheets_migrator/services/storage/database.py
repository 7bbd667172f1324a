"""
SQLAlchemy Storage Implementation

Writes records into the dashboard's `revenue_entries`,
`expense_entries` and `salary_entries` tables. Works with SQLite for
local runs and any other SQLAlchemy URL in production.

Tables are created on first connect if they do not exist yet.
"""

import asyncio
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import (
    Column,
    Date,
    DateTime,
    Float,
    Integer,
    String,
    create_engine,
)
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from sheets_migrator.config import DatabaseSettings
from sheets_migrator.models.records import (
    RECORD_TYPES,
    Record,
    RecordCategory,
    revenue_channel_fields,
)
from sheets_migrator.services.storage.interface import (
    RecordStorageInterface,
    StorageConnectionError,
    StorageError,
)


Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RevenueEntry(Base):
    __tablename__ = "revenue_entries"

    id = Column(Integer, primary_key=True, autoincrement=True)
    date = Column(Date, nullable=False, index=True)
    year = Column(Integer, nullable=False)
    month = Column(String(3), nullable=False)
    created_by = Column(Integer, nullable=False)
    created_at = Column(DateTime, default=_utcnow)

    def __repr__(self):
        return f"<RevenueEntry {self.date}>"


# One Float column per revenue channel
for _field in revenue_channel_fields():
    setattr(RevenueEntry, _field, Column(_field, Float, nullable=False, default=0.0))


class ExpenseEntry(Base):
    __tablename__ = "expense_entries"

    id = Column(Integer, primary_key=True, autoincrement=True)
    date = Column(Date, nullable=False, index=True)
    year = Column(Integer, nullable=False)
    month = Column(String(3), nullable=False)
    cost_type = Column(String(100), nullable=False)
    expense_type = Column(String(100), nullable=True)
    item_vendor = Column(String(200), nullable=True)
    amount = Column(Float, nullable=False, default=0.0)
    created_by = Column(Integer, nullable=False)
    created_at = Column(DateTime, default=_utcnow)

    def __repr__(self):
        return f"<ExpenseEntry {self.date} {self.cost_type} {self.amount}>"


class SalaryEntry(Base):
    __tablename__ = "salary_entries"

    id = Column(Integer, primary_key=True, autoincrement=True)
    date = Column(Date, nullable=False, index=True)
    year = Column(Integer, nullable=False)
    month = Column(String(3), nullable=False)
    resource_name = Column(String(100), nullable=False)
    amount = Column(Float, nullable=False, default=0.0)
    actual_paid_date = Column(Date, nullable=True)
    created_by = Column(Integer, nullable=False)
    created_at = Column(DateTime, default=_utcnow)

    def __repr__(self):
        return f"<SalaryEntry {self.date} {self.resource_name} {self.amount}>"


ENTRY_TABLES = {
    RecordCategory.REVENUE: RevenueEntry,
    RecordCategory.EXPENSES: ExpenseEntry,
    RecordCategory.SALARIES: SalaryEntry,
}


def create_db_engine(settings: DatabaseSettings) -> Engine:
    """Create an engine; SQLite connections may be used from worker threads."""
    kwargs: dict[str, Any] = {"echo": settings.echo}
    if settings.url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if settings.url in ("sqlite://", "sqlite:///:memory:"):
            # One shared connection, otherwise every thread gets its own empty database
            kwargs["poolclass"] = StaticPool
    return create_engine(settings.url, **kwargs)


class SQLAlchemyRecordStorage(RecordStorageInterface):
    """
    SQLAlchemy implementation of record storage.

    Each call opens a short session in a worker thread.
    """

    def __init__(self, engine: Engine):
        self._engine = engine
        self._session_factory = sessionmaker(
            autocommit=False, autoflush=False, bind=engine
        )
        self._initialized = False

    @classmethod
    def from_settings(cls, settings: DatabaseSettings) -> "SQLAlchemyRecordStorage":
        return cls(create_db_engine(settings))

    def _ensure_tables(self) -> None:
        if not self._initialized:
            try:
                Base.metadata.create_all(bind=self._engine)
            except SQLAlchemyError as e:
                raise StorageConnectionError(f"Failed to initialize database: {e}") from e
            self._initialized = True

    @staticmethod
    def _entry_to_record(category: RecordCategory, entry) -> Record:
        record_type = RECORD_TYPES[category]
        values = {
            name: getattr(entry, name)
            for name in record_type.model_fields
        }
        return record_type(**values)

    def _find_first(self, category: RecordCategory, criteria: dict[str, Any]) -> Optional[Record]:
        self._ensure_tables()
        table = ENTRY_TABLES[category]
        try:
            with self._session_factory() as session:
                entry = session.query(table).filter_by(**criteria).first()
                if entry is None:
                    return None
                return self._entry_to_record(category, entry)
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to look up {category.value} entry: {e}") from e

    def _create(self, record: Record) -> Record:
        self._ensure_tables()
        table = ENTRY_TABLES[record.category]
        try:
            with self._session_factory() as session:
                session.add(table(**record.to_row()))
                session.commit()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to save {record.category.value} entry: {e}") from e
        return record

    def _list_records(self, category: RecordCategory) -> list[Record]:
        self._ensure_tables()
        table = ENTRY_TABLES[category]
        try:
            with self._session_factory() as session:
                entries = session.query(table).order_by(table.date, table.id).all()
                return [self._entry_to_record(category, entry) for entry in entries]
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to list {category.value} entries: {e}") from e

    async def find_first(
        self,
        category: RecordCategory,
        criteria: dict[str, Any],
    ) -> Optional[Record]:
        return await asyncio.to_thread(self._find_first, category, criteria)

    async def create(self, record: Record) -> Record:
        return await asyncio.to_thread(self._create, record)

    async def list_records(self, category: RecordCategory) -> list[Record]:
        return await asyncio.to_thread(self._list_records, category)

    async def close(self) -> None:
        self._engine.dispose()
