"""
Data Models Package

Pydantic models for the records the importer writes, the statistics it
reports and the events it logs.
"""

from sheets_migrator.models.records import (
    RECORD_TYPES,
    SYSTEM_USER_ID,
    DatedRecord,
    ExpenseRecord,
    Record,
    RecordCategory,
    RevenueRecord,
    SalaryRecord,
    revenue_channel_fields,
)
from sheets_migrator.models.stats import (
    CategoryStats,
    MigrationStats,
    RowOutcome,
)
from sheets_migrator.models.events import (
    EventSeverity,
    MigrationEvent,
    MigrationEventBuilder,
    MigrationEventType,
)

__all__ = [
    # Records
    "RECORD_TYPES",
    "SYSTEM_USER_ID",
    "DatedRecord",
    "ExpenseRecord",
    "Record",
    "RecordCategory",
    "RevenueRecord",
    "SalaryRecord",
    "revenue_channel_fields",
    # Stats
    "CategoryStats",
    "MigrationStats",
    "RowOutcome",
    # Events
    "EventSeverity",
    "MigrationEvent",
    "MigrationEventBuilder",
    "MigrationEventType",
]
