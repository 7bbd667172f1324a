"""
Migration Event Models

Every step of an import run is described by a MigrationEvent and written
to the structured log. A run's events share one correlation id, so a
single import can be pulled out of a busy log.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class MigrationEventType(str, Enum):
    """Types of events emitted during a run."""
    # Run lifecycle
    RUN_STARTED = "run_started"
    RUN_COMPLETED = "run_completed"
    RUN_ABORTED = "run_aborted"

    # Source
    SOURCE_CONNECTED = "source_connected"
    SHEET_FETCHED = "sheet_fetched"
    SHEET_EMPTY = "sheet_empty"
    SHEET_FETCH_FAILED = "sheet_fetch_failed"

    # Rows
    ROW_REJECTED = "row_rejected"
    ROW_SKIPPED = "row_skipped"
    ROW_INSERTED = "row_inserted"
    ROW_FAILED = "row_failed"
    ROW_BLANK = "row_blank"

    CATEGORY_COMPLETED = "category_completed"


class EventSeverity(str, Enum):
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class MigrationEvent(BaseModel):
    """A single structured log event."""

    event_id: UUID = Field(default_factory=uuid4)
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )
    event_type: MigrationEventType
    severity: EventSeverity = EventSeverity.INFO
    category: Optional[str] = Field(
        default=None,
        description="Record category the event belongs to"
    )
    correlation_id: Optional[UUID] = None
    description: str = Field(..., max_length=500)
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """Flatten into keyword arguments for the structured logger."""
        log = {
            "event_id": str(self.event_id),
            "event_type": self.event_type.value,
            "description": self.description,
        }
        if self.category:
            log["category"] = self.category
        if self.correlation_id:
            log["correlation_id"] = str(self.correlation_id)
        if self.details:
            log["details"] = self.details
        if self.error_message:
            log["error"] = self.error_message
        return log


def _row_context(row_number: int, row: dict) -> dict:
    return {"row_number": row_number, "row": dict(row)}


class MigrationEventBuilder:
    """
    Helper class to build migration events with common patterns.

    Usage:
        event = MigrationEventBuilder.row_inserted("expenses", 3, "2024-01-05", run_id)
    """

    @staticmethod
    def run_started(
        spreadsheet_id: str,
        started_at: datetime,
        correlation_id: UUID,
    ) -> MigrationEvent:
        return MigrationEvent(
            event_type=MigrationEventType.RUN_STARTED,
            correlation_id=correlation_id,
            description="Starting Google Sheets to database migration",
            details={
                "spreadsheet_id": spreadsheet_id,
                "started_at": started_at.isoformat(),
            },
        )

    @staticmethod
    def source_connected(probe_range: str, correlation_id: UUID) -> MigrationEvent:
        return MigrationEvent(
            event_type=MigrationEventType.SOURCE_CONNECTED,
            correlation_id=correlation_id,
            description="Google Sheets connection successful",
            details={"probe_range": probe_range},
        )

    @staticmethod
    def run_aborted(error_message: str, correlation_id: UUID) -> MigrationEvent:
        return MigrationEvent(
            event_type=MigrationEventType.RUN_ABORTED,
            severity=EventSeverity.ERROR,
            correlation_id=correlation_id,
            description="Migration aborted before any rows were processed",
            error_message=error_message,
        )

    @staticmethod
    def sheet_fetched(
        category: str,
        sheet_name: str,
        row_count: int,
        correlation_id: UUID,
    ) -> MigrationEvent:
        return MigrationEvent(
            event_type=MigrationEventType.SHEET_FETCHED,
            category=category,
            correlation_id=correlation_id,
            description=f"Fetched {row_count} rows from '{sheet_name}'",
            details={"sheet_name": sheet_name, "row_count": row_count},
        )

    @staticmethod
    def sheet_empty(category: str, sheet_name: str, correlation_id: UUID) -> MigrationEvent:
        return MigrationEvent(
            event_type=MigrationEventType.SHEET_EMPTY,
            severity=EventSeverity.WARNING,
            category=category,
            correlation_id=correlation_id,
            description=f"No data found in '{sheet_name}'",
            details={"sheet_name": sheet_name},
        )

    @staticmethod
    def sheet_fetch_failed(
        category: str,
        sheet_name: str,
        error_message: str,
        correlation_id: UUID,
    ) -> MigrationEvent:
        return MigrationEvent(
            event_type=MigrationEventType.SHEET_FETCH_FAILED,
            severity=EventSeverity.ERROR,
            category=category,
            correlation_id=correlation_id,
            description=f"Could not fetch '{sheet_name}'",
            details={"sheet_name": sheet_name},
            error_message=error_message,
        )

    @staticmethod
    def row_rejected(
        category: str,
        row_number: int,
        row: dict,
        reason: str,
        correlation_id: UUID,
    ) -> MigrationEvent:
        return MigrationEvent(
            event_type=MigrationEventType.ROW_REJECTED,
            severity=EventSeverity.WARNING,
            category=category,
            correlation_id=correlation_id,
            description=f"Skipping {category} row {row_number}: {reason}",
            details=_row_context(row_number, row),
        )

    @staticmethod
    def row_skipped(
        category: str,
        row_number: int,
        natural_key: dict,
        correlation_id: UUID,
    ) -> MigrationEvent:
        return MigrationEvent(
            event_type=MigrationEventType.ROW_SKIPPED,
            category=category,
            correlation_id=correlation_id,
            description=f"Skipping existing {category} entry (row {row_number})",
            details={
                "row_number": row_number,
                "key": {k: str(v) for k, v in natural_key.items()},
            },
        )

    @staticmethod
    def row_blank(
        category: str,
        row_number: int,
        correlation_id: UUID,
    ) -> MigrationEvent:
        return MigrationEvent(
            event_type=MigrationEventType.ROW_BLANK,
            severity=EventSeverity.DEBUG,
            category=category,
            correlation_id=correlation_id,
            description=f"Ignoring blank {category} row {row_number}",
            details={"row_number": row_number},
        )

    @staticmethod
    def row_inserted(
        category: str,
        row_number: int,
        record_date: str,
        correlation_id: UUID,
    ) -> MigrationEvent:
        return MigrationEvent(
            event_type=MigrationEventType.ROW_INSERTED,
            category=category,
            correlation_id=correlation_id,
            description=f"Migrated {category} entry for {record_date}",
            details={"row_number": row_number, "date": record_date},
        )

    @staticmethod
    def row_failed(
        category: str,
        row_number: int,
        row: dict,
        error_message: str,
        correlation_id: UUID,
    ) -> MigrationEvent:
        return MigrationEvent(
            event_type=MigrationEventType.ROW_FAILED,
            severity=EventSeverity.ERROR,
            category=category,
            correlation_id=correlation_id,
            description=f"Error migrating {category} row {row_number}",
            details=_row_context(row_number, row),
            error_message=error_message,
        )

    @staticmethod
    def category_completed(
        category: str,
        counts: dict,
        correlation_id: UUID,
    ) -> MigrationEvent:
        return MigrationEvent(
            event_type=MigrationEventType.CATEGORY_COMPLETED,
            category=category,
            correlation_id=correlation_id,
            description=f"Finished {category} migration",
            details=counts,
        )

    @staticmethod
    def run_completed(
        totals: dict,
        duration_seconds: float,
        correlation_id: UUID,
    ) -> MigrationEvent:
        severity = EventSeverity.INFO if totals.get("success") else EventSeverity.WARNING
        return MigrationEvent(
            event_type=MigrationEventType.RUN_COMPLETED,
            severity=severity,
            correlation_id=correlation_id,
            description="Migration finished",
            details={**totals, "duration_seconds": round(duration_seconds, 3)},
        )
