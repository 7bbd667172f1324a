"""
Migration Logger

DESIGN DECISION: Every step of an import run is logged as a structured
event. This provides:
1. A readable console trail while the import runs
2. JSON output for log shipping (IMPORTER_LOG_FORMAT=json)
3. Row-level context for every rejected or failed row

Logging never raises into the import; a broken renderer must not cost
us a row.
"""

import logging
import sys
from typing import Optional
from uuid import UUID, uuid4

import structlog

from sheets_migrator.models.events import (
    EventSeverity,
    MigrationEvent,
    MigrationEventBuilder,
)


def configure_logging(log_format: str = "console", log_level: str = "INFO") -> None:
    """
    Configure structlog for the process.

    Called once by the entry points. Tests leave structlog at its defaults.
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper(), logging.INFO),
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if log_format == "json"
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


class MigrationLogger:
    """
    Central logging service for an import run.

    Keeps the run's correlation id and the list of emitted events, which
    the tests use to check log ordering.
    """

    def __init__(self, correlation_id: Optional[UUID] = None):
        self.correlation_id = correlation_id or create_correlation_id()
        self.events: list[MigrationEvent] = []
        self._logger = structlog.get_logger("sheets_migrator")

    def log(self, event: MigrationEvent) -> None:
        """Write an event to the structured log."""
        self.events.append(event)
        log_dict = event.to_log_dict()
        event_name = log_dict.pop("event_type")

        try:
            if event.severity == EventSeverity.ERROR:
                self._logger.error(event_name, **log_dict)
            elif event.severity == EventSeverity.WARNING:
                self._logger.warning(event_name, **log_dict)
            elif event.severity == EventSeverity.DEBUG:
                self._logger.debug(event_name, **log_dict)
            else:
                self._logger.info(event_name, **log_dict)
        except Exception as e:
            print(f"WARNING: Failed to write log event {event_name}: {e}", file=sys.stderr)

    def events_of(self, event_type) -> list[MigrationEvent]:
        return [e for e in self.events if e.event_type == event_type]

    def run_started(self, spreadsheet_id: str, started_at) -> None:
        self.log(MigrationEventBuilder.run_started(
            spreadsheet_id=spreadsheet_id,
            started_at=started_at,
            correlation_id=self.correlation_id,
        ))

    def source_connected(self, probe_range: str) -> None:
        self.log(MigrationEventBuilder.source_connected(
            probe_range=probe_range,
            correlation_id=self.correlation_id,
        ))

    def run_aborted(self, error_message: str) -> None:
        self.log(MigrationEventBuilder.run_aborted(
            error_message=error_message,
            correlation_id=self.correlation_id,
        ))

    def sheet_fetched(self, category: str, sheet_name: str, row_count: int) -> None:
        self.log(MigrationEventBuilder.sheet_fetched(
            category=category,
            sheet_name=sheet_name,
            row_count=row_count,
            correlation_id=self.correlation_id,
        ))

    def sheet_empty(self, category: str, sheet_name: str) -> None:
        self.log(MigrationEventBuilder.sheet_empty(
            category=category,
            sheet_name=sheet_name,
            correlation_id=self.correlation_id,
        ))

    def sheet_fetch_failed(self, category: str, sheet_name: str, error_message: str) -> None:
        self.log(MigrationEventBuilder.sheet_fetch_failed(
            category=category,
            sheet_name=sheet_name,
            error_message=error_message,
            correlation_id=self.correlation_id,
        ))

    def row_rejected(self, category: str, row_number: int, row: dict, reason: str) -> None:
        self.log(MigrationEventBuilder.row_rejected(
            category=category,
            row_number=row_number,
            row=row,
            reason=reason,
            correlation_id=self.correlation_id,
        ))

    def row_skipped(self, category: str, row_number: int, natural_key: dict) -> None:
        self.log(MigrationEventBuilder.row_skipped(
            category=category,
            row_number=row_number,
            natural_key=natural_key,
            correlation_id=self.correlation_id,
        ))

    def row_blank(self, category: str, row_number: int) -> None:
        self.log(MigrationEventBuilder.row_blank(
            category=category,
            row_number=row_number,
            correlation_id=self.correlation_id,
        ))

    def row_inserted(self, category: str, row_number: int, record_date: str) -> None:
        self.log(MigrationEventBuilder.row_inserted(
            category=category,
            row_number=row_number,
            record_date=record_date,
            correlation_id=self.correlation_id,
        ))

    def row_failed(self, category: str, row_number: int, row: dict, error_message: str) -> None:
        self.log(MigrationEventBuilder.row_failed(
            category=category,
            row_number=row_number,
            row=row,
            error_message=error_message,
            correlation_id=self.correlation_id,
        ))

    def category_completed(self, category: str, counts: dict) -> None:
        self.log(MigrationEventBuilder.category_completed(
            category=category,
            counts=counts,
            correlation_id=self.correlation_id,
        ))

    def run_completed(self, totals: dict, duration_seconds: float) -> None:
        self.log(MigrationEventBuilder.run_completed(
            totals=totals,
            duration_seconds=duration_seconds,
            correlation_id=self.correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for one import run.

    Every event of the run carries it.
    """
    return uuid4()
