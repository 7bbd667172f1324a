"""Logging package."""

from sheets_migrator.audit.logger import (
    MigrationLogger,
    configure_logging,
    create_correlation_id,
)

__all__ = ["MigrationLogger", "configure_logging", "create_correlation_id"]
