"""
Sheets Migrator - Command Line Entry Point

    sheets-migrate

Reads GOOGLE_SHEETS_SPREADSHEET_ID and GOOGLE_SHEETS_API_KEY (environment
or .env), imports the Net Sale / Expenses / Salaries sheets into the
database at DATABASE_URL and prints a summary.

Exit status:
    0  run completed (even if nothing new was imported)
    1  configuration missing or spreadsheet unreachable
"""

import asyncio
import sys
from typing import Optional

from pydantic import ValidationError

from sheets_migrator.audit import MigrationLogger, configure_logging
from sheets_migrator.config import (
    ConfigurationError,
    GoogleSheetsSettings,
    ImporterSettings,
    get_settings,
    load_sheets_settings,
)
from sheets_migrator.orchestrator import Clock, MigrationOrchestrator, utc_now
from sheets_migrator.services.sheets import (
    GoogleSheetsSource,
    SourceConnectionError,
    TabularSourceInterface,
)
from sheets_migrator.services.storage import (
    RecordStorageInterface,
    SQLAlchemyRecordStorage,
)


EXIT_OK = 0
EXIT_FATAL = 1


async def run_migration(
    sheets_settings: GoogleSheetsSettings,
    source: TabularSourceInterface,
    storage: RecordStorageInterface,
    importer_settings: Optional[ImporterSettings] = None,
    logger: Optional[MigrationLogger] = None,
    clock: Clock = utc_now,
) -> int:
    """
    Run one import and print the summary.

    Storage is always closed, whether the run finished or aborted.

    Returns:
        Process exit status
    """
    orchestrator = MigrationOrchestrator(
        sheets_settings=sheets_settings,
        source=source,
        storage=storage,
        importer_settings=importer_settings,
        logger=logger,
        clock=clock,
    )

    print("🚀 Starting Google Sheets to database migration...")
    print(f"📊 Source: {source.source_id}")

    try:
        stats = await orchestrator.run()
    except SourceConnectionError as e:
        print(f"❌ Migration failed: {e}", file=sys.stderr)
        return EXIT_FATAL
    finally:
        await storage.close()

    print(orchestrator.summary(stats))
    return EXIT_OK


def main() -> int:
    try:
        importer_settings = get_settings().importer
    except ValidationError as e:
        print(f"❌ Invalid importer configuration: {e}", file=sys.stderr)
        return EXIT_FATAL

    configure_logging(importer_settings.log_format, importer_settings.log_level)

    try:
        sheets_settings = load_sheets_settings()
    except ConfigurationError as e:
        print(f"❌ {e}", file=sys.stderr)
        return EXIT_FATAL

    storage = SQLAlchemyRecordStorage.from_settings(get_settings().database)
    source = GoogleSheetsSource.from_settings(sheets_settings)

    return asyncio.run(run_migration(
        sheets_settings=sheets_settings,
        source=source,
        storage=storage,
        importer_settings=importer_settings,
    ))


if __name__ == "__main__":
    sys.exit(main())
