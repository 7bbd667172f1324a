"""
Database Backup

    sheets-backup

Dumps the revenue, expense and salary tables to
<IMPORTER_BACKUP_DIR>/backup-YYYY-MM-DD.json. Running twice on the same
day overwrites that day's file.
"""

import asyncio
import json
import sys
from pathlib import Path

from sheets_migrator.config import get_settings
from sheets_migrator.models.records import RecordCategory
from sheets_migrator.orchestrator import CATEGORY_LABELS, Clock, utc_now
from sheets_migrator.services.storage import (
    RecordStorageInterface,
    SQLAlchemyRecordStorage,
    StorageError,
)


async def collect_backup(storage: RecordStorageInterface, clock: Clock = utc_now) -> dict:
    """Read every table into a JSON-ready document."""
    backup = {}
    for category in RecordCategory:
        records = await storage.list_records(category)
        backup[category.value] = [record.model_dump(mode="json") for record in records]
    backup["timestamp"] = clock().isoformat()
    return backup


async def create_backup(
    storage: RecordStorageInterface,
    backup_dir: Path,
    clock: Clock = utc_now,
) -> Path:
    """
    Write the backup file.

    Returns:
        Path of the file written
    """
    backup = await collect_backup(storage, clock)

    backup_dir.mkdir(parents=True, exist_ok=True)
    path = backup_dir / f"backup-{clock().date().isoformat()}.json"
    path.write_text(json.dumps(backup, indent=2), encoding="utf-8")

    print("✅ Backup created successfully!")
    print(f"📁 Location: {path}")
    print("📊 Records backed up:")
    for category in RecordCategory:
        print(f"   - {CATEGORY_LABELS[category]}: {len(backup[category.value])}")

    return path


async def _run(storage: RecordStorageInterface, backup_dir: Path) -> int:
    try:
        await create_backup(storage, backup_dir)
    except (StorageError, OSError) as e:
        print(f"❌ Backup failed: {e}", file=sys.stderr)
        return 1
    finally:
        await storage.close()
    return 0


def main() -> int:
    settings = get_settings()
    storage = SQLAlchemyRecordStorage.from_settings(settings.database)
    return asyncio.run(_run(storage, Path(settings.importer.backup_dir)))


if __name__ == "__main__":
    sys.exit(main())
