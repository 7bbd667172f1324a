"""Services package."""

from sheets_migrator.services.sheets import (
    FetchStatus,
    GoogleSheetsClient,
    GoogleSheetsSource,
    SheetFetchResult,
    SourceConnectionError,
    SourceError,
    TabularSourceInterface,
)
from sheets_migrator.services.storage import (
    InMemoryRecordStorage,
    RecordStorageInterface,
    SQLAlchemyRecordStorage,
    StorageConnectionError,
    StorageError,
)

__all__ = [
    # Sheet source
    "FetchStatus",
    "GoogleSheetsClient",
    "GoogleSheetsSource",
    "SheetFetchResult",
    "SourceConnectionError",
    "SourceError",
    "TabularSourceInterface",
    # Storage
    "InMemoryRecordStorage",
    "RecordStorageInterface",
    "SQLAlchemyRecordStorage",
    "StorageConnectionError",
    "StorageError",
]
