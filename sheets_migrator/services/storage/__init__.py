"""
Storage Services Package

Provides the abstract storage interface and concrete implementations.
The importer only sees RecordStorageInterface.
"""

from sheets_migrator.services.storage.interface import (
    RecordStorageInterface,
    StorageConnectionError,
    StorageError,
)
from sheets_migrator.services.storage.memory import InMemoryRecordStorage
from sheets_migrator.services.storage.database import (
    ENTRY_TABLES,
    SQLAlchemyRecordStorage,
    create_db_engine,
)

__all__ = [
    # Interface
    "RecordStorageInterface",
    # Exceptions
    "StorageConnectionError",
    "StorageError",
    # Implementations
    "ENTRY_TABLES",
    "InMemoryRecordStorage",
    "SQLAlchemyRecordStorage",
    "create_db_engine",
]
