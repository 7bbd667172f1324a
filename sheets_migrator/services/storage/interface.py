"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Point the importer at SQLite locally and PostgreSQL in production
2. Use in-memory storage for testing
3. Keep reconciliation logic decoupled from the database

The interface is intentionally small. The importer only ever asks
"is there already a record with this key?" and "insert this record";
it never issues bulk or transactional operations.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

from sheets_migrator.models.records import Record, RecordCategory


class RecordStorageInterface(ABC):
    """
    Abstract interface for dashboard record storage.

    Any storage implementation must implement these methods.
    """

    @abstractmethod
    async def find_first(
        self,
        category: RecordCategory,
        criteria: dict[str, Any],
    ) -> Optional[Record]:
        """
        Find the first stored record whose fields equal `criteria`.

        Args:
            category: Which record family to search
            criteria: Field name -> value, usually a record's natural key

        Returns:
            The matching record if found, None otherwise

        Raises:
            StorageError: If the lookup fails
        """
        pass

    @abstractmethod
    async def create(self, record: Record) -> Record:
        """
        Insert a record.

        Returns:
            The stored record

        Raises:
            StorageError: If the insert fails
        """
        pass

    @abstractmethod
    async def list_records(self, category: RecordCategory) -> list[Record]:
        """
        Return every stored record of a category, oldest date first.

        Used by the backup command.
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release connections held by the storage backend."""
        pass

    async def count(self, category: RecordCategory) -> int:
        return len(await self.list_records(category))


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass
