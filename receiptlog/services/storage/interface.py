"""
Abstract Record Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Keep receipts in SQLite by default
2. Use in-memory storage for tests and throwaway sessions
3. Keep the entry workflow decoupled from storage implementation

The interface is intentionally small: create, commit, list, get, delete.
Committing a record whose id is already stored replaces it (upsert);
there is no partial update of individual fields.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Callable, Optional
from uuid import UUID

from receiptlog.models.receipt import ReceiptRecord, utc_now


Clock = Callable[[], datetime]


class RecordStoreInterface(ABC):
    """
    Abstract interface for receipt record storage.

    Any storage implementation must implement the abstract methods.
    `create_record` is shared: allocating a record never touches storage.
    """

    def __init__(self, clock: Optional[Clock] = None):
        """
        Args:
            clock: Source of creation timestamps. Defaults to the UTC wall clock.
        """
        self._clock = clock or utc_now

    def create_record(self) -> ReceiptRecord:
        """
        Allocate a new pending record.

        The record has a fresh id and the current timestamp; amount and
        image are unset. It is NOT persisted until committed.
        """
        return ReceiptRecord(timestamp=self._clock())

    @abstractmethod
    async def commit_record(self, record: ReceiptRecord) -> bool:
        """
        Persist a record.

        Inserts the record, or replaces a stored record with the same id.

        Args:
            record: The record to persist; its amount must be set

        Returns:
            True if persisted

        Raises:
            IncompleteRecordError: If the record has no amount
            PersistenceError: If the storage write fails
        """
        pass

    @abstractmethod
    async def list_records(self) -> list[ReceiptRecord]:
        """
        List all committed records.

        Returns:
            Records ordered by ascending timestamp; equal timestamps keep
            the order in which they were committed
        """
        pass

    @abstractmethod
    async def get_record(self, record_id: UUID) -> Optional[ReceiptRecord]:
        """
        Retrieve a record by its ID.

        Returns:
            The record if found, None otherwise
        """
        pass

    @abstractmethod
    async def delete_record(self, record_id: UUID) -> bool:
        """
        Delete a record by ID.

        Args:
            record_id: The record's unique identifier

        Returns:
            True if a record was deleted, False if no record has that id

        Raises:
            PersistenceError: If the storage write fails
        """
        pass

    async def count_records(self) -> int:
        """Number of committed records."""
        return len(await self.list_records())


def ensure_committable(record: ReceiptRecord) -> None:
    """Reject records that may not enter the durable collection."""
    if not record.is_committable:
        raise IncompleteRecordError(
            f"Record {record.id} has no amount and cannot be committed"
        )


def sort_by_timestamp(records: list[ReceiptRecord]) -> list[ReceiptRecord]:
    """Stable ascending sort by timestamp."""
    return sorted(records, key=lambda r: r.timestamp)


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class PersistenceError(StorageError):
    """A storage write (commit or delete) failed."""
    pass


class IncompleteRecordError(StorageError):
    """Attempted to commit a record without an amount."""
    pass
