"""
In-Memory Record Storage

Keeps receipts in a dict for the lifetime of the process.
Used by the test-suite and by the "memory" backend setting.
"""

from typing import Optional
from uuid import UUID

from receiptlog.models.receipt import ReceiptRecord
from receiptlog.services.storage.interface import (
    Clock,
    RecordStoreInterface,
    ensure_committable,
    sort_by_timestamp,
)


class InMemoryRecordStore(RecordStoreInterface):
    """Dict-backed implementation of record storage."""

    def __init__(self, clock: Optional[Clock] = None):
        super().__init__(clock)
        # Insertion ordered; replacing a key keeps its original position
        self._records: dict[UUID, ReceiptRecord] = {}

    async def commit_record(self, record: ReceiptRecord) -> bool:
        ensure_committable(record)
        self._records[record.id] = record
        return True

    async def list_records(self) -> list[ReceiptRecord]:
        return sort_by_timestamp(list(self._records.values()))

    async def get_record(self, record_id: UUID) -> Optional[ReceiptRecord]:
        return self._records.get(record_id)

    async def delete_record(self, record_id: UUID) -> bool:
        return self._records.pop(record_id, None) is not None

    async def count_records(self) -> int:
        return len(self._records)
