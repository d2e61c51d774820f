"""
Totals

DESIGN DECISION: The total is recomputed from the full record list on
every request. No running total is cached, so it can never drift from
what is actually stored. At personal receipt-logging scale the sum is
trivially cheap.
"""

from decimal import Decimal
from typing import Iterable

from receiptlog.models.receipt import ReceiptRecord
from receiptlog.services.storage import RecordStoreInterface


def total_amount(records: Iterable[ReceiptRecord]) -> Decimal:
    """
    Sum the amounts of committed records.

    Raises:
        ValueError: If a record without an amount is included
    """
    total = Decimal("0")
    for record in records:
        if record.amount is None:
            raise ValueError(f"Record {record.id} has no amount")
        total += record.amount
    return total


class TotalAggregator:
    """Derives the total of everything currently in the record store."""

    def __init__(self, storage: RecordStoreInterface):
        self._storage = storage

    async def current_total(self) -> Decimal:
        return total_amount(await self._storage.list_records())
