"""
Core Data Model for Receipt Log

A ReceiptRecord is one receipt entry: when it was logged, how much it was
for, and optionally the encoded photo of the paper receipt.

DESIGN DECISION: Records are immutable (frozen pydantic models).
The entry workflow fills in the amount and image by producing a copy,
so a record handed out by the store can never change underneath a caller.
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


class ReceiptRecord(BaseModel):
    """
    One receipt entry.

    A record is *pending* while `amount` is None and *committable*
    once an amount has been set. Only committable records are accepted
    by the record store.
    """
    model_config = ConfigDict(frozen=True)

    # Identity
    id: UUID = Field(
        default_factory=uuid4,
        description="Stable unique record ID"
    )
    timestamp: datetime = Field(
        default_factory=utc_now,
        description="When the entry was started (UTC)"
    )

    # Filled in on commit
    amount: Optional[Decimal] = Field(
        default=None,
        description="Amount in the configured currency"
    )
    image: Optional[bytes] = Field(
        default=None,
        repr=False,
        description="Encoded receipt photo; None means no photo attached"
    )

    @property
    def has_image(self) -> bool:
        return self.image is not None

    @property
    def is_committable(self) -> bool:
        """A record can be committed once its amount is set."""
        return self.amount is not None

    def with_fields(
        self,
        amount: Decimal,
        image: Optional[bytes] = None,
    ) -> "ReceiptRecord":
        """Return a copy carrying the given amount and image."""
        return self.model_copy(update={"amount": amount, "image": image})
