"""
Display Formatting

Text shown on the receipt list and detail views.
Amounts are rendered as the currency symbol followed by two decimals
("£12.50"); timestamps in local time as short date + medium time.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from receiptlog.config import AppSettings, get_settings
from receiptlog.models.receipt import ReceiptRecord


NO_IMAGE_PLACEHOLDER = "No image available for this item."
AMOUNT_PROMPT_TITLE = "Enter GBP Amount"
AMOUNT_PROMPT_MESSAGE = "Please enter the amount in GBP and take a photo of the receipt"
AMOUNT_PLACEHOLDER = "£0.00"


def format_amount(amount: Decimal, settings: Optional[AppSettings] = None) -> str:
    """Render an amount with the currency symbol, e.g. '£12.50'."""
    settings = settings or get_settings().app
    return f"{settings.currency_symbol}{amount:.2f}"


def format_timestamp(timestamp: datetime, settings: Optional[AppSettings] = None) -> str:
    """Render a timestamp in local time."""
    settings = settings or get_settings().app
    return timestamp.astimezone().strftime(settings.timestamp_format)


def total_title(total: Decimal, settings: Optional[AppSettings] = None) -> str:
    return f"Total: {format_amount(total, settings)}"


def record_label(record: ReceiptRecord, settings: Optional[AppSettings] = None) -> str:
    """Short list-row label; a camera marker flags records with a photo."""
    label = format_timestamp(record.timestamp, settings)
    if record.has_image:
        label = f"{label}  📷"
    return label


def record_summary(record: ReceiptRecord, settings: Optional[AppSettings] = None) -> str:
    """Detail-view headline for a committed record."""
    if record.amount is None:
        raise ValueError(f"Record {record.id} has no amount")
    return (
        f"Item at {format_timestamp(record.timestamp, settings)} "
        f"for {format_amount(record.amount, settings)}"
    )
