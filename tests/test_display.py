"""Tests for display formatting."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from receiptlog.config import AppSettings
from receiptlog.display import (
    format_amount,
    format_timestamp,
    record_label,
    record_summary,
    total_title,
)
from receiptlog.models.receipt import ReceiptRecord


# Mid-month, mid-day: the same date in every local timezone
TIMESTAMP = datetime(2026, 7, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(currency_symbol="£", timestamp_format="%Y-%m-%d")


class TestFormatAmount:

    @pytest.mark.parametrize("amount,expected", [
        ("12.5", "£12.50"),
        ("0", "£0.00"),
        ("3", "£3.00"),
        ("1234.567", "£1234.57"),
        ("-3.00", "£-3.00"),
    ])
    def test_two_decimals(self, settings, amount, expected):
        assert format_amount(Decimal(amount), settings) == expected

    def test_total_title(self, settings):
        assert total_title(Decimal("15.25"), settings) == "Total: £15.25"

    def test_other_currency(self):
        settings = AppSettings(currency_symbol="$")
        assert format_amount(Decimal("1"), settings) == "$1.00"


class TestRecordText:

    def test_format_timestamp(self, settings):
        assert format_timestamp(TIMESTAMP, settings) == "2026-07-15"

    def test_summary(self, settings):
        record = ReceiptRecord(timestamp=TIMESTAMP, amount=Decimal("12.5"))
        assert record_summary(record, settings) == "Item at 2026-07-15 for £12.50"

    def test_summary_needs_amount(self, settings):
        with pytest.raises(ValueError):
            record_summary(ReceiptRecord(timestamp=TIMESTAMP), settings)

    def test_label_without_photo(self, settings):
        record = ReceiptRecord(timestamp=TIMESTAMP, amount=Decimal("1"))
        assert record_label(record, settings) == "2026-07-15"

    def test_label_marks_photo(self, settings):
        record = ReceiptRecord(timestamp=TIMESTAMP, amount=Decimal("1"), image=b"jpeg")
        label = record_label(record, settings)
        assert label.startswith("2026-07-15")
        assert "📷" in label
