"""
Amount Parsing

Turns what the user typed into the amount prompt into a Decimal.

ACCEPTED INPUT:
- The currency symbol anywhere in the text ("£12.50", "12.50£", "£ 12.50")
- Surrounding whitespace and newlines
- Plain decimal-point notation: "12", "12.5", ".5", "12.", "-3.00"

REJECTED INPUT:
- Empty text (after cleaning)
- Thousands separators ("1,000.00")
- Exponents, "inf", "nan" and anything else that is not a plain number

IMPORTANT: Parsing NEVER guesses. "1,50" is not read as 1.50.
"""

import re
from decimal import Decimal, InvalidOperation
from typing import Optional

from receiptlog.config import AppSettings, get_settings


# ASCII digits only
_DECIMAL_PATTERN = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)")


class InvalidAmountError(ValueError):
    """The entered text is not a valid amount."""

    def __init__(self, text: str, reason: str):
        self.text = text
        self.reason = reason
        super().__init__(f"Invalid amount {text!r}: {reason}")


class AmountParser:
    """
    Parses currency text entered by the user.

    The currency symbol and the negative-amount policy come from AppSettings.
    """

    def __init__(self, settings: Optional[AppSettings] = None):
        self._settings = settings or get_settings().app

    @property
    def currency_symbol(self) -> str:
        return self._settings.currency_symbol

    def clean(self, text: str) -> str:
        """Remove the currency symbol and surrounding whitespace."""
        return text.replace(self.currency_symbol, "").strip()

    def parse(self, text: str) -> Decimal:
        """
        Parse entered text into an amount.

        Raises:
            InvalidAmountError: If the cleaned text is not a plain decimal number,
                or is negative while negative amounts are rejected.
        """
        cleaned = self.clean(text)

        if not cleaned:
            raise InvalidAmountError(text, "no amount entered")

        if not _DECIMAL_PATTERN.fullmatch(cleaned):
            raise InvalidAmountError(text, "not a decimal number")

        try:
            amount = Decimal(cleaned)
        except InvalidOperation:
            raise InvalidAmountError(text, "not a decimal number")

        if amount < 0 and self._settings.reject_negative_amounts:
            raise InvalidAmountError(text, "negative amounts are not allowed")

        return amount


def parse_amount(text: str) -> Decimal:
    """Parse entered text using the configured settings."""
    return AmountParser().parse(text)
