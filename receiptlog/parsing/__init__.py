"""Input parsing package."""

from receiptlog.parsing.amount import AmountParser, InvalidAmountError, parse_amount

__all__ = ["AmountParser", "InvalidAmountError", "parse_amount"]
