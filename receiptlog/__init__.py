"""
Receipt Log - Source Package

A small personal application for logging receipts: add an entry,
enter the amount, optionally photograph the receipt, and keep a
timestamped list with a running total.

DESIGN PRINCIPLES:
1. A record is saved only with an amount
2. The app never edits a committed record; it can only be deleted
3. Bad input and unreadable photos never crash the entry flow
4. Storage failures are reported, never fatal
5. Storage layer is swappable
"""

__version__ = "1.0.0"
