"""Aggregate queries package."""

from receiptlog.queries.totals import TotalAggregator, total_amount

__all__ = ["TotalAggregator", "total_amount"]
