"""
Data Models Package

This package contains the Pydantic models used in Receipt Log.
All data flowing through the system must conform to these schemas.
"""

from receiptlog.models.receipt import ReceiptRecord, utc_now
from receiptlog.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Receipt models
    "ReceiptRecord",
    "utc_now",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
