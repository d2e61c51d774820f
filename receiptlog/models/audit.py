"""
Audit Models for Receipt Log

Every significant action in the system is recorded as an AuditEvent.
This provides:
1. Traceability of each receipt entry from "add" to commit or cancel
2. Debugging information when storage or image handling fails
3. A record of the silent rejections the entry prompt performs

DESIGN DECISION: Audit events are emitted, never edited.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from receiptlog.models.receipt import utc_now


class AuditEventType(str, Enum):
    """
    Types of events we audit.

    Every transition of the entry workflow has its own event type.
    """
    # Entry workflow
    ENTRY_STARTED = "entry_started"
    AMOUNT_REJECTED = "amount_rejected"
    ENTRY_CANCELLED = "entry_cancelled"

    # Photo capture
    PHOTO_CAPTURE_STARTED = "photo_capture_started"
    PHOTO_CAPTURED = "photo_captured"
    PHOTO_CAPTURE_DISMISSED = "photo_capture_dismissed"
    PHOTO_ENCODE_FAILED = "photo_encode_failed"
    IMAGE_DECODE_FAILED = "image_decode_failed"

    # Persistence
    RECORD_COMMITTED = "record_committed"
    RECORD_DELETED = "record_deleted"
    RECORD_NOT_FOUND = "record_not_found"
    PERSISTENCE_FAILED = "persistence_failed"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    One step of a receipt entry, a deletion, or a storage or image failure.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Event ID"
    )
    timestamp: datetime = Field(
        default_factory=utc_now,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="What happened"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Log level the event is emitted at"
    )

    # Context - which record is this about?
    record_id: Optional[UUID] = Field(
        default=None,
        description="ID of the receipt record this event relates to"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID shared by all events of one receipt entry"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Short human-readable summary"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Event-specific values such as the rejected text"
    )

    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="True when a tap or submit by the user caused it"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "record_id": str(self.record_id) if self.record_id else None,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.entry_started(record_id, correlation_id)
        event = AuditEventBuilder.record_committed(record_id, "12.50", False, correlation_id)
    """

    @staticmethod
    def entry_started(
        record_id: UUID,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ENTRY_STARTED,
            record_id=record_id,
            correlation_id=correlation_id,
            description="New receipt entry started",
            is_user_action=True,
        )

    @staticmethod
    def amount_rejected(
        record_id: UUID,
        text: str,
        reason: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.AMOUNT_REJECTED,
            severity=AuditSeverity.WARNING,
            record_id=record_id,
            correlation_id=correlation_id,
            description="Entered amount could not be parsed",
            details={
                "text": text,
                "reason": reason,
            },
            is_user_action=True,
        )

    @staticmethod
    def entry_cancelled(
        record_id: UUID,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ENTRY_CANCELLED,
            record_id=record_id,
            correlation_id=correlation_id,
            description="Receipt entry cancelled; pending record discarded",
            is_user_action=True,
        )

    @staticmethod
    def photo_capture_started(
        record_id: UUID,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PHOTO_CAPTURE_STARTED,
            record_id=record_id,
            correlation_id=correlation_id,
            description="Camera opened for receipt photo",
            is_user_action=True,
        )

    @staticmethod
    def photo_captured(
        record_id: UUID,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PHOTO_CAPTURED,
            record_id=record_id,
            correlation_id=correlation_id,
            description="Receipt photo captured",
            is_user_action=True,
        )

    @staticmethod
    def photo_capture_dismissed(
        record_id: UUID,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PHOTO_CAPTURE_DISMISSED,
            record_id=record_id,
            correlation_id=correlation_id,
            description="Camera dismissed without a new photo",
            is_user_action=True,
        )

    @staticmethod
    def photo_encode_failed(
        record_id: UUID,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PHOTO_ENCODE_FAILED,
            severity=AuditSeverity.WARNING,
            record_id=record_id,
            correlation_id=correlation_id,
            description="Receipt photo could not be encoded; saving without image",
        )

    @staticmethod
    def image_decode_failed(
        record_id: UUID,
        error_message: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.IMAGE_DECODE_FAILED,
            severity=AuditSeverity.WARNING,
            record_id=record_id,
            description="Stored receipt image could not be decoded",
            error_message=error_message,
        )

    @staticmethod
    def record_committed(
        record_id: UUID,
        amount: str,
        has_image: bool,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_COMMITTED,
            record_id=record_id,
            correlation_id=correlation_id,
            description="Receipt saved",
            details={
                "amount": amount,
                "has_image": has_image,
            },
        )

    @staticmethod
    def record_deleted(
        record_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_DELETED,
            record_id=record_id,
            description="Receipt deleted",
            is_user_action=True,
        )

    @staticmethod
    def record_not_found(
        record_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RECORD_NOT_FOUND,
            severity=AuditSeverity.WARNING,
            record_id=record_id,
            description="Delete requested for a receipt that does not exist",
            is_user_action=True,
        )

    @staticmethod
    def persistence_failed(
        operation: str,
        error_message: str,
        record_id: Optional[UUID] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PERSISTENCE_FAILED,
            severity=AuditSeverity.ERROR,
            record_id=record_id,
            correlation_id=correlation_id,
            description=f"Storage write failed during {operation}",
            error_message=error_message,
            details={
                "operation": operation,
            },
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )
