"""
Audit Logger

DESIGN DECISION: Every significant action in the system is logged.
This provides:
1. Traceability of each receipt entry
2. Debugging capability for storage and image failures
3. A visible trace of amounts the entry prompt rejected silently

The audit logger:
- Writes structured JSON lines through structlog
- Maps event severity onto the log level
- Supports correlation IDs to trace the events of one entry
"""

import logging
import sys
from typing import Optional
from uuid import UUID, uuid4

import structlog

from receiptlog.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


def configure_logging(log_level: str = "INFO") -> None:
    """
    Configure stdlib logging and structlog for local structured logs.

    Safe to call more than once; the last call wins.
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper(), logging.INFO),
        force=True,
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer()
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


class AuditLogger:
    """
    Central audit logging service.

    Each helper builds an AuditEvent and logs it at the level matching
    its severity.
    """

    def __init__(self, logger_name: str = "receiptlog.audit"):
        self._logger = structlog.get_logger(logger_name)

    def log(self, event: AuditEvent) -> None:
        """Log an audit event locally."""
        log_dict = event.to_log_dict()

        if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

    def log_entry_started(self, record_id: UUID, correlation_id: UUID) -> None:
        self.log(AuditEventBuilder.entry_started(record_id, correlation_id))

    def log_amount_rejected(
        self,
        record_id: UUID,
        text: str,
        reason: str,
        correlation_id: UUID,
    ) -> None:
        self.log(AuditEventBuilder.amount_rejected(
            record_id=record_id,
            text=text,
            reason=reason,
            correlation_id=correlation_id,
        ))

    def log_entry_cancelled(self, record_id: UUID, correlation_id: UUID) -> None:
        self.log(AuditEventBuilder.entry_cancelled(record_id, correlation_id))

    def log_photo_capture_started(self, record_id: UUID, correlation_id: UUID) -> None:
        self.log(AuditEventBuilder.photo_capture_started(record_id, correlation_id))

    def log_photo_captured(self, record_id: UUID, correlation_id: UUID) -> None:
        self.log(AuditEventBuilder.photo_captured(record_id, correlation_id))

    def log_photo_capture_dismissed(self, record_id: UUID, correlation_id: UUID) -> None:
        self.log(AuditEventBuilder.photo_capture_dismissed(record_id, correlation_id))

    def log_photo_encode_failed(self, record_id: UUID, correlation_id: UUID) -> None:
        self.log(AuditEventBuilder.photo_encode_failed(record_id, correlation_id))

    def log_image_decode_failed(self, record_id: UUID, error_message: str) -> None:
        self.log(AuditEventBuilder.image_decode_failed(record_id, error_message))

    def log_record_committed(
        self,
        record_id: UUID,
        amount: str,
        has_image: bool,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a successful commit."""
        self.log(AuditEventBuilder.record_committed(
            record_id=record_id,
            amount=amount,
            has_image=has_image,
            correlation_id=correlation_id,
        ))

    def log_record_deleted(self, record_id: UUID) -> None:
        self.log(AuditEventBuilder.record_deleted(record_id))

    def log_record_not_found(self, record_id: UUID) -> None:
        self.log(AuditEventBuilder.record_not_found(record_id))

    def log_persistence_failed(
        self,
        operation: str,
        error_message: str,
        record_id: Optional[UUID] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a storage write that failed after retries."""
        self.log(AuditEventBuilder.persistence_failed(
            operation=operation,
            error_message=error_message,
            record_id=record_id,
            correlation_id=correlation_id,
        ))

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an error."""
        self.log(AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a new receipt entry.
    Pass it through all subsequent operations.
    """
    return uuid4()
