"""Tests for the audit logger."""

from uuid import uuid4

import pytest
from structlog.testing import capture_logs

from receiptlog.audit import AuditLogger, create_correlation_id
from receiptlog.models.audit import AuditEventBuilder


@pytest.fixture
def audit_logger() -> AuditLogger:
    # Fresh logger per test so capture_logs sees the current configuration
    return AuditLogger(logger_name=f"test.audit.{uuid4()}")


class TestAuditLogger:

    def test_info_event(self, audit_logger):
        record_id = uuid4()
        with capture_logs() as logs:
            audit_logger.log_record_deleted(record_id)

        assert len(logs) == 1
        assert logs[0]["event"] == "audit_event"
        assert logs[0]["log_level"] == "info"
        assert logs[0]["event_type"] == "record_deleted"
        assert logs[0]["record_id"] == str(record_id)

    def test_warning_event(self, audit_logger):
        with capture_logs() as logs:
            audit_logger.log_amount_rejected(uuid4(), "abc", "not a decimal number", uuid4())

        assert logs[0]["log_level"] == "warning"
        assert logs[0]["details"]["reason"] == "not a decimal number"

    def test_error_event(self, audit_logger):
        with capture_logs() as logs:
            audit_logger.log_persistence_failed("commit", "disk full", record_id=uuid4())

        assert logs[0]["log_level"] == "error"
        assert logs[0]["error_message"] == "disk full"

    def test_log_prebuilt_event(self, audit_logger):
        event = AuditEventBuilder.system_error("storage_unavailable", "no such file")
        with capture_logs() as logs:
            audit_logger.log(event)

        assert logs[0]["event_type"] == "system_error"

    def test_correlation_ids_unique(self):
        assert create_correlation_id() != create_correlation_id()
