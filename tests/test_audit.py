"""Tests for the audit logger."""

import asyncio
from uuid import uuid4

from finance_tracker.audit import AuditLogger
from finance_tracker.models import AuditEventBuilder


class FailingLogger:
    def info(self, *args, **kwargs):
        raise RuntimeError("log sink down")

    warning = error = info


class RecordingLogger:
    def __init__(self):
        self.calls = []

    def info(self, event, **kwargs):
        self.calls.append(("info", kwargs))

    def warning(self, event, **kwargs):
        self.calls.append(("warning", kwargs))

    def error(self, event, **kwargs):
        self.calls.append(("error", kwargs))


class TestAuditLogger:
    """Audit logging routes by severity and never breaks the caller."""

    def test_routes_by_severity(self):
        audit = AuditLogger()
        recorder = RecordingLogger()
        audit._logger = recorder

        asyncio.run(audit.log_user_logged_in(uuid4()))
        asyncio.run(audit.log_access_denied(uuid4(), "transaction", uuid4()))
        asyncio.run(audit.log_error("StorageError", "boom"))

        assert [level for level, _ in recorder.calls] == ["info", "warning", "error"]
        assert recorder.calls[1][1]["event_type"] == "access_denied"
        assert recorder.calls[2][1]["error_message"] == "boom"

    def test_failure_is_swallowed(self):
        audit = AuditLogger()
        audit._logger = FailingLogger()
        event = AuditEventBuilder.transaction_deleted(uuid4(), uuid4())
        assert asyncio.run(audit.log(event)) is False

    def test_success_returns_true(self):
        audit = AuditLogger()
        audit._logger = RecordingLogger()
        event = AuditEventBuilder.login_failed("someone@example.com")
        assert asyncio.run(audit.log(event)) is True
