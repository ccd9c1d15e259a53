"""Tests for the structured log sink."""

import logging
from dataclasses import replace
from unittest.mock import Mock

import pytest

from form_mailer.notifications.models import LogRecord
from form_mailer.notifications.sink import StructuredLogSink


@pytest.fixture
def sent_record():
    return LogRecord(
        mode="TEST",
        subject="[TESTING] New response submitted: Volunteer Signup",
        form_id="form-1",
        form_title="Volunteer Signup",
        form_summary_url="https://docs.google.com/forms/d/form-1/edit#responses",
        results_store_url="Not linked",
        recipients=("tester@example.com",),
        timestamp="2025-11-04T15:42:10.000Z",
        submitted_by="owner@example.com",
        html_preview="<h2>New response",
    )


def test_sent_record_logged_at_info(sent_record, caplog):
    caplog.set_level(logging.INFO)

    StructuredLogSink().log(sent_record)

    assert len(caplog.records) == 1
    entry = caplog.records[0]
    assert entry.levelno == logging.INFO
    assert entry.event == "submission.notification.sent"
    assert entry.component == "formatter"
    assert entry.submitted_at == "2025-11-04T15:42:10.000Z"
    assert entry.recipients == ["tester@example.com"]
    assert entry.results_store_url == "Not linked"


def test_failed_record_logged_at_error(sent_record, caplog):
    failed = replace(sent_record, status="failed", error="SMTP error")

    StructuredLogSink().log(failed)

    entry = caplog.records[0]
    assert entry.levelno == logging.ERROR
    assert entry.event == "submission.notification.failed"
    assert entry.error == "SMTP error"
    assert "SMTP error" in entry.getMessage()


def test_logger_errors_are_contained(sent_record):
    broken_logger = Mock()
    broken_logger.info.side_effect = RuntimeError("handler exploded")

    StructuredLogSink(broken_logger).log(sent_record)

    broken_logger.info.assert_called_once()


def test_record_to_dict(sent_record):
    data = sent_record.to_dict()

    assert data["recipients"] == ["tester@example.com"]
    assert data["status"] == "sent"
    assert data["error"] is None
    assert sent_record.is_success() is True
    assert replace(sent_record, status="failed").is_success() is False
