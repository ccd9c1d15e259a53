"""Shared fixtures for form mailer tests."""

from datetime import datetime, timezone
from unittest.mock import Mock

import pytest

from form_mailer.config.models import NotificationConfig
from form_mailer.domain.models import FormMetadata, SubmissionEvent
from form_mailer.logging.context import clear_log_context
from form_mailer.notifications.service import NotificationFormatter
from form_mailer.sources.static import StaticFormMetadataSource, StaticIdentityProvider
from tests.helpers import FIXED_NOW, FORM_ID, SHEET_ID


@pytest.fixture(autouse=True)
def clean_log_context():
    """Clear logging context before and after each test."""
    clear_log_context()
    yield
    clear_log_context()


@pytest.fixture
def mock_env_vars(monkeypatch):
    """Minimal valid environment for load_config()."""
    for name in (
        "SMTP_USER",
        "SMTP_PASS",
        "LOG_LEVEL",
        "FORM_MAILER_MODE",
        "FORM_MAILER_EFFECTIVE_USER",
        "GOOGLE_FORMS_ACCESS_TOKEN",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("SMTP_HOST", "smtp.example.com")
    monkeypatch.setenv("SMTP_PORT", "587")


@pytest.fixture
def test_config():
    """Notification config in TEST mode."""
    return NotificationConfig(
        mode="TEST",
        sender_address="form-sender@example.com",
        sender_display_name="Form Mailer Notifications",
        test_recipients=["tester@example.com", "qa@example.com"],
        prod_recipients=["office@example.com"],
    )


@pytest.fixture
def prod_config(test_config):
    """Same config switched to PROD mode."""
    return test_config.model_copy(update={"mode": "PROD"})


@pytest.fixture
def two_answer_event():
    """Submission with the two answers used throughout the scenarios."""
    return SubmissionEvent(
        form_id=FORM_ID,
        submitted_at=datetime(2025, 11, 4, 15, 42, 10, tzinfo=timezone.utc),
        item_responses=[
            {"question_title": "Name", "answer": "Alice"},
            {"question_title": "Email", "answer": "a@x.com"},
        ],
    )


@pytest.fixture
def linked_metadata():
    """Form with a linked spreadsheet."""
    return FormMetadata(form_id=FORM_ID, title="Volunteer Signup", linked_storage_id=SHEET_ID)


@pytest.fixture
def unlinked_metadata():
    """Form without a linked spreadsheet."""
    return FormMetadata(form_id=FORM_ID, title="Volunteer Signup")


@pytest.fixture
def mock_transport():
    """Transport that accepts every message."""
    transport = Mock()
    transport.send.return_value = None
    return transport


@pytest.fixture
def mock_sink():
    """Log sink recording every record."""
    return Mock()


@pytest.fixture
def make_formatter(mock_transport, mock_sink):
    """Factory for a formatter around the given metadata and identity."""

    def _make(metadata, identity="owner@example.com"):
        return NotificationFormatter(
            metadata_source=StaticFormMetadataSource([metadata]),
            identity_provider=StaticIdentityProvider(identity),
            transport=mock_transport,
            log_sink=mock_sink,
            clock=lambda: FIXED_NOW,
        )

    return _make
