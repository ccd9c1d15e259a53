"""Unit tests for the notification formatter.

Tests the NotificationFormatter for:
- Mode routing (TEST/PROD recipients and subjects)
- Table rows and ordering in the rendered body
- Linked spreadsheet link vs. warning
- Identity degradation to "Unavailable"
- Metadata, mode and dispatch failures
- Log records on success and on dispatch failure
"""

from unittest.mock import Mock

import pytest

from form_mailer.domain.models import SubmissionEvent
from form_mailer.notifications.models import (
    NOT_LINKED,
    UNAVAILABLE_IDENTITY,
    DispatchFailed,
    LogRecord,
    UnsupportedMode,
)
from form_mailer.notifications.payloads import MISSING_STORE_WARNING
from form_mailer.notifications.service import NotificationFormatter
from form_mailer.sources.exceptions import MetadataUnavailable
from form_mailer.sources.static import StaticFormMetadataSource, StaticIdentityProvider

from tests.helpers import FIXED_NOW, FORM_ID, SHEET_ID, data_rows


def sent_kwargs(mock_transport):
    """Return (args, kwargs) of the single transport.send call."""
    mock_transport.send.assert_called_once()
    return mock_transport.send.call_args


def test_test_mode_scenario_with_linked_sheet(
    make_formatter, linked_metadata, two_answer_event, test_config, mock_transport
):
    """Two answers, TEST mode, linked sheet: testers, [TESTING] subject, sheet link."""
    formatter = make_formatter(linked_metadata)

    record = formatter.handle_submission(two_answer_event, test_config)

    args, kwargs = sent_kwargs(mock_transport)
    recipients, subject, text_body = args
    html = kwargs["html_body"]

    assert subject.startswith("[TESTING]")
    assert subject == "[TESTING] New response submitted: Volunteer Signup"
    assert tuple(recipients) == ("tester@example.com", "qa@example.com")
    assert text_body == ""

    assert html.count("<tr>") == 3
    assert html.count("<th>") == 2
    assert data_rows(html) == [("Name", "Alice"), ("Email", "a@x.com")]

    sheet_url = f"https://docs.google.com/spreadsheets/d/{SHEET_ID}/edit"
    assert f'<a href="{sheet_url}" target="_blank">View Google Sheet</a>' in html
    assert MISSING_STORE_WARNING not in html

    assert record.status == "sent"
    assert record.results_store_url == sheet_url


def test_missing_sheet_renders_warning_instead_of_link(
    make_formatter, unlinked_metadata, two_answer_event, test_config, mock_transport
):
    """Without a linked sheet the email carries a red, bold warning."""
    formatter = make_formatter(unlinked_metadata)

    record = formatter.handle_submission(two_answer_event, test_config)

    html = sent_kwargs(mock_transport)[1]["html_body"]
    assert "No linked Google Sheet found" in html
    assert 'style="color:red; font-size:150%; font-weight:bold;"' in html
    assert "View Google Sheet" not in html
    assert "spreadsheets/d/" not in html
    assert record.results_store_url == NOT_LINKED


def test_unsupported_mode_fails_before_dispatch(
    make_formatter, linked_metadata, two_answer_event, test_config, mock_transport, mock_sink
):
    """mode=STAGING raises UnsupportedMode and nothing is sent or logged."""
    formatter = make_formatter(linked_metadata)
    staging = test_config.model_copy(update={"mode": "STAGING"})

    with pytest.raises(UnsupportedMode) as exc_info:
        formatter.handle_submission(two_answer_event, staging)

    assert exc_info.value.mode == "STAGING"
    mock_transport.send.assert_not_called()
    mock_sink.log.assert_not_called()


def test_prod_mode_uses_only_production_recipients(
    make_formatter, linked_metadata, two_answer_event, prod_config, mock_transport
):
    """PROD mode never addresses testers and has no [TESTING] prefix."""
    formatter = make_formatter(linked_metadata)

    record = formatter.handle_submission(two_answer_event, prod_config)

    recipients, subject, _ = sent_kwargs(mock_transport)[0]
    assert tuple(recipients) == ("office@example.com",)
    assert "tester@example.com" not in recipients
    assert subject == "New response submitted: Volunteer Signup"
    assert record.mode == "PROD"


def test_rows_preserve_order_and_duplicates(
    make_formatter, linked_metadata, test_config, mock_transport
):
    """Every answer becomes exactly one row, in input order, duplicates kept."""
    answers = [
        ("Q3", "third"),
        ("Q1", "first"),
        ("Q1", "first"),
        ("Q2", ""),
    ]
    event = SubmissionEvent(
        form_id=FORM_ID,
        item_responses=[{"question_title": q, "answer": a} for q, a in answers],
    )
    formatter = make_formatter(linked_metadata)

    formatter.handle_submission(event, test_config)

    html = sent_kwargs(mock_transport)[1]["html_body"]
    assert data_rows(html) == answers


def test_answers_are_not_escaped_by_default(
    make_formatter, linked_metadata, test_config, mock_transport
):
    """Markup in answers is inserted as submitted."""
    event = SubmissionEvent(
        form_id=FORM_ID,
        item_responses=[{"question_title": "Bio", "answer": "<b>bold</b> & more"}],
    )
    formatter = make_formatter(linked_metadata)

    formatter.handle_submission(event, test_config)

    html = sent_kwargs(mock_transport)[1]["html_body"]
    assert "<b>bold</b> & more" in html


def test_escape_html_option_escapes_answers(
    make_formatter, linked_metadata, test_config, mock_transport
):
    """escape_html=True escapes markup in answers."""
    event = SubmissionEvent(
        form_id=FORM_ID,
        item_responses=[{"question_title": "Bio", "answer": "<script>x</script>"}],
    )
    formatter = make_formatter(linked_metadata)
    escaping = test_config.model_copy(update={"escape_html": True})

    formatter.handle_submission(event, escaping)

    html = sent_kwargs(mock_transport)[1]["html_body"]
    assert "<script>" not in html
    assert "&lt;script&gt;x&lt;/script&gt;" in html


def test_include_text_body_sends_plain_text_part(
    make_formatter, linked_metadata, two_answer_event, test_config, mock_transport
):
    """include_text_body=True sends a plain-text rendition as well."""
    formatter = make_formatter(linked_metadata)
    config = test_config.model_copy(update={"include_text_body": True})

    formatter.handle_submission(two_answer_event, config)

    text_body = sent_kwargs(mock_transport)[0][2]
    assert "Name: Alice" in text_body
    assert "Email: a@x.com" in text_body
    assert "<td" not in text_body


def test_sender_and_display_name_passed_to_transport(
    make_formatter, linked_metadata, two_answer_event, test_config, mock_transport
):
    """The transport receives sender address and display name; footer names sender."""
    formatter = make_formatter(linked_metadata)

    formatter.handle_submission(two_answer_event, test_config)

    kwargs = sent_kwargs(mock_transport)[1]
    assert kwargs["sender"] == "form-sender@example.com"
    assert kwargs["display_name"] == "Form Mailer Notifications"
    assert "This email was sent by <strong>form-sender@example.com</strong>." in kwargs["html_body"]


def test_render_timestamp_is_wall_clock_not_submission_time(
    make_formatter, linked_metadata, two_answer_event, test_config, mock_transport
):
    """The body shows render time; the log record keeps the submission time."""
    formatter = make_formatter(linked_metadata)

    record = formatter.handle_submission(two_answer_event, test_config)

    html = sent_kwargs(mock_transport)[1]["html_body"]
    assert "<strong>Submitted at:</strong> 2025-11-04 16:00:00 UTC" in html
    assert "<strong>Mode:</strong> TEST" in html
    assert record.timestamp == "2025-11-04T15:42:10.000Z"


def test_missing_submission_time_falls_back_to_clock(
    make_formatter, linked_metadata, test_config
):
    """Without a submission timestamp the record uses the current time."""
    event = SubmissionEvent(form_id=FORM_ID, item_responses=[{"title": "Q", "response": "A"}])
    formatter = make_formatter(linked_metadata)

    record = formatter.handle_submission(event, test_config)

    assert record.timestamp == "2025-11-04T16:00:00.000Z"


def test_identity_failure_degrades_to_sentinel(
    make_formatter, linked_metadata, two_answer_event, test_config, mock_transport
):
    """No configured identity still sends and records "Unavailable"."""
    formatter = make_formatter(linked_metadata, identity=None)

    record = formatter.handle_submission(two_answer_event, test_config)

    mock_transport.send.assert_called_once()
    assert record.submitted_by == UNAVAILABLE_IDENTITY


def test_unexpected_identity_error_degrades_to_sentinel(
    linked_metadata, two_answer_event, test_config, mock_transport, mock_sink
):
    """Any identity lookup error is absorbed."""
    identity = Mock()
    identity.get_current_user_email.side_effect = PermissionError("denied")
    formatter = NotificationFormatter(
        metadata_source=StaticFormMetadataSource([linked_metadata]),
        identity_provider=identity,
        transport=mock_transport,
        log_sink=mock_sink,
        clock=lambda: FIXED_NOW,
    )

    record = formatter.handle_submission(two_answer_event, test_config)

    assert record.submitted_by == UNAVAILABLE_IDENTITY
    assert record.status == "sent"


def test_identity_is_recorded_when_available(
    make_formatter, linked_metadata, two_answer_event, test_config
):
    """A resolved identity lands in the record."""
    formatter = make_formatter(linked_metadata, identity="owner@example.com")

    record = formatter.handle_submission(two_answer_event, test_config)

    assert record.submitted_by == "owner@example.com"


def test_unknown_form_raises_metadata_unavailable(
    make_formatter, linked_metadata, test_config, mock_transport, mock_sink
):
    """A form the source cannot find aborts the invocation."""
    formatter = make_formatter(linked_metadata)
    event = SubmissionEvent(form_id="unknown-form", item_responses=[])

    with pytest.raises(MetadataUnavailable):
        formatter.handle_submission(event, test_config)

    mock_transport.send.assert_not_called()
    mock_sink.log.assert_not_called()


def test_unexpected_metadata_error_is_wrapped(
    two_answer_event, test_config, mock_transport, mock_sink
):
    """Non-contract errors from the source surface as MetadataUnavailable."""
    source = Mock()
    source.get_form_metadata.side_effect = RuntimeError("backend down")
    formatter = NotificationFormatter(
        metadata_source=source,
        identity_provider=StaticIdentityProvider("owner@example.com"),
        transport=mock_transport,
        log_sink=mock_sink,
    )

    with pytest.raises(MetadataUnavailable) as exc_info:
        formatter.handle_submission(two_answer_event, test_config)

    assert "backend down" in str(exc_info.value)
    assert isinstance(exc_info.value.__cause__, RuntimeError)
    mock_transport.send.assert_not_called()


def test_dispatch_failure_propagates_and_is_logged(
    make_formatter, linked_metadata, two_answer_event, test_config, mock_transport, mock_sink
):
    """DispatchFailed reaches the caller after a failed record is logged."""
    mock_transport.send.side_effect = DispatchFailed("sender is not a verified alias")
    formatter = make_formatter(linked_metadata)

    with pytest.raises(DispatchFailed):
        formatter.handle_submission(two_answer_event, test_config)

    mock_transport.send.assert_called_once()
    mock_sink.log.assert_called_once()
    failed = mock_sink.log.call_args[0][0]
    assert failed.status == "failed"
    assert "verified alias" in failed.error
    assert not failed.is_success()


def test_unexpected_transport_error_becomes_dispatch_failed(
    make_formatter, linked_metadata, two_answer_event, test_config, mock_transport
):
    """Transport errors outside the contract are wrapped in DispatchFailed."""
    mock_transport.send.side_effect = ConnectionResetError("reset by peer")
    formatter = make_formatter(linked_metadata)

    with pytest.raises(DispatchFailed) as exc_info:
        formatter.handle_submission(two_answer_event, test_config)

    assert isinstance(exc_info.value.__cause__, ConnectionResetError)


def test_success_record_is_logged_once(
    make_formatter, linked_metadata, two_answer_event, test_config, mock_sink
):
    """On success exactly one record goes to the sink and is returned."""
    formatter = make_formatter(linked_metadata)

    record = formatter.handle_submission(two_answer_event, test_config)

    mock_sink.log.assert_called_once_with(record)
    assert isinstance(record, LogRecord)
    assert record.form_id == FORM_ID
    assert record.form_title == "Volunteer Signup"
    assert record.form_summary_url == f"https://docs.google.com/forms/d/{FORM_ID}/edit#responses"
    assert record.recipients == ("tester@example.com", "qa@example.com")
    assert record.subject == "[TESTING] New response submitted: Volunteer Signup"


@pytest.mark.parametrize("answer_count", [1, 5, 200])
def test_html_preview_is_bounded(
    make_formatter, linked_metadata, test_config, answer_count
):
    """The logged preview never exceeds 200 characters plus the ellipsis."""
    event = SubmissionEvent(
        form_id=FORM_ID,
        item_responses=[
            {"question_title": f"Question {i}", "answer": "x" * 100} for i in range(answer_count)
        ],
    )
    formatter = make_formatter(linked_metadata)

    record = formatter.handle_submission(event, test_config)

    assert len(record.html_preview) <= 203
    assert record.html_preview.endswith("...")
    assert record.html_preview.startswith('<h2>New response submitted for "Volunteer Signup"</h2>')
