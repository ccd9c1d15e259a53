"""Data models and exceptions for the notification pipeline.

This module defines the value objects passed between the pipeline steps
(routing, links, rendered message, log record) and the exceptions that abort
an invocation.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional, Tuple

UNAVAILABLE_IDENTITY = "Unavailable"
NOT_LINKED = "Not linked"


class NotificationError(Exception):
    """Base exception for notification-related errors."""

    pass


class UnsupportedMode(NotificationError):
    """The configured mode is neither TEST nor PROD, or has no recipients."""

    def __init__(self, message: str, mode: str) -> None:
        super().__init__(message)
        self.mode = mode


class NotificationTemplateError(NotificationError):
    """Raised when template rendering fails due to configuration or missing variables."""

    pass


class DispatchFailed(NotificationError):
    """The mail transport rejected or failed to deliver the message.

    Fatal for the invocation; there is no retry and no partial send.
    """

    pass


@dataclass(frozen=True)
class ModeRouting:
    """Subject line and audience derived from the active mode."""

    mode: str
    subject: str
    recipients: Tuple[str, ...]


@dataclass(frozen=True)
class FormLinks:
    """Links rendered into the notification.

    Attributes:
        form_summary_url: Responses summary page of the form
        results_store_url: Linked spreadsheet, or None when the form has none
    """

    form_summary_url: str
    results_store_url: Optional[str] = None


@dataclass(frozen=True)
class RenderedMessage:
    """A fully rendered notification, ready for the transport."""

    subject: str
    recipients: Tuple[str, ...]
    html_body: str
    text_body: str = ""


@dataclass(frozen=True)
class LogRecord:
    """Snapshot of one handled submission, as written to the log.

    Attributes:
        mode: Active delivery mode
        subject: Subject line that was sent
        form_id: Identifier of the form
        form_title: Title of the form
        form_summary_url: Responses summary link
        results_store_url: Spreadsheet link, or "Not linked"
        recipients: Addresses the message went to
        timestamp: Submission time (ISO-8601 UTC)
        submitted_by: Current user's address, or "Unavailable"
        html_preview: First 200 characters of the HTML body
        status: "sent" or "failed"
        error: Failure description when status is "failed"
    """

    mode: str
    subject: str
    form_id: str
    form_title: str
    form_summary_url: str
    results_store_url: str
    recipients: Tuple[str, ...] = field(default_factory=tuple)
    timestamp: str = ""
    submitted_by: str = UNAVAILABLE_IDENTITY
    html_preview: str = ""
    status: str = "sent"
    error: Optional[str] = None

    def is_success(self) -> bool:
        return self.status == "sent"

    def to_dict(self) -> Dict[str, Any]:
        """Plain dictionary form with recipients as a list."""
        data = asdict(self)
        data["recipients"] = list(self.recipients)
        return data
