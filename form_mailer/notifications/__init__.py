"""Formatting and dispatch of form submission notifications.

This package provides the complete notification pipeline:
- NotificationFormatter: handles one submission end to end
- resolve_mode / build_form_links: subject, audience and links
- TemplateRenderer: Jinja2-based email body rendering
- SMTPMailTransport: SMTP delivery behind the MailTransport contract
- StructuredLogSink: structured log output of each outcome
"""

from .models import (
    NOT_LINKED,
    UNAVAILABLE_IDENTITY,
    DispatchFailed,
    FormLinks,
    LogRecord,
    ModeRouting,
    NotificationError,
    NotificationTemplateError,
    RenderedMessage,
    UnsupportedMode,
)
from .payloads import MISSING_STORE_WARNING, build_submission_context
from .routing import build_form_links, resolve_mode
from .service import NotificationFormatter
from .sink import LogSink, StructuredLogSink
from .smtp_client import SMTPMailTransport, build_message
from .templates import TemplateRenderer
from .transport import MailTransport

__all__ = [
    # Main component
    "NotificationFormatter",
    # Models and results
    "LogRecord",
    "RenderedMessage",
    "ModeRouting",
    "FormLinks",
    "UNAVAILABLE_IDENTITY",
    "NOT_LINKED",
    "MISSING_STORE_WARNING",
    # Exceptions
    "NotificationError",
    "UnsupportedMode",
    "NotificationTemplateError",
    "DispatchFailed",
    # Components
    "TemplateRenderer",
    "MailTransport",
    "SMTPMailTransport",
    "LogSink",
    "StructuredLogSink",
    # Utilities
    "resolve_mode",
    "build_form_links",
    "build_submission_context",
    "build_message",
]
