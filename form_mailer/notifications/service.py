"""Notification formatter for form submissions.

This module provides NotificationFormatter, which turns one submission
event into one email: metadata lookup, identity lookup, mode routing, link
derivation, rendering, dispatch and a structured log record.
"""

import logging
from dataclasses import replace
from datetime import datetime
from typing import Callable, Optional

from form_mailer.config.models import NotificationConfig
from form_mailer.domain.models import FormMetadata, SubmissionEvent
from form_mailer.logging import get_logger
from form_mailer.logging.context import log_context
from form_mailer.sources.base import FormMetadataSource, IdentityProvider
from form_mailer.sources.exceptions import IdentityUnavailable, MetadataUnavailable
from form_mailer.utils.text import preview_text
from form_mailer.utils.timestamps import isoformat_utc, utc_now

from .models import (
    NOT_LINKED,
    UNAVAILABLE_IDENTITY,
    DispatchFailed,
    FormLinks,
    LogRecord,
    ModeRouting,
    RenderedMessage,
)
from .payloads import build_submission_context
from .routing import build_form_links, resolve_mode
from .sink import LogSink, StructuredLogSink
from .templates import TemplateRenderer
from .transport import MailTransport

logger = get_logger(__name__, component="formatter")


class NotificationFormatter:
    """Formats and dispatches the notification for a single submission.

    Each call to handle_submission is one linear pass:
    1. Resolve form metadata (MetadataUnavailable is fatal)
    2. Resolve the current user's identity (failure becomes "Unavailable")
    3. Resolve subject and recipients from the mode (UnsupportedMode is fatal)
    4. Derive the summary and spreadsheet links
    5. Render the HTML body (and optional plain-text body)
    6. Dispatch through the mail transport (DispatchFailed is fatal, no retry)
    7. Hand a LogRecord to the log sink, on success and on dispatch failure

    The formatter keeps no state between calls.
    """

    def __init__(
        self,
        metadata_source: FormMetadataSource,
        identity_provider: IdentityProvider,
        transport: MailTransport,
        log_sink: Optional[LogSink] = None,
        template_renderer: Optional[TemplateRenderer] = None,
        clock: Callable[[], datetime] = utc_now,
        logger_instance: Optional[logging.LoggerAdapter] = None,
    ):
        """Initialize the formatter with its collaborators.

        Args:
            metadata_source: Looks up form title and linked spreadsheet
            identity_provider: Resolves the current user's address
            transport: Delivers the rendered message
            log_sink: Receives the outcome record (structured logger if None)
            template_renderer: Renderer to use; when None one is built on demand
                honouring config.escape_html
            clock: Returns the current time; used for the render timestamp
            logger_instance: Logger instance (uses module logger if None)
        """
        self.metadata_source = metadata_source
        self.identity_provider = identity_provider
        self.transport = transport
        self.log_sink = log_sink or StructuredLogSink()
        self.template_renderer = template_renderer
        self.clock = clock
        self.logger = logger_instance or logger
        self._renderers = {}

    def handle_submission(self, event: SubmissionEvent, config: NotificationConfig) -> LogRecord:
        """Render and send the notification for one submission.

        Args:
            event: The submitted response
            config: Notification configuration fixed at startup

        Returns:
            LogRecord describing what was sent

        Raises:
            MetadataUnavailable: If the form cannot be resolved
            UnsupportedMode: If the mode is unknown or has no recipients
            NotificationTemplateError: If rendering fails
            DispatchFailed: If the transport fails to deliver
        """
        with log_context(form_id=event.form_id, mode=config.mode):
            metadata = self._resolve_metadata(event.form_id)
            submitted_by = self._resolve_identity()
            routing = resolve_mode(config, metadata.title)
            links = build_form_links(metadata, config)

            message = self.render(event, metadata, links, routing, config)

            record = LogRecord(
                mode=routing.mode,
                subject=message.subject,
                form_id=metadata.form_id,
                form_title=metadata.title,
                form_summary_url=links.form_summary_url,
                results_store_url=links.results_store_url or NOT_LINKED,
                recipients=message.recipients,
                timestamp=isoformat_utc(event.submitted_at or self.clock()),
                submitted_by=submitted_by,
                html_preview=preview_text(message.html_body),
            )

            try:
                self._dispatch(message, config)
            except DispatchFailed as e:
                failed = replace(record, status="failed", error=str(e))
                self.log_sink.log(failed)
                raise

            self.log_sink.log(record)
            return record

    def render(
        self,
        event: SubmissionEvent,
        metadata: FormMetadata,
        links: FormLinks,
        routing: ModeRouting,
        config: NotificationConfig,
    ) -> RenderedMessage:
        """Render the message without sending it.

        Raises:
            NotificationTemplateError: If template rendering fails
        """
        context = build_submission_context(event, metadata, links, config, self.clock())
        rendered = self._renderer_for(config).render(context)

        self.logger.debug(
            f"Rendered notification with {len(event.item_responses)} answers",
            extra={
                "event": "submission.rendered",
                "answer_count": len(event.item_responses),
                "has_linked_sheet": links.results_store_url is not None,
            },
        )

        return RenderedMessage(
            subject=routing.subject,
            recipients=routing.recipients,
            html_body=rendered["html_body"],
            text_body=rendered["text_body"] if config.include_text_body else "",
        )

    def _renderer_for(self, config: NotificationConfig) -> TemplateRenderer:
        if self.template_renderer is not None:
            return self.template_renderer
        if config.escape_html not in self._renderers:
            self._renderers[config.escape_html] = TemplateRenderer(escape_html=config.escape_html)
        return self._renderers[config.escape_html]

    def _resolve_metadata(self, form_id: str) -> FormMetadata:
        try:
            metadata = self.metadata_source.get_form_metadata(form_id)
        except MetadataUnavailable as e:
            self.logger.error(
                f"Form metadata unavailable for {form_id}: {e}",
                extra={"event": "submission.metadata.unavailable"},
            )
            raise
        except Exception as e:
            self.logger.error(
                f"Unexpected error resolving form {form_id}: {e}",
                exc_info=True,
                extra={"event": "submission.metadata.unavailable", "error_type": type(e).__name__},
            )
            raise MetadataUnavailable(
                f"Failed to resolve form {form_id}: {e}", form_id=form_id
            ) from e

        self.logger.debug(
            f"Resolved form metadata: {metadata.title}",
            extra={"event": "submission.metadata.resolved"},
        )
        return metadata

    def _resolve_identity(self) -> str:
        """Return the current user's address or the "Unavailable" sentinel."""
        try:
            email = self.identity_provider.get_current_user_email()
        except IdentityUnavailable as e:
            self.logger.debug(
                f"Submitter identity unavailable: {e}",
                extra={"event": "submission.identity.unavailable"},
            )
            return UNAVAILABLE_IDENTITY
        except Exception as e:
            self.logger.warning(
                f"Identity lookup failed: {e}",
                extra={
                    "event": "submission.identity.unavailable",
                    "error_type": type(e).__name__,
                },
            )
            return UNAVAILABLE_IDENTITY

        return email.strip() if email and email.strip() else UNAVAILABLE_IDENTITY

    def _dispatch(self, message: RenderedMessage, config: NotificationConfig) -> None:
        try:
            self.transport.send(
                message.recipients,
                message.subject,
                message.text_body,
                html_body=message.html_body,
                sender=config.sender_address,
                display_name=config.sender_display_name,
            )
        except DispatchFailed as e:
            self.logger.error(
                f"Dispatch failed: {e}",
                extra={"event": "submission.dispatch.failed", "error_type": type(e).__name__},
            )
            raise
        except Exception as e:
            self.logger.error(
                f"Dispatch failed: {e}",
                exc_info=True,
                extra={"event": "submission.dispatch.failed", "error_type": type(e).__name__},
            )
            raise DispatchFailed(f"Mail transport error: {e}") from e

        self.logger.info(
            f"Notification dispatched to {', '.join(message.recipients)}",
            extra={"event": "submission.dispatch.succeeded", "recipient_count": len(message.recipients)},
        )
