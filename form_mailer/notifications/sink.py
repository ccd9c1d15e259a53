"""Log sinks for handled-submission records."""

import logging
from abc import ABC, abstractmethod
from typing import Optional

from form_mailer.logging import get_logger

from .models import LogRecord

logger = get_logger(__name__, component="formatter")


class LogSink(ABC):
    """Receives one LogRecord per handled submission. Must never raise."""

    @abstractmethod
    def log(self, record: LogRecord) -> None:
        """Record the outcome of a submission."""


class StructuredLogSink(LogSink):
    """Writes records through the project logger as structured extras."""

    def __init__(self, logger_instance: Optional[logging.LoggerAdapter] = None):
        self.logger = logger_instance or logger

    def log(self, record: LogRecord) -> None:
        try:
            fields = record.to_dict()
            # "timestamp" is the formatter's own field name
            fields["submitted_at"] = fields.pop("timestamp")
            if record.is_success():
                self.logger.info(
                    f"Notification sent for form {record.form_id}: {record.subject}",
                    extra={"event": "submission.notification.sent", **fields},
                )
            else:
                self.logger.error(
                    f"Notification failed for form {record.form_id}: {record.error}",
                    extra={"event": "submission.notification.failed", **fields},
                )
        except Exception as e:
            logging.getLogger(__name__).debug(f"Dropping log record that could not be emitted: {e}")
