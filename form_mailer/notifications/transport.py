"""Mail transport contract used by the notification formatter."""

from abc import ABC, abstractmethod
from typing import Sequence


class MailTransport(ABC):
    """Delivers one rendered message.

    Implementations raise DispatchFailed on any delivery problem and must not
    retry or deliver to a subset of recipients.
    """

    @abstractmethod
    def send(
        self,
        recipients: Sequence[str],
        subject: str,
        text_body: str,
        *,
        html_body: str,
        sender: str,
        display_name: str,
    ) -> None:
        """Send a message with a plain-text part and an HTML alternative.

        Raises:
            DispatchFailed: If the message could not be delivered
        """
