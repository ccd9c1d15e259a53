"""SMTP mail transport.

A thin wrapper around smtplib with support for STARTTLS, implicit TLS,
authentication and connection cleanup.
"""

import logging
import smtplib
import ssl
from email.message import EmailMessage
from email.utils import formataddr
from typing import Callable, Optional, Sequence

from form_mailer.config.environment import EnvironmentConfig
from form_mailer.config.models import EmailConfig

from .models import DispatchFailed
from .transport import MailTransport

logger = logging.getLogger(__name__)

IMPLICIT_TLS_PORT = 465


def build_message(
    recipients: Sequence[str],
    subject: str,
    text_body: str,
    html_body: str,
    sender: str,
    display_name: str,
) -> EmailMessage:
    """Build a multipart/alternative message.

    The plain-text part may be empty; the HTML part carries the content.

    Example:
        >>> msg = build_message(["a@example.com"], "Hi", "", "<p>Hi</p>", "s@example.com", "Forms")
        >>> msg["From"]
        'Forms <s@example.com>'
    """
    message = EmailMessage()
    message["Subject"] = subject
    message["From"] = formataddr((display_name, sender))
    message["To"] = ", ".join(recipients)
    message.set_content(text_body or "")
    message.add_alternative(html_body, subtype="html")
    return message


class SMTPMailTransport(MailTransport):
    """MailTransport that delivers through an SMTP server.

    Port 465 uses implicit TLS (SMTP_SSL); any other port uses plain SMTP with
    optional STARTTLS. Factories are injectable so tests never open sockets.
    """

    def __init__(
        self,
        env_config: EnvironmentConfig,
        email_config: Optional[EmailConfig] = None,
        smtp_factory: Optional[Callable] = None,
        smtp_ssl_factory: Optional[Callable] = None,
    ):
        """Initialize SMTP transport.

        Args:
            env_config: Environment configuration with SMTP host, port and credentials
            email_config: TLS and timeout settings (defaults if None)
            smtp_factory: Factory for SMTP instances (for mocking)
            smtp_ssl_factory: Factory for SMTP_SSL instances (for mocking)
        """
        self.env_config = env_config
        self.email_config = email_config or EmailConfig()
        self.smtp_factory = smtp_factory or smtplib.SMTP
        self.smtp_ssl_factory = smtp_ssl_factory or smtplib.SMTP_SSL

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
        """Build and deliver the message in one SMTP session.

        Raises:
            DispatchFailed: On SMTP, network or unexpected errors, including a
                sender address the server refuses to relay for
        """
        if not recipients:
            raise DispatchFailed("Refusing to send a message without recipients")

        message = build_message(recipients, subject, text_body, html_body, sender, display_name)
        self.deliver(message)

    def deliver(self, message: EmailMessage) -> None:
        """Deliver an already built message.

        Raises:
            DispatchFailed: If delivery fails
        """
        env = self.env_config
        timeout = self.email_config.timeout_seconds
        smtp = None
        try:
            if env.smtp_port == IMPLICIT_TLS_PORT:
                logger.debug(f"Connecting to {env.smtp_host}:{env.smtp_port} with implicit TLS")
                smtp = self.smtp_ssl_factory(
                    env.smtp_host,
                    env.smtp_port,
                    timeout=timeout,
                    context=ssl.create_default_context(),
                )
            else:
                logger.debug(f"Connecting to {env.smtp_host}:{env.smtp_port}")
                smtp = self.smtp_factory(env.smtp_host, env.smtp_port, timeout=timeout)

                if self.email_config.use_tls:
                    logger.debug("Upgrading connection with STARTTLS")
                    smtp.starttls(context=ssl.create_default_context())

            if env.smtp_user and env.smtp_pass:
                logger.debug(f"Authenticating as {env.smtp_user}")
                smtp.login(env.smtp_user, env.smtp_pass)

            smtp.send_message(message)
            logger.debug(f"Message sent successfully to {message['To']}")

        except smtplib.SMTPException as e:
            error_msg = f"SMTP error during message delivery: {e}"
            logger.error(error_msg)
            raise DispatchFailed(error_msg) from e
        except OSError as e:
            error_msg = f"Network error during SMTP connection: {e}"
            logger.error(error_msg)
            raise DispatchFailed(error_msg) from e
        except Exception as e:
            error_msg = f"Unexpected error during SMTP delivery: {e}"
            logger.error(error_msg)
            raise DispatchFailed(error_msg) from e
        finally:
            if smtp is not None:
                try:
                    smtp.quit()
                except Exception as e:
                    logger.warning(f"Error closing SMTP connection: {e}")
