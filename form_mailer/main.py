"""Host entry point for form submission notifications.

The host (a webhook receiver, a queue consumer, a Cloud Function) calls
bootstrap() once at process start and then on_form_submit() for every
submission, the same way a form trigger hands its event and form id to the
library:

    mailer = bootstrap(Path("config.yaml"))
    mailer.on_form_submit(payload, form_id)
"""

from dotenv import load_dotenv
load_dotenv()

import os
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from pydantic import ValidationError

from form_mailer.config.environment import EnvironmentConfig
from form_mailer.config.loader import load_config
from form_mailer.config.models import AppConfig, NotificationConfig
from form_mailer.domain.models import SubmissionEvent
from form_mailer.logging import get_logger
from form_mailer.logging.config import configure_logging
from form_mailer.notifications.models import LogRecord
from form_mailer.notifications.service import NotificationFormatter
from form_mailer.notifications.smtp_client import SMTPMailTransport
from form_mailer.sources.base import FormMetadataSource
from form_mailer.sources.google_forms import GoogleFormsMetadataSource
from form_mailer.sources.static import StaticFormMetadataSource, StaticIdentityProvider

logger = get_logger(__name__, component="host")


class FormMailer:
    """A configured formatter plus the configuration it runs with."""

    def __init__(self, formatter: NotificationFormatter, config: NotificationConfig):
        self.formatter = formatter
        self.config = config

    def on_form_submit(self, payload: Dict[str, Any], form_id: Optional[str] = None) -> LogRecord:
        """Handle one submission payload.

        Args:
            payload: Submission payload (see SubmissionEvent.from_payload)
            form_id: Identifier of the submitted form; overrides payload["form_id"]

        Returns:
            LogRecord of the sent notification

        Raises:
            ValueError: If the payload is not a valid submission
            MetadataUnavailable, UnsupportedMode, NotificationTemplateError,
            DispatchFailed: Propagated from the formatter
        """
        try:
            event = SubmissionEvent.from_payload(payload, form_id=form_id)
        except ValidationError as e:
            logger.error(
                f"Rejected malformed submission payload: {e.error_count()} errors",
                extra={"event": "submission.payload.invalid", "form_id": form_id},
            )
            raise ValueError(f"Invalid submission payload: {e}") from e

        return self.formatter.handle_submission(event, self.config)


def build_metadata_source(app_config: AppConfig, env_config: EnvironmentConfig) -> FormMetadataSource:
    """Use the Google Forms API when a token is configured, else the config file."""
    if env_config.forms_api_token:
        return GoogleFormsMetadataSource(
            access_token=env_config.forms_api_token,
            timeout=app_config.advanced.http_request_timeout,
            user_agent=app_config.advanced.user_agent,
        )
    return StaticFormMetadataSource(app_config.forms)


def build_formatter(app_config: AppConfig, env_config: EnvironmentConfig) -> NotificationFormatter:
    """Wire the formatter with collaborators derived from configuration."""
    return NotificationFormatter(
        metadata_source=build_metadata_source(app_config, env_config),
        identity_provider=StaticIdentityProvider(env_config.effective_user),
        transport=SMTPMailTransport(env_config, app_config.email),
    )


def load_runtime_config(
    config_path: Optional[Path], log_level_override: Optional[str] = None
) -> Tuple[AppConfig, EnvironmentConfig]:
    """
    Load configuration and settle the effective log level.

    Log level priority: explicit override > LOG_LEVEL > config file > INFO.

    Raises:
        ConfigurationError: If configuration is invalid
    """
    app_config, env_config = load_config(config_path)

    if log_level_override:
        env_config.log_level = log_level_override.upper()
    elif not env_config.log_level:
        env_config.log_level = app_config.logging.level or "INFO"

    return app_config, env_config


def bootstrap(
    config_path: Optional[Path] = None, log_level_override: Optional[str] = None
) -> FormMailer:
    """
    Load configuration once, configure logging and build the host object.

    Args:
        config_path: Path to config.yaml (default lookup if None)
        log_level_override: Log level taking precedence over env and config

    Returns:
        FormMailer ready to handle submissions

    Raises:
        ConfigurationError: If configuration is invalid (including an
            unsupported mode)
    """
    app_config, env_config = load_runtime_config(config_path, log_level_override)

    configure_logging(
        level=env_config.log_level,
        format_type=app_config.logging.format,
        environment=os.environ.get("ENVIRONMENT", "local"),
    )

    mailer = FormMailer(build_formatter(app_config, env_config), app_config.notification)

    logger.info(
        "Form mailer ready",
        extra={
            "event": "service.ready",
            "config_path": str(config_path) if config_path else None,
            "mode": app_config.notification.mode,
            "form_count": len(app_config.forms),
            "metadata_source": "google_forms_api" if env_config.forms_api_token else "config",
        },
    )
    return mailer
