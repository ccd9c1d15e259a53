"""Configuration schema models using Pydantic."""

from enum import Enum
from typing import Any, List, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

from form_mailer.domain.models import FormMetadata

DEFAULT_FORM_SUMMARY_URL_TEMPLATE = "https://docs.google.com/forms/d/{form_id}/edit#responses"
DEFAULT_RESULTS_STORE_URL_TEMPLATE = "https://docs.google.com/spreadsheets/d/{storage_id}/edit"


class DeliveryMode(str, Enum):
    """Deployment switch selecting the audience and subject framing."""

    TEST = "TEST"
    PROD = "PROD"


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    KEY_VALUE = "key-value"


def normalize_recipients(value: Any) -> Tuple[str, ...]:
    """Turn a recipient list from config into a de-duplicated tuple of addresses.

    Entries may themselves be comma-joined strings ("a@x.com, b@x.com"), which
    is how recipient lists were historically written. Order of first
    appearance is kept.

    Raises:
        ValueError: If any address is invalid
    """
    if value is None:
        return ()
    if isinstance(value, str):
        value = [value]

    recipients: List[str] = []
    for entry in value:
        for raw in str(entry).split(","):
            address = raw.strip()
            if not address:
                continue
            try:
                normalized = validate_email(address, check_deliverability=False).normalized
            except EmailNotValidError as e:
                raise ValueError(f"Invalid recipient address '{address}': {e}") from e
            if normalized not in recipients:
                recipients.append(normalized)

    return tuple(recipients)


def _check_url_template(template: str, field_name: str, placeholder: str) -> str:
    """Reject a link template that cannot be filled with ``placeholder`` alone."""
    if "{" + placeholder + "}" not in template:
        raise ValueError(f"{field_name} must contain a {{{placeholder}}} placeholder")
    try:
        template.format(**{placeholder: "x"})
    except (AttributeError, IndexError, KeyError, ValueError) as e:
        raise ValueError(
            f"{field_name} may only use the {{{placeholder}}} placeholder: {e!r}"
        ) from e
    return template


class NotificationConfig(BaseModel):
    """Process-wide notification settings, fixed once loaded.

    ``mode`` is kept as a plain string so that an unsupported value can still
    be represented and rejected by the formatter before anything is sent.
    """

    mode: str = Field(DeliveryMode.TEST.value, description="Delivery mode (TEST or PROD)")
    sender_address: EmailStr = Field(..., description="From address, must be a verified alias")
    sender_display_name: str = Field(
        "Form Mailer Notifications", min_length=1, description="Display name for the From header"
    )
    test_recipients: Tuple[str, ...] = Field(default=(), description="Recipients in TEST mode")
    prod_recipients: Tuple[str, ...] = Field(default=(), description="Recipients in PROD mode")
    form_summary_url_template: str = Field(
        DEFAULT_FORM_SUMMARY_URL_TEMPLATE,
        description="URL of the responses summary, with a {form_id} placeholder",
    )
    results_store_url_template: str = Field(
        DEFAULT_RESULTS_STORE_URL_TEMPLATE,
        description="URL of the linked spreadsheet, with a {storage_id} placeholder",
    )
    escape_html: bool = Field(False, description="HTML-escape question titles and answers")
    include_text_body: bool = Field(False, description="Send a plain-text alternative part")
    display_timezone: str = Field("UTC", description="IANA timezone for the rendered timestamp")
    timestamp_format: str = Field("%Y-%m-%d %H:%M:%S %Z", description="strftime format for the rendered timestamp")

    model_config = {"frozen": True}

    @field_validator("mode", mode="before")
    @classmethod
    def normalize_mode(cls, v: Any) -> str:
        """Upper-case and strip the mode value."""
        if isinstance(v, DeliveryMode):
            return v.value
        return str(v).strip().upper()

    @field_validator("test_recipients", "prod_recipients", mode="before")
    @classmethod
    def parse_recipients(cls, v: Any) -> Tuple[str, ...]:
        """Split, validate and de-duplicate recipient addresses."""
        return normalize_recipients(v)

    @field_validator("sender_display_name")
    @classmethod
    def strip_display_name(cls, v: str) -> str:
        """Strip whitespace from the display name."""
        stripped = v.strip()
        if not stripped:
            raise ValueError("sender_display_name cannot be empty or whitespace-only")
        return stripped

    @field_validator("form_summary_url_template")
    @classmethod
    def check_summary_placeholder(cls, v: str) -> str:
        """Require the {form_id} placeholder and no other."""
        return _check_url_template(v, "form_summary_url_template", "form_id")

    @field_validator("results_store_url_template")
    @classmethod
    def check_store_placeholder(cls, v: str) -> str:
        """Require the {storage_id} placeholder and no other."""
        return _check_url_template(v, "results_store_url_template", "storage_id")

    @field_validator("display_timezone")
    @classmethod
    def check_timezone(cls, v: str) -> str:
        """Reject unknown IANA timezone names."""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {v}") from e
        return v

    def is_supported_mode(self) -> bool:
        """Check whether ``mode`` is one of the supported delivery modes."""
        return self.mode in {m.value for m in DeliveryMode}


class EmailConfig(BaseModel):
    """SMTP delivery settings."""

    use_tls: bool = Field(True, description="Use TLS/STARTTLS for secure connection")
    timeout_seconds: int = Field(
        30, ge=5, le=300, description="Socket timeout for the SMTP connection (seconds)"
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(LogLevel.INFO, description="Log level")
    format: LogFormat = Field(
        LogFormat.KEY_VALUE, description="Log output format (json or key-value)"
    )

    model_config = {"use_enum_values": True}


class AdvancedConfig(BaseModel):
    """Settings for the Google Forms API metadata source."""

    http_request_timeout: int = Field(
        30, ge=5, le=300, description="Request timeout for Forms API calls (seconds)"
    )
    user_agent: str = Field(
        "FormMailerNotifications/1.0",
        min_length=1,
        description="User-Agent string for HTTP requests",
    )

    @field_validator("user_agent")
    @classmethod
    def strip_user_agent(cls, v: str) -> str:
        """Strip whitespace from user agent."""
        stripped = v.strip()
        if not stripped:
            raise ValueError("user_agent cannot be empty")
        return stripped


class AppConfig(BaseModel):
    """Root configuration object for the form mailer."""

    notification: NotificationConfig = Field(..., description="Mode, sender and recipients")
    forms: List[FormMetadata] = Field(
        default_factory=list, description="Known forms for the static metadata source"
    )
    email: EmailConfig = Field(default_factory=EmailConfig, description="SMTP settings")
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
    advanced: AdvancedConfig = Field(
        default_factory=AdvancedConfig, description="Advanced runtime settings"
    )

    @model_validator(mode="after")
    def validate_mode_and_forms(self):
        """Reject unsupported modes, empty audiences and duplicate forms."""
        notification = self.notification
        if not notification.is_supported_mode():
            supported = ", ".join(m.value for m in DeliveryMode)
            raise ValueError(
                f"Unsupported notification mode '{notification.mode}'. Must be one of: {supported}"
            )

        if notification.mode == DeliveryMode.TEST.value and not notification.test_recipients:
            raise ValueError("notification.test_recipients must not be empty in TEST mode")
        if notification.mode == DeliveryMode.PROD.value and not notification.prod_recipients:
            raise ValueError("notification.prod_recipients must not be empty in PROD mode")

        seen = set()
        for form in self.forms:
            if form.form_id in seen:
                raise ValueError(f"Duplicate form: {form.form_id} appears multiple times")
            seen.add(form.form_id)

        return self
