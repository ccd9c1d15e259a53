"""Additional validation utilities for configuration."""

import warnings
from typing import Any, Dict, List, Optional, Set

from .environment import EnvironmentConfig


def _address_set(value: Any) -> Set[str]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        return set()
    addresses = set()
    for entry in value:
        for part in str(entry).split(","):
            part = part.strip().lower()
            if part:
                addresses.add(part)
    return addresses


def check_for_warnings(
    config_dict: Dict[str, Any], env_config: Optional[EnvironmentConfig] = None
) -> List[str]:
    """
    Check raw configuration for likely mistakes that are not hard errors.

    Args:
        config_dict: Raw configuration dictionary
        env_config: Environment configuration, if already loaded

    Returns:
        List of warning messages
    """
    warning_messages = []

    notification = config_dict.get("notification", {})
    if isinstance(notification, dict):
        overlap = _address_set(notification.get("test_recipients")) & _address_set(
            notification.get("prod_recipients")
        )
        if overlap:
            warning_messages.append(
                "Addresses listed as both test and production recipients: "
                f"{', '.join(sorted(overlap))}"
            )

        sender = str(notification.get("sender_address", "")).strip().lower()
        if env_config and env_config.smtp_user and sender and sender != env_config.smtp_user.lower():
            warning_messages.append(
                f"sender_address {sender} differs from SMTP_USER; the server may reject it "
                "unless it is a verified alias"
            )

    forms = config_dict.get("forms") or []
    uses_forms_api = bool(env_config and env_config.forms_api_token)
    if not forms and not uses_forms_api:
        warning_messages.append(
            "No forms configured and GOOGLE_FORMS_ACCESS_TOKEN is not set; "
            "every submission will fail metadata lookup"
        )

    return warning_messages


def emit_warnings(warning_messages: List[str]) -> None:
    """
    Emit warning messages using Python's warnings module.

    Args:
        warning_messages: List of warning messages to emit
    """
    for message in warning_messages:
        warnings.warn(message, UserWarning, stacklevel=2)
