"""Configuration management module for the form mailer."""

from .environment import EnvironmentConfig, load_environment_config
from .exceptions import ConfigurationError
from .loader import load_config, validate_config_file
from .models import (
    AdvancedConfig,
    AppConfig,
    DeliveryMode,
    EmailConfig,
    LogFormat,
    LoggingConfig,
    LogLevel,
    NotificationConfig,
)

__all__ = [
    # Main loader functions
    "load_config",
    "validate_config_file",
    "load_environment_config",
    # Configuration models
    "AppConfig",
    "NotificationConfig",
    "EmailConfig",
    "LoggingConfig",
    "AdvancedConfig",
    "EnvironmentConfig",
    # Enums
    "DeliveryMode",
    "LogLevel",
    "LogFormat",
    # Exceptions
    "ConfigurationError",
]
