"""Configuration management module for ayd-mailto-alert."""

from .environment import apply_environment, get_env, load_logging_settings, load_status_page_base
from .exceptions import ConfigurationError, MissingFieldError
from .loader import default_config_paths, load_files, resolve_config
from .mailrc import parse_mailrc
from .models import (
    DEFAULT_SENDER,
    ConfigDraft,
    LogFormat,
    LoggingSettings,
    LogLevel,
    SMTPConfig,
)

__all__ = [
    # Resolver functions
    "resolve_config",
    "load_files",
    "parse_mailrc",
    "apply_environment",
    "default_config_paths",
    # Environment helpers
    "get_env",
    "load_logging_settings",
    "load_status_page_base",
    # Configuration models
    "SMTPConfig",
    "ConfigDraft",
    "LoggingSettings",
    "DEFAULT_SENDER",
    # Enums
    "LogLevel",
    "LogFormat",
    # Exceptions
    "ConfigurationError",
    "MissingFieldError",
]
