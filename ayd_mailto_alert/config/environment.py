"""Environment variable lookup and overrides.

The process environment is never read here directly: callers pass a
key->value mapping (``dict(os.environ)`` in production, a plain dict in
tests).

Recognized variables (lower-case name checked first, then upper-case):
- smtp_server: SMTP server as ``host:port``
- smtp_username: SMTP authentication user
- smtp_password: SMTP authentication password
- ayd_mail_from: Sender mailbox, e.g. ``Ayd <ayd@example.com>``
- ayd_url: Base URL of the Ayd server (status page and status feed)
- ayd_mail_log_level: Diagnostic log level (default WARNING)
- ayd_mail_log_format: Diagnostic log format, ``key-value`` or ``json``
"""

import logging
from typing import Mapping, Optional
from urllib.parse import urlsplit

from pydantic import ValidationError

from ayd_mailto_alert.addressing import AddressError, Endpoint, parse_host_port, parse_mailbox

from .exceptions import ConfigurationError
from .models import ConfigDraft, LoggingSettings

logger = logging.getLogger(__name__)

SMTP_SERVER = "smtp_server"
SMTP_USERNAME = "smtp_username"
SMTP_PASSWORD = "smtp_password"
MAIL_FROM = "ayd_mail_from"
AYD_URL = "ayd_url"
LOG_LEVEL = "ayd_mail_log_level"
LOG_FORMAT = "ayd_mail_log_format"


def get_env(env: Mapping[str, str], key: str, default: str = "") -> str:
    """Look up a variable by its lower-case name, then its upper-case name.

    Empty values count as unset.

    Args:
        env: Environment mapping
        key: Variable name in any case
        default: Value returned when neither spelling is set

    Returns:
        Variable value or default
    """
    value = env.get(key.lower(), "")
    if not value:
        value = env.get(key.upper(), "")
    return value or default


def apply_environment(draft: ConfigDraft, env: Mapping[str, str]) -> ConfigDraft:
    """Apply environment overrides on top of file-derived settings.

    Args:
        draft: Configuration folded from files so far
        env: Environment mapping

    Returns:
        New draft with overrides applied

    Raises:
        ConfigurationError: If an override has an invalid value
    """
    server = get_env(env, SMTP_SERVER)
    if server:
        try:
            host, port = parse_host_port(server)
        except AddressError as e:
            raise _invalid_variable(SMTP_SERVER, e, draft) from e
        draft = draft.apply_endpoint(Endpoint(host=host, port=port, secure=True))

    username = get_env(env, SMTP_USERNAME)
    if username:
        draft = draft.apply(username=username)

    password = get_env(env, SMTP_PASSWORD)
    if password:
        draft = draft.apply(password=password)

    sender = get_env(env, MAIL_FROM)
    if sender:
        try:
            draft = draft.apply(sender=parse_mailbox(sender))
        except AddressError as e:
            raise _invalid_variable(MAIL_FROM, e, draft) from e

    return draft


def load_status_page_base(env: Mapping[str, str]) -> Optional[str]:
    """Read and validate the ``ayd_url`` variable.

    Returns:
        The base URL, or None when the variable is unset

    Raises:
        ConfigurationError: If the URL is not an absolute http(s) URL
    """
    raw = get_env(env, AYD_URL).strip()
    if not raw:
        return None

    try:
        parts = urlsplit(raw)
    except ValueError as e:
        raise ConfigurationError(f"environment variable `{AYD_URL}` is invalid: {e}") from e

    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise ConfigurationError(
            f"environment variable `{AYD_URL}` is invalid: expected an http or https URL but got '{raw}'"
        )

    return raw


def load_logging_settings(env: Mapping[str, str]) -> LoggingSettings:
    """Read diagnostic logging settings, falling back to defaults when invalid."""
    values = {}
    level = get_env(env, LOG_LEVEL)
    if level:
        values["level"] = level
    log_format = get_env(env, LOG_FORMAT)
    if log_format:
        values["format"] = log_format

    try:
        return LoggingSettings.model_validate(values)
    except ValidationError as e:
        logger.warning(
            f"Ignoring invalid logging settings: {e.error_count()} error(s)",
            extra={"event": "config.logging.invalid", "log_level": level, "log_format": log_format},
        )
        return LoggingSettings()


def _invalid_variable(name: str, error: Exception, draft: ConfigDraft) -> ConfigurationError:
    return ConfigurationError(
        f"environment variable `{name}` is invalid: {error}",
        context=draft.diagnostic_context(),
    )
