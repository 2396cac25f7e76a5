"""Configuration schema models using Pydantic."""

from enum import Enum
from typing import Any, Dict

from pydantic import BaseModel, Field, field_validator

from ayd_mailto_alert.addressing.models import Endpoint, MailboxIdentity

from .exceptions import MissingFieldError

DEFAULT_SENDER = MailboxIdentity(name="Ayd? Alert", address="ayd@localhost")


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


class LoggingSettings(BaseModel):
    """Diagnostic logging settings (written to stderr)."""

    level: LogLevel = Field(LogLevel.WARNING, description="Log level")
    format: LogFormat = Field(LogFormat.KEY_VALUE, description="Log output format (json or key-value)")

    model_config = {"use_enum_values": True, "validate_default": True}

    @field_validator("level", mode="before")
    @classmethod
    def uppercase_level(cls, v: Any) -> Any:
        """Accept log levels in any case."""
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @field_validator("format", mode="before")
    @classmethod
    def lowercase_format(cls, v: Any) -> Any:
        """Accept log formats in any case."""
        if isinstance(v, str):
            return v.strip().lower()
        return v


class SMTPConfig(BaseModel):
    """Resolved SMTP and identity settings.

    Only ever constructed from a fully populated draft; every required field
    is non-empty.
    """

    host: str = Field(..., min_length=1, description="SMTP server host")
    port: int = Field(..., ge=1, le=65535, description="SMTP server port")
    secure: bool = Field(True, description="TLS mandatory (True) or opportunistic (False)")
    username: str = Field(..., min_length=1, description="SMTP auth user")
    password: str = Field(..., min_length=1, description="SMTP auth password")
    sender: MailboxIdentity = Field(DEFAULT_SENDER, description="Default From identity")

    model_config = {"frozen": True}

    def diagnostic_context(self) -> Dict[str, Any]:
        """Fields included in outcome reports for operator triage."""
        return {"smtp_server": self.host, "from_address": str(self.sender)}


class ConfigDraft(BaseModel):
    """In-progress configuration while folding sources.

    Each source produces a new draft via ``apply_*``; the draft becomes an
    SMTPConfig only through ``finalize()``.
    """

    host: str = ""
    port: int = 0
    secure: bool = True
    username: str = ""
    password: str = ""
    sender: MailboxIdentity = DEFAULT_SENDER

    model_config = {"frozen": True}

    def apply_endpoint(self, endpoint: Endpoint) -> "ConfigDraft":
        return self.model_copy(
            update={"host": endpoint.host, "port": endpoint.port, "secure": endpoint.secure}
        )

    def apply(self, **changes: Any) -> "ConfigDraft":
        return self.model_copy(update=changes)

    def diagnostic_context(self) -> Dict[str, Any]:
        """Diagnostic fields, available once a server is known."""
        if not self.host:
            return {}
        return {"smtp_server": self.host, "from_address": str(self.sender)}

    def finalize(self) -> SMTPConfig:
        """Validate required fields and build the immutable config.

        Required fields are checked in a fixed order and only the first
        missing one is reported.

        Raises:
            MissingFieldError: If host, username or password is empty
        """
        context = self.diagnostic_context()
        if not self.host:
            raise MissingFieldError("SMTP_SERVER", context=context)
        if not self.username:
            raise MissingFieldError("SMTP_USERNAME", context=context)
        if not self.password:
            raise MissingFieldError("SMTP_PASSWORD", context=context)

        return SMTPConfig(
            host=self.host,
            port=self.port,
            secure=self.secure,
            username=self.username,
            password=self.password,
            sender=self.sender,
        )

