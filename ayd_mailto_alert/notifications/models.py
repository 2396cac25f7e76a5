"""Data models and exceptions for alert dispatch.

This module defines the dispatch state machine, its result type and the
custom exceptions used throughout the notification pipeline.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Tuple


class NotificationError(Exception):
    """Base exception for notification-related errors."""

    pass


class NotificationTemplateError(NotificationError):
    """Raised when template rendering fails due to configuration or missing variables."""

    pass


class SMTPDeliveryError(NotificationError):
    """Raised when the SMTP session fails to deliver the message."""

    pass


class DispatchState(str, Enum):
    """Stages of a single alert dispatch.

    INIT -> CONFIG_RESOLVED -> ADDRESSES_RESOLVED -> MESSAGE_COMPOSED -> SENT,
    with FAILED reachable from every stage before SENT.
    """

    INIT = "INIT"
    CONFIG_RESOLVED = "CONFIG_RESOLVED"
    ADDRESSES_RESOLVED = "ADDRESSES_RESOLVED"
    MESSAGE_COMPOSED = "MESSAGE_COMPOSED"
    SENT = "SENT"
    FAILED = "FAILED"


OUTCOME_HEALTHY = "healthy"
OUTCOME_FAILURE = "failure"
OUTCOME_UNKNOWN = "unknown"


@dataclass
class DispatchResult:
    """Result of dispatching one alert.

    Mirrors the outcome record written to the supervisor, so callers and tests
    can inspect it without parsing stdout.

    Attributes:
        state: Final dispatch state (SENT or FAILED)
        outcome: Reported outcome ("healthy", "failure" or "unknown")
        message: Reported outcome message
        recipients: Rendered recipient addresses, empty if never resolved
        extra: Diagnostic fields attached to the outcome record
    """

    state: DispatchState
    outcome: str
    message: str
    recipients: Tuple[str, ...] = ()
    extra: Dict[str, Any] = field(default_factory=dict)

    def is_success(self) -> bool:
        """Check if the alert was delivered.

        Returns:
            True if the dispatch reached SENT
        """
        return self.state == DispatchState.SENT
