"""Parsing and validation of mailboxes, SMTP endpoints and alert URLs.

Everything in this package is pure: no state, no I/O.
"""

from .alert_url import ALERT_SCHEME, parse_alert_url, split_alert_url
from .endpoint import parse_endpoint, parse_host_port, parse_smtp_url
from .exceptions import (
    AddressError,
    InvalidAddressError,
    InvalidPortError,
    MissingHostError,
    MissingPortError,
    UnsupportedProtocolError,
)
from .mailbox import format_mailbox, format_mailbox_list, parse_mailbox, parse_mailbox_list
from .models import AlertTarget, Endpoint, MailboxIdentity

__all__ = [
    # Models
    "AlertTarget",
    "Endpoint",
    "MailboxIdentity",
    # Parsers
    "parse_alert_url",
    "split_alert_url",
    "parse_endpoint",
    "parse_host_port",
    "parse_smtp_url",
    "parse_mailbox",
    "parse_mailbox_list",
    "format_mailbox",
    "format_mailbox_list",
    "ALERT_SCHEME",
    # Exceptions
    "AddressError",
    "InvalidAddressError",
    "InvalidPortError",
    "MissingHostError",
    "MissingPortError",
    "UnsupportedProtocolError",
]
