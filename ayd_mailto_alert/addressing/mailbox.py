"""Mailbox and mailbox-list parsing.

Mailbox lists follow the RFC 5322 ``address-list`` syntax used in ``To``
headers, e.g. ``me <me@example.com>, you@example.org``. Splitting is done by
the standard library header parser; each addr-spec is then validated with
email-validator. Quoted local parts, domain literals and reserved names such
as ``localhost`` or ``corp.local`` are valid mailbox syntax and are accepted.
"""

import logging
from email.utils import getaddresses
from typing import Iterable, Tuple

import email_validator
from email_validator import EmailNotValidError, validate_email

from .exceptions import InvalidAddressError
from .models import MailboxIdentity

logger = logging.getLogger(__name__)

# Reserved names (localhost, *.local, *.test, ...) are syntactically valid
# mailboxes; the list is read by email-validator on every call.
email_validator.SPECIAL_USE_DOMAIN_NAMES.clear()


def parse_mailbox_list(raw: str) -> Tuple[MailboxIdentity, ...]:
    """Parse and validate a comma-separated mailbox list.

    Args:
        raw: Mailbox list, e.g. ``"me <me@example.com>, you@example.org"``

    Returns:
        Tuple of MailboxIdentity in the order they were written

    Raises:
        InvalidAddressError: If the list is empty or any mailbox is invalid
    """
    if raw is None or not raw.strip():
        raise InvalidAddressError("no mail address found", fragment=raw or "")

    mailboxes = []
    for name, address in getaddresses([raw]):
        name = name.strip()
        address = address.strip()

        # Empty elements such as a trailing comma
        if not name and not address:
            continue

        mailboxes.append(_validate_mailbox(name, address))

    if not mailboxes:
        raise InvalidAddressError(f"no mail address found in '{raw}'", fragment=raw)

    return tuple(mailboxes)


def parse_mailbox(raw: str) -> MailboxIdentity:
    """Parse exactly one mailbox.

    Args:
        raw: Mailbox, e.g. ``"Ayd? Alert <ayd@example.com>"``

    Returns:
        Parsed MailboxIdentity

    Raises:
        InvalidAddressError: If the mailbox is invalid or more than one is given
    """
    mailboxes = parse_mailbox_list(raw)
    if len(mailboxes) != 1:
        raise InvalidAddressError(
            f"expected a single mail address but got {len(mailboxes)} in '{raw}'",
            fragment=raw,
        )
    return mailboxes[0]


def format_mailbox(mailbox: MailboxIdentity) -> str:
    """Render a mailbox as ``Name <address>``, or the bare address without a name."""
    return str(mailbox)


def format_mailbox_list(mailboxes: Iterable[MailboxIdentity]) -> str:
    """Render mailboxes as a comma-separated mailbox list."""
    return ", ".join(format_mailbox(m) for m in mailboxes)


def _validate_mailbox(name: str, address: str) -> MailboxIdentity:
    fragment = f"{name} <{address}>" if name else address

    if not address:
        raise InvalidAddressError(f"invalid mail address '{fragment}': missing address", fragment=fragment)

    try:
        validated = validate_email(
            address,
            check_deliverability=False,
            globally_deliverable=False,
            allow_quoted_local=True,
            allow_domain_literal=True,
        )
    except EmailNotValidError as e:
        raise InvalidAddressError(f"invalid mail address '{fragment}': {e}", fragment=fragment) from e

    logger.debug(f"Parsed mailbox {validated.normalized}")
    return MailboxIdentity(name=name, address=validated.normalized)
