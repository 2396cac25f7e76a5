"""Alert-channel URL parsing.

Ayd passes the alert channel as a ``mailto:`` URL::

    mailto:ops@example.org,Me <me@example.com>?from=Ayd <ayd@example.com>

The opaque part is the recipient list and the optional ``from`` query
parameter overrides the configured sender.
"""

from typing import List, Tuple
from urllib.parse import unquote, urlsplit

from .exceptions import InvalidAddressError
from .mailbox import parse_mailbox, parse_mailbox_list
from .models import AlertTarget

ALERT_SCHEME = "mailto"


def split_alert_url(raw: str) -> Tuple[str, str, str]:
    """Split an alert URL into scheme, opaque part and query.

    Only the shape is checked here; recipients are not parsed.

    Args:
        raw: Alert URL as passed on the command line

    Returns:
        Tuple of (scheme, opaque, query), opaque and query still percent-encoded

    Raises:
        InvalidAddressError: If the URL has no scheme or no opaque part
    """
    try:
        parts = urlsplit(raw.strip())
    except ValueError as e:
        raise InvalidAddressError(f"invalid alert URL '{raw}': {e}", fragment=raw) from e

    if not parts.scheme:
        raise InvalidAddressError(f"invalid alert URL '{raw}': missing scheme", fragment=raw)

    opaque = parts.netloc + parts.path if parts.netloc else parts.path
    if not opaque:
        raise InvalidAddressError(f"invalid alert URL '{raw}': missing recipients", fragment=raw)

    return parts.scheme.lower(), opaque, parts.query


def _query_values(query: str, key: str) -> List[str]:
    """Return every value of ``key`` in a query string, in order.

    Values are percent-decoded like the recipient list, so ``+`` stays a
    literal plus sign (``alerts+ayd@example.com``).
    """
    values = []
    for pair in query.split("&"):
        name, _, value = pair.partition("=")
        if unquote(name) == key:
            values.append(unquote(value))
    return values


def parse_alert_url(raw: str, expected_scheme: str = ALERT_SCHEME) -> AlertTarget:
    """Parse an alert URL into its recipients and optional sender override.

    Args:
        raw: Alert URL, e.g. ``mailto:ops@example.org?from=ayd@example.com``
        expected_scheme: Channel scheme this plugin handles

    Returns:
        AlertTarget with at least one recipient

    Raises:
        InvalidAddressError: If the scheme does not match or any mailbox is invalid
    """
    scheme, opaque, query = split_alert_url(raw)

    if scheme != expected_scheme:
        raise InvalidAddressError(
            f"unsupported alert scheme '{scheme}': expected '{expected_scheme}'",
            fragment=raw,
        )

    recipients = parse_mailbox_list(unquote(opaque))

    override_from = None
    senders = _query_values(query, "from")
    if senders:
        override_from = parse_mailbox(senders[-1])

    return AlertTarget(
        scheme=scheme,
        opaque=opaque,
        recipients=recipients,
        override_from=override_from,
    )
