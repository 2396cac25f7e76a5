"""SMTP endpoint parsing.

Accepts the two spellings used by mailrc files and environment variables:
- ``smtps://smtp.gmail.com`` / ``smtp://example.com:25`` (URL form)
- ``example.com:587`` / ``[::1]:25`` (bare host:port form)
"""

from typing import Tuple
from urllib.parse import urlsplit

from .exceptions import (
    InvalidAddressError,
    InvalidPortError,
    MissingHostError,
    MissingPortError,
    UnsupportedProtocolError,
)
from .models import Endpoint

DEFAULT_PORTS = {
    "smtp": 25,
    "smtps": 465,
}

SECURE_SCHEMES = {"smtps"}


def parse_host_port(raw: str) -> Tuple[str, int]:
    """Split a bare ``host:port`` address.

    IPv6 hosts must be bracketed (``[::1]:25``); brackets are removed from
    the returned host.

    Args:
        raw: Address string

    Returns:
        Tuple of (host, port)

    Raises:
        MissingPortError: If there is no port
        InvalidPortError: If the port is not an integer in 1..65535
        MissingHostError: If the host part is empty
        InvalidAddressError: If the address is otherwise malformed
    """
    address = raw.strip()

    if address.startswith("["):
        end = address.find("]")
        if end < 0:
            raise InvalidAddressError(f"address {address}: missing ']' in address", fragment=address)
        host = address[1:end]
        rest = address[end + 1:]
        if not rest.startswith(":"):
            raise MissingPortError(address)
        port_str = rest[1:]
    else:
        host, sep, port_str = address.rpartition(":")
        if not sep:
            raise MissingPortError(address)
        if ":" in host:
            raise InvalidAddressError(f"address {address}: too many colons in address", fragment=address)

    if not port_str.isascii() or not port_str.isdigit():
        raise InvalidPortError(address)
    port = int(port_str)
    if port < 1 or port > 65535:
        raise InvalidPortError(address)

    if not host:
        raise MissingHostError(address)

    return host, port


def parse_smtp_url(raw: str) -> Endpoint:
    """Parse an ``smtp://`` or ``smtps://`` URL.

    The scheme decides the TLS policy and the default port. Userinfo and
    path components are ignored.

    Args:
        raw: URL string

    Returns:
        Endpoint with host, port and secure flag

    Raises:
        UnsupportedProtocolError: If the scheme is neither smtp nor smtps
        AddressError: If the host or port part is invalid
    """
    try:
        parts = urlsplit(raw.strip())
    except ValueError as e:
        raise InvalidAddressError(f"invalid SMTP URL '{raw}': {e}", fragment=raw) from e

    scheme = parts.scheme.lower()
    if scheme not in DEFAULT_PORTS:
        raise UnsupportedProtocolError(parts.scheme)

    hostport = parts.netloc.rpartition("@")[2]
    if hostport.endswith(":"):
        hostport = hostport[:-1]

    # A colon inside IPv6 brackets is not a port separator
    if hostport.rfind(":") <= hostport.rfind("]"):
        hostport = f"{hostport}:{DEFAULT_PORTS[scheme]}"

    host, port = parse_host_port(hostport)
    return Endpoint(host=host, port=port, secure=scheme in SECURE_SCHEMES)


def parse_endpoint(raw: str) -> Endpoint:
    """Parse an SMTP endpoint in either URL or bare ``host:port`` form.

    A bare address has no scheme to derive the TLS policy from, so it is
    treated as secure.

    Args:
        raw: Endpoint string

    Returns:
        Endpoint with host, port and secure flag

    Raises:
        AddressError: If the endpoint cannot be parsed
    """
    if "://" in raw:
        return parse_smtp_url(raw)

    host, port = parse_host_port(raw)
    return Endpoint(host=host, port=port, secure=True)
