"""Custom exceptions for address and URL parsing."""

from typing import Optional


class AddressError(ValueError):
    """Base exception for all address parsing errors.

    Catching this exception will catch any malformed mailbox, mailbox list,
    SMTP endpoint or alert URL error.
    """

    pass


class InvalidAddressError(AddressError):
    """A mailbox, mailbox list or URL could not be parsed.

    Carries the offending fragment so that operators can see which part of
    a recipient list was rejected.
    """

    def __init__(self, message: str, fragment: Optional[str] = None) -> None:
        """Initialize invalid address error.

        Args:
            message: Human-readable error message
            fragment: The part of the input that failed to parse
        """
        super().__init__(message)
        self.fragment = fragment


class UnsupportedProtocolError(AddressError):
    """SMTP endpoint URL uses a scheme other than smtp or smtps."""

    def __init__(self, scheme: str) -> None:
        """Initialize with the rejected scheme.

        Args:
            scheme: URL scheme as written by the user
        """
        super().__init__(f"unsupported protocol: '{scheme}'")
        self.scheme = scheme


class MissingHostError(AddressError):
    """Endpoint address has a port but no host."""

    def __init__(self, address: str) -> None:
        super().__init__(f"address {address}: missing host in address")
        self.address = address


class MissingPortError(AddressError):
    """Endpoint address has no port and no default applies."""

    def __init__(self, address: str) -> None:
        super().__init__(f"address {address}: missing port in address")
        self.address = address


class InvalidPortError(AddressError):
    """Endpoint port is not a number between 1 and 65535."""

    def __init__(self, address: str) -> None:
        super().__init__(f"address {address}: invalid port")
        self.address = address
