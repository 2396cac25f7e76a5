"""Custom exceptions for the status feed lookup."""

from typing import Optional


class IncidentLookupError(Exception):
    """Fetching or decoding the status feed failed.

    Never escapes IncidentLookup.lookup(); it is turned into a non-fatal
    diagnostic on the lookup result.
    """

    def __init__(self, message: str, url: str, status_code: Optional[int] = None) -> None:
        """Initialize lookup error.

        Args:
            message: Human-readable error message
            url: Status feed URL that failed
            status_code: HTTP status code, when a response was received
        """
        super().__init__(message)
        self.url = url
        self.status_code = status_code
