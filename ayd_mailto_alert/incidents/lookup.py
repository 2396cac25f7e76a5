"""Incident message lookup from the Ayd status feed.

Older Ayd versions pass a check record without a message. The message of
the latest incident for the target is then recovered from ``status.json``
on the Ayd server. The lookup is best-effort: any failure yields an empty
message and a diagnostic string, never an exception.
"""

from dataclasses import dataclass
from typing import Any, List, Optional
from urllib.parse import urljoin

import requests

from ayd_mailto_alert import PROGRAM_NAME, __version__
from ayd_mailto_alert.logging import get_logger

from .exceptions import IncidentLookupError

logger = get_logger(__name__, component="incidents")

STATUS_FEED_PATH = "status.json"


@dataclass(frozen=True)
class IncidentLookupResult:
    """Outcome of an incident lookup.

    Attributes:
        message: Incident message, empty when unavailable
        error: Diagnostic for fetch/decode failures; None on success or when
            the target simply has no incident
    """

    message: str = ""
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.error is not None


class IncidentLookup:
    """Fetches the status feed and extracts incident messages."""

    def __init__(
        self,
        timeout: int = 30,
        user_agent: str = f"{PROGRAM_NAME}/{__version__}",
        session: Optional[requests.Session] = None,
    ) -> None:
        """Initialize lookup with HTTP settings.

        Args:
            timeout: HTTP request timeout in seconds
            user_agent: User-Agent header for requests
            session: requests session to use (created when None)
        """
        self.timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update({"User-Agent": user_agent})

    def lookup(self, base_url: str, target: str) -> IncidentLookupResult:
        """Find the latest incident message for a target.

        Args:
            base_url: Ayd server base URL; ``status.json`` is resolved against it
            target: Target URL as written in the check record

        Returns:
            IncidentLookupResult; never raises
        """
        url = urljoin(base_url, STATUS_FEED_PATH)

        try:
            incidents = self._fetch_incidents(url)
        except IncidentLookupError as e:
            logger.warning(
                f"Failed to look up incident message: {e}",
                extra={"event": "incident.fetch.failed", "url": url, "status_code": e.status_code},
            )
            return IncidentLookupResult(error=str(e))

        for incident in incidents:
            if isinstance(incident, dict) and incident.get("target") == target:
                message = incident.get("message") or ""
                logger.debug(
                    "Found incident message",
                    extra={"event": "incident.lookup.found", "check_target": target},
                )
                return IncidentLookupResult(message=str(message))

        logger.debug(
            "No incident found for target",
            extra={"event": "incident.lookup.not_found", "check_target": target},
        )
        return IncidentLookupResult()

    def find_message(self, base_url: str, target: str) -> str:
        """Return the latest incident message for a target, or an empty string."""
        return self.lookup(base_url, target).message

    def _fetch_incidents(self, url: str) -> List[Any]:
        logger.debug(
            f"HTTP GET request to {url}",
            extra={"event": "incident.fetch.request", "url": url, "timeout": self.timeout},
        )

        try:
            response = self._session.get(url, timeout=self.timeout)
        except requests.exceptions.Timeout as e:
            raise IncidentLookupError(
                f"request to {url} timed out after {self.timeout} seconds", url=url
            ) from e
        except requests.exceptions.RequestException as e:
            raise IncidentLookupError(f"request to {url} failed: {e}", url=url) from e

        if response.status_code != 200:
            raise IncidentLookupError(
                f"unexpected HTTP {response.status_code} from {url}",
                url=url,
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise IncidentLookupError(
                f"failed to parse JSON response from {url}: {e}",
                url=url,
                status_code=response.status_code,
            ) from e

        return extract_incidents(data, url)


def extract_incidents(data: Any, url: str = STATUS_FEED_PATH) -> List[Any]:
    """Flatten the supported status feed shapes into one incident list.

    Supported shapes:
    - a JSON list of incidents
    - ``{"incidents": [...]}``
    - ``{"current_incidents": [...], "incident_history": [...]}``; current
      incidents come first, then history newest-first

    Raises:
        IncidentLookupError: If the payload matches none of these shapes
    """
    if isinstance(data, list):
        return data

    if not isinstance(data, dict):
        raise IncidentLookupError(
            f"expected JSON object or array from {url}, got {type(data).__name__}", url=url
        )

    if "incidents" in data:
        return _as_list(data["incidents"], "incidents", url)

    if "current_incidents" in data or "incident_history" in data:
        current = _as_list(data.get("current_incidents") or [], "current_incidents", url)
        history = _as_list(data.get("incident_history") or [], "incident_history", url)
        return current + list(reversed(history))

    raise IncidentLookupError(f"no incident list found in response from {url}", url=url)


def _as_list(value: Any, field: str, url: str) -> List[Any]:
    if not isinstance(value, list):
        raise IncidentLookupError(
            f"expected '{field}' to be an array in response from {url}, got {type(value).__name__}",
            url=url,
        )
    return value


def find_message(base_url: str, target: str, lookup: Optional[IncidentLookup] = None) -> str:
    """Module-level convenience wrapper around IncidentLookup.find_message()."""
    return (lookup or IncidentLookup()).find_message(base_url, target)
