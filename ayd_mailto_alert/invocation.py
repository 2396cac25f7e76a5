"""Command-line invocation model.

Ayd runs the plugin as ``ayd-mailto-alert ALERT_URL RECORD``. Only the shape
of both arguments is checked here; recipients and configuration are
resolved later by the dispatcher, so that their errors are reported to Ayd
instead of stderr.
"""

from typing import Tuple

from pydantic import BaseModel

from ayd_mailto_alert.addressing import AddressError, split_alert_url
from ayd_mailto_alert.checks import CheckRecord, RecordParseError, parse_record


class UsageError(Exception):
    """The command line is malformed. Reported on stderr with exit code 2."""

    pass


class Invocation(BaseModel):
    """One alert request: the alert channel URL and the record to send."""

    alert_url: str
    record: CheckRecord

    model_config = {"frozen": True}

    @property
    def alert_parts(self) -> Tuple[str, str, str]:
        return split_alert_url(self.alert_url)

    @property
    def outcome_target(self) -> str:
        """Alert URL without its query, as the target of the outcome record."""
        scheme, opaque, _ = self.alert_parts
        return f"{scheme}:{opaque}"


def parse_invocation(alert_url: str, record: str) -> Invocation:
    """Validate the two positional arguments.

    Args:
        alert_url: Alert channel URL, e.g. ``mailto:ops@example.org``
        record: Serialized check record

    Returns:
        Immutable Invocation

    Raises:
        UsageError: If the alert URL or the record is malformed
    """
    try:
        split_alert_url(alert_url)
    except AddressError as e:
        raise UsageError(str(e)) from e

    try:
        parsed = parse_record(record)
    except RecordParseError as e:
        raise UsageError(str(e)) from e

    return Invocation(alert_url=alert_url, record=parsed)
