"""Outcome reporting back to Ayd.

Ayd reads the plugin's stdout and treats every JSON line as a result record
for the alert target::

    {"time": "2021-01-02T15:04:05Z", "status": "HEALTHY", "latency": 812.519,
     "target": "mailto:ops@example.org", "message": "sent alert to ops@example.org",
     "smtp_server": "smtp.example.com", "from_address": "Ayd? Alert <ayd@localhost>"}

Each invocation reports exactly one such record.
"""

import json
import logging
import sys
import time
from datetime import datetime, timezone
from typing import IO, Any, Callable, Dict, Optional

from ayd_mailto_alert.utils.timestamps import format_timestamp

from . import get_logger

logger = get_logger(__name__, component="outcome")

STATUS_HEALTHY = "HEALTHY"
STATUS_FAILURE = "FAILURE"
STATUS_UNKNOWN = "UNKNOWN"

RECORD_FIELDS = ("time", "status", "latency", "target", "message")

_LEVELS = {
    STATUS_HEALTHY: logging.INFO,
    STATUS_UNKNOWN: logging.WARNING,
    STATUS_FAILURE: logging.ERROR,
}


class AydRecordFormatter(logging.Formatter):
    """Formats an outcome log record as one Ayd JSON result record."""

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        log_obj: Dict[str, Any] = {
            "time": format_timestamp(created),
            "status": getattr(record, "ayd_status", STATUS_UNKNOWN),
            "latency": getattr(record, "latency", 0.0),
            "target": getattr(record, "target", ""),
            "message": record.getMessage(),
        }

        for key, value in getattr(record, "fields", {}).items():
            if key not in RECORD_FIELDS:
                log_obj[key] = value

        return json.dumps(log_obj, ensure_ascii=False, default=str)


class OutcomeReporter:
    """Reports the single outcome of an invocation.

    The latency written to the record is the time elapsed since the
    reporter was created, in milliseconds.
    """

    def __init__(
        self,
        target: str,
        stream: Optional[IO[str]] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize reporter for an alert target.

        Args:
            target: Alert URL reported as the record target (without query)
            stream: Output stream, stdout by default
            clock: Monotonic clock in seconds (injectable for tests)
        """
        self.target = target
        self.clock = clock
        self.started_at = clock()
        self.reported: Optional[str] = None

        # Private logger: not registered globally, never propagates to root
        self._logger = logging.Logger(f"{__name__}.record", level=logging.DEBUG)
        handler = logging.StreamHandler(stream if stream is not None else sys.stdout)
        handler.setFormatter(AydRecordFormatter())
        self._logger.addHandler(handler)

    def healthy(self, message: str, fields: Optional[Dict[str, Any]] = None) -> None:
        self.report(STATUS_HEALTHY, message, fields)

    def failure(self, message: str, fields: Optional[Dict[str, Any]] = None) -> None:
        self.report(STATUS_FAILURE, message, fields)

    def unknown(self, message: str, fields: Optional[Dict[str, Any]] = None) -> None:
        self.report(STATUS_UNKNOWN, message, fields)

    def report(self, status: str, message: str, fields: Optional[Dict[str, Any]] = None) -> None:
        """Write the outcome record.

        Args:
            status: HEALTHY, FAILURE or UNKNOWN
            message: Human-readable outcome, including any error detail
            fields: Additional diagnostic fields

        Raises:
            RuntimeError: If an outcome was already reported
        """
        if self.reported is not None:
            raise RuntimeError(f"outcome already reported as {self.reported}")

        fields = {k: v for k, v in (fields or {}).items() if k not in RECORD_FIELDS}
        latency = round((self.clock() - self.started_at) * 1000, 3)
        level = _LEVELS.get(status, logging.WARNING)

        self._logger.log(
            level,
            message,
            extra={"ayd_status": status, "latency": latency, "target": self.target, "fields": fields},
        )
        self.reported = status

        logger.log(
            level,
            f"Reported {status}: {message}",
            extra={"event": "outcome.reported", "status": status, "latency_ms": latency, **fields},
        )
