"""Decoding of serialized check records.

Ayd hands the record that triggered the alert to the plugin as a single
argument. Two encodings exist:

- JSON (current)::

    {"time": "2021-01-02T15:04:05Z", "status": "FAILURE", "latency": 12.3,
     "target": "https://example.com", "message": "timeout", "code": 503}

  Any key other than the five standard ones is kept in ``extra`` in the
  order it appears.

- Tab-separated (legacy)::

    2021-01-02T15:04:05Z<TAB>FAILURE<TAB>12.300<TAB>https://example.com<TAB>timeout
"""

import json
from typing import Any, Dict

from pydantic import ValidationError

from ayd_mailto_alert.utils.timestamps import parse_iso_datetime

from .models import CheckRecord, CheckStatus

STANDARD_FIELDS = ("time", "status", "latency", "target", "message")


class RecordParseError(ValueError):
    """Raised when a serialized check record cannot be decoded."""

    pass


def parse_record(raw: str) -> CheckRecord:
    """Decode a check record in either JSON or legacy tab-separated form.

    Args:
        raw: Serialized record

    Returns:
        Parsed CheckRecord

    Raises:
        RecordParseError: If the record is malformed
    """
    text = raw.strip()
    if not text:
        raise RecordParseError("invalid record: empty string")

    if text.startswith("{"):
        return _parse_json_record(text)
    return _parse_tsv_record(raw)


def _parse_json_record(text: str) -> CheckRecord:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise RecordParseError(f"invalid record: {e}") from e

    if not isinstance(data, dict):
        raise RecordParseError("invalid record: expected JSON object")

    time_str = data.get("time")
    if not isinstance(time_str, str):
        raise RecordParseError("invalid record: missing time")

    status = data.get("status")
    if not isinstance(status, str):
        raise RecordParseError("invalid record: missing status")

    latency = data.get("latency", 0.0)
    if not isinstance(latency, (int, float)) or isinstance(latency, bool):
        raise RecordParseError(f"invalid record: latency must be a number, got {latency!r}")

    message = data.get("message", "")
    if message is None:
        message = ""

    extra: Dict[str, Any] = {k: v for k, v in data.items() if k not in STANDARD_FIELDS}

    return _build_record(time_str, status, float(latency), data.get("target"), str(message), extra)


def _parse_tsv_record(raw: str) -> CheckRecord:
    columns = raw.rstrip("\r\n").split("\t", 4)
    if len(columns) < 4:
        raise RecordParseError(
            f"invalid record: expected at least 4 tab-separated columns but got {len(columns)}"
        )

    time_str, status, latency_str, target = (c.strip() for c in columns[:4])
    message = columns[4] if len(columns) > 4 else ""

    try:
        latency = float(latency_str)
    except ValueError as e:
        raise RecordParseError(f"invalid record: invalid latency '{latency_str}'") from e

    return _build_record(time_str, status, latency, target, message, {})


def _build_record(time_str, status, latency, target, message, extra) -> CheckRecord:
    checked_at = parse_iso_datetime(time_str)
    if checked_at is None:
        raise RecordParseError(f"invalid record: invalid time '{time_str}'")

    if not isinstance(target, str) or not target.strip():
        raise RecordParseError("invalid record: missing target")

    try:
        return CheckRecord(
            time=checked_at,
            status=CheckStatus.parse(status),
            latency=latency,
            target=target.strip(),
            message=message,
            extra=extra,
        )
    except ValidationError as e:
        raise RecordParseError(f"invalid record: {e}") from e
