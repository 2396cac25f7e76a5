"""Check record models and decoding."""

from .models import CheckRecord, CheckStatus
from .parser import RecordParseError, parse_record

__all__ = [
    "CheckRecord",
    "CheckStatus",
    "RecordParseError",
    "parse_record",
]
