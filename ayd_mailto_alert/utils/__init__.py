"""Utility functions for hashing and time handling."""

from .hashing import hash_string, target_anchor
from .timestamps import ensure_utc, format_timestamp, parse_iso_datetime, utc_now

__all__ = [
    # Hashing
    "hash_string",
    "target_anchor",
    # Timestamps
    "utc_now",
    "ensure_utc",
    "parse_iso_datetime",
    "format_timestamp",
]
