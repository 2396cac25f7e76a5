"""Hashing utilities for stable, content-derived identifiers.

This module provides deterministic hashing functions for:
- hash_string: general-purpose SHA256 hex digest
- target_anchor: status page fragment identifier for a monitored target
"""

import hashlib

ANCHOR_PREFIX = "target-"
ANCHOR_LENGTH = 16


def hash_string(value: str) -> str:
    """Compute SHA256 hash of a string value.

    Args:
        value: String to hash

    Returns:
        Hexadecimal string representation of SHA256 hash (64 characters)
    """
    hash_obj = hashlib.sha256(value.encode("utf-8"))
    return hash_obj.hexdigest()


def target_anchor(target: str) -> str:
    """Compute the status page anchor for a target URL.

    The same target always yields the same anchor, so alert links stay valid
    across runs.

    Args:
        target: Target URL exactly as reported in the check record

    Returns:
        Fragment identifier such as ``target-3f2a9c0d1e4b5a6c``

    Example:
        >>> target_anchor("https://example.com") == target_anchor("https://example.com")
        True
    """
    return ANCHOR_PREFIX + hash_string(target.strip())[:ANCHOR_LENGTH]
