"""Alert content composition.

Builds the RenderContext shared by the subject line and both body templates
from a check record. Composition is deterministic: the same record, base URL
and message always produce the same context.
"""

import json
from typing import Callable, Mapping, Optional, Tuple
from urllib.parse import urljoin

from pydantic import BaseModel

from ayd_mailto_alert.checks import CheckRecord, CheckStatus
from ayd_mailto_alert.config.environment import load_status_page_base
from ayd_mailto_alert.utils.hashing import target_anchor
from ayd_mailto_alert.utils.timestamps import format_timestamp

DEFAULT_STATUS_PAGE_BASE = "http://localhost:9000"
STATUS_PAGE_PATH = "status.html"
RESOLVED_LABEL = "RESOLVED"

AnchorStrategy = Callable[[str], str]


class RenderContext(BaseModel):
    """Values available to the alert templates."""

    subject: str
    status_page_url: Optional[str] = None
    target: str
    checked_at: str
    status: str
    message: str = ""

    model_config = {"frozen": True}


def status_label(status: CheckStatus) -> str:
    """Label shown to the reader: RESOLVED for healthy checks, else the status name."""
    if status == CheckStatus.HEALTHY:
        return RESOLVED_LABEL
    return status.value


def build_subject(label: str, target: str) -> str:
    return f"[{label}] {target}"


def build_status_page_url(
    base_url: Optional[str],
    target: str,
    anchor_strategy: Optional[AnchorStrategy] = None,
) -> Optional[str]:
    """Resolve the status page against the Ayd base URL.

    Args:
        base_url: Ayd server base URL, or None
        target: Target URL the link should point at
        anchor_strategy: Maps a target to a fragment identifier; no fragment
            is added when None

    Returns:
        Absolute status page URL, or None without a base URL
    """
    if not base_url:
        return None

    url = urljoin(base_url, STATUS_PAGE_PATH)
    if anchor_strategy is not None:
        url = f"{url}#{anchor_strategy(target)}"
    return url


def format_message(message: str, extra: Mapping) -> str:
    """Append the record's extra fields to the message as indented JSON."""
    if not extra:
        return message

    dumped = json.dumps(dict(extra), indent=2, ensure_ascii=False, default=str)
    if message:
        return f"{message}\n\n{dumped}"
    return dumped


def compose_alert(
    record: CheckRecord,
    status_page_base: Optional[str] = None,
    message: Optional[str] = None,
    anchor_strategy: Optional[AnchorStrategy] = None,
) -> RenderContext:
    """Build the render context for a check record.

    Args:
        record: Check record being alerted on
        status_page_base: Ayd server base URL for the status page link
        message: Message to show instead of the record's own (e.g. one
            recovered from the status feed)
        anchor_strategy: Deep-link anchor strategy for the status page URL

    Returns:
        RenderContext for the templates
    """
    label = status_label(record.status)
    body_message = record.message if message is None else message

    return RenderContext(
        subject=build_subject(label, record.target),
        status_page_url=build_status_page_url(status_page_base, record.target, anchor_strategy),
        target=record.target,
        checked_at=format_timestamp(record.time),
        status=label,
        message=format_message(body_message, record.extra),
    )


def resolve_status_page_base(env: Mapping[str, str]) -> Tuple[str, bool]:
    """Determine the status page base URL and whether to deep-link.

    Deep links are only generated for an explicitly configured Ayd server;
    the built-in default serves a plain status page link.

    Returns:
        Tuple of (base URL, anchored)

    Raises:
        ConfigurationError: If ``ayd_url`` is set but invalid
    """
    base = load_status_page_base(env)
    if base is None:
        return DEFAULT_STATUS_PAGE_BASE, False
    return base, True


def default_anchor_strategy(anchored: bool) -> Optional[AnchorStrategy]:
    return target_anchor if anchored else None
