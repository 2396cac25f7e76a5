"""Alert composition and delivery.

This module provides the complete alert pipeline:
- AlertDispatcher: orchestrates one alert and reports its outcome
- DispatchResult / DispatchState: dispatch outcome and state machine
- compose_alert: builds the template context from a check record
- TemplateRenderer: Jinja2-based alert body rendering
- SMTPClient: SMTP wrapper with implicit TLS and STARTTLS policies
"""

from .composer import (
    DEFAULT_STATUS_PAGE_BASE,
    AnchorStrategy,
    RenderContext,
    build_status_page_url,
    compose_alert,
    resolve_status_page_base,
)
from .models import (
    DispatchResult,
    DispatchState,
    NotificationError,
    NotificationTemplateError,
    SMTPDeliveryError,
)
from .service import AlertDispatcher
from .smtp_client import SMTPClient
from .templates import TemplateRenderer

__all__ = [
    # Main service
    "AlertDispatcher",
    # Models and results
    "DispatchResult",
    "DispatchState",
    "RenderContext",
    # Exceptions
    "NotificationError",
    "NotificationTemplateError",
    "SMTPDeliveryError",
    # Components
    "TemplateRenderer",
    "SMTPClient",
    # Composition
    "AnchorStrategy",
    "DEFAULT_STATUS_PAGE_BASE",
    "build_status_page_url",
    "compose_alert",
    "resolve_status_page_base",
]
