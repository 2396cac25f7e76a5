"""Alert dispatch service.

This module provides the AlertDispatcher class that orchestrates one alert:
configuration resolution, recipient parsing, optional incident lookup,
template rendering and SMTP delivery. Every dispatch reports exactly one
outcome to Ayd, whatever goes wrong along the way.
"""

import logging
from email.message import EmailMessage
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Tuple, Union

from ayd_mailto_alert.addressing import (
    AddressError,
    AlertTarget,
    MailboxIdentity,
    format_mailbox_list,
    parse_alert_url,
)
from ayd_mailto_alert.config import ConfigurationError, SMTPConfig, resolve_config
from ayd_mailto_alert.incidents import IncidentLookup
from ayd_mailto_alert.invocation import Invocation
from ayd_mailto_alert.logging import get_logger
from ayd_mailto_alert.logging.context import log_context
from ayd_mailto_alert.logging.outcome import OutcomeReporter

from .composer import RenderContext, compose_alert, default_anchor_strategy, resolve_status_page_base
from .models import (
    OUTCOME_FAILURE,
    OUTCOME_HEALTHY,
    OUTCOME_UNKNOWN,
    DispatchResult,
    DispatchState,
    NotificationError,
    SMTPDeliveryError,
)
from .smtp_client import SMTPClient
from .templates import TemplateRenderer

logger = get_logger(__name__, component="dispatcher")

ReporterFactory = Callable[[str], OutcomeReporter]


class _DispatchFailed(Exception):
    """Internal control flow: a stage failed and the outcome is known."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AlertDispatcher:
    """Dispatches one alert and reports its outcome.

    Stages run in order and each one only starts when the previous one
    succeeded:
    1. Resolve SMTP configuration (files, then environment)
    2. Parse recipients and sender override from the alert URL
    3. Recover the incident message when the record has none
    4. Compose and render the alert
    5. Deliver via SMTP

    The SMTP session is opened only after all content is resolved.
    """

    def __init__(
        self,
        template_renderer: Optional[TemplateRenderer] = None,
        smtp_client: Optional[SMTPClient] = None,
        incident_lookup: Optional[IncidentLookup] = None,
        reporter_factory: Optional[ReporterFactory] = None,
        logger_instance: Optional[logging.Logger] = None,
    ):
        """Initialize dispatcher.

        Args:
            template_renderer: Template renderer instance (creates default if None)
            smtp_client: SMTP client instance (creates default if None)
            incident_lookup: Status feed lookup (creates default if None)
            reporter_factory: Builds the outcome reporter for an alert target
            logger_instance: Logger instance (uses module logger if None)
        """
        self.template_renderer = template_renderer or TemplateRenderer()
        self.smtp_client = smtp_client or SMTPClient()
        self.incident_lookup = incident_lookup or IncidentLookup()
        self.reporter_factory = reporter_factory or OutcomeReporter
        self.logger = logger_instance or logger

    def dispatch(
        self,
        invocation: Invocation,
        env: Mapping[str, str],
        config_paths: Iterable[Union[str, Path]],
    ) -> DispatchResult:
        """Send the alert for an invocation and report the outcome.

        Never raises: every failure after argument parsing becomes a failure
        outcome.

        Args:
            invocation: Parsed command-line invocation
            env: Environment mapping
            config_paths: mailrc files to fold, in order

        Returns:
            DispatchResult mirroring the reported outcome
        """
        record = invocation.record
        reporter = self.reporter_factory(invocation.outcome_target)

        with log_context(alert_target=invocation.outcome_target, check_target=record.target):
            state = DispatchState.INIT
            extra: Dict[str, Any] = {}
            recipients: Tuple[str, ...] = ()

            try:
                config = self._resolve_config(env, config_paths, extra)
                state = DispatchState.CONFIG_RESOLVED

                target = self._resolve_target(invocation.alert_url)
                recipients = tuple(str(r) for r in target.recipients)
                if target.override_from is not None:
                    extra["from_address"] = str(target.override_from)
                state = DispatchState.ADDRESSES_RESOLVED

                context, lookup_error = self._compose(record, env)
                message = self._build_message(context, config, target)
                state = DispatchState.MESSAGE_COMPOSED
                self.logger.debug(
                    f"Alert composed: {context.subject}",
                    extra={"event": "notification.compose.success", "state": state.value},
                )

                self._deliver(message, config)
                state = DispatchState.SENT

            except _DispatchFailed as e:
                return self._fail(reporter, state, e.message, recipients, extra)
            except Exception as e:
                self.logger.error(
                    f"Unexpected error while dispatching alert: {e}",
                    exc_info=True,
                    extra={"event": "notification.unexpected_error", "state": state.value},
                )
                return self._fail(reporter, state, f"unexpected error: {e}", recipients, extra)

            summary = f"sent alert to {', '.join(recipients)}"
            if lookup_error is not None:
                extra["lookup_error"] = lookup_error
                reporter.unknown(summary, extra)
                outcome = OUTCOME_UNKNOWN
            else:
                reporter.healthy(summary, extra)
                outcome = OUTCOME_HEALTHY

            self.logger.info(
                f"Alert sent to {', '.join(recipients)}",
                extra={"event": "notification.send.success", "recipients": list(recipients)},
            )
            return DispatchResult(
                state=state, outcome=outcome, message=summary, recipients=recipients, extra=extra
            )

    def _resolve_config(
        self,
        env: Mapping[str, str],
        config_paths: Iterable[Union[str, Path]],
        extra: Dict[str, Any],
    ) -> SMTPConfig:
        try:
            config = resolve_config(config_paths, env)
        except ConfigurationError as e:
            extra.update(e.context)
            self.logger.error(
                f"Configuration error: {e.message}",
                extra={"event": "config.invalid"},
            )
            raise _DispatchFailed(str(e)) from e

        extra.update(config.diagnostic_context())
        return config

    def _resolve_target(self, alert_url: str) -> AlertTarget:
        try:
            return parse_alert_url(alert_url)
        except AddressError as e:
            self.logger.error(
                f"Invalid alert URL {alert_url}: {e}",
                extra={"event": "notification.address.invalid"},
            )
            raise _DispatchFailed(f"mail address is invalid: {e}") from e

    def _compose(self, record, env: Mapping[str, str]) -> Tuple[RenderContext, Optional[str]]:
        try:
            base_url, anchored = resolve_status_page_base(env)
        except ConfigurationError as e:
            raise _DispatchFailed(str(e)) from e

        message = None
        lookup_error = None
        if not record.message and anchored:
            result = self.incident_lookup.lookup(base_url, record.target)
            message = result.message
            lookup_error = result.error

        context = compose_alert(
            record,
            status_page_base=base_url,
            message=message,
            anchor_strategy=default_anchor_strategy(anchored),
        )
        return context, lookup_error

    def _build_message(
        self,
        context: RenderContext,
        config: SMTPConfig,
        target: AlertTarget,
    ) -> EmailMessage:
        try:
            rendered = self.template_renderer.render(context)
        except NotificationError as e:
            raise _DispatchFailed(str(e)) from e

        sender: MailboxIdentity = target.override_from or config.sender

        try:
            message = EmailMessage()
            message["Subject"] = rendered["subject"]
            message["From"] = sender.to_header_address()
            message["To"] = tuple(r.to_header_address() for r in target.recipients)

            message.set_content(rendered["text_body"])
            message.add_alternative(rendered["html_body"], subtype="html")
        except ValueError as e:
            self.logger.error(
                f"Failed to build email message: {e}",
                extra={"event": "notification.compose.failure"},
            )
            raise _DispatchFailed(f"failed to build e-mail: {e}") from e

        self.logger.debug(
            f"Built message from {format_mailbox_list([sender])} to {format_mailbox_list(target.recipients)}",
            extra={"event": "notification.message.built"},
        )
        return message

    def _deliver(self, message: EmailMessage, config: SMTPConfig) -> None:
        try:
            self.smtp_client.send(message, config)
        except SMTPDeliveryError as e:
            self.logger.error(
                f"SMTP delivery failed: {e}",
                extra={"event": "notification.send.failure", "error_type": type(e).__name__},
            )
            raise _DispatchFailed(f"failed to send e-mail: {e}") from e

    def _fail(
        self,
        reporter: OutcomeReporter,
        state: DispatchState,
        message: str,
        recipients: Tuple[str, ...],
        extra: Dict[str, Any],
    ) -> DispatchResult:
        reporter.failure(message, extra)
        self.logger.debug(
            f"Dispatch failed after {state.value}",
            extra={"event": "notification.dispatch.failed", "failed_after": state.value},
        )
        return DispatchResult(
            state=DispatchState.FAILED,
            outcome=OUTCOME_FAILURE,
            message=message,
            recipients=recipients,
            extra=extra,
        )
