"""SMTP client wrapper for alert delivery.

This module provides a thin wrapper around Python's smtplib with support
for implicit TLS, mandatory or opportunistic STARTTLS, authentication,
and proper connection lifecycle management.
"""

import logging
import smtplib
import ssl
from email.message import EmailMessage
from typing import Callable, Optional

from ayd_mailto_alert.config.models import SMTPConfig

from .models import SMTPDeliveryError

logger = logging.getLogger(__name__)

IMPLICIT_TLS_PORT = 465


class SMTPClient:
    """Wrapper around smtplib for sending one message per session.

    TLS policy:
    - port 465: implicit TLS (SMTP_SSL)
    - secure config: STARTTLS is mandatory; a server without it fails delivery
    - otherwise: STARTTLS when the server advertises it, plaintext if not

    Designed to be easily mockable for testing.
    """

    def __init__(
        self,
        smtp_factory: Optional[Callable] = None,
        smtp_ssl_factory: Optional[Callable] = None,
        ssl_context_factory: Optional[Callable[[], ssl.SSLContext]] = None,
    ):
        """Initialize SMTP client with optional factory injection.

        Args:
            smtp_factory: Factory function for creating SMTP instances (for mocking)
            smtp_ssl_factory: Factory function for creating SMTP_SSL instances (for mocking)
            ssl_context_factory: Factory for TLS contexts (for mocking)
        """
        self.smtp_factory = smtp_factory or smtplib.SMTP
        self.smtp_ssl_factory = smtp_ssl_factory or smtplib.SMTP_SSL
        self.ssl_context_factory = ssl_context_factory or ssl.create_default_context

    def send(self, message: EmailMessage, config: SMTPConfig) -> None:
        """Send an email message via SMTP.

        Handles connection, TLS negotiation and authentication, and always
        closes the session, on success and on failure.

        Args:
            message: Fully constructed EmailMessage to send
            config: Resolved SMTP configuration

        Raises:
            SMTPDeliveryError: If message delivery fails
        """
        smtp = None
        try:
            if config.port == IMPLICIT_TLS_PORT:
                logger.debug(f"Connecting to {config.host}:{config.port} with implicit TLS")
                smtp = self.smtp_ssl_factory(
                    config.host, config.port, context=self.ssl_context_factory()
                )
            else:
                logger.debug(f"Connecting to {config.host}:{config.port}")
                smtp = self.smtp_factory(config.host, config.port)
                self._negotiate_starttls(smtp, config)

            logger.debug(f"Authenticating as {config.username}")
            smtp.login(config.username, config.password)

            smtp.send_message(message)
            logger.debug(f"Message sent successfully to {message['To']}")

        except smtplib.SMTPException as e:
            error_msg = f"SMTP error during message delivery: {e}"
            logger.error(error_msg)
            raise SMTPDeliveryError(error_msg) from e
        except OSError as e:
            error_msg = f"Network error during SMTP connection: {e}"
            logger.error(error_msg)
            raise SMTPDeliveryError(error_msg) from e
        finally:
            if smtp is not None:
                try:
                    smtp.quit()
                except (smtplib.SMTPException, OSError) as e:
                    logger.warning(f"Error closing SMTP connection: {e}")

    def _negotiate_starttls(self, smtp, config: SMTPConfig) -> None:
        smtp.ehlo()

        if config.secure:
            logger.debug("Upgrading connection with STARTTLS (required)")
            smtp.starttls(context=self.ssl_context_factory())
            smtp.ehlo()
        elif smtp.has_extn("starttls"):
            logger.debug("Upgrading connection with STARTTLS (offered by server)")
            smtp.starttls(context=self.ssl_context_factory())
            smtp.ehlo()
        else:
            logger.debug("Server does not offer STARTTLS, continuing without TLS")
