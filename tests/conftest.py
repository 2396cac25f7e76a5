"""Shared fixtures for the ayd-mailto-alert test suite."""

import io
import logging
from datetime import datetime, timezone
from unittest.mock import MagicMock, Mock

import pytest

from ayd_mailto_alert.checks import CheckRecord, CheckStatus
from ayd_mailto_alert.config import SMTPConfig
from ayd_mailto_alert.logging.context import clear_log_context
from ayd_mailto_alert.logging.outcome import OutcomeReporter


@pytest.fixture(autouse=True)
def clean_context():
    """Clear logging context before and after each test."""
    clear_log_context()
    yield
    clear_log_context()


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Undo configure_logging() calls made by the code under test."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
    root.setLevel(level)


@pytest.fixture
def smtp_env():
    """Environment providing every required SMTP setting."""
    return {
        "smtp_server": "smtp.example.com:587",
        "smtp_username": "alert-user",
        "smtp_password": "secret123",
    }


@pytest.fixture
def smtp_config():
    """Resolved configuration for a plain SMTP server on port 25."""
    return SMTPConfig(
        host="example.com",
        port=25,
        secure=False,
        username="foo",
        password="bar",
    )


@pytest.fixture
def failure_record():
    """A failing check with a message."""
    return CheckRecord(
        time=datetime(2021, 1, 2, 15, 4, 5, tzinfo=timezone.utc),
        status=CheckStatus.FAILURE,
        latency=123.456,
        target="https://svc/health",
        message="timeout",
    )


@pytest.fixture
def healthy_record():
    """A recovered check with a message."""
    return CheckRecord(
        time=datetime(2021, 1, 2, 15, 4, 5, tzinfo=timezone.utc),
        status=CheckStatus.HEALTHY,
        latency=12.0,
        target="https://svc/health",
        message="all good",
    )


@pytest.fixture
def mock_smtp():
    """SMTP session double that does not offer STARTTLS."""
    smtp = MagicMock()
    smtp.has_extn.return_value = False
    return smtp


@pytest.fixture
def mock_smtp_factory(mock_smtp):
    return Mock(return_value=mock_smtp)


class CapturingReporterFactory:
    """Builds OutcomeReporters writing into in-memory streams."""

    def __init__(self):
        self.reporters = []
        self.streams = []

    def __call__(self, target):
        stream = io.StringIO()
        reporter = OutcomeReporter(target, stream=stream, clock=lambda: 0.0)
        self.reporters.append(reporter)
        self.streams.append(stream)
        return reporter

    @property
    def lines(self):
        return [line for s in self.streams for line in s.getvalue().splitlines()]


@pytest.fixture
def reporter_factory():
    return CapturingReporterFactory()
