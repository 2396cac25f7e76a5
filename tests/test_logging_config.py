"""Tests for logging configuration and formatters."""

import io
import json
import logging

import pytest

from ayd_mailto_alert.logging import ComponentLoggerAdapter, get_logger
from ayd_mailto_alert.logging.config import (
    SERVICE_NAME,
    ContextualFilter,
    JSONFormatter,
    KeyValueFormatter,
    configure_logging,
)
from ayd_mailto_alert.logging.context import log_context


@pytest.fixture
def logger():
    """Create a test logger for building records."""
    test_logger = logging.getLogger("test_logger")
    test_logger.setLevel(logging.DEBUG)
    test_logger.handlers.clear()

    yield test_logger

    test_logger.handlers.clear()


def make_record(logger, message="Sending alert", extra=None):
    return logger.makeRecord("test", logging.INFO, "test.py", 1, message, (), None, extra=extra)


def test_json_formatter_basic(logger):
    """Test JSONFormatter produces valid JSON with mandatory fields."""
    log_obj = json.loads(JSONFormatter().format(make_record(logger)))

    assert log_obj["level"] == "INFO"
    assert log_obj["message"] == "Sending alert"
    # YYYY-MM-DDTHH:MM:SS.sssZ
    assert log_obj["timestamp"].endswith("Z")
    assert len(log_obj["timestamp"]) == 24
    assert "name" not in log_obj


def test_json_formatter_with_extra_fields(logger):
    record = make_record(logger, extra={"event": "config.resolved", "smtp_port": 25, "secure": False})

    log_obj = json.loads(JSONFormatter().format(record))

    assert log_obj["event"] == "config.resolved"
    assert log_obj["smtp_port"] == 25
    assert log_obj["secure"] is False


def test_json_formatter_stringifies_unknown_types(logger):
    record = make_record(logger, extra={"path": io.StringIO})

    log_obj = json.loads(JSONFormatter().format(record))

    assert log_obj["path"] == str(io.StringIO)


def test_contextual_filter_adds_service_and_context(logger):
    """Test full pipeline: context + filter + JSON formatter."""
    with log_context(alert_target="mailto:ops@example.org", check_target="https://svc/health"):
        record = make_record(logger, extra={"event": "notification.send.success"})
        ContextualFilter().filter(record)

    log_obj = json.loads(JSONFormatter().format(record))

    assert log_obj["service"] == SERVICE_NAME
    assert log_obj["alert_target"] == "mailto:ops@example.org"
    assert log_obj["check_target"] == "https://svc/health"
    assert log_obj["event"] == "notification.send.success"


def test_contextual_filter_keeps_explicit_fields(logger):
    with log_context(component="context"):
        record = make_record(logger, extra={"component": "explicit"})
        ContextualFilter().filter(record)

    assert record.component == "explicit"


def test_key_value_formatter(logger):
    formatter = KeyValueFormatter("[%(levelname)s] %(name)s: %(message)s")
    record = make_record(
        logger,
        extra={"event": "config.file.skipped", "path": "/etc/mail.rc", "note": "two words", "flag": True, "gone": None},
    )

    output = formatter.format(record)

    assert output.startswith("[INFO] test: Sending alert ")
    assert "event=config.file.skipped" in output
    assert "path=/etc/mail.rc" in output
    assert 'note="two words"' in output
    assert "flag=true" in output
    assert "gone=null" in output


def test_key_value_formatter_omits_service(logger):
    formatter = KeyValueFormatter("%(message)s")
    record = make_record(logger)
    ContextualFilter().filter(record)

    assert formatter.format(record) == "Sending alert"


def test_configure_logging_invalid_level():
    with pytest.raises(ValueError, match="Invalid log level"):
        configure_logging(level="CHATTY")


def test_configure_logging_invalid_format():
    with pytest.raises(ValueError, match="Invalid log format"):
        configure_logging(format_type="xml")


def test_configure_logging_json_to_stream():
    stream = io.StringIO()
    configure_logging(level="INFO", format_type="json", stream=stream)

    get_logger("ayd_mailto_alert.test", component="test").info(
        "Alert sent", extra={"event": "notification.send.success"}
    )

    log_obj = json.loads(stream.getvalue().splitlines()[-1])
    assert log_obj["message"] == "Alert sent"
    assert log_obj["component"] == "test"
    assert log_obj["service"] == SERVICE_NAME


def test_configure_logging_defaults_to_stderr_key_value(capsys):
    configure_logging()

    root_logger = logging.getLogger()
    assert root_logger.level == logging.WARNING
    assert isinstance(root_logger.handlers[0].formatter, KeyValueFormatter)

    logging.getLogger("ayd_mailto_alert.test").warning("to stderr")

    captured = capsys.readouterr()
    assert captured.out == ""
    assert "to stderr" in captured.err


def test_configure_logging_replaces_handlers():
    configure_logging(stream=io.StringIO())
    configure_logging(stream=io.StringIO())

    assert len(logging.getLogger().handlers) == 1


class TestGetLogger:
    def test_without_component(self):
        assert isinstance(get_logger("ayd_mailto_alert.test"), logging.Logger)

    def test_with_component(self):
        adapter = get_logger("ayd_mailto_alert.test", component="dispatcher")

        assert isinstance(adapter, ComponentLoggerAdapter)
        assert adapter.extra == {"component": "dispatcher"}

    def test_call_extra_takes_precedence(self):
        adapter = get_logger("ayd_mailto_alert.test", component="dispatcher")

        _, kwargs = adapter.process("msg", {"extra": {"component": "override", "event": "x"}})

        assert kwargs["extra"] == {"component": "override", "event": "x"}
