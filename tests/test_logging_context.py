"""Tests for logging context propagation."""

import pytest

from ayd_mailto_alert.logging.context import (
    get_log_context,
    log_context,
    pop_log_context,
    push_log_context,
)


def test_empty_context():
    assert get_log_context() == {}


def test_push_and_pop():
    token = push_log_context(alert_target="mailto:ops@example.org", check_target="https://svc/health")
    assert get_log_context() == {
        "alert_target": "mailto:ops@example.org",
        "check_target": "https://svc/health",
    }

    pop_log_context(token)
    assert get_log_context() == {}


def test_nested_push_overrides_and_restores():
    outer = push_log_context(alert_target="mailto:a@example.org")
    inner = push_log_context(alert_target="mailto:b@example.org", state="SENT")
    assert get_log_context() == {"alert_target": "mailto:b@example.org", "state": "SENT"}

    pop_log_context(inner)
    assert get_log_context() == {"alert_target": "mailto:a@example.org"}

    pop_log_context(outer)
    assert get_log_context() == {}


def test_get_returns_copy():
    with log_context(alert_target="mailto:ops@example.org"):
        snapshot = get_log_context()
        snapshot["alert_target"] = "changed"

        assert get_log_context() == {"alert_target": "mailto:ops@example.org"}


def test_context_manager_nested():
    with log_context(alert_target="mailto:ops@example.org"):
        with log_context(check_target="https://svc/health"):
            assert get_log_context() == {
                "alert_target": "mailto:ops@example.org",
                "check_target": "https://svc/health",
            }

        assert get_log_context() == {"alert_target": "mailto:ops@example.org"}

    assert get_log_context() == {}


def test_context_manager_restores_on_exception():
    with pytest.raises(RuntimeError):
        with log_context(alert_target="mailto:ops@example.org"):
            raise RuntimeError("boom")

    assert get_log_context() == {}
