"""Unit tests for alert composition."""

from datetime import datetime, timedelta, timezone

import pytest

from ayd_mailto_alert.checks import CheckRecord, CheckStatus
from ayd_mailto_alert.config import ConfigurationError
from ayd_mailto_alert.notifications import (
    DEFAULT_STATUS_PAGE_BASE,
    build_status_page_url,
    compose_alert,
    resolve_status_page_base,
)
from ayd_mailto_alert.utils.hashing import target_anchor


def make_record(status=CheckStatus.FAILURE, message="timeout", extra=None, target="https://svc/health"):
    return CheckRecord(
        time=datetime(2021, 1, 3, 0, 4, 5, tzinfo=timezone(timedelta(hours=9))),
        status=status,
        target=target,
        message=message,
        extra=extra or {},
    )


class TestComposeAlert:
    def test_failure(self):
        context = compose_alert(make_record())

        assert context.subject == "[FAILURE] https://svc/health"
        assert context.status == "FAILURE"
        assert context.target == "https://svc/health"
        assert context.message == "timeout"
        assert context.status_page_url is None

    def test_healthy_is_resolved(self):
        context = compose_alert(make_record(status=CheckStatus.HEALTHY, message="ok"))

        assert context.status == "RESOLVED"
        assert context.subject == "[RESOLVED] https://svc/health"

    @pytest.mark.parametrize("status", [CheckStatus.DEGRADE, CheckStatus.UNKNOWN, CheckStatus.ABORTED])
    def test_other_statuses_keep_their_names(self, status):
        assert compose_alert(make_record(status=status)).status == status.value

    def test_checked_at_is_utc(self):
        assert compose_alert(make_record()).checked_at == "2021-01-02T15:04:05Z"

    def test_extra_is_appended_as_json(self):
        context = compose_alert(make_record(extra={"code": 503, "body": "unavailable"}))

        assert context.message == 'timeout\n\n{\n  "code": 503,\n  "body": "unavailable"\n}'

    def test_extra_without_message(self):
        context = compose_alert(make_record(message="", extra={"code": 503}))

        assert context.message == '{\n  "code": 503\n}'

    def test_message_override(self):
        context = compose_alert(make_record(message=""), message="recovered from feed")

        assert context.message == "recovered from feed"

    def test_status_page_without_anchor(self):
        context = compose_alert(make_record(), status_page_base="http://localhost:9000")

        assert context.status_page_url == "http://localhost:9000/status.html"

    def test_status_page_with_anchor(self):
        context = compose_alert(
            make_record(),
            status_page_base="https://ayd.example.com/",
            anchor_strategy=target_anchor,
        )

        assert context.status_page_url == (
            f"https://ayd.example.com/status.html#{target_anchor('https://svc/health')}"
        )

    def test_is_deterministic(self):
        record = make_record(extra={"a": 1})

        first = compose_alert(record, status_page_base="http://ayd/", anchor_strategy=target_anchor)
        second = compose_alert(record, status_page_base="http://ayd/", anchor_strategy=target_anchor)

        assert first == second


class TestBuildStatusPageURL:
    def test_no_base(self):
        assert build_status_page_url(None, "x") is None

    def test_relative_to_base_path(self):
        assert build_status_page_url("http://ayd.example.com/monitor/", "x") == (
            "http://ayd.example.com/monitor/status.html"
        )

    def test_custom_anchor_strategy(self):
        url = build_status_page_url("http://ayd/", "x", anchor_strategy=lambda target: f"t-{target}")

        assert url == "http://ayd/status.html#t-x"


class TestResolveStatusPageBase:
    def test_default_without_anchors(self):
        assert resolve_status_page_base({}) == (DEFAULT_STATUS_PAGE_BASE, False)

    def test_configured_with_anchors(self):
        assert resolve_status_page_base({"ayd_url": "https://ayd.example.com"}) == (
            "https://ayd.example.com",
            True,
        )

    def test_invalid(self):
        with pytest.raises(ConfigurationError, match="environment variable `ayd_url` is invalid"):
            resolve_status_page_base({"ayd_url": "gopher://ayd"})
