"""Tests for command-line invocation parsing."""

import pytest

from ayd_mailto_alert.checks import CheckStatus
from ayd_mailto_alert.invocation import Invocation, UsageError, parse_invocation

RECORD = '{"time": "2021-01-02T15:04:05Z", "status": "FAILURE", "target": "https://svc/health"}'


def test_parse_invocation():
    invocation = parse_invocation("mailto:ops@example.org?from=a@example.com", RECORD)

    assert isinstance(invocation, Invocation)
    assert invocation.alert_url == "mailto:ops@example.org?from=a@example.com"
    assert invocation.record.status == CheckStatus.FAILURE
    assert invocation.outcome_target == "mailto:ops@example.org"


def test_recipients_are_not_validated_yet():
    """Bad recipients are reported to Ayd by the dispatcher, not as usage errors."""
    invocation = parse_invocation("mailto:definitely not valid", RECORD)

    assert invocation.outcome_target == "mailto:definitely not valid"


@pytest.mark.parametrize("alert_url", ["ops@example.org", "mailto:", ""])
def test_malformed_alert_url(alert_url):
    with pytest.raises(UsageError, match="invalid alert URL"):
        parse_invocation(alert_url, RECORD)


def test_malformed_record():
    with pytest.raises(UsageError, match="invalid record"):
        parse_invocation("mailto:ops@example.org", "not a record")


def test_invocation_is_frozen():
    invocation = parse_invocation("mailto:ops@example.org", RECORD)

    with pytest.raises(Exception):
        invocation.alert_url = "mailto:other@example.org"
