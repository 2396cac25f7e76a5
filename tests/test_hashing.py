"""Unit tests for hashing utilities."""

import hashlib

from ayd_mailto_alert.utils.hashing import hash_string, target_anchor


class TestHashString:
    def test_matches_sha256(self):
        assert hash_string("https://svc/health") == hashlib.sha256(b"https://svc/health").hexdigest()

    def test_unicode(self):
        assert len(hash_string("ターゲット")) == 64


class TestTargetAnchor:
    def test_format(self):
        anchor = target_anchor("https://svc/health")

        assert anchor.startswith("target-")
        assert len(anchor) == len("target-") + 16
        assert anchor == "target-" + hash_string("https://svc/health")[:16]

    def test_deterministic(self):
        assert target_anchor("ping:example.com") == target_anchor("ping:example.com")

    def test_surrounding_whitespace_is_ignored(self):
        assert target_anchor("  ping:example.com\n") == target_anchor("ping:example.com")

    def test_different_targets_differ(self):
        assert target_anchor("ping:a.example.com") != target_anchor("ping:b.example.com")
