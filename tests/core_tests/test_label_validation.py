# tests/core_tests/test_label_validation.py
# This file is part of Ergon - A Label-Driven Build Scheduler
#
# Test suite for configuration-time label checks

"""Test suite for check_label."""

import pytest
from core import CheckKind, check_label


class TestCheckLabel:
    def test_empty_label_means_any_node(self, windows_pool):
        result = check_label("", windows_pool)
        assert result.kind is CheckKind.OK
        assert result.ok

    def test_malformed_label_is_error(self, windows_pool):
        result = check_label("foo bar", windows_pool)
        assert result.kind is CheckKind.ERROR
        assert not result.ok
        assert result.message.startswith("Invalid label expression")

    def test_unmatched_label_is_warning(self, windows_pool):
        result = check_label("solaris", windows_pool)
        assert result.kind is CheckKind.WARNING
        assert result.ok
        assert "solaris" in result.message

    @pytest.mark.parametrize(
        "text, count",
        [("win", 2), ("win && 32bit", 1), ("!win", 1), ("32bit || 64bit", 3)],
    )
    def test_matching_label_reports_nodes(self, windows_pool, text, count):
        result = check_label(text, windows_pool)
        assert result.kind is CheckKind.OK
        assert f"{count} node(s)" in result.message

    def test_message_uses_canonical_name(self, windows_pool):
        result = check_label("win  &&\t32bit", windows_pool)
        assert "'win&&32bit'" in result.message
        assert str(result).startswith("OK: ")
