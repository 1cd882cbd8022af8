"""Tests for services/search.py and services/summary.py."""
import json
import re

import pytest

from diffcore import ComparisonOptions, compute_diff, compute_enhanced_diff
from services import SearchMatch, generate_diff_summary, navigate_to_path, search_in_diff
from services.search import last_member


@pytest.fixture
def line_result():
    return compute_diff("foo bar foo", "bar")


class TestSearch:
    """Plain and regex search over both columns."""

    def test_plain_search(self, line_result):
        matches = search_in_diff(line_result, "foo")
        assert matches == [SearchMatch(0, 0, "left"), SearchMatch(0, 8, "left")]

    def test_case_insensitive_by_default(self, line_result):
        matches = search_in_diff(line_result, "BAR")
        assert [(m.side, m.column) for m in matches] == [("left", 4), ("right", 0)]
        assert search_in_diff(line_result, "BAR", case_sensitive=True) == []

    def test_overlapping_matches(self):
        result = compute_diff("aaa", "b")
        assert [m.column for m in search_in_diff(result, "aa")] == [0, 1]

    def test_regex(self, line_result):
        matches = search_in_diff(line_result, r"b\w+", regex=True)
        assert [(m.side, m.column) for m in matches] == [("left", 4), ("right", 0)]

    def test_empty_query(self, line_result):
        assert search_in_diff(line_result, "") == []

    def test_invalid_regex(self, line_result):
        with pytest.raises(re.error):
            search_in_diff(line_result, "[", regex=True)

    def test_match_to_dict(self):
        assert SearchMatch(3, 1, "right").to_dict() == {"line": 3, "column": 1, "side": "right"}


class TestNavigation:

    @pytest.fixture
    def json_result(self):
        return compute_enhanced_diff(json.dumps({"a": {"name": 1}}), json.dumps({"a": {"name": 2}}))

    def test_navigate_to_path(self, json_result):
        assert navigate_to_path(json_result, "$.a.name") == (2, "left")

    def test_falls_back_to_right_column(self):
        result = compute_enhanced_diff(json.dumps({"a": 1}), json.dumps({"a": 1, "extra": 2}))
        row, side = navigate_to_path(result, "$.extra")
        assert side == "right"
        assert '"extra"' in result.right[row].content

    def test_missing_path(self, json_result):
        assert navigate_to_path(json_result, "$.missing") is None
        assert navigate_to_path(json_result, "$") is None

    @pytest.mark.parametrize("path,expected", [
        ("$.spec.containers[0].image", "image"),
        ("$.items[2]", "items"),
        ("$.grid[0][1]", "grid"),
        ("$", ""),
    ])
    def test_last_member(self, path, expected):
        assert last_member(path) == expected


class TestSummary:

    def test_json_summary(self):
        result = compute_enhanced_diff(json.dumps({"a": 1, "b": 2}), json.dumps({"a": 1, "b": 3}))
        summary = generate_diff_summary(result)
        assert summary.splitlines() == [
            "Comparison summary:",
            "  1 fields identical",
            "  1 fields modified",
            "  50.0% of fields changed",
            "  Lines: 3 unchanged, 1 modified, +1 / -1",
        ]

    def test_identical_text(self):
        summary = generate_diff_summary(compute_diff("a\nb", "a\nb"))
        assert "Lines: 2 unchanged, 0 modified, +0 / -0" in summary
        assert summary.endswith("No differences")

    def test_ignored_lines_are_reported(self):
        result = compute_enhanced_diff(
            json.dumps({"a": 1}),
            json.dumps({"a": 1, "request_id": "x"}),
            ComparisonOptions(ignore_keys=["request_id"]),
        )
        assert "1 changed lines ignored" in generate_diff_summary(result)
