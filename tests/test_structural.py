"""Tests for diffcore/structural.py - structure-aware alignment."""
import pytest

from diffcore.models import FieldType, LineType
from diffcore.structural import (
    _window,
    compute_structural_diff,
    extract_key_value,
    find_structural_matches,
    tokenize_line,
)


class TestExtraction:
    """Test key/value extraction and tokenization."""

    @pytest.mark.parametrize("line,expected", [
        ("  name: web,", ("name", "web")),
        ('  "id": 5,', ("id", "5")),
        ("export FOO=bar", ("FOO", "bar")),
        ("- DEBUG=true", ("DEBUG", "true")),
        ("  - LOG_LEVEL: info", ("LOG_LEVEL", "info")),
        ("plain text", (None, None)),
    ])
    def test_extract_key_value(self, line, expected):
        assert extract_key_value(line) == expected

    def test_tokenize_timestamp_field(self):
        token = tokenize_line("    created_at: 2024-01-01")
        assert token.indent == 2
        assert token.key == "created_at"
        assert token.field_type == FieldType.TIMESTAMP
        assert token.is_special

    def test_tokenize_comment(self):
        assert tokenize_line("  # note").is_comment
        assert tokenize_line("// note").is_comment
        assert not tokenize_line("key: 1").is_comment

    def test_tokenize_empty(self):
        assert tokenize_line("   ").is_empty

    def test_window_is_nearest_first(self):
        assert list(_window(5, 2, 10)) == [5, 6, 4, 7, 3]
        assert list(_window(0, 2, 2)) == [0, 1]


class TestAlignment:
    """Test the matching passes and layout."""

    def test_inserted_field_does_not_cascade(self, service_config):
        lines = service_config.split("\n")
        changed = "\n".join(lines[:3] + ["  tls: true"] + lines[3:])
        result = compute_structural_diff(service_config, changed)

        assert len(result.left) == len(result.right) == 8
        assert all(line.type in (LineType.UNCHANGED, LineType.EMPTY) for line in result.left)
        assert [line.content for line in result.right if line.type == LineType.ADDED] == ["  tls: true"]
        assert (result.additions, result.removals) == (1, 0)
        assert result.right[3].content == "  tls: true"
        assert result.left[3].type == LineType.EMPTY

    def test_removed_field_does_not_cascade(self, service_config):
        lines = service_config.split("\n")
        changed = "\n".join(lines[:2] + lines[3:])
        result = compute_structural_diff(service_config, changed)

        assert [line.content for line in result.left if line.type == LineType.REMOVED] == ["  port: 8080"]
        assert all(line.type in (LineType.UNCHANGED, LineType.EMPTY) for line in result.right)
        assert (result.additions, result.removals) == (0, 1)

    def test_drifting_timestamp_is_paired(self):
        left = "a: 1\nupdated_at: 2024-01-01\nb: 2"
        right = "a: 1\nupdated_at: 2024-02-02\nb: 2"
        result = compute_structural_diff(left, right)

        assert result.left[1].type == LineType.MODIFIED
        assert result.right[1].type == LineType.MODIFIED
        assert "".join(s.text for s in result.right[1].segments) == "updated_at: 2024-02-02"
        assert (result.additions, result.removals) == (1, 1)

    def test_similar_lines_are_modified(self):
        left = "a: 1\ndescription: the quick brown fox\nz: 9"
        right = "a: 1\ndescription: the quick brown cat\nz: 9"
        result = compute_structural_diff(left, right)
        assert result.left[1].type == LineType.MODIFIED
        assert result.right[1].type == LineType.MODIFIED

    def test_unrelated_lines_are_added_and_removed(self):
        result = compute_structural_diff("a: 1\nxxxxxxxx", "a: 1\n12345678 = q")
        assert LineType.REMOVED in [line.type for line in result.left]
        assert LineType.ADDED in [line.type for line in result.right]
        assert len(result.left) == len(result.right)

    def test_moved_line_matched_within_window(self):
        left = "first: 1\nsecond: 2\nthird: 3"
        right = "second: 2\nthird: 3\nfirst: 1"
        left_tokens = [tokenize_line(line) for line in left.split("\n")]
        right_tokens = [tokenize_line(line) for line in right.split("\n")]
        assert find_structural_matches(left_tokens, right_tokens) == {0: 2, 1: 0, 2: 1}

    def test_identical_documents(self, service_config):
        result = compute_structural_diff(service_config, service_config)
        assert not result.has_differences
        assert all(line.type == LineType.UNCHANGED for line in result.left + result.right)

    @pytest.mark.parametrize("left,right", [
        ("a: 1\nb: 2\nc: 3", "c: 3\nd: 4"),
        ("", "x: 1\ny: 2"),
        ("x: 1\ny: 2", ""),
        ("# comment one\nkey: v", "# comment two\nkey: v\nnew: 1\nnewer: 2"),
    ])
    def test_columns_have_equal_length(self, left, right):
        result = compute_structural_diff(left, right)
        assert len(result.left) == len(result.right)
        for line in result.left + result.right:
            if line.type == LineType.MODIFIED:
                assert "".join(s.text for s in line.segments) == line.content
