"""Tests for diffcore/field_classifier.py."""
import pytest

from diffcore.field_classifier import detect_field_type, group_fields, key_tokens
from diffcore.models import FieldType


class TestDetectFieldType:
    """Key heuristics first, then value shape."""

    @pytest.mark.parametrize("key,value,expected", [
        ("created_at", "x", FieldType.TIMESTAMP),
        ("timestamp", 1, FieldType.TIMESTAMP),
        ("birthDate", "x", FieldType.TIMESTAMP),
        ("published_on", "x", FieldType.TIMESTAMP),
        ("user_id", 5, FieldType.ID),
        ("requestId", "abc", FieldType.ID),
        ("uuid", "abc", FieldType.ID),
        ("api_token", "x", FieldType.ID),
        ("version", "1", FieldType.VERSION),
        ("width", 5, FieldType.NORMAL),
        ("name", "web", FieldType.NORMAL),
    ])
    def test_key_heuristics(self, key, value, expected):
        assert detect_field_type(key, value) == expected

    @pytest.mark.parametrize("value,expected", [
        ("2024-01-01T10:00:00Z", FieldType.TIMESTAMP),
        ("2024-01-01", FieldType.TIMESTAMP),
        (1700000000, FieldType.TIMESTAMP),
        ("1700000000000", FieldType.TIMESTAMP),
        ("550e8400-e29b-41d4-a716-446655440000", FieldType.ID),
        ("507f1f77bcf86cd799439011", FieldType.ID),
        ("sess_abc123", FieldType.ID),
        ("v1.2.3", FieldType.VERSION),
        ("^2.0.1", FieldType.VERSION),
        ("hello", FieldType.NORMAL),
        (True, FieldType.NORMAL),
        (None, FieldType.NORMAL),
        (42, FieldType.NORMAL),
    ])
    def test_value_patterns(self, value, expected):
        assert detect_field_type("value", value) == expected

    def test_key_tokens(self):
        assert key_tokens("requestId") == ["request", "id"]
        assert key_tokens("request-id") == ["request", "id"]
        assert key_tokens("REQUEST_ID") == ["request", "id"]


class TestGroupFields:

    def test_buckets(self):
        groups = group_fields({
            "id": 1,
            "created_at": "2024-01-01",
            "version": "1.0.0",
            "name": "web",
        })
        assert groups == {
            "metadata": {"version": "1.0.0"},
            "identifiers": {"id": 1},
            "timestamps": {"created_at": "2024-01-01"},
            "data": {"name": "web"},
        }
