"""
Heuristic classification of fields whose values tend to drift between
otherwise identical documents: timestamps, identifiers and versions.
"""
import re
from typing import Any

from diffcore.models import FieldType

TIMESTAMP_VALUE_PATTERNS = [
    re.compile(r"^\d{4}-\d{2}-\d{2}[T ]\d{2}:\d{2}(:\d{2}(\.\d+)?)?(Z|[+-]\d{2}:?\d{2})?$"),  # ISO 8601
    re.compile(r"^\d{4}-\d{2}-\d{2}$"),                                                     # ISO date
    re.compile(r"^\d{10}(\d{3})?$"),                                                        # epoch s / ms
]

ID_VALUE_PATTERNS = [
    re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE),  # UUID
    re.compile(r"^[0-9a-f]{24}$"),                                                               # ObjectId
    re.compile(r"^(sess|req|tok|trace|span|usr|cus|ch|pi|evt)_[A-Za-z0-9]+$"),                   # prefixed tokens
]

VERSION_VALUE_PATTERNS = [
    re.compile(r"^[\^~]?v?\d+\.\d+\.\d+([-+][0-9A-Za-z.-]+)?$"),
]

ID_KEY_TOKENS = {"id", "uuid", "guid"}
_KEY_SPLIT_RE = re.compile(r"[_\-.\s]+|(?<=[a-z0-9])(?=[A-Z])")


def key_tokens(key: str) -> list[str]:
    """``requestId`` / ``request_id`` / ``request-id`` -> ``['request', 'id']``."""
    return [t.lower() for t in _KEY_SPLIT_RE.split(key) if t]


def classify_by_key(key: str) -> FieldType:
    lowered = key.lower()
    if "time" in lowered or "date" in lowered or lowered.endswith("_at") or lowered.endswith("_on"):
        return FieldType.TIMESTAMP
    tokens = key_tokens(key)
    if ID_KEY_TOKENS.intersection(tokens) or "token" in lowered:
        return FieldType.ID
    if "version" in lowered:
        return FieldType.VERSION
    return FieldType.NORMAL


def classify_by_value(value: Any) -> FieldType:
    if isinstance(value, bool) or value is None:
        return FieldType.NORMAL
    if isinstance(value, (int, float)):
        value = str(value)
    if not isinstance(value, str):
        return FieldType.NORMAL
    text = value.strip().strip("'\"")
    if any(p.match(text) for p in TIMESTAMP_VALUE_PATTERNS):
        return FieldType.TIMESTAMP
    if any(p.match(text) for p in ID_VALUE_PATTERNS):
        return FieldType.ID
    if any(p.match(text) for p in VERSION_VALUE_PATTERNS):
        return FieldType.VERSION
    return FieldType.NORMAL


def detect_field_type(key: str, value: Any) -> FieldType:
    """Key-name heuristics first, then value shape."""
    by_key = classify_by_key(key or "")
    if by_key != FieldType.NORMAL:
        return by_key
    return classify_by_value(value)


def group_fields(obj: dict) -> dict[str, dict]:
    """Bucket the top-level members of ``obj`` by field type."""
    groups: dict[str, dict] = {"metadata": {}, "identifiers": {}, "timestamps": {}, "data": {}}
    for key, value in obj.items():
        field_type = detect_field_type(key, value)
        if field_type == FieldType.TIMESTAMP:
            groups["timestamps"][key] = value
        elif field_type == FieldType.ID:
            groups["identifiers"][key] = value
        elif field_type == FieldType.VERSION:
            groups["metadata"][key] = value
        else:
            groups["data"][key] = value
    return groups
