"""
Smart comparison helpers for JSON values.

Array comparison in three modes (ordered, set, by key), null/missing
folding, array-kind detection and semantic version comparison.
"""
import json
import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from diffcore.json_tree import dumps_flat

logger = logging.getLogger(__name__)

ID_FIELDS = ("id", "_id", "uuid")
SET_HINTS = ("permission", "role", "tag", "feature")

_VERSION_PREFIX_RE = re.compile(r"^[v^~]")


class ArrayMode(str, Enum):
    ORDERED = "ordered"
    SET = "set"
    BY_KEY = "by_key"


class VersionChange(str, Enum):
    IDENTICAL = "identical"
    PATCH = "patch"
    MINOR = "minor"
    MAJOR = "major"
    DIFFERENT = "different"


@dataclass
class ArrayComparison:
    """Outcome of comparing two arrays."""
    added: list = field(default_factory=list)
    removed: list = field(default_factory=list)
    modified: list[tuple[Any, Any]] = field(default_factory=list)

    @property
    def identical(self) -> bool:
        return not self.added and not self.removed and not self.modified

    def to_dict(self) -> dict:
        return {
            "identical": self.identical,
            "added": self.added,
            "removed": self.removed,
            "modified": [{"old": old, "new": new} for old, new in self.modified],
        }


def _object_to_key(obj: Any) -> str:
    """
    Convert any value to a consistent string key for set-based comparison.
    Object keys are sorted and nested arrays are treated as sets as well.
    """
    if obj is None:
        return "null"
    if isinstance(obj, bool):
        return "true" if obj else "false"
    if isinstance(obj, (int, float)):
        return repr(obj)
    if isinstance(obj, str):
        return json.dumps(obj, ensure_ascii=False)
    if isinstance(obj, list):
        return "[" + ",".join(sorted(_object_to_key(item) for item in obj)) + "]"
    if isinstance(obj, dict):
        parts = [f"{json.dumps(str(key))}:{_object_to_key(obj[key])}" for key in sorted(obj.keys(), key=str)]
        return "{" + ",".join(parts) + "}"
    return str(obj)


def _canonical(obj: Any) -> str:
    return dumps_flat(obj, sort_keys=True)


def _compare_arrays_as_sets(old_arr: list, new_arr: list) -> ArrayComparison:
    """Order and duplicates do not matter, only which items exist."""
    old_keys = {}
    for item in old_arr:
        old_keys.setdefault(_object_to_key(item), item)

    new_keys = {}
    for item in new_arr:
        new_keys.setdefault(_object_to_key(item), item)

    return ArrayComparison(
        added=[item for key, item in new_keys.items() if key not in old_keys],
        removed=[item for key, item in old_keys.items() if key not in new_keys],
    )


def _compare_arrays_by_key(old_arr: list, new_arr: list, key_field: str) -> ArrayComparison:
    """
    Match items on ``key_field``. Items lacking the field are compared as a
    set among themselves.
    """
    old_items: dict[str, Any] = {}
    new_items: dict[str, Any] = {}
    old_loose: list = []
    new_loose: list = []

    for item in old_arr:
        if isinstance(item, dict) and key_field in item:
            old_items[_canonical(item[key_field])] = item
        else:
            old_loose.append(item)
    for item in new_arr:
        if isinstance(item, dict) and key_field in item:
            new_items[_canonical(item[key_field])] = item
        else:
            new_loose.append(item)

    result = _compare_arrays_as_sets(old_loose, new_loose)
    for key, old_item in old_items.items():
        if key not in new_items:
            result.removed.append(old_item)
        elif _canonical(old_item) != _canonical(new_items[key]):
            result.modified.append((old_item, new_items[key]))
    for key, new_item in new_items.items():
        if key not in old_items:
            result.added.append(new_item)
    return result


def _compare_arrays_ordered(old_arr: list, new_arr: list) -> ArrayComparison:
    result = ArrayComparison()
    for i in range(max(len(old_arr), len(new_arr))):
        if i >= len(old_arr):
            result.added.append(new_arr[i])
        elif i >= len(new_arr):
            result.removed.append(old_arr[i])
        elif _canonical(old_arr[i]) != _canonical(new_arr[i]):
            result.modified.append((old_arr[i], new_arr[i]))
    return result


def compare_arrays(
    old_arr: list,
    new_arr: list,
    mode: ArrayMode = ArrayMode.ORDERED,
    key_field: Optional[str] = None,
) -> ArrayComparison:
    """
    Compare two arrays.

    ``by_key`` without a ``key_field`` degrades to ordered comparison.
    """
    mode = ArrayMode(mode)
    if mode == ArrayMode.SET:
        return _compare_arrays_as_sets(old_arr, new_arr)
    if mode == ArrayMode.BY_KEY:
        if key_field:
            return _compare_arrays_by_key(old_arr, new_arr, key_field)
        logger.debug("by_key comparison requested without a key field; comparing positionally")
    return _compare_arrays_ordered(old_arr, new_arr)


def normalize_nullish(value: Any, treat_as_equal: bool = False) -> Any:
    """
    With ``treat_as_equal``, make a null member indistinguishable from a
    missing one by dropping ``None`` members from objects, nested ones
    included. Otherwise ``value`` is returned as is.
    """
    if not treat_as_equal:
        return value
    if isinstance(value, dict):
        return {k: normalize_nullish(v, True) for k, v in value.items() if v is not None}
    if isinstance(value, list):
        return [normalize_nullish(item, True) for item in value]
    return value


def detect_array_type(arr: list) -> str:
    """
    Guess how an array should be compared: ``objects_with_id``, ``set`` or
    ``ordered``.
    """
    if not arr:
        return "ordered"

    if all(isinstance(item, dict) and any(f in item for f in ID_FIELDS) for item in arr):
        return "objects_with_id"

    if all(isinstance(item, (str, int, float)) for item in arr):
        if isinstance(arr[0], str) and any(hint in arr[0].lower() for hint in SET_HINTS):
            return "set"
        if len({_object_to_key(item) for item in arr}) < len(arr):
            return "ordered"
        return "set"

    return "ordered"


def _version_parts(version: str) -> Optional[tuple[int, int, int]]:
    parts = _VERSION_PREFIX_RE.sub("", version.strip()).split(".")
    if len(parts) != 3 or not all(p.isdigit() for p in parts):
        return None
    return int(parts[0]), int(parts[1]), int(parts[2])


def compare_versions(v1: str, v2: str) -> VersionChange:
    """Classify the difference between two ``major.minor.patch`` versions."""
    parts1 = _version_parts(v1)
    parts2 = _version_parts(v2)
    if parts1 is None or parts2 is None:
        return VersionChange.IDENTICAL if v1 == v2 else VersionChange.DIFFERENT

    if parts1[0] != parts2[0]:
        return VersionChange.MAJOR
    if parts1[1] != parts2[1]:
        return VersionChange.MINOR
    if parts1[2] != parts2[2]:
        return VersionChange.PATCH
    return VersionChange.IDENTICAL

