"""
Configurable deep equality over parsed JSON trees.
"""
import json
import logging
import re
from typing import Any, Optional

from config import Settings, settings as default_settings
from diffcore.cache import BoundedCache
from diffcore.json_tree import (
    ROOT,
    compile_ignore_patterns,
    dumps_flat,
    index_path,
    is_container,
    json_type,
    keyed_path,
    matches_any,
    member_path,
    values_equal,
)
from diffcore.options import ComparisonOptions, DEFAULT_OPTIONS

logger = logging.getLogger(__name__)

_NUMERIC_RE = re.compile(r"^[-+]?(\d+\.?\d*|\.\d+)([eE][-+]?\d+)?$")
_WS_RUN_RE = re.compile(r"\s+")
_KEYWORDS = {"true": True, "false": False, "null": None}


def coerce_scalar(value: str) -> Any:
    """Numeric-looking strings become numbers; "true"/"false"/"null" become typed values."""
    stripped = value.strip()
    if stripped in _KEYWORDS:
        return _KEYWORDS[stripped]
    if _NUMERIC_RE.match(stripped):
        if re.match(r"^[-+]?\d+$", stripped):
            return int(stripped)
        return float(stripped)
    return value


def normalize_value(value: Any, options: ComparisonOptions) -> Any:
    if not isinstance(value, str):
        return value
    if options.semantic_comparison:
        coerced = coerce_scalar(value)
        if not isinstance(coerced, str):
            return coerced
    if options.ignore_case:
        value = value.lower()
    if options.ignore_whitespace:
        value = _WS_RUN_RE.sub(" ", value).strip()
    return value


def array_item_key(item: Any, key_field: str) -> Optional[str]:
    """Hashable identity of an array item, or ``None`` if it lacks the key field."""
    if isinstance(item, dict) and key_field in item:
        return dumps_flat(item[key_field], sort_keys=True)
    return None


def display_key(key: str) -> str:
    """Key identity as shown in paths: bare for strings and numbers."""
    value = json.loads(key)
    return value if isinstance(value, str) else json.dumps(value)


class SemanticComparator:
    """
    Deep equality under a fixed set of options.

    Primitive comparisons are memoized in ``cache`` (shared across the
    comparisons of one session) keyed by the options, the path and both
    values.
    """

    def __init__(
        self,
        options: Optional[ComparisonOptions] = None,
        tuning: Optional[Settings] = None,
        cache: Optional[BoundedCache] = None,
    ):
        self.options = options or DEFAULT_OPTIONS
        self.tuning = tuning or default_settings
        self.cache = cache
        self.ignore_patterns = compile_ignore_patterns(self.options.ignore_paths)
        self.ignore_keys = set(self.options.ignore_keys)
        self._options_key = self.options.model_dump_json()
        self._depth_warned = False

    def is_ignored(self, path: str) -> bool:
        return bool(self.ignore_patterns) and matches_any(path, self.ignore_patterns)

    def visible_keys(self, obj: dict) -> list:
        return [k for k in obj if k not in self.ignore_keys]

    def equal(self, a: Any, b: Any, path: str = ROOT, depth: int = 0) -> bool:
        if self.is_ignored(path):
            return True

        cache_key = None
        if self.cache is not None and not is_container(a) and not is_container(b):
            cache_key = (
                self._options_key,
                path,
                json.dumps(a, sort_keys=True, ensure_ascii=False, default=str),
                json.dumps(b, sort_keys=True, ensure_ascii=False, default=str),
            )
            cached = self.cache.get(cache_key)
            if cached is not None:
                return cached

        result = self._compare(a, b, path, depth)
        if cache_key is not None:
            self.cache.put(cache_key, result)
        return result

    def _compare(self, a: Any, b: Any, path: str, depth: int) -> bool:
        a = normalize_value(a, self.options)
        b = normalize_value(b, self.options)

        if json_type(a) != json_type(b):
            return False

        if depth > self.tuning.MAX_TREE_DEPTH:
            if not self._depth_warned:
                logger.warning(f"Depth guard reached at {path}; comparing subtree by value")
                self._depth_warned = True
            return values_equal(a, b, self._normalize, self.ignore_keys)

        if isinstance(a, list):
            if self.options.move_detection_enabled:
                return self._compare_keyed_arrays(a, b, path, depth)
            if len(a) != len(b):
                return False
            for n, (x, y) in enumerate(zip(a, b)):
                if not self.equal(x, y, index_path(path, n), depth + 1):
                    return False
            return True

        if isinstance(a, dict):
            keys_a = self.visible_keys(a)
            keys_b = self.visible_keys(b)
            if set(keys_a) != set(keys_b):
                return False
            for k in keys_a:
                if not self.equal(a[k], b[k], member_path(path, k), depth + 1):
                    return False
            return True

        return a == b

    def _normalize(self, value: Any) -> Any:
        return normalize_value(value, self.options)

    def _compare_keyed_arrays(self, a: list, b: list, path: str, depth: int) -> bool:
        """
        Compare arrays as key -> items maps, ignoring order. Items sharing a
        key are paired in order of appearance; items without the key field
        are compared positionally among themselves.
        """
        if len(a) != len(b):
            return False

        key_field = self.options.array_key_field
        keyed_a: dict[str, list] = {}
        keyed_b: dict[str, list] = {}
        loose_a: list = []
        loose_b: list = []

        for items, keyed, loose in ((a, keyed_a, loose_a), (b, keyed_b, loose_b)):
            for item in items:
                key = array_item_key(item, key_field)
                if key is None:
                    loose.append(item)
                else:
                    keyed.setdefault(key, []).append(item)

        if keyed_a.keys() != keyed_b.keys() or len(loose_a) != len(loose_b):
            return False

        for key, group in keyed_a.items():
            other = keyed_b[key]
            if len(group) != len(other):
                return False
            item_path = keyed_path(path, key_field, display_key(key))
            for x, y in zip(group, other):
                if not self.equal(x, y, item_path, depth + 1):
                    return False

        for n, (x, y) in enumerate(zip(loose_a, loose_b)):
            if not self.equal(x, y, index_path(path, n), depth + 1):
                return False
        return True


def deep_equal(
    a: Any,
    b: Any,
    options: Optional[ComparisonOptions] = None,
    path: str = ROOT,
    tuning: Optional[Settings] = None,
    cache: Optional[BoundedCache] = None,
) -> bool:
    """Compare two parsed JSON values under ``options``."""
    return SemanticComparator(options, tuning, cache).equal(a, b, path)
