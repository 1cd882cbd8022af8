"""
Bounded memoization used by a comparison session.
"""
import hashlib
from collections import OrderedDict
from typing import Any, Hashable, Optional


class BoundedCache:
    """Least-recently-used mapping with a fixed capacity."""

    def __init__(self, max_size: int):
        self.max_size = max(1, max_size)
        self._data: "OrderedDict[Hashable, Any]" = OrderedDict()
        self.hits = 0
        self.misses = 0

    def get(self, key: Hashable) -> Optional[Any]:
        if key in self._data:
            self._data.move_to_end(key)
            self.hits += 1
            return self._data[key]
        self.misses += 1
        return None

    def __contains__(self, key: Hashable) -> bool:
        return key in self._data

    def put(self, key: Hashable, value: Any) -> None:
        self._data[key] = value
        self._data.move_to_end(key)
        while len(self._data) > self.max_size:
            self._data.popitem(last=False)

    def clear(self) -> None:
        self._data.clear()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._data)


def fingerprint(a: str, b: str, prefix: int = 32) -> tuple:
    """
    Cache key for a pair of strings: lengths and prefixes for cheap
    discrimination, plus a digest of the full pair so distinct strings
    sharing a prefix never collide.
    """
    digest = hashlib.sha256(f"{a}\x00{b}".encode("utf-8", "surrogatepass")).hexdigest()[:16]
    return (len(a), len(b), a[:prefix], b[:prefix], digest)
