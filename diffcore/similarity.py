"""
String similarity derived from Levenshtein edit distance.
"""
from typing import Optional

from rapidfuzz.distance import Levenshtein

from diffcore.cache import BoundedCache, fingerprint


def edit_distance(a: str, b: str) -> int:
    return Levenshtein.distance(a, b)


def common_prefix_length(a: str, b: str) -> int:
    i = 0
    limit = min(len(a), len(b))
    while i < limit and a[i] == b[i]:
        i += 1
    return i


def similarity(
    a: str,
    b: str,
    cache: Optional[BoundedCache] = None,
    prefix_boost: float = 0.0,
    prefix_min_length: int = 0,
) -> float:
    """
    ``1 - distance / max(len(a), len(b))``, in [0, 1].

    Identical strings score 1; an empty string against a non-empty one
    scores 0. With ``prefix_boost`` set, a shared prefix longer than
    ``prefix_min_length`` adds the boost (capped at 1).
    """
    if a == b:
        return 1.0
    if not a or not b:
        return 0.0

    key = None
    if cache is not None:
        key = fingerprint(a, b) + (prefix_boost, prefix_min_length)
        cached = cache.get(key)
        if cached is not None:
            return cached

    score = 1.0 - edit_distance(a, b) / max(len(a), len(b))
    if prefix_boost and common_prefix_length(a, b) > prefix_min_length:
        score = min(1.0, score + prefix_boost)

    if cache is not None:
        cache.put(key, score)
    return score
