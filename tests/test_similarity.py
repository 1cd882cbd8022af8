"""Tests for diffcore/similarity.py and diffcore/cache.py."""
import pytest

from diffcore.cache import BoundedCache, fingerprint
from diffcore.similarity import common_prefix_length, edit_distance, similarity


class TestSimilarity:
    """Test Levenshtein-based similarity."""

    def test_identical(self):
        assert similarity("abc", "abc") == 1.0
        assert similarity("", "") == 1.0

    def test_one_side_empty(self):
        assert similarity("", "abc") == 0.0

    def test_normalized_distance(self):
        assert edit_distance("kitten", "sitting") == 3
        assert similarity("kitten", "sitting") == pytest.approx(1 - 3 / 7)

    def test_prefix_boost(self):
        a, b = "server_name: abcdef", "server_name: uvwxyz"
        base = similarity(a, b)
        assert base == pytest.approx(1 - 6 / 19)
        assert similarity(a, b, prefix_boost=0.2, prefix_min_length=10) == pytest.approx(base + 0.2)

    def test_prefix_boost_needs_long_prefix(self):
        a, b = "ab: 1234", "ab: 9876"
        assert similarity(a, b, prefix_boost=0.2, prefix_min_length=10) == similarity(a, b)

    def test_prefix_boost_capped(self):
        a, b = "database_host: alpha", "database_host: alphb"
        assert similarity(a, b, prefix_boost=0.2, prefix_min_length=10) == 1.0

    def test_common_prefix_length(self):
        assert common_prefix_length("abcd", "abxy") == 2
        assert common_prefix_length("", "a") == 0

    def test_cached_results(self):
        cache = BoundedCache(10)
        first = similarity("abc", "abd", cache=cache)
        assert len(cache) == 1
        assert similarity("abc", "abd", cache=cache) == first
        assert cache.hits == 1


class TestBoundedCache:
    """Test LRU eviction."""

    def test_evicts_least_recently_used(self):
        cache = BoundedCache(2)
        cache.put("a", 1)
        cache.put("b", 2)
        assert cache.get("a") == 1
        cache.put("c", 3)
        assert "a" in cache
        assert "b" not in cache
        assert len(cache) == 2

    def test_miss_returns_none(self):
        cache = BoundedCache(2)
        assert cache.get("missing") is None
        assert cache.misses == 1

    def test_clear(self):
        cache = BoundedCache(2)
        cache.put("a", 1)
        cache.clear()
        assert len(cache) == 0
        assert cache.hits == 0

    def test_fingerprint_distinguishes_shared_prefix(self):
        a = "x" * 40 + "1"
        b = "x" * 40 + "2"
        assert fingerprint(a, "y") != fingerprint(b, "y")
        assert fingerprint(a, "y") == fingerprint(a, "y")
