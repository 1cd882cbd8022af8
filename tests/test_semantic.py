"""Tests for diffcore/semantic.py - configurable deep equality."""
from config import Settings
from diffcore.cache import BoundedCache
from diffcore.options import ComparisonOptions
from diffcore.semantic import SemanticComparator, coerce_scalar, deep_equal


class TestCoercion:
    """Semantic comparison of scalars."""

    def test_numeric_string_equals_number_when_semantic(self):
        assert deep_equal("5", 5, ComparisonOptions(semantic_comparison=True))
        assert not deep_equal("5", 5)

    def test_keywords(self):
        options = ComparisonOptions(semanticComparison=True)
        assert deep_equal("true", True, options)
        assert deep_equal("null", None, options)
        assert deep_equal("2.50", 2.5, options)
        assert not deep_equal("1", True, options)

    def test_coerce_scalar(self):
        assert coerce_scalar("42") == 42
        assert coerce_scalar("-1.5e3") == -1500.0
        assert coerce_scalar("false") is False
        assert coerce_scalar("abc") == "abc"

    def test_ignore_case_and_whitespace(self):
        assert deep_equal("ABC", "abc", ComparisonOptions(ignore_case=True))
        assert deep_equal(" a  b ", "a b", ComparisonOptions(ignore_whitespace=True))
        assert not deep_equal("ABC", "abc")


class TestStructure:
    """Objects, arrays and ignore rules."""

    def test_nested_objects(self):
        assert deep_equal({"a": {"b": [1, 2]}}, {"a": {"b": [1, 2]}})
        assert not deep_equal({"a": {"b": [1, 2]}}, {"a": {"b": [1, 3]}})

    def test_key_order_is_irrelevant(self):
        assert deep_equal({"a": 1, "b": 2}, {"b": 2, "a": 1})

    def test_type_mismatch(self):
        assert not deep_equal({"a": 1}, [1])
        assert not deep_equal(1, "1")
        assert not deep_equal(None, 0)

    def test_ignore_paths(self):
        left = {"meta": {"ts": 1}, "a": 1}
        right = {"meta": {"ts": 2}, "a": 1}
        assert not deep_equal(left, right)
        assert deep_equal(left, right, ComparisonOptions(ignore_paths=["$.meta.ts"]))
        assert deep_equal(left, right, ComparisonOptions(ignore_paths=["meta.*"]))

    def test_ignore_keys(self):
        options = ComparisonOptions(ignore_keys=["ts"])
        assert deep_equal({"ts": 1, "a": 1}, {"a": 1}, options)
        assert deep_equal({"x": {"ts": 1}}, {"x": {"ts": 2}}, options)

    def test_arrays_are_positional_by_default(self):
        assert not deep_equal([1, 2], [2, 1])
        assert not deep_equal([1], [1, 1])

    def test_keyed_arrays_ignore_order(self, move_options):
        left = [{"id": 1, "v": "a"}, {"id": 2, "v": "b"}]
        right = [{"id": 2, "v": "b"}, {"id": 1, "v": "a"}]
        assert deep_equal(left, right, move_options)
        assert not deep_equal(left, [{"id": 2, "v": "b"}, {"id": 1, "v": "z"}], move_options)
        assert not deep_equal(left, [{"id": 1, "v": "a"}, {"id": 3, "v": "b"}], move_options)

    def test_items_without_key_compare_positionally(self, move_options):
        assert deep_equal([{"id": 1}, "x"], ["x", {"id": 1}], move_options)
        assert not deep_equal([{"id": 1}, "x", "y"], [{"id": 1}, "y", "x"], move_options)

    def test_move_detection_without_key_field_is_positional(self):
        options = ComparisonOptions(detect_array_moves=True)
        assert not options.move_detection_enabled
        assert not deep_equal([1, 2], [2, 1], options)


class TestComparator:

    def test_primitive_results_are_cached(self):
        cache = BoundedCache(100)
        comparator = SemanticComparator(ComparisonOptions(), cache=cache)
        assert comparator.equal({"a": 1, "b": "x"}, {"a": 1, "b": "x"})
        assert len(cache) == 2
        assert comparator.equal({"a": 1, "b": "x"}, {"a": 1, "b": "x"})
        assert cache.hits == 2

    def test_cache_separates_options(self):
        cache = BoundedCache(100)
        assert not SemanticComparator(ComparisonOptions(), cache=cache).equal("A", "a")
        assert SemanticComparator(ComparisonOptions(ignore_case=True), cache=cache).equal("A", "a")

    def test_depth_guard_compares_by_value(self):
        tuning = Settings(MAX_TREE_DEPTH=2)
        deep = {"a": {"b": {"c": {"d": 1}}}}
        assert deep_equal(deep, {"a": {"b": {"c": {"d": 1}}}}, tuning=tuning)
        assert not deep_equal(deep, {"a": {"b": {"c": {"d": 2}}}}, tuning=tuning)

    def test_depth_guard_keeps_options(self):
        tuning = Settings(MAX_TREE_DEPTH=1)
        options = ComparisonOptions(ignore_case=True, ignore_keys=["ts"])
        left = {"a": {"b": {"c": ["X"], "ts": 1}}}
        right = {"a": {"b": {"c": ["x"], "ts": 2}}}
        assert deep_equal(left, right, options, tuning=tuning)

    def test_nesting_beyond_recursion_limit(self):
        def nested(leaf):
            value = leaf
            for _ in range(3000):
                value = {"k": [value]}
            return value

        assert deep_equal(nested(1), nested(1))
        assert not deep_equal(nested(1), nested(2))


class TestKeyedArrays:
    """Arrays matched on ``array_key_field``."""

    def test_duplicate_keys_need_matching_counts(self, move_options):
        left = [{"id": 1, "v": 1}, {"id": 1, "v": 2}]
        assert not deep_equal(left, [{"id": 1, "v": 2}], move_options)
        assert not deep_equal(left, [{"id": 1, "v": 2}, {"id": 1, "v": 2}], move_options)
        assert deep_equal(left, [{"id": 1, "v": 1}, {"id": 1, "v": 2}], move_options)

    def test_ignore_paths_address_items_by_key(self):
        left = [{"id": 1, "ts": 1}, {"id": 2, "ts": 5}]
        right = [{"id": 2, "ts": 5}, {"id": 1, "ts": 2}]

        by_key = ComparisonOptions(detect_array_moves=True, array_key_field="id", ignore_paths=["$[id=1].ts"])
        assert deep_equal(left, right, by_key)

        by_position = ComparisonOptions(detect_array_moves=True, array_key_field="id", ignore_paths=["$[1].ts"])
        assert not deep_equal(left, right, by_position)
