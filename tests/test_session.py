"""Tests for diffcore/session.py and config.py."""
from config import Settings
from diffcore import ComparisonOptions, ComparisonSession, compute_diff, compute_enhanced_diff, compute_structural_diff, deep_equal
from diffcore.models import LineType


class TestCaches:
    """Cache ownership and lifecycle."""

    def test_similarity_is_cached(self, session):
        session.similarity("abc", "abd")
        assert len(session.similarity_cache) == 1

    def test_reset_clears_similarity_only(self, session):
        session.similarity("abc", "abd")
        session.deep_equal({"a": 1}, {"a": 1})
        assert len(session.equality_cache) == 1

        session.reset()
        assert len(session.similarity_cache) == 0
        assert len(session.equality_cache) == 1

    def test_reset_all(self, session):
        session.similarity("abc", "abd")
        session.deep_equal({"a": 1}, {"a": 1})
        session.reset_all()
        assert len(session.similarity_cache) == 0
        assert len(session.equality_cache) == 0

    def test_enhanced_diff_starts_with_a_reset(self, session):
        session.similarity("x", "y")
        session.enhanced_diff("same", "same")
        assert len(session.similarity_cache) == 0

    def test_sessions_do_not_share_caches(self):
        first, second = ComparisonSession(), ComparisonSession()
        first.similarity("abc", "abd")
        assert len(second.similarity_cache) == 0

    def test_cache_sizes_come_from_settings(self):
        session = ComparisonSession(Settings(SIMILARITY_CACHE_SIZE=1))
        session.similarity("a", "b")
        session.similarity("a", "c")
        assert len(session.similarity_cache) == 1


class TestOperations:

    def test_diff(self, session):
        result = session.diff("a\nb", "a\nc")
        assert result.left[1].type == LineType.MODIFIED

    def test_structural_diff(self, session):
        result = session.structural_diff("a: 1\nb: 2", "b: 2\na: 1")
        assert not result.has_differences

    def test_session_tuning_is_used(self):
        strict = ComparisonSession(Settings(INLINE_HARD_MAX_LENGTH=1))
        result = strict.diff("ab", "ac")
        assert [s.text for s in result.left[0].segments] == ["ab"]

    def test_module_level_functions(self):
        options = ComparisonOptions(semantic_comparison=True)
        assert deep_equal({"a": "1"}, {"a": 1}, options)
        assert compute_diff("a", "b").has_differences
        assert not compute_structural_diff("k: v", "k: v").has_differences
        assert compute_enhanced_diff('{"a": 1}', '{"a": 1}').format_type == "json"


class TestSettings:

    def test_defaults(self):
        tuning = Settings()
        assert tuning.LINE_PAIR_SIMILARITY_THRESHOLD == 0.3
        assert tuning.STRUCTURAL_SEARCH_WINDOW == 30
        assert tuning.INLINE_HARD_MAX_LENGTH == 1000

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("TANDEM_JSON_INDENT", "4")
        assert Settings().JSON_INDENT == 4
