"""
Comparison session: the owner of the memoization caches.

A session holds a similarity cache and an equality cache, both bounded.
``reset()`` clears the similarity cache and runs at the start of every
enhanced comparison; the equality cache is keyed by the full option set
and only cleared by ``reset_all()``.
"""
import logging
from typing import Any, Optional

from config import Settings, settings as default_settings
from diffcore import enhanced, line_diff, structural
from diffcore.cache import BoundedCache
from diffcore.models import DiffResult, EnhancedDiffResult
from diffcore.options import ComparisonOptions
from diffcore.semantic import SemanticComparator
from diffcore.similarity import similarity as _similarity

logger = logging.getLogger(__name__)


class ComparisonSession:
    def __init__(self, tuning: Optional[Settings] = None):
        self.tuning = tuning or default_settings
        self.similarity_cache = BoundedCache(self.tuning.SIMILARITY_CACHE_SIZE)
        self.equality_cache = BoundedCache(self.tuning.EQUALITY_CACHE_SIZE)

    def diff(self, left_text: str, right_text: str, options: Optional[ComparisonOptions] = None) -> DiffResult:
        """Plain line diff."""
        return line_diff.compute_diff(left_text, right_text, options, self.tuning, self.similarity_cache)

    def structural_diff(
        self,
        left_text: str,
        right_text: str,
        options: Optional[ComparisonOptions] = None,
    ) -> DiffResult:
        return structural.compute_structural_diff(
            left_text, right_text, options, self.tuning, self.similarity_cache
        )

    def enhanced_diff(
        self,
        left_text: str,
        right_text: str,
        options: Optional[ComparisonOptions] = None,
        left_name: Optional[str] = None,
        right_name: Optional[str] = None,
    ) -> EnhancedDiffResult:
        self.reset()
        return enhanced.compute_enhanced_diff(
            left_text,
            right_text,
            options,
            self.tuning,
            self.similarity_cache,
            self.equality_cache,
            left_name=left_name,
            right_name=right_name,
        )

    def deep_equal(self, a: Any, b: Any, options: Optional[ComparisonOptions] = None) -> bool:
        return SemanticComparator(options, self.tuning, self.equality_cache).equal(a, b)

    def similarity(self, a: str, b: str) -> float:
        return _similarity(a, b, cache=self.similarity_cache)

    def reset(self) -> None:
        """Clear the similarity cache."""
        logger.debug(f"Clearing similarity cache ({len(self.similarity_cache)} entries)")
        self.similarity_cache.clear()

    def reset_all(self) -> None:
        """Clear both caches."""
        self.reset()
        logger.debug(f"Clearing equality cache ({len(self.equality_cache)} entries)")
        self.equality_cache.clear()


def compute_diff(left_text: str, right_text: str, options: Optional[ComparisonOptions] = None) -> DiffResult:
    return ComparisonSession().diff(left_text, right_text, options)


def compute_structural_diff(
    left_text: str,
    right_text: str,
    options: Optional[ComparisonOptions] = None,
) -> DiffResult:
    return ComparisonSession().structural_diff(left_text, right_text, options)


def compute_enhanced_diff(
    left_text: str,
    right_text: str,
    options: Optional[ComparisonOptions] = None,
    left_name: Optional[str] = None,
    right_name: Optional[str] = None,
) -> EnhancedDiffResult:
    return ComparisonSession().enhanced_diff(left_text, right_text, options, left_name, right_name)


def deep_equal(a: Any, b: Any, options: Optional[ComparisonOptions] = None) -> bool:
    return ComparisonSession().deep_equal(a, b, options)
