"""
Line-by-line diff built on the LCS table.

Differing lines met at the same backtrack step are paired as "modified"
(and diffed inline) when the table cannot prefer a side, when they share
key/assignment/bracket structure, or when they are similar enough.
"""
import logging
import re
from typing import Optional

from config import Settings, settings as default_settings
from diffcore.cache import BoundedCache
from diffcore.inline_diff import compute_inline_diff, has_changes
from diffcore.models import DiffLine, DiffResult, LineType, build_result
from diffcore.normalizer import normalize_line
from diffcore.options import ComparisonOptions
from diffcore.sequence import is_ambiguous, lcs_table, prefers_insert
from diffcore.similarity import similarity

logger = logging.getLogger(__name__)

_LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")
STRUCTURE_CHARS = (":", "=", "{", "}", "[", "]", "(", ")")


def split_lines(text: str, options: Optional[ComparisonOptions] = None) -> list[str]:
    """Split on ``\\n``; with ``ignore_line_endings`` also on ``\\r\\n`` and ``\\r``."""
    if options is not None and options.ignore_line_endings:
        return _LINE_BREAK_RE.split(text)
    return text.split("\n")


def comparison_keys(lines: list[str], options: Optional[ComparisonOptions]) -> list[str]:
    if options is None or not options.normalizes_lines:
        return list(lines)
    return [normalize_line(line, options) for line in lines]


def shares_structure(a: str, b: str) -> bool:
    """Both lines carry the same ``:``, ``=`` or bracket character."""
    if not a.strip() or not b.strip():
        return False
    return any(ch in a and ch in b for ch in STRUCTURE_CHARS)


def unchanged_result(left_lines: list[str], right_lines: list[str]) -> DiffResult:
    """All rows unchanged; both sides have the same number of lines."""
    left = [DiffLine(line, LineType.UNCHANGED, n) for n, line in enumerate(left_lines, start=1)]
    right = [DiffLine(line, LineType.UNCHANGED, n) for n, line in enumerate(right_lines, start=1)]
    return DiffResult(left=left, right=right, additions=0, removals=0, has_differences=False)


def compute_diff(
    left_text: str,
    right_text: str,
    options: Optional[ComparisonOptions] = None,
    tuning: Optional[Settings] = None,
    cache: Optional[BoundedCache] = None,
) -> DiffResult:
    """
    Diff two texts line by line.

    Lines are compared by their normalized form when ``options`` ask for
    any normalization, by raw content otherwise. Displayed content is
    always the original line.
    """
    tuning = tuning or default_settings

    left_lines = split_lines(left_text, options)
    right_lines = split_lines(right_text, options)
    left_keys = comparison_keys(left_lines, options)
    right_keys = comparison_keys(right_lines, options)

    if left_keys == right_keys:
        logger.debug("Line diff short-circuit: documents identical after normalization")
        return unchanged_result(left_lines, right_lines)

    dp = lcs_table(left_keys, right_keys)

    left: list[DiffLine] = []
    right: list[DiffLine] = []
    i, j = len(left_lines), len(right_lines)

    while i > 0 or j > 0:
        if i > 0 and j > 0 and left_keys[i - 1] == right_keys[j - 1]:
            left.append(DiffLine(left_lines[i - 1], LineType.UNCHANGED, i))
            right.append(DiffLine(right_lines[j - 1], LineType.UNCHANGED, j))
            i -= 1
            j -= 1
        elif i > 0 and j > 0 and (
            is_ambiguous(dp, i, j)
            or shares_structure(left_keys[i - 1], right_keys[j - 1])
            or similarity(left_keys[i - 1], right_keys[j - 1], cache=cache)
            > tuning.LINE_PAIR_SIMILARITY_THRESHOLD
        ):
            left_segments, right_segments = compute_inline_diff(
                left_lines[i - 1], right_lines[j - 1], tuning=tuning, cache=cache
            )
            if has_changes(left_segments, right_segments):
                left.append(DiffLine(left_lines[i - 1], LineType.MODIFIED, i, left_segments))
                right.append(DiffLine(right_lines[j - 1], LineType.MODIFIED, j, right_segments))
            else:
                left.append(DiffLine(left_lines[i - 1], LineType.UNCHANGED, i))
                right.append(DiffLine(right_lines[j - 1], LineType.UNCHANGED, j))
            i -= 1
            j -= 1
        elif prefers_insert(dp, i, j):
            left.append(DiffLine.empty())
            right.append(DiffLine(right_lines[j - 1], LineType.ADDED, j))
            j -= 1
        else:
            left.append(DiffLine(left_lines[i - 1], LineType.REMOVED, i))
            right.append(DiffLine.empty())
            i -= 1

    left.reverse()
    right.reverse()
    return build_result(left, right)
