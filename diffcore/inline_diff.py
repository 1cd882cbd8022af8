"""
Word- and character-level diff inside a pair of differing lines.

Concatenating the returned segments on either side reproduces that side's
line exactly.
"""
import logging
from typing import Optional

from config import Settings, settings as default_settings
from diffcore.cache import BoundedCache
from diffcore.models import DiffSegment, SegmentType
from diffcore.sequence import AlignOp, align
from diffcore.similarity import similarity

logger = logging.getLogger(__name__)

MODE_AUTO = "auto"
MODE_CHAR = "char"
MODE_WORD = "word"


def tokenize_words(line: str) -> list[str]:
    """Split into non-whitespace runs, keeping every whitespace char as its own token."""
    tokens: list[str] = []
    current = ""
    for char in line:
        if char.isspace():
            if current:
                tokens.append(current)
                current = ""
            tokens.append(char)
        else:
            current += char
    if current:
        tokens.append(current)
    return tokens


def merge_segments(segments: list[DiffSegment]) -> list[DiffSegment]:
    """Join neighbouring segments of the same type."""
    merged: list[DiffSegment] = []
    for segment in segments:
        if not segment.text:
            continue
        if merged and merged[-1].type == segment.type:
            merged[-1] = DiffSegment(merged[-1].text + segment.text, segment.type)
        else:
            merged.append(DiffSegment(segment.text, segment.type))
    return merged


def _diff_tokens(
    left_tokens: list[str],
    right_tokens: list[str],
) -> tuple[list[DiffSegment], list[DiffSegment]]:
    left_segments: list[DiffSegment] = []
    right_segments: list[DiffSegment] = []

    for op, i, j in align(left_tokens, right_tokens):
        if op == AlignOp.EQUAL:
            left_segments.append(DiffSegment(left_tokens[i], SegmentType.UNCHANGED))
            right_segments.append(DiffSegment(right_tokens[j], SegmentType.UNCHANGED))
        elif op == AlignOp.INSERT:
            right_segments.append(DiffSegment(right_tokens[j], SegmentType.ADDED))
        else:
            left_segments.append(DiffSegment(left_tokens[i], SegmentType.REMOVED))

    return merge_segments(left_segments), merge_segments(right_segments)


def whole_line_segments(left: str, right: str) -> tuple[list[DiffSegment], list[DiffSegment]]:
    """Coarse result: the whole left line removed, the whole right line added."""
    left_segments = [DiffSegment(left, SegmentType.REMOVED)] if left else []
    right_segments = [DiffSegment(right, SegmentType.ADDED)] if right else []
    return left_segments, right_segments


def compute_char_diff(left: str, right: str) -> tuple[list[DiffSegment], list[DiffSegment]]:
    return _diff_tokens(list(left), list(right))


def compute_word_diff(left: str, right: str) -> tuple[list[DiffSegment], list[DiffSegment]]:
    return _diff_tokens(tokenize_words(left), tokenize_words(right))


def compute_inline_diff(
    left: str,
    right: str,
    tuning: Optional[Settings] = None,
    cache: Optional[BoundedCache] = None,
    mode: str = MODE_AUTO,
) -> tuple[list[DiffSegment], list[DiffSegment]]:
    """
    Diff two lines into (left_segments, right_segments).

    In ``auto`` mode, character-level diff is used when the lines are
    similar enough and both are short; otherwise word-level. Lines past the
    hard size ceiling are never diffed finely.
    """
    tuning = tuning or default_settings

    if len(left) > tuning.INLINE_HARD_MAX_LENGTH or len(right) > tuning.INLINE_HARD_MAX_LENGTH:
        logger.debug(f"Inline diff skipped for oversized lines ({len(left)}/{len(right)} chars)")
        return whole_line_segments(left, right)

    if mode == MODE_CHAR:
        return compute_char_diff(left, right)
    if mode == MODE_WORD:
        return compute_word_diff(left, right)

    score = similarity(left, right, cache=cache)
    if (
        score > tuning.INLINE_CHAR_SIMILARITY_THRESHOLD
        and len(left) < tuning.INLINE_CHAR_MAX_LENGTH
        and len(right) < tuning.INLINE_CHAR_MAX_LENGTH
    ):
        return compute_char_diff(left, right)
    return compute_word_diff(left, right)


def has_changes(left_segments: list[DiffSegment], right_segments: list[DiffSegment]) -> bool:
    return any(s.type != SegmentType.UNCHANGED for s in left_segments + right_segments)
