"""
Structure-aware diff for configuration-style text.

A single field inserted into or removed from a YAML / env / JSON document
shifts every following line; a purely positional diff then reports all of
them as changed. This aligner matches lines by content and key instead:

1. identical normalized content at the same index;
2. identical normalized content within a window, indent within tolerance,
   plus drifting fields (timestamps, ids) under the same key;
3. identical (key, value) pairs anywhere, indent within tolerance.

Leftovers are paired as "modified" when similar and close, and everything
else is a plain addition or removal. Right-side lines are laid out on the
row of their left partner so both columns stay the same length.
"""
import logging
import re
from collections import defaultdict
from typing import Optional

from config import Settings, settings as default_settings
from diffcore.cache import BoundedCache
from diffcore.field_classifier import detect_field_type
from diffcore.inline_diff import MODE_WORD, compute_inline_diff, has_changes
from diffcore.line_diff import split_lines, unchanged_result
from diffcore.models import (
    DiffLine,
    DiffResult,
    FieldType,
    LineToken,
    LineType,
    build_result,
)
from diffcore.normalizer import indent_width, normalize_line
from diffcore.options import ComparisonOptions, DEFAULT_OPTIONS
from diffcore.similarity import similarity

logger = logging.getLogger(__name__)

_KEY_VALUE_RE = re.compile(r"""^\s*(?:"([^"]+)"|'([^']+)'|([A-Za-z0-9_.$@-]+))\s*:\s*(.*)$""")
_ENV_ITEM_RE = re.compile(r"^\s*-\s*([A-Z_][A-Z0-9_]*)\s*[=:]\s*(.*)$")
_ASSIGNMENT_RE = re.compile(r"^\s*(?:export\s+)?([A-Za-z_][A-Za-z0-9_.-]*)\s*=\s*(.*)$")
_COMMENT_RE = re.compile(r"^\s*(#|//)")


def extract_key_value(normalized: str) -> tuple[Optional[str], Optional[str]]:
    """Pull ``(key, value)`` out of YAML, JSON member, env-list or assignment lines."""
    match = _ENV_ITEM_RE.match(normalized)
    if match:
        return match.group(1), match.group(2)
    match = _KEY_VALUE_RE.match(normalized)
    if match:
        key = match.group(1) or match.group(2) or match.group(3)
        return key, match.group(4).rstrip(",").rstrip()
    match = _ASSIGNMENT_RE.match(normalized)
    if match:
        return match.group(1), match.group(2)
    return None, None


def tokenize_line(line: str, options: Optional[ComparisonOptions] = None) -> LineToken:
    options = options or DEFAULT_OPTIONS
    normalized = normalize_line(line, options)
    key, value = extract_key_value(normalized)

    field_type = FieldType.NORMAL
    if key is not None:
        field_type = detect_field_type(key, (value or "").strip("'\""))

    return LineToken(
        content=line,
        normalized=normalized,
        indent=indent_width(normalized, options.tab_size) // 2,
        key=key,
        value=value,
        is_comment=bool(_COMMENT_RE.match(normalized)),
        is_empty=not normalized.strip(),
        field_type=field_type,
    )


def _window(i: int, radius: int, size: int):
    """Indexes within ``radius`` of ``i``, nearest first, forward offset before backward."""
    if 0 <= i < size:
        yield i
    for offset in range(1, radius + 1):
        if i + offset < size:
            yield i + offset
        if 0 <= i - offset < size:
            yield i - offset


def find_structural_matches(
    left: list[LineToken],
    right: list[LineToken],
    tuning: Optional[Settings] = None,
) -> dict[int, int]:
    """Map left index -> right index for lines that are structurally the same line."""
    tuning = tuning or default_settings
    matches: dict[int, int] = {}
    used_right: set[int] = set()

    # Pass 1: same content at the same index
    for i in range(min(len(left), len(right))):
        if left[i].normalized == right[i].normalized:
            matches[i] = i
            used_right.add(i)

    # Pass 2: same content nearby, or drifting fields under the same key
    for i, token in enumerate(left):
        if i in matches:
            continue
        for j in _window(i, tuning.STRUCTURAL_SEARCH_WINDOW, len(right)):
            if j in used_right:
                continue
            other = right[j]
            if abs(token.indent - other.indent) > tuning.STRUCTURAL_INDENT_TOLERANCE:
                continue
            same_content = token.normalized == other.normalized
            same_drifting_field = (
                token.is_special
                and other.is_special
                and token.key == other.key
                and token.field_type == other.field_type
            )
            if same_content or same_drifting_field:
                matches[i] = j
                used_right.add(j)
                break

    # Pass 3: same key and value regardless of position
    for i, token in enumerate(left):
        if i in matches or token.key is None:
            continue
        for j, other in enumerate(right):
            if j in used_right:
                continue
            if (
                token.key == other.key
                and token.value == other.value
                and abs(token.indent - other.indent) <= tuning.KEY_VALUE_INDENT_TOLERANCE
            ):
                matches[i] = j
                used_right.add(j)
                break

    return matches


def find_modified_pairs(
    left: list[LineToken],
    right: list[LineToken],
    matches: dict[int, int],
    tuning: Optional[Settings] = None,
    cache: Optional[BoundedCache] = None,
) -> dict[int, int]:
    """Pair unmatched lines that look like the same line edited."""
    tuning = tuning or default_settings
    used_right = set(matches.values())
    pairs: dict[int, int] = {}

    for i, token in enumerate(left):
        if i in matches:
            continue
        for j in _window(i, tuning.MODIFIED_PAIR_WINDOW, len(right)):
            if j in used_right:
                continue
            other = right[j]
            score = similarity(
                token.normalized,
                other.normalized,
                cache=cache,
                prefix_boost=tuning.PREFIX_BOOST,
                prefix_min_length=tuning.PREFIX_BOOST_MIN_LENGTH,
            )
            if token.is_comment and other.is_comment and abs(i - j) <= tuning.COMMENT_POSITION_WINDOW:
                threshold = tuning.COMMENT_SIMILARITY_THRESHOLD
            else:
                threshold = tuning.MODIFIED_SIMILARITY_THRESHOLD
            if score > threshold:
                pairs[i] = j
                used_right.add(j)
                break

    return pairs


def _paired_lines(
    left_token: LineToken,
    right_token: LineToken,
    left_number: int,
    right_number: int,
    tuning: Settings,
    cache: Optional[BoundedCache],
) -> tuple[DiffLine, DiffLine]:
    if left_token.normalized != right_token.normalized:
        left_segments, right_segments = compute_inline_diff(
            left_token.content, right_token.content, tuning=tuning, cache=cache, mode=MODE_WORD
        )
        if has_changes(left_segments, right_segments):
            return (
                DiffLine(left_token.content, LineType.MODIFIED, left_number, left_segments),
                DiffLine(right_token.content, LineType.MODIFIED, right_number, right_segments),
            )
    return (
        DiffLine(left_token.content, LineType.UNCHANGED, left_number),
        DiffLine(right_token.content, LineType.UNCHANGED, right_number),
    )


def layout_rows(
    left: list[LineToken],
    right: list[LineToken],
    partners: dict[int, int],
    tuning: Settings,
    cache: Optional[BoundedCache] = None,
) -> tuple[list[DiffLine], list[DiffLine]]:
    """
    Build the two columns.

    Every left line keeps its order; a paired right line sits on its
    partner's row. An unpaired right line follows the row of the nearest
    paired right line above it, sharing a row with an unpaired left line
    when one is next, otherwise on its own row against a placeholder.
    """
    left_of_right = {j: i for i, j in partners.items()}

    # Bucket unpaired right lines under the left row they should follow (-1 = top)
    following: dict[int, list[int]] = defaultdict(list)
    anchor = -1
    for j in range(len(right)):
        if j in left_of_right:
            anchor = left_of_right[j]
        else:
            following[anchor].append(j)

    out_left: list[DiffLine] = []
    out_right: list[DiffLine] = []
    pending: list[int] = list(following[-1])

    def added(j: int) -> DiffLine:
        return DiffLine(right[j].content, LineType.ADDED, j + 1)

    for i, token in enumerate(left):
        if i in partners:
            for j in pending:
                out_left.append(DiffLine.empty())
                out_right.append(added(j))
            pending = []
            pair = _paired_lines(token, right[partners[i]], i + 1, partners[i] + 1, tuning, cache)
            out_left.append(pair[0])
            out_right.append(pair[1])
        else:
            out_left.append(DiffLine(token.content, LineType.REMOVED, i + 1))
            if pending:
                out_right.append(added(pending.pop(0)))
            else:
                out_right.append(DiffLine.empty())
        pending.extend(following.get(i, []))

    for j in pending:
        out_left.append(DiffLine.empty())
        out_right.append(added(j))

    return out_left, out_right


def compute_structural_diff(
    left_text: str,
    right_text: str,
    options: Optional[ComparisonOptions] = None,
    tuning: Optional[Settings] = None,
    cache: Optional[BoundedCache] = None,
) -> DiffResult:
    """Diff configuration-style text by structure rather than position."""
    options = options or DEFAULT_OPTIONS
    tuning = tuning or default_settings

    left_lines = split_lines(left_text, options)
    right_lines = split_lines(right_text, options)
    left = [tokenize_line(line, options) for line in left_lines]
    right = [tokenize_line(line, options) for line in right_lines]

    if [t.normalized for t in left] == [t.normalized for t in right]:
        logger.debug("Structural diff short-circuit: documents identical after normalization")
        return unchanged_result(left_lines, right_lines)

    matches = find_structural_matches(left, right, tuning)
    modified = find_modified_pairs(left, right, matches, tuning, cache)
    logger.debug(
        f"Structural alignment: {len(matches)} matched, {len(modified)} modified, "
        f"{len(left)} left / {len(right)} right lines"
    )

    partners = {**matches, **modified}
    out_left, out_right = layout_rows(left, right, partners, tuning, cache)
    return build_result(out_left, out_right)
