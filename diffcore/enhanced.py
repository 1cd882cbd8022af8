"""
Enhanced comparison: picks the right differ for the input and, for JSON,
adds tree-level analysis on top of the line diff.

Routing:

- both sides parse as JSON   -> pretty-print, structural alignment,
                                structural changes and statistics
- configuration / YAML input -> structural alignment with indentation
                                normalization
- anything else              -> plain line diff
"""
import logging
import os
import re
from typing import Any, Optional

from config import Settings, settings as default_settings
from diffcore.cache import BoundedCache
from diffcore.inline_diff import compute_inline_diff
from diffcore.json_tree import RenderedLine, dumps_flat, is_container, render_json_lines, try_parse_json
from diffcore.line_diff import compute_diff
from diffcore.models import (
    DiffLine,
    DiffResult,
    DiffStatistics,
    EnhancedDiffResult,
    LineType,
    StructuralChangeType,
    count_changes,
)
from diffcore.options import ComparisonOptions, DEFAULT_OPTIONS, FormatType
from diffcore.semantic import SemanticComparator
from diffcore.structural import compute_structural_diff
from diffcore.structural_changes import StructuralChangeDetector, compute_statistics

logger = logging.getLogger(__name__)

CONFIG_EXTENSIONS = {".yaml", ".yml", ".conf", ".cfg", ".ini", ".env", ".properties", ".toml"}
YAML_EXTENSIONS = {".yaml", ".yml"}
CONFIG_LINE_RATIO = 0.6

_CONFIG_LINE_PATTERNS = [
    re.compile(r"^\s*[\"']?[\w.$@-]+[\"']?\s*:(\s|$)"),        # key: value
    re.compile(r"^\s*(export\s+)?[A-Za-z_][\w.-]*\s*=\s*"),     # key=value
    re.compile(r"^\s*-\s+\S"),                                  # - item
    re.compile(r"^\s*\[[^\]]+\]\s*$"),                          # [section]
]
_COMMENT_LINE_RE = re.compile(r"^\s*(#|//|;)")
_DOCUMENT_MARKER_RE = re.compile(r"^---\s*$", re.MULTILINE)


def _extension(name: Optional[str]) -> str:
    if not name:
        return ""
    base = os.path.basename(name).lower()
    if base.startswith(".") and base.count(".") == 1:
        return base  # dotfiles such as ".env"
    return os.path.splitext(base)[1]


def looks_like_config(text: str) -> bool:
    """True when most meaningful lines look like key/value, list or section lines."""
    lines = [
        line for line in text.splitlines()
        if line.strip() and not _COMMENT_LINE_RE.match(line)
    ]
    if not lines:
        return False
    hits = sum(1 for line in lines if any(p.match(line) for p in _CONFIG_LINE_PATTERNS))
    return hits / len(lines) >= CONFIG_LINE_RATIO


def detect_format(
    left_text: str,
    right_text: str,
    options: Optional[ComparisonOptions] = None,
    left_name: Optional[str] = None,
    right_name: Optional[str] = None,
) -> FormatType:
    """
    Decide how a pair of documents should be compared.

    An explicit ``format_type`` wins, except that JSON which fails to parse
    on either side falls back to auto-detection of the remaining formats.
    """
    options = options or DEFAULT_OPTIONS
    requested = options.format_type

    if requested in (FormatType.YAML, FormatType.CONFIG, FormatType.TEXT, FormatType.XML):
        return requested

    left_ok, _ = try_parse_json(left_text)
    right_ok, _ = try_parse_json(right_text)
    if left_ok and right_ok:
        return FormatType.JSON
    if requested == FormatType.JSON:
        logger.debug("JSON requested but one side does not parse; falling back")

    extensions = {_extension(left_name), _extension(right_name)}
    if extensions & YAML_EXTENSIONS:
        return FormatType.YAML
    if extensions & CONFIG_EXTENSIONS:
        return FormatType.CONFIG
    if _DOCUMENT_MARKER_RE.search(left_text) or _DOCUMENT_MARKER_RE.search(right_text):
        return FormatType.YAML
    if looks_like_config(left_text) and looks_like_config(right_text):
        return FormatType.CONFIG
    return FormatType.TEXT


def _rendered(line: DiffLine, rendered: list[RenderedLine]) -> Optional[RenderedLine]:
    if line.line_number is None:
        return None
    return rendered[line.line_number - 1]


def _unchanged(line: DiffLine) -> DiffLine:
    return DiffLine(line.content, LineType.UNCHANGED, line.line_number)


def _is_leaf(info: Optional[RenderedLine]) -> bool:
    return info is not None and not (is_container(info.value) and info.value)


def reconcile_json_rows(
    result: DiffResult,
    left_rendered: list[RenderedLine],
    right_rendered: list[RenderedLine],
    comparator: SemanticComparator,
    tuning: Optional[Settings] = None,
    similarity_cache: Optional[BoundedCache] = None,
) -> tuple[list[DiffLine], list[DiffLine], int, int, int]:
    """
    Re-classify aligned JSON rows using the values behind each line.

    A modified pair at the same path whose values are equal under the
    options (a trailing comma that moved, ``"5"`` against ``5`` with
    semantic comparison) becomes unchanged, as does a modified pair where
    both lines are ignored. An unchanged pair of leaf lines at the same path
    whose values differ (text equal only after normalization, such as a
    no-break space against a space) becomes modified. Changed lines under
    ignored keys or paths do not count towards additions or removals.

    Returns ``(left, right, additions, removals, ignored_lines)``.
    """
    left: list[DiffLine] = []
    right: list[DiffLine] = []
    ignored_lines = 0

    for left_line, right_line in zip(result.left, result.right):
        left_info = _rendered(left_line, left_rendered)
        right_info = _rendered(right_line, right_rendered)

        if left_line.type == LineType.MODIFIED and right_line.type == LineType.MODIFIED:
            both_ignored = left_info.ignored and right_info.ignored
            same_value = (
                left_info.path == right_info.path
                and comparator.equal(left_info.value, right_info.value, left_info.path)
            )
            if both_ignored or same_value:
                ignored_lines += 2 if both_ignored else 0
                left.append(_unchanged(left_line))
                right.append(_unchanged(right_line))
                continue

        if (
            left_line.type == LineType.UNCHANGED
            and right_line.type == LineType.UNCHANGED
            and _is_leaf(left_info)
            and _is_leaf(right_info)
            and left_info.path == right_info.path
            and not (left_info.ignored or right_info.ignored)
            and not comparator.equal(left_info.value, right_info.value, left_info.path)
        ):
            left_segments, right_segments = compute_inline_diff(
                left_line.content, right_line.content, tuning=tuning, cache=similarity_cache
            )
            left.append(DiffLine(left_line.content, LineType.MODIFIED, left_line.line_number, left_segments))
            right.append(DiffLine(right_line.content, LineType.MODIFIED, right_line.line_number, right_segments))
            continue

        if left_line.is_change and left_info is not None and left_info.ignored:
            ignored_lines += 1
        if right_line.is_change and right_info is not None and right_info.ignored:
            ignored_lines += 1
        left.append(left_line)
        right.append(right_line)

    additions = sum(
        1 for line in right
        if line.type in (LineType.ADDED, LineType.MODIFIED) and not _rendered(line, right_rendered).ignored
    )
    removals = sum(
        1 for line in left
        if line.type in (LineType.REMOVED, LineType.MODIFIED) and not _rendered(line, left_rendered).ignored
    )
    return left, right, additions, removals, ignored_lines


def _compact_size(value: Any) -> int:
    return len(dumps_flat(value, ",", ":"))


def compare_json(
    left_obj: Any,
    right_obj: Any,
    options: ComparisonOptions,
    tuning: Settings,
    similarity_cache: Optional[BoundedCache] = None,
    equality_cache: Optional[BoundedCache] = None,
) -> EnhancedDiffResult:
    """Line diff plus tree-level analysis for two parsed JSON documents."""
    comparator = SemanticComparator(options, tuning, equality_cache)

    left_rendered = render_json_lines(left_obj, options, tuning.JSON_INDENT, tuning.MAX_TREE_DEPTH)
    right_rendered = render_json_lines(right_obj, options, tuning.JSON_INDENT, tuning.MAX_TREE_DEPTH)
    aligned = compute_structural_diff(
        "\n".join(line.text for line in left_rendered),
        "\n".join(line.text for line in right_rendered),
        options,
        tuning,
        similarity_cache,
    )
    left, right, additions, removals, ignored_lines = reconcile_json_rows(
        aligned, left_rendered, right_rendered, comparator, tuning, similarity_cache
    )

    structural_changes = []
    statistics = DiffStatistics()
    if options.advanced_mode:
        size = _compact_size(left_obj)
        if size > tuning.STRUCTURAL_ANALYSIS_MAX_SIZE:
            logger.warning(
                f"Skipping structural change detection: document is {size} characters "
                f"(limit {tuning.STRUCTURAL_ANALYSIS_MAX_SIZE})"
            )
        else:
            structural_changes = StructuralChangeDetector(
                options, tuning, comparator=comparator
            ).detect(left_obj, right_obj)
        statistics = compute_statistics(left_obj, right_obj, tuning=tuning, comparator=comparator)

    moved_properties = {
        change.from_: change.to
        for change in structural_changes
        if change.type == StructuralChangeType.MOVED
    }

    return EnhancedDiffResult(
        left=left,
        right=right,
        additions=additions,
        removals=removals,
        has_differences=additions > 0 or removals > 0,
        structural_changes=structural_changes,
        moved_properties=moved_properties,
        statistics=statistics,
        format_type=FormatType.JSON.value,
        ignored_lines=ignored_lines,
        semantically_equal=comparator.equal(left_obj, right_obj),
    )


def _enhance(result: DiffResult, format_type: FormatType) -> EnhancedDiffResult:
    additions, removals = count_changes(result.left, result.right)
    return EnhancedDiffResult(
        left=result.left,
        right=result.right,
        additions=additions,
        removals=removals,
        has_differences=result.has_differences,
        format_type=format_type.value,
    )


def compute_enhanced_diff(
    left_text: str,
    right_text: str,
    options: Optional[ComparisonOptions] = None,
    tuning: Optional[Settings] = None,
    similarity_cache: Optional[BoundedCache] = None,
    equality_cache: Optional[BoundedCache] = None,
    left_name: Optional[str] = None,
    right_name: Optional[str] = None,
) -> EnhancedDiffResult:
    """
    Compare two documents with the best available strategy.

    ``left_name`` / ``right_name`` are optional file names used only as
    format hints.
    """
    options = options or DEFAULT_OPTIONS
    tuning = tuning or default_settings

    fmt = detect_format(left_text, right_text, options, left_name, right_name)
    logger.debug(f"Enhanced diff routed as {fmt.value}")

    if fmt == FormatType.JSON:
        _, left_obj = try_parse_json(left_text)
        _, right_obj = try_parse_json(right_text)
        try:
            return compare_json(left_obj, right_obj, options, tuning, similarity_cache, equality_cache)
        except RecursionError:
            logger.warning("JSON nests too deeply for tree analysis; comparing as plain text")
            fmt = FormatType.TEXT

    if fmt in (FormatType.YAML, FormatType.CONFIG):
        config_options = options.model_copy(update={"normalize_indentation": True, "format_type": fmt})
        result = compute_structural_diff(left_text, right_text, config_options, tuning, similarity_cache)
        return _enhance(result, fmt)

    result = compute_diff(left_text, right_text, options, tuning, similarity_cache)
    return _enhance(result, fmt)
