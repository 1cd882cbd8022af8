# Tandem v1.0.0
"""
Core package for the Tandem comparison engine.
Contains the line, structural and JSON-aware differs and the session that
owns their caches.
"""
from diffcore.models import (
    LineType,
    SegmentType,
    StructuralChangeType,
    FieldType,
    LineToken,
    DiffSegment,
    DiffLine,
    DiffResult,
    StructuralChange,
    DiffStatistics,
    EnhancedDiffResult
)
from diffcore.options import ComparisonOptions, FormatType
from diffcore.cache import BoundedCache
from diffcore.sequence import lcs_table, align
from diffcore.normalizer import normalize_line
from diffcore.similarity import similarity
from diffcore.inline_diff import compute_inline_diff
from diffcore.field_classifier import detect_field_type, group_fields
from diffcore.json_tree import format_json, format_headers
from diffcore.structural_changes import detect_structural_changes, compute_statistics
from diffcore.enhanced import detect_format
from diffcore.smart import ArrayComparison, ArrayMode, compare_arrays, compare_versions, detect_array_type, normalize_nullish
from diffcore.session import (
    ComparisonSession,
    compute_diff,
    compute_structural_diff,
    compute_enhanced_diff,
    deep_equal
)

__all__ = [
    "LineType",
    "SegmentType",
    "StructuralChangeType",
    "FieldType",
    "LineToken",
    "DiffSegment",
    "DiffLine",
    "DiffResult",
    "StructuralChange",
    "DiffStatistics",
    "EnhancedDiffResult",
    "ComparisonOptions",
    "FormatType",
    "BoundedCache",
    "lcs_table",
    "align",
    "normalize_line",
    "similarity",
    "compute_inline_diff",
    "detect_field_type",
    "group_fields",
    "format_json",
    "format_headers",
    "detect_structural_changes",
    "compute_statistics",
    "detect_format",
    "ArrayComparison",
    "ArrayMode",
    "compare_arrays",
    "compare_versions",
    "detect_array_type",
    "normalize_nullish",
    "ComparisonSession",
    "compute_diff",
    "compute_structural_diff",
    "compute_enhanced_diff",
    "deep_equal"
]
