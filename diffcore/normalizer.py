"""
Line normalization for comparison.

The normalized form is a comparison key only; displayed content is always
the original line.
"""
import re
from typing import Optional

from diffcore.options import ComparisonOptions, DEFAULT_OPTIONS

# Control characters other than tab, DEL/C1 controls, zero-width and BOM
_INVISIBLE_RE = re.compile(r"[\x00-\x08\x0a-\x1f\x7f-\x9f\u200b-\u200d\u2060\ufeff]")
_UNICODE_SPACE_RE = re.compile(r"[\u00a0\u2000-\u200a\u202f\u205f\u3000]")
_LEADING_WS_RE = re.compile(r"^([ \t]*)(.*)$", re.DOTALL)
_WS_RUN_RE = re.compile(r"\s+")

_YAML_KEY_RE = re.compile(r"^(\s*(?:-\s+)?)([^\s:#'\"][^:#]*?|\"[^\"]*\"|'[^']*')\s*:(?:\s+(.*))?$")
_YAML_PLAIN_UNSAFE_RE = re.compile(r"^[\[\]{}&*!|>%@`,#?:-]|: | #|^\s|\s$")
_YAML_TYPED_SCALAR_RE = re.compile(
    r"^(?:true|false|yes|no|on|off|null|~|[-+]?(?:\d[\d_]*)?\.?\d+(?:[eE][-+]?\d+)?|0x[0-9a-fA-F]+|\.inf|\.nan)$",
    re.IGNORECASE,
)

INDENT_STEPS = (4, 3, 5)


def strip_line_breaks(line: str) -> str:
    return line.replace("\r\n", "\n").replace("\r", "\n").replace("\n", "")


def collapse_indent_width(width: int) -> int:
    """Rescale an indent written with 3/4/5-space steps to 2-space steps."""
    if width == 0:
        return 0
    for step in INDENT_STEPS:
        if width % step == 0:
            return width // step * 2
    return width


def unquote_yaml_scalar(value: str) -> str:
    """Drop quotes that do not change how a YAML scalar is read."""
    if len(value) < 2 or value[0] != value[-1] or value[0] not in ("'", '"'):
        return value
    inner = value[1:-1]
    if not inner or "\\" in inner or inner.strip() != inner:
        return value
    if value[0] in inner or _YAML_PLAIN_UNSAFE_RE.search(inner) or _YAML_TYPED_SCALAR_RE.match(inner):
        return value
    return inner


def normalize_yaml_line(line: str) -> str:
    match = _YAML_KEY_RE.match(line)
    if not match:
        return line
    lead, key, value = match.groups()
    if value is None:
        return f"{lead}{key}:"
    return f"{lead}{key}: {unquote_yaml_scalar(value.strip())}"


def normalize_line(line: str, options: Optional[ComparisonOptions] = None) -> str:
    """Apply the normalization steps in order and return the comparison key."""
    options = options or DEFAULT_OPTIONS

    normalized = strip_line_breaks(line)
    normalized = _INVISIBLE_RE.sub("", normalized)
    normalized = _UNICODE_SPACE_RE.sub(" ", normalized)
    normalized = normalized.replace("\t", " " * options.tab_size)

    if options.normalize_indentation or options.is_yaml:
        indent, body = _LEADING_WS_RE.match(normalized).groups()
        normalized = " " * collapse_indent_width(len(indent)) + body

    normalized = normalized.rstrip()

    if options.ignore_whitespace:
        indent, body = _LEADING_WS_RE.match(normalized).groups()
        normalized = indent + _WS_RUN_RE.sub(" ", body)

    if options.is_yaml:
        normalized = normalize_yaml_line(normalized)

    if options.ignore_case:
        normalized = normalized.lower()

    return normalized


def indent_width(line: str, tab_size: int = 2) -> int:
    """Width of the leading whitespace after tab expansion."""
    expanded = line.replace("\t", " " * tab_size)
    return len(expanded) - len(expanded.lstrip(" \t"))
