"""
JSON tree helpers: parsing, JSONPath-style paths, ignore rules and a
pretty printer that remembers which path each output line belongs to.
"""
import json
import re
from typing import Any, Callable, Collection, NamedTuple, Optional

from diffcore.options import ComparisonOptions, DEFAULT_OPTIONS

ROOT = "$"


def try_parse_json(text: str) -> tuple[bool, Any]:
    """Return ``(True, value)`` when ``text`` is JSON, ``(False, None)`` otherwise."""
    if not text or not text.strip():
        return False, None
    try:
        return True, json.loads(text)
    except (ValueError, RecursionError):
        return False, None


def json_type(value: Any) -> str:
    """JSON type name of a parsed value."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def is_container(value: Any) -> bool:
    return isinstance(value, (dict, list))


def member_path(path: str, key: Any) -> str:
    return f"{path}.{key}"


def index_path(path: str, index: Any) -> str:
    return f"{path}[{index}]"


def keyed_path(path: str, key_field: str, key: Any) -> str:
    """Path of an array item addressed by its key field: ``$.users[id=7]``."""
    return f"{path}[{key_field}={key}]"


def dumps_flat(
    value: Any,
    item_separator: str = ", ",
    key_separator: str = ": ",
    sort_keys: bool = False,
) -> str:
    """
    Single-line JSON text, equal to ``json.dumps(value, ensure_ascii=False,
    separators=(item_separator, key_separator))``.

    Containers are walked with an explicit stack, so nesting depth is not
    limited by the interpreter's recursion limit.
    """
    parts: list[str] = []
    stack: list[tuple[bool, Any]] = [(False, value)]
    while stack:
        literal, item = stack.pop()
        if literal:
            parts.append(item)
        elif isinstance(item, dict):
            entries = sorted(item.items(), key=lambda kv: str(kv[0])) if sort_keys else list(item.items())
            pending: list[tuple[bool, Any]] = [(True, "{")]
            for n, (key, child) in enumerate(entries):
                if n:
                    pending.append((True, item_separator))
                pending.append((True, json.dumps(str(key), ensure_ascii=False) + key_separator))
                pending.append((False, child))
            pending.append((True, "}"))
            stack.extend(reversed(pending))
        elif isinstance(item, list):
            pending = [(True, "[")]
            for n, child in enumerate(item):
                if n:
                    pending.append((True, item_separator))
                pending.append((False, child))
            pending.append((True, "]"))
            stack.extend(reversed(pending))
        else:
            parts.append(json.dumps(item, ensure_ascii=False, default=str))
    return "".join(parts)


def values_equal(
    a: Any,
    b: Any,
    normalize: Optional[Callable[[Any], Any]] = None,
    skip_keys: Collection[str] = (),
) -> bool:
    """
    Strict structural equality without recursion.

    ``normalize`` is applied to every scalar before comparing; members named
    in ``skip_keys`` are left out of object comparisons.
    """
    stack = [(a, b)]
    while stack:
        x, y = stack.pop()
        if normalize is not None:
            x, y = normalize(x), normalize(y)
        if json_type(x) != json_type(y):
            return False
        if isinstance(x, list):
            if len(x) != len(y):
                return False
            stack.extend(zip(x, y))
        elif isinstance(x, dict):
            keys = {k for k in x if k not in skip_keys}
            if keys != {k for k in y if k not in skip_keys}:
                return False
            stack.extend((x[k], y[k]) for k in keys)
        elif x != y:
            return False
    return True


def compile_ignore_patterns(patterns: list[str]) -> list[re.Pattern]:
    """
    Compile ``$.a.*.b`` style patterns; ``*`` matches any run of characters.
    Patterns without a leading ``$`` are taken relative to the root.
    """
    compiled = []
    for pattern in patterns:
        pattern = pattern.strip()
        if not pattern:
            continue
        if not pattern.startswith(ROOT):
            pattern = ROOT + (pattern if pattern.startswith("[") else "." + pattern)
        regex = ".*".join(re.escape(part) for part in pattern.split("*"))
        compiled.append(re.compile(f"^{regex}$"))
    return compiled


def matches_any(path: str, patterns: list[re.Pattern]) -> bool:
    return any(p.match(path) for p in patterns)


class RenderedLine(NamedTuple):
    text: str
    path: str
    value: Any
    ignored: bool


def render_json_lines(
    obj: Any,
    options: Optional[ComparisonOptions] = None,
    indent: int = 2,
    max_depth: int = 200,
) -> list[RenderedLine]:
    """
    Pretty-print ``obj`` exactly as ``json.dumps(obj, indent=indent,
    ensure_ascii=False)`` would, one entry per output line.

    A line is ``ignored`` when it falls under an ignored key or path.
    Containers nested deeper than ``max_depth`` are emitted compactly.
    """
    options = options or DEFAULT_OPTIONS
    patterns = compile_ignore_patterns(options.ignore_paths)
    ignore_keys = set(options.ignore_keys)
    out: list[RenderedLine] = []

    def emit(value, path, level, prefix, suffix, ignored):
        pad = " " * (indent * level)
        ignored = ignored or matches_any(path, patterns)
        if isinstance(value, dict) and value and level < max_depth:
            out.append(RenderedLine(f"{pad}{prefix}{{", path, value, ignored))
            items = list(value.items())
            for n, (key, child) in enumerate(items):
                key_text = json.dumps(str(key), ensure_ascii=False)
                emit(
                    child,
                    member_path(path, key),
                    level + 1,
                    f"{key_text}: ",
                    "," if n < len(items) - 1 else "",
                    ignored or key in ignore_keys,
                )
            out.append(RenderedLine(f"{pad}}}{suffix}", path, value, ignored))
        elif isinstance(value, list) and value and level < max_depth:
            out.append(RenderedLine(f"{pad}{prefix}[", path, value, ignored))
            for n, child in enumerate(value):
                emit(
                    child,
                    index_path(path, n),
                    level + 1,
                    "",
                    "," if n < len(value) - 1 else "",
                    ignored,
                )
            out.append(RenderedLine(f"{pad}]{suffix}", path, value, ignored))
        else:
            text = dumps_flat(value)
            out.append(RenderedLine(f"{pad}{prefix}{text}{suffix}", path, value, ignored))

    emit(obj, ROOT, 0, "", "", False)
    return out


def format_json(text: str, indent: int = 2) -> str:
    """Pretty-print JSON text; anything that does not parse or nests too deeply comes back unchanged."""
    ok, value = try_parse_json(text)
    if not ok:
        return text
    try:
        return json.dumps(value, indent=indent, ensure_ascii=False)
    except RecursionError:
        return text


def format_headers(headers: dict[str, str]) -> str:
    """Render a header mapping as sorted ``Name: value`` lines."""
    return "\n".join(f"{key}: {value}" for key, value in sorted(headers.items(), key=lambda kv: kv[0].lower()))
