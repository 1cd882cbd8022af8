"""
Search and path navigation over a finished diff.

Both functions only read the result; they are meant for viewers that need
to jump between occurrences of a term or to the line of a JSON path.
"""
import re
from dataclasses import dataclass
from typing import Optional, List, Tuple

from diffcore.models import DiffLine, DiffResult

LEFT = "left"
RIGHT = "right"

_TRAILING_INDEX_RE = re.compile(r"(\[[^\]]*\])+$")


@dataclass(frozen=True)
class SearchMatch:
    """One occurrence: 0-based row index, 0-based column, and side."""
    line: int
    column: int
    side: str

    def to_dict(self) -> dict:
        return {"line": self.line, "column": self.column, "side": self.side}


def _plain_positions(content: str, query: str, case_sensitive: bool) -> List[int]:
    haystack = content if case_sensitive else content.lower()
    needle = query if case_sensitive else query.lower()
    positions = []
    position = haystack.find(needle)
    while position != -1:
        positions.append(position)
        position = haystack.find(needle, position + 1)
    return positions


def _search_side(
    lines: List[DiffLine],
    side: str,
    query: str,
    pattern: Optional[re.Pattern],
    case_sensitive: bool,
) -> List[SearchMatch]:
    matches = []
    for index, line in enumerate(lines):
        if not line.content:
            continue
        if pattern is not None:
            positions = [m.start() for m in pattern.finditer(line.content)]
        else:
            positions = _plain_positions(line.content, query, case_sensitive)
        matches.extend(SearchMatch(index, column, side) for column in positions)
    return matches


def search_in_diff(
    result: DiffResult,
    query: str,
    case_sensitive: bool = False,
    regex: bool = False,
) -> List[SearchMatch]:
    """
    Find every occurrence of ``query`` in the displayed lines, left side
    first. Plain-text matches may overlap.

    Raises:
        re.error: if ``regex`` is set and ``query`` is not a valid pattern
    """
    if not query:
        return []

    pattern = None
    if regex:
        pattern = re.compile(query, 0 if case_sensitive else re.IGNORECASE)

    return (
        _search_side(result.left, LEFT, query, pattern, case_sensitive)
        + _search_side(result.right, RIGHT, query, pattern, case_sensitive)
    )


def last_member(json_path: str) -> str:
    """``$.spec.containers[0].image`` -> ``image``; ``$.items[2]`` -> ``items``."""
    member = json_path.lstrip("$").split(".")[-1]
    return _TRAILING_INDEX_RE.sub("", member)


def navigate_to_path(result: DiffResult, json_path: str) -> Optional[Tuple[int, str]]:
    """
    Locate the first row showing the last member of ``json_path`` as a
    quoted key. Returns ``(row, side)``, or ``None`` when nothing matches.
    """
    member = last_member(json_path)
    if not member:
        return None

    needle = f'"{member}"'
    for side, lines in ((LEFT, result.left), (RIGHT, result.right)):
        for index, line in enumerate(lines):
            if line.content and needle in line.content:
                return index, side
    return None
