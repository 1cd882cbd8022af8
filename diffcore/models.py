"""
Result types produced by the comparison engine.

Every value here is created fresh per comparison call and is never mutated
once returned. ``to_dict`` renders the camelCase shape the rendering layer
consumes.
"""
from typing import Any, Optional
from dataclasses import dataclass, field
from enum import Enum


class LineType(str, Enum):
    UNCHANGED = "unchanged"
    ADDED = "added"
    REMOVED = "removed"
    MODIFIED = "modified"
    EMPTY = "empty"


class SegmentType(str, Enum):
    UNCHANGED = "unchanged"
    ADDED = "added"
    REMOVED = "removed"


class StructuralChangeType(str, Enum):
    MOVED = "moved"
    RENAMED = "renamed"
    TYPE_CHANGED = "type_changed"
    REORDERED = "reordered"


class FieldType(str, Enum):
    TIMESTAMP = "timestamp"
    ID = "id"
    VERSION = "version"
    NORMAL = "normal"


@dataclass(frozen=True)
class LineToken:
    """One input line prepared for structural matching."""
    content: str
    normalized: str
    indent: int
    key: Optional[str] = None
    value: Optional[str] = None
    is_comment: bool = False
    is_empty: bool = False
    field_type: FieldType = FieldType.NORMAL

    @property
    def is_special(self) -> bool:
        """Timestamp or id fields whose values are expected to drift."""
        return self.key is not None and self.field_type in (FieldType.TIMESTAMP, FieldType.ID)


@dataclass
class DiffSegment:
    """A span of text inside a modified line."""
    text: str
    type: SegmentType

    def to_dict(self) -> dict:
        return {"text": self.text, "type": self.type.value}


@dataclass
class DiffLine:
    """A single row on one side of a side-by-side diff."""
    content: str
    type: LineType
    line_number: Optional[int] = None
    segments: Optional[list[DiffSegment]] = None

    @classmethod
    def empty(cls) -> "DiffLine":
        """Padding row; carries no line number."""
        return cls(content="", type=LineType.EMPTY, line_number=None)

    @property
    def is_change(self) -> bool:
        return self.type in (LineType.ADDED, LineType.REMOVED, LineType.MODIFIED)

    def to_dict(self) -> dict:
        result = {
            "content": self.content,
            "type": self.type.value,
            "lineNumber": self.line_number,
        }
        if self.segments is not None:
            result["segments"] = [s.to_dict() for s in self.segments]
        return result


@dataclass
class DiffResult:
    """Parallel left/right rows; ``len(left) == len(right)`` always holds."""
    left: list[DiffLine] = field(default_factory=list)
    right: list[DiffLine] = field(default_factory=list)
    additions: int = 0
    removals: int = 0
    has_differences: bool = False

    @property
    def row_count(self) -> int:
        return len(self.left)

    def to_dict(self) -> dict:
        return {
            "left": [line.to_dict() for line in self.left],
            "right": [line.to_dict() for line in self.right],
            "additions": self.additions,
            "removals": self.removals,
            "hasDifferences": self.has_differences,
        }


@dataclass
class StructuralChange:
    """A tree-level change detected between two JSON documents."""
    type: StructuralChangeType
    path: str
    from_: Any = None
    to: Any = None
    old_value: Any = None
    new_value: Any = None

    def to_dict(self) -> dict:
        result = {"type": self.type.value, "path": self.path}
        if self.from_ is not None:
            result["from"] = self.from_
        if self.to is not None:
            result["to"] = self.to
        if self.old_value is not None:
            result["oldValue"] = self.old_value
        if self.new_value is not None:
            result["newValue"] = self.new_value
        return result


@dataclass
class DiffStatistics:
    """Leaf-path counts over two parsed JSON trees."""
    total_keys: int = 0
    changed_keys: int = 0
    added_keys: int = 0
    removed_keys: int = 0
    percent_changed: float = 0.0

    @property
    def unchanged_keys(self) -> int:
        return self.total_keys - self.changed_keys - self.added_keys - self.removed_keys

    def to_dict(self) -> dict:
        return {
            "totalKeys": self.total_keys,
            "changedKeys": self.changed_keys,
            "addedKeys": self.added_keys,
            "removedKeys": self.removed_keys,
            "percentChanged": self.percent_changed,
        }


@dataclass
class EnhancedDiffResult(DiffResult):
    """A line diff enriched with tree-level analysis (JSON input only)."""
    structural_changes: list[StructuralChange] = field(default_factory=list)
    moved_properties: dict[str, str] = field(default_factory=dict)
    statistics: DiffStatistics = field(default_factory=DiffStatistics)
    format_type: str = "text"
    ignored_lines: int = 0
    semantically_equal: Optional[bool] = None

    def to_dict(self) -> dict:
        result = super().to_dict()
        result.update({
            "structuralChanges": [c.to_dict() for c in self.structural_changes],
            "movedProperties": dict(self.moved_properties),
            "statistics": self.statistics.to_dict(),
            "formatType": self.format_type,
            "ignoredLines": self.ignored_lines,
            "semanticallyEqual": self.semantically_equal,
        })
        return result


def count_changes(left: list[DiffLine], right: list[DiffLine]) -> tuple[int, int]:
    """Return (additions, removals); a modified row counts once on each side."""
    additions = sum(1 for line in right if line.type in (LineType.ADDED, LineType.MODIFIED))
    removals = sum(1 for line in left if line.type in (LineType.REMOVED, LineType.MODIFIED))
    return additions, removals


def build_result(left: list[DiffLine], right: list[DiffLine]) -> DiffResult:
    additions, removals = count_changes(left, right)
    return DiffResult(
        left=left,
        right=right,
        additions=additions,
        removals=removals,
        has_differences=additions > 0 or removals > 0,
    )
