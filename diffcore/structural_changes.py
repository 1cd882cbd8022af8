"""
Tree-level change detection and leaf-path statistics for JSON input.

Move detection favours precision: a removed key is reported as moved only
when its value matches exactly one added key and that added key matches
no other removed key.
"""
import logging
from typing import Any, Optional

from config import Settings, settings as default_settings
from diffcore.cache import BoundedCache
from diffcore.json_tree import ROOT, index_path, is_container, json_type, keyed_path, member_path
from diffcore.models import DiffStatistics, StructuralChange, StructuralChangeType
from diffcore.options import ComparisonOptions, DEFAULT_OPTIONS
from diffcore.semantic import SemanticComparator, array_item_key, display_key

logger = logging.getLogger(__name__)


class StructuralChangeDetector:
    """Walks two parsed JSON trees and reports moves, reorders and type changes."""

    def __init__(
        self,
        options: Optional[ComparisonOptions] = None,
        tuning: Optional[Settings] = None,
        cache: Optional[BoundedCache] = None,
        comparator: Optional[SemanticComparator] = None,
    ):
        self.options = options or DEFAULT_OPTIONS
        self.tuning = tuning or default_settings
        self.comparator = comparator or SemanticComparator(self.options, self.tuning, cache)

    def detect(self, left: Any, right: Any) -> list[StructuralChange]:
        changes: list[StructuralChange] = []
        self._walk(left, right, ROOT, 0, changes)
        return changes

    def _walk(self, left: Any, right: Any, path: str, depth: int, changes: list[StructuralChange]) -> None:
        if self.comparator.is_ignored(path):
            return

        left_type, right_type = json_type(left), json_type(right)
        if left_type != right_type:
            changes.append(StructuralChange(
                type=StructuralChangeType.TYPE_CHANGED,
                path=path,
                from_=left_type,
                to=right_type,
                old_value=left,
                new_value=right,
            ))
            return

        if not is_container(left):
            return

        if depth >= self.tuning.MAX_TREE_DEPTH:
            logger.warning(f"Depth guard reached at {path}; structural analysis stops here")
            return

        if isinstance(left, list):
            self._walk_arrays(left, right, path, depth, changes)
        else:
            self._walk_objects(left, right, path, depth, changes)

    def _walk_arrays(self, left: list, right: list, path: str, depth: int, changes: list) -> None:
        if self.options.move_detection_enabled:
            key_field = self.options.array_key_field
            left_index: dict[str, int] = {}
            right_index: dict[str, int] = {}
            for n, item in enumerate(left):
                key = array_item_key(item, key_field)
                if key is not None:
                    left_index.setdefault(key, n)
            for n, item in enumerate(right):
                key = array_item_key(item, key_field)
                if key is not None:
                    right_index.setdefault(key, n)

            for key, left_pos in left_index.items():
                if key not in right_index:
                    continue
                right_pos = right_index[key]
                item_path = keyed_path(path, key_field, display_key(key))
                if left_pos != right_pos:
                    changes.append(StructuralChange(
                        type=StructuralChangeType.REORDERED,
                        path=item_path,
                        from_=left_pos,
                        to=right_pos,
                    ))
                self._walk(left[left_pos], right[right_pos], item_path, depth + 1, changes)
        elif len(left) == len(right):
            for n, (x, y) in enumerate(zip(left, right)):
                self._walk(x, y, index_path(path, n), depth + 1, changes)

    def _walk_objects(self, left: dict, right: dict, path: str, depth: int, changes: list) -> None:
        ignore_keys = self.comparator.ignore_keys
        left_only = [k for k in left if k not in right and k not in ignore_keys]
        right_only = [k for k in right if k not in left and k not in ignore_keys]

        candidates: dict[str, list[str]] = {}
        for left_key in left_only:
            child_path = member_path(path, left_key)
            candidates[left_key] = [
                right_key for right_key in right_only
                if self.comparator.equal(left[left_key], right[right_key], child_path, depth + 1)
            ]

        claims: dict[str, int] = {}
        for matched in candidates.values():
            for right_key in matched:
                claims[right_key] = claims.get(right_key, 0) + 1

        for left_key, matched in candidates.items():
            if len(matched) == 1 and claims[matched[0]] == 1:
                changes.append(StructuralChange(
                    type=StructuralChangeType.MOVED,
                    path=member_path(path, left_key),
                    from_=left_key,
                    to=matched[0],
                ))

        for key in left:
            if key in right and key not in ignore_keys:
                self._walk(left[key], right[key], member_path(path, key), depth + 1, changes)


def detect_structural_changes(
    left: Any,
    right: Any,
    options: Optional[ComparisonOptions] = None,
    tuning: Optional[Settings] = None,
    cache: Optional[BoundedCache] = None,
) -> list[StructuralChange]:
    return StructuralChangeDetector(options, tuning, cache).detect(left, right)


def collect_leaf_paths(
    obj: Any,
    comparator: SemanticComparator,
    max_depth: int,
) -> dict[str, Any]:
    """Map every leaf path (scalars and empty containers) to its value."""
    leaves: dict[str, Any] = {}

    def visit(value, path, depth):
        if comparator.is_ignored(path):
            return
        if isinstance(value, dict) and value and depth < max_depth:
            for key in comparator.visible_keys(value):
                visit(value[key], member_path(path, key), depth + 1)
        elif isinstance(value, list) and value and depth < max_depth:
            for n, item in enumerate(value):
                visit(item, index_path(path, n), depth + 1)
        else:
            leaves[path] = value

    visit(obj, ROOT, 0)
    return leaves


def compute_statistics(
    left: Any,
    right: Any,
    options: Optional[ComparisonOptions] = None,
    tuning: Optional[Settings] = None,
    cache: Optional[BoundedCache] = None,
    comparator: Optional[SemanticComparator] = None,
) -> DiffStatistics:
    """Count changed, added and removed leaf paths across two trees."""
    tuning = tuning or default_settings
    comparator = comparator or SemanticComparator(options, tuning, cache)

    left_leaves = collect_leaf_paths(left, comparator, tuning.MAX_TREE_DEPTH)
    right_leaves = collect_leaf_paths(right, comparator, tuning.MAX_TREE_DEPTH)

    all_paths = set(left_leaves) | set(right_leaves)
    added = [p for p in right_leaves if p not in left_leaves]
    removed = [p for p in left_leaves if p not in right_leaves]
    changed = [
        p for p in left_leaves
        if p in right_leaves and not comparator.equal(left_leaves[p], right_leaves[p], p)
    ]

    total = len(all_paths)
    touched = len(changed) + len(added) + len(removed)
    return DiffStatistics(
        total_keys=total,
        changed_keys=len(changed),
        added_keys=len(added),
        removed_keys=len(removed),
        percent_changed=(touched / total * 100) if total else 0.0,
    )
