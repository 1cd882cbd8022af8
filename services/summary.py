"""
Human-readable summary of a comparison.
"""
from diffcore.models import DiffResult, EnhancedDiffResult, LineType


def generate_diff_summary(result: DiffResult) -> str:
    """
    Summarize a diff in a few lines of text.

    Field counts come from the leaf statistics of an enhanced JSON result;
    every result reports line counts.
    """
    lines = ["Comparison summary:"]

    if isinstance(result, EnhancedDiffResult) and result.statistics.total_keys:
        stats = result.statistics
        lines.append(f"  {stats.unchanged_keys} fields identical")
        if stats.changed_keys:
            lines.append(f"  {stats.changed_keys} fields modified")
        if stats.added_keys:
            lines.append(f"  {stats.added_keys} fields added")
        if stats.removed_keys:
            lines.append(f"  {stats.removed_keys} fields removed")
        lines.append(f"  {stats.percent_changed:.1f}% of fields changed")

    if isinstance(result, EnhancedDiffResult):
        if result.ignored_lines:
            lines.append(f"  {result.ignored_lines} changed lines ignored")
        if result.structural_changes:
            lines.append(f"  {len(result.structural_changes)} structural changes")

    modified = sum(1 for line in result.left if line.type == LineType.MODIFIED)
    unchanged = sum(1 for line in result.left if line.type == LineType.UNCHANGED)
    lines.append(
        f"  Lines: {unchanged} unchanged, {modified} modified, "
        f"+{result.additions} / -{result.removals}"
    )

    if not result.has_differences:
        lines.append("  No differences")

    return "\n".join(lines)
