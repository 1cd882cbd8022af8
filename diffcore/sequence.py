"""
Longest-common-subsequence alignment over arbitrary token sequences.

The same table and backtrack drive line-, word- and character-level diffs.
Backtracking starts at (n, m); on a mismatch the step is taken as a
right-side insertion whenever ``dp[i][j-1] >= dp[i-1][j]``. That tie-break
decides whether runs render as "added then removed" and must not change.
"""
from typing import Callable, Optional, Sequence, TypeVar
from enum import Enum

T = TypeVar("T")


class AlignOp(str, Enum):
    EQUAL = "equal"
    INSERT = "insert"   # token present only on the right
    DELETE = "delete"   # token present only on the left


def lcs_table(a: Sequence[T], b: Sequence[T]) -> list[list[int]]:
    """``dp[i][j]`` is the LCS length of ``a[:i]`` and ``b[:j]``."""
    n, m = len(a), len(b)
    dp = [[0] * (m + 1) for _ in range(n + 1)]
    for i in range(1, n + 1):
        row, prev = dp[i], dp[i - 1]
        ai = a[i - 1]
        for j in range(1, m + 1):
            if ai == b[j - 1]:
                row[j] = prev[j - 1] + 1
            else:
                row[j] = prev[j] if prev[j] >= row[j - 1] else row[j - 1]
    return dp


def prefers_insert(dp: list[list[int]], i: int, j: int) -> bool:
    """Tie-break for a mismatch at (i, j): insertion wins ties."""
    if j == 0:
        return False
    if i == 0:
        return True
    return dp[i][j - 1] >= dp[i - 1][j]


def is_ambiguous(dp: list[list[int]], i: int, j: int) -> bool:
    """Both neighbours carry the same LCS length, so neither step is preferred."""
    return i > 0 and j > 0 and dp[i - 1][j] == dp[i][j - 1]


def align(
    a: Sequence[T],
    b: Sequence[T],
    dp: Optional[list[list[int]]] = None,
    equals: Optional[Callable[[T, T], bool]] = None,
) -> list[tuple[AlignOp, Optional[int], Optional[int]]]:
    """
    Backtrack the LCS table into an ordered edit script.

    Returns ``(op, i, j)`` triples in document order where ``i``/``j`` are
    0-based indexes into ``a``/``b`` (``None`` on the side the op skips).
    """
    if dp is None:
        dp = lcs_table(a, b)
    eq = equals or (lambda x, y: x == y)

    ops: list[tuple[AlignOp, Optional[int], Optional[int]]] = []
    i, j = len(a), len(b)
    while i > 0 or j > 0:
        if i > 0 and j > 0 and eq(a[i - 1], b[j - 1]):
            ops.append((AlignOp.EQUAL, i - 1, j - 1))
            i -= 1
            j -= 1
        elif prefers_insert(dp, i, j):
            ops.append((AlignOp.INSERT, None, j - 1))
            j -= 1
        else:
            ops.append((AlignOp.DELETE, i - 1, None))
            i -= 1
    ops.reverse()
    return ops
