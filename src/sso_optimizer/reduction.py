"""
Local best selection and the best-solution reduction protocol.

Workers each reduce their partition to one ResultRecord. The records are then
combined with a binary merge operator that keeps the goal-better operand and
favours the left operand on ties. The operator is associative, so it can be
applied as a pairwise reduction tree or as a linear scan over gathered
records, with the same result.
"""

from functools import partial

import numpy as np

from .data_structures import ResultRecord

REDUCTION_METHODS = ("tree", "gather")


def select_local_best(positions, best_values, goal: int) -> ResultRecord:
    """
    Pick the candidate with the goal-adjusted extreme value.

    Linear scan, the first candidate encountered wins ties.

    Args:
        positions: (n, nd) final positions of a partition
        best_values: (n,) value of each candidate
        goal: +1 to maximize, -1 to minimize

    Returns:
        ResultRecord holding a copy of the winning row and its value
    """
    positions = np.asarray(positions)
    best_values = np.asarray(best_values)

    if len(best_values) == 0:
        raise ValueError("cannot select a best candidate from an empty partition")
    if len(positions) != len(best_values):
        raise ValueError(
            f"{len(positions)} positions but {len(best_values)} values"
        )

    best_idx = 0
    for i in range(1, len(best_values)):
        if goal * best_values[i] > goal * best_values[best_idx]:
            best_idx = i

    return ResultRecord(
        solution=np.array(positions[best_idx], dtype=np.float64),
        value=float(best_values[best_idx]),
    )


def merge_results(a: ResultRecord, b: ResultRecord, goal: int) -> ResultRecord:
    """Return ``a`` if it is at least as good as ``b`` under ``goal``, else ``b``."""
    if goal * a.value >= goal * b.value:
        return a
    return b


def merge_arrays(a: np.ndarray, b: np.ndarray, goal: int) -> np.ndarray:
    """
    Merge operator over packed records ``[x_0, ..., x_{nd-1}, value]``.

    The value is always the trailing element, so the operator works without
    knowing ``nd``.
    """
    if a.shape != b.shape:
        raise ValueError(f"packed records differ in shape: {a.shape} vs {b.shape}")
    if goal * a[-1] >= goal * b[-1]:
        return a
    return b


def make_merge(goal: int):
    """Bind ``goal`` into a binary merge function."""
    return partial(merge_results, goal=goal)


def tree_reduce(records, merge):
    """
    Combine records by rounds of pairwise merges.

    Round after round, neighbours ``(0, 1), (2, 3), ...`` are merged and an
    odd record out is carried over. Operands always keep their left-to-right
    order.
    """
    level = list(records)
    if not level:
        raise ValueError("cannot reduce an empty set of records")

    while len(level) > 1:
        next_level = [merge(level[i], level[i + 1]) for i in range(0, len(level) - 1, 2)]
        if len(level) % 2:
            next_level.append(level[-1])
        level = next_level

    return level[0]


def gather_reduce(records, merge):
    """Combine records with a single left-to-right scan."""
    records = list(records)
    if not records:
        raise ValueError("cannot reduce an empty set of records")

    best = records[0]
    for record in records[1:]:
        best = merge(best, record)
    return best


def reduce_results(records, goal: int, method: str = "tree") -> ResultRecord:
    """Global best of ``records`` using the given reduction method."""
    merge = make_merge(goal)
    if method == "tree":
        return tree_reduce(records, merge)
    if method == "gather":
        return gather_reduce(records, merge)
    raise ValueError(f"unknown reduction method '{method}', expected one of {REDUCTION_METHODS}")
