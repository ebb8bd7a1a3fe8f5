"""Iteration number to per-variable row index mapping."""

from __future__ import annotations

from typing import Dict, Sequence, Tuple

from bssmix.core.combine import AllPlan, Plan, RowsPlan
from bssmix.core.params import VARIABLE_ORDER


def unravel_index(index: int, sizes: Sequence[int]) -> Tuple[int, ...]:
    """
    Decompose a 0-based linear index into 0-based subscripts, first dimension fastest.

    Equivalent to ``numpy.unravel_index(index, sizes, order="F")`` for a single
    index. Cached mixture numbering depends on this ordering.

    Usage example
    -------------
        unravel_index(3, (2, 3))   # (1, 1)
        unravel_index(5, (2, 3))   # (1, 2)
    """

    if any(size < 1 for size in sizes):
        raise ValueError(f"Dimension sizes must be positive, got {tuple(sizes)}.")
    total = 1
    for size in sizes:
        total *= size
    if index < 0 or index >= total:
        raise IndexError(f"Index {index} out of range 0..{total - 1} for sizes {tuple(sizes)}.")

    subscripts = []
    remainder = index
    for size in sizes:
        subscripts.append(remainder % size)
        remainder //= size
    return tuple(subscripts)


def row_indices(plan: Plan, iteration: int) -> Dict[str, int]:
    """
    Return the 0-based row index of every variable for a 1-based iteration.

    In rows mode the index wraps modulo each variable's row count, so scalar
    variables always resolve to row 0 and the others to ``iteration - 1``.
    """

    if iteration < 1 or iteration > plan.iterations:
        raise IndexError(f"Iteration {iteration} out of range 1..{plan.iterations}.")

    if isinstance(plan, RowsPlan):
        return {name: (iteration - 1) % plan.row_counts.get(name, 1) for name in VARIABLE_ORDER}
    if isinstance(plan, AllPlan):
        return dict(zip(VARIABLE_ORDER, unravel_index(iteration - 1, plan.dimension_sizes)))
    raise TypeError(f"Unsupported plan type: {type(plan).__name__}")
