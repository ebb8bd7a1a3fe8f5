"""Combination-mode decision and iteration counting."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from bssmix.core.params import VARIABLE_ORDER, CombineMode, ParameterSet
from bssmix.core.rows import row_counts
from bssmix.errors.types import UnequalRowsError


@dataclass(frozen=True)
class RowsPlan:
    """
    Row-by-row combination: iteration m uses row m of every non-scalar variable.

    Scalar and empty variables are broadcast to every iteration.
    """

    iterations: int
    row_counts: Mapping[str, int] = field(default_factory=dict)

    @property
    def mode(self) -> CombineMode:
        return CombineMode.ROWS


@dataclass(frozen=True)
class AllPlan:
    """
    Full cross-product over ``dimension_sizes`` (ordered as ``VARIABLE_ORDER``).

    Usage example
    -------------
        plan = AllPlan(dimension_sizes=(2, 3, 1, 1, 1, 1))
        plan.iterations   # 6
    """

    dimension_sizes: Tuple[int, ...]

    @property
    def mode(self) -> CombineMode:
        return CombineMode.ALL

    @property
    def iterations(self) -> int:
        return math.prod(self.dimension_sizes)

    @property
    def row_counts(self) -> Mapping[str, int]:
        return dict(zip(VARIABLE_ORDER, self.dimension_sizes))


Plan = Union[RowsPlan, AllPlan]


def check_equal_rows(counts: Mapping[str, int]) -> Tuple[bool, int]:
    """
    Compare effective row counts, ignoring scalar/empty variables.

    Returns
    -------
    equal
        True when every count above one is identical (or there are none).
    rows
        The common count when equal (1 when every variable is scalar),
        otherwise 0.
    """

    non_trivial = [count for count in counts.values() if count > 1]
    if not non_trivial:
        return True, 1
    if all(count == non_trivial[0] for count in non_trivial):
        return True, non_trivial[0]
    return False, 0


def select_mode(requested: Optional[CombineMode], equal: bool) -> CombineMode:
    """Return the requested mode, or infer it from row-count equality."""

    if requested is not None:
        return requested
    return CombineMode.ROWS if equal else CombineMode.ALL


def plan_iterations(params: ParameterSet) -> Plan:
    """
    Decide how ``params`` expands into iterations.

    Raises
    ------
    UnequalRowsError
        ``combine="rows"`` was requested but non-scalar variables differ in row count.
    """

    counts = row_counts(params)
    equal, common = check_equal_rows(counts)
    mode = select_mode(params.combine, equal)

    if mode is CombineMode.ROWS:
        if not equal:
            raise UnequalRowsError({name: n for name, n in counts.items() if n > 1})
        return RowsPlan(iterations=common, row_counts=counts)
    return AllPlan(dimension_sizes=tuple(counts[name] for name in VARIABLE_ORDER))


def describe_plan(plan: Plan) -> Dict[str, Any]:
    """JSON-friendly summary of a plan."""

    summary: Dict[str, Any] = {
        "mode": plan.mode.value,
        "iterations": plan.iterations,
        "row_counts": dict(plan.row_counts),
    }
    if isinstance(plan, AllPlan):
        summary["dimension_sizes"] = list(plan.dimension_sizes)
    return summary
