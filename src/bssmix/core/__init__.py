"""
core subpackage: combinatorial expansion of independent variables into mixtures.

Key primitives
--------------
- build_parameter_set(): validate and normalise targets, interferers and options
- plan_iterations(): choose rows/all combination and count iterations
- row_indices() / unravel_index(): map an iteration number to per-variable rows
- generate_mixtures(): build (and optionally cache) one mixture per iteration
"""

from .source import Source, SourceLike
from .params import VARIABLE_ORDER, CombineMode, GenerationOptions, ParameterSet, build_parameter_set
from .rows import natural_row_count, row_count, row_counts
from .combine import AllPlan, Plan, RowsPlan, check_equal_rows, describe_plan, plan_iterations
from .indexing import row_indices, unravel_index
from .mixture import Mixture
from .builder import (
    IterationContext,
    apply_spatial,
    cache_path,
    generate_mixtures,
    iteration_contexts,
    resolve_iteration,
)

__all__ = [
    "Source",
    "SourceLike",
    "VARIABLE_ORDER",
    "CombineMode",
    "GenerationOptions",
    "ParameterSet",
    "build_parameter_set",
    "natural_row_count",
    "row_count",
    "row_counts",
    "AllPlan",
    "Plan",
    "RowsPlan",
    "check_equal_rows",
    "describe_plan",
    "plan_iterations",
    "row_indices",
    "unravel_index",
    "Mixture",
    "IterationContext",
    "apply_spatial",
    "cache_path",
    "generate_mixtures",
    "iteration_contexts",
    "resolve_iteration",
]
