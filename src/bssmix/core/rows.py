"""Row counting for independent variables."""

from __future__ import annotations

from typing import Any, Dict

import numpy as np

from bssmix.core.params import VARIABLE_ORDER, ParameterSet


def natural_row_count(value: Any) -> int:
    """
    Return the number of rows a variable holds.

    Tuples count their items; arrays count along the first axis; an empty
    value has zero rows and a 0-d array one.
    """

    if isinstance(value, np.ndarray):
        if value.ndim == 0:
            return 1
        return int(value.shape[0])
    if isinstance(value, (tuple, list)):
        return len(value)
    return 0 if value is None else 1


def row_count(value: Any) -> int:
    """Effective row count: scalar and empty variables count as one row."""

    return max(natural_row_count(value), 1)


def row_counts(params: ParameterSet) -> Dict[str, int]:
    """Effective row count of every independent variable, in cross-product order."""

    return {name: row_count(params.variable(name)) for name in VARIABLE_ORDER}
