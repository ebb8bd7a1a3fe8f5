"""bssmix - test-corpus generation for blind source separation."""

from bssmix.version import __version__
from bssmix.core import (
    CombineMode,
    GenerationOptions,
    Mixture,
    Source,
    build_parameter_set,
    generate_mixtures,
    plan_iterations,
)
from bssmix.errors import BssMixError, ConfigurationError, ShapeError, UnequalRowsError

__all__ = [
    "__version__",
    "CombineMode",
    "GenerationOptions",
    "Mixture",
    "Source",
    "build_parameter_set",
    "generate_mixtures",
    "plan_iterations",
    "BssMixError",
    "ConfigurationError",
    "ShapeError",
    "UnequalRowsError",
]
