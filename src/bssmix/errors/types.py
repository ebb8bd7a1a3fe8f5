"""Exception taxonomy for mixture generation."""

from __future__ import annotations


class BssMixError(ValueError):
    """Base class for invalid generation inputs."""


class ConfigurationError(BssMixError):
    """
    Raised when generation options are malformed.

    Covers odd name/value pair lists, unknown ``combine`` values, unknown option
    names in strict mode and unreadable corpus configuration files.
    """


class ShapeError(BssMixError):
    """Raised when azimuths/elevations do not match the interferer column count."""


class UnequalRowsError(BssMixError):
    """
    Raised when ``combine="rows"`` is requested but variables differ in row count.

    Usage example
    -------------
        raise UnequalRowsError(row_counts={"targets": 5, "tirs": 3})
    """

    def __init__(self, row_counts: dict[str, int] | None = None) -> None:
        self.row_counts = dict(row_counts or {})
        message = "Variables must have an equal number of rows if combine mode is 'rows'"
        if self.row_counts:
            detail = ", ".join(f"{name}={count}" for name, count in self.row_counts.items())
            message = f"{message} (got {detail})"
        super().__init__(message)
