"""Generation options and the validated, immutable parameter set."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields, replace
from enum import Enum
from pathlib import Path
from typing import Any, Mapping, Optional, Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from bssmix.core.source import SourceLike
from bssmix.errors.types import ConfigurationError, ShapeError

logger = logging.getLogger(__name__)

# Order of the independent variables for the full cross-product. The first
# variable cycles fastest; cached file numbering depends on this order.
VARIABLE_ORDER: Tuple[str, ...] = ("targets", "interferers", "hrtfs", "tirs", "azimuths", "elevations")


class CombineMode(str, Enum):
    """How independent variables are combined into iterations."""
    ROWS = "rows"
    ALL = "all"


@dataclass(frozen=True)
class GenerationOptions:
    """
    Named options for :func:`bssmix.generate_mixtures`.

    ``azimuths``/``elevations`` default to an all-zero row sized to the
    interferer count, which is only known once the interferers are, so
    ``None`` stands for that default here.

    Usage example
    -------------
        opts = GenerationOptions(tirs=[-6, 0, 6], cache=True, folder="corpus")
        opts = GenerationOptions.from_mapping({"TIRS": 0, "combine": "all"})
        opts = GenerationOptions.from_pairs(["fs", 44100, "cache", True])
    """

    azimuths: Any = None
    elevations: Any = None
    hrtfs: Any = None
    tirs: Any = 0
    fs: Any = 16000
    cache: Any = False
    combine: Any = None
    folder: Any = "mixture_temp"

    @classmethod
    def option_names(cls) -> Tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any], *, strict: bool = False) -> "GenerationOptions":
        """Build options from a name -> value mapping (names are case-insensitive)."""

        return cls().merged(options, strict=strict)

    @classmethod
    def from_pairs(cls, pairs: Sequence[Any], *, strict: bool = False) -> "GenerationOptions":
        """Build options from a flat ``[name, value, name, value, ...]`` sequence."""

        items = list(pairs)
        if len(items) % 2 != 0:
            raise ConfigurationError(
                f"Options need name/value pairs, got an odd number of entries ({len(items)})."
            )
        mapping: dict[str, Any] = {}
        for name, value in zip(items[0::2], items[1::2]):
            if not isinstance(name, str):
                raise ConfigurationError(f"Option names must be strings, got {type(name).__name__}.")
            mapping[name] = value
        return cls.from_mapping(mapping, strict=strict)

    def merged(self, overrides: Mapping[str, Any], *, strict: bool = False) -> "GenerationOptions":
        """Return a copy with ``overrides`` applied; unknown names warn, or raise when strict."""

        known = {name.lower(): name for name in self.option_names()}
        matched: dict[str, Any] = {}
        unknown: list[str] = []
        for raw_name, value in overrides.items():
            name = known.get(str(raw_name).lower())
            if name is None:
                unknown.append(str(raw_name))
            else:
                matched[name] = value
        if unknown:
            if strict:
                raise ConfigurationError(
                    f"Unknown option name(s): {', '.join(unknown)}. Expected one of {list(known.values())}."
                )
            logger.warning("Ignoring unknown option name(s): %s", ", ".join(unknown))
        return replace(self, **matched)


OptionsInput = Union[GenerationOptions, Mapping[str, Any], Sequence[Any], None]


def coerce_options(options: OptionsInput, *, strict: bool = False) -> GenerationOptions:
    """Accept an options record, a mapping or a flat name/value sequence."""

    if options is None:
        return GenerationOptions()
    if isinstance(options, GenerationOptions):
        return options
    if isinstance(options, Mapping):
        return GenerationOptions.from_mapping(options, strict=strict)
    if isinstance(options, (str, bytes)) or not isinstance(options, Sequence):
        raise ConfigurationError(
            f"Options must be a mapping or a name/value sequence, got {type(options).__name__}."
        )
    return GenerationOptions.from_pairs(options, strict=strict)


@dataclass(frozen=True, eq=False)
class ParameterSet:
    """
    Validated independent variables and settings for one generation run.

    Parameters
    ----------
    targets
        Non-empty tuple of sources, one per row.
    interferers
        Tuple of rows; every row holds ``interferer_count`` sources.
        Empty when there are no interferers.
    azimuths, elevations
        Read-only float arrays of shape (rows, interferer_count + 1).
        Column 0 is the target, column i is interferer i-1.
    hrtfs
        Tuple of HRTF references (possibly empty).
    tirs
        Read-only 1-D float array of target-to-interferer ratios in dB (possibly empty).
    fs, cache, folder, combine
        Settings. ``combine`` is None when the mode is inferred.
    """

    targets: Tuple[SourceLike, ...]
    interferers: Tuple[Tuple[SourceLike, ...], ...]
    interferer_count: int
    azimuths: NDArray[np.float64]
    elevations: NDArray[np.float64]
    hrtfs: Tuple[str, ...]
    tirs: NDArray[np.float64]
    fs: float
    cache: bool
    folder: Path
    combine: Optional[CombineMode]

    def variable(self, name: str) -> Any:
        """Return an independent variable by name."""

        if name not in VARIABLE_ORDER:
            raise KeyError(f"Unknown independent variable '{name}'. Expected one of {VARIABLE_ORDER}.")
        return getattr(self, name)


# ##########  Normalisation helpers  ##########

def _normalize_targets(targets: Any) -> Tuple[SourceLike, ...]:
    if isinstance(targets, SourceLike):
        items = [targets]
    elif isinstance(targets, np.ndarray):
        items = list(targets.ravel())
    elif isinstance(targets, Sequence) and not isinstance(targets, (str, bytes)):
        items = list(targets)
    else:
        raise TypeError(f"'targets' must be a sequence of sources, got {type(targets).__name__}.")
    if not items:
        raise TypeError("'targets' must contain at least one source.")
    for item in items:
        if not isinstance(item, SourceLike):
            raise TypeError(
                f"'targets' must only contain sources (azimuth, elevation, copy()), got {type(item).__name__}."
            )
    return tuple(items)


def _normalize_interferers(interferers: Any) -> Tuple[Tuple[SourceLike, ...], ...]:
    """Normalise to a rectangular tuple of rows. A flat sequence is a single row."""

    if interferers is None:
        return ()
    if isinstance(interferers, SourceLike):
        rows = [[interferers]]
    elif isinstance(interferers, np.ndarray):
        if interferers.ndim > 2:
            raise ShapeError(f"'interferers' must be at most 2-D, got {interferers.ndim} dimensions.")
        rows = [list(row) for row in np.atleast_2d(interferers)] if interferers.size else []
    elif isinstance(interferers, Sequence) and not isinstance(interferers, (str, bytes)):
        items = list(interferers)
        if items and all(isinstance(item, SourceLike) for item in items):
            rows = [items]
        else:
            rows = []
            for row in items:
                if isinstance(row, SourceLike) or not isinstance(row, Sequence) or isinstance(row, (str, bytes)):
                    raise TypeError(
                        "'interferers' must be a sequence of sources or a sequence of rows of sources."
                    )
                rows.append(list(row))
    else:
        raise TypeError(f"'interferers' must be a 2-D collection of sources, got {type(interferers).__name__}.")

    for row in rows:
        for item in row:
            if not isinstance(item, SourceLike):
                raise TypeError(
                    f"'interferers' must only contain sources (azimuth, elevation, copy()), got {type(item).__name__}."
                )
    widths = {len(row) for row in rows}
    if len(widths) > 1:
        raise ShapeError(f"'interferers' rows must all have the same length, got lengths {sorted(widths)}.")
    if not rows or widths == {0}:
        return ()
    return tuple(tuple(row) for row in rows)


def _numeric_array(name: str, value: Any) -> np.ndarray:
    try:
        arr = np.asarray(value)
    except ValueError as error:
        raise ShapeError(f"'{name}' must be a rectangular numeric array: {error}") from error
    if arr.dtype.kind not in ("i", "u", "f"):
        raise TypeError(f"'{name}' must be numeric, got dtype {arr.dtype}.")
    return arr.astype(np.float64)


def _spatial_matrix(name: str, value: Any, n_cols: int) -> NDArray[np.float64]:
    if value is None:
        matrix = np.zeros((1, n_cols), dtype=np.float64)
    else:
        arr = _numeric_array(name, value)
        if arr.ndim == 0:
            arr = arr.reshape(1, 1)
        elif arr.ndim == 1:
            arr = arr.reshape(1, -1)
        elif arr.ndim > 2:
            raise ShapeError(f"'{name}' must be at most 2-D, got {arr.ndim} dimensions.")
        if arr.shape[1] != n_cols:
            raise ShapeError(
                f"'{name}' should have one more column than interferers: "
                f"expected {n_cols}, got {arr.shape[1]}."
            )
        if arr.shape[0] == 0:
            raise ShapeError(f"'{name}' must have at least one row.")
        matrix = arr.copy()
    matrix.setflags(write=False)
    return matrix


def _normalize_hrtfs(hrtfs: Any) -> Tuple[str, ...]:
    if hrtfs is None:
        return ()
    if isinstance(hrtfs, (str, os.PathLike)):
        ref = os.fspath(hrtfs)
        return (ref,) if ref else ()
    if isinstance(hrtfs, Sequence) or isinstance(hrtfs, np.ndarray):
        refs = list(hrtfs)
        if not all(isinstance(ref, (str, os.PathLike)) for ref in refs):
            raise TypeError("'hrtfs' should be a string or a sequence of strings.")
        return tuple(os.fspath(ref) for ref in refs)
    raise TypeError(f"'hrtfs' should be a string or a sequence of strings, got {type(hrtfs).__name__}.")


def _normalize_tirs(tirs: Any) -> NDArray[np.float64]:
    column = np.zeros(0, dtype=np.float64) if tirs is None else _numeric_array("tirs", tirs).ravel()
    column.setflags(write=False)
    return column


def _normalize_combine(combine: Any) -> Optional[CombineMode]:
    if combine is None:
        return None
    if isinstance(combine, CombineMode):
        return combine
    if not isinstance(combine, str):
        raise TypeError(f"'combine' must be a string, got {type(combine).__name__}.")
    if combine == "":
        return None
    try:
        return CombineMode(combine.lower())
    except ValueError:
        raise ConfigurationError(
            f"Unknown 'combine' mode '{combine}'. Expected one of {[m.value for m in CombineMode]}."
        ) from None


def _validate_settings(opts: GenerationOptions) -> Tuple[float, bool, Path]:
    if not isinstance(opts.cache, (bool, np.bool_)):
        raise TypeError(f"'cache' must be a boolean, got {type(opts.cache).__name__}.")
    if not isinstance(opts.folder, (str, os.PathLike)):
        raise TypeError(f"'folder' must be a string or path, got {type(opts.folder).__name__}.")
    fs = opts.fs
    if isinstance(fs, (bool, np.bool_)) or not isinstance(fs, (int, float, np.integer, np.floating)):
        raise TypeError(f"'fs' must be a numeric scalar, got {type(fs).__name__}.")
    if fs <= 0:
        raise ConfigurationError(f"'fs' must be positive, got {fs}.")
    return fs, bool(opts.cache), Path(opts.folder)


def build_parameter_set(
    targets: Any,
    interferers: Any,
    options: OptionsInput = None,
    *,
    strict: bool = False,
    **overrides: Any,
) -> ParameterSet:
    """
    Validate and normalise generation inputs.

    Parameters
    ----------
    targets
        A source or a sequence of sources (one per row).
    interferers
        A 2-D collection of sources (rows x interferer slots). A flat sequence
        of sources is a single row; ``None`` or ``[]`` means no interferers.
    options
        ``GenerationOptions``, a mapping, or a flat name/value sequence.
    strict
        Raise ``ConfigurationError`` on unknown option names instead of warning.
    **overrides
        Options applied on top of ``options``.

    Raises
    ------
    TypeError, ShapeError, ConfigurationError
        Before any mixture is built.
    """

    opts = coerce_options(options, strict=strict)
    if overrides:
        opts = opts.merged(overrides, strict=strict)

    target_tuple = _normalize_targets(targets)
    interferer_rows = _normalize_interferers(interferers)
    interferer_count = len(interferer_rows[0]) if interferer_rows else 0

    azimuths = _spatial_matrix("azimuths", opts.azimuths, interferer_count + 1)
    elevations = _spatial_matrix("elevations", opts.elevations, interferer_count + 1)
    hrtfs = _normalize_hrtfs(opts.hrtfs)
    tirs = _normalize_tirs(opts.tirs)
    fs, cache, folder = _validate_settings(opts)
    combine = _normalize_combine(opts.combine)

    return ParameterSet(
        targets=target_tuple,
        interferers=interferer_rows,
        interferer_count=interferer_count,
        azimuths=azimuths,
        elevations=elevations,
        hrtfs=hrtfs,
        tirs=tirs,
        fs=fs,
        cache=cache,
        folder=folder,
        combine=combine,
    )
