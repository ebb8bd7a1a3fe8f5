"""Mixture generation: resolve each iteration, place sources, build and cache mixtures."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Iterator, List, Mapping, Optional, Sequence, Tuple

from bssmix.core.combine import Plan, describe_plan, plan_iterations
from bssmix.core.indexing import row_indices
from bssmix.core.mixture import Mixture
from bssmix.core.params import OptionsInput, ParameterSet, build_parameter_set
from bssmix.core.source import SourceLike
from bssmix.errors.logging import JsonlEventLogger

logger = logging.getLogger(__name__)

CACHE_EXTENSION = ".wav"

MixtureFactory = Callable[[SourceLike, Tuple[SourceLike, ...], Optional[float], Optional[str], float], Any]


@dataclass(frozen=True)
class IterationContext:
    """
    Values resolved for one iteration. Sources here are the shared originals;
    use :func:`place_sources` to obtain per-iteration copies.
    """

    iteration: int
    target: SourceLike
    interferers: Tuple[SourceLike, ...]
    hrtf: Optional[str]
    tir: Optional[float]
    azimuths: Tuple[float, ...]
    elevations: Tuple[float, ...]
    rows: Mapping[str, int] = field(default_factory=dict)


def cache_path(folder: Path, iteration: int) -> Path:
    """Cache file for a 1-based iteration, e.g. ``folder/mixture-00042.wav``."""

    return Path(folder) / f"mixture-{iteration:05d}{CACHE_EXTENSION}"


def _field_value(params: ParameterSet, name: str, row: int) -> Any:
    value = params.variable(name)
    if len(value) == 0:
        return None
    if name in ("hrtfs", "targets", "interferers"):
        return value[row]
    if name == "tirs":
        return float(value[row])
    return tuple(float(v) for v in value[row, :])


def resolve_iteration(params: ParameterSet, plan: Plan, iteration: int) -> IterationContext:
    """Resolve the value of every independent variable for a 1-based iteration."""

    rows = row_indices(plan, iteration)
    interferers = _field_value(params, "interferers", rows["interferers"])
    return IterationContext(
        iteration=iteration,
        target=_field_value(params, "targets", rows["targets"]),
        interferers=interferers if interferers is not None else (),
        hrtf=_field_value(params, "hrtfs", rows["hrtfs"]),
        tir=_field_value(params, "tirs", rows["tirs"]),
        azimuths=_field_value(params, "azimuths", rows["azimuths"]),
        elevations=_field_value(params, "elevations", rows["elevations"]),
        rows=rows,
    )


def iteration_contexts(params: ParameterSet, plan: Plan) -> Iterator[IterationContext]:
    for iteration in range(1, plan.iterations + 1):
        yield resolve_iteration(params, plan, iteration)


def apply_spatial(
    target: SourceLike,
    interferers: Sequence[SourceLike],
    azimuths: Sequence[float],
    elevations: Sequence[float],
) -> None:
    """Column 0 goes to the target, column i+1 to interferer i."""

    target.azimuth = azimuths[0]
    target.elevation = elevations[0]
    for i, interferer in enumerate(interferers):
        interferer.azimuth = azimuths[i + 1]
        interferer.elevation = elevations[i + 1]


def place_sources(ctx: IterationContext) -> Tuple[SourceLike, Tuple[SourceLike, ...]]:
    """Copy the iteration's sources and apply its spatial parameters to the copies."""

    target = ctx.target.copy()
    interferers = tuple(source.copy() for source in ctx.interferers)
    apply_spatial(target, interferers, ctx.azimuths, ctx.elevations)
    return target, interferers


def build_mixture(ctx: IterationContext, fs: float, mixture_factory: MixtureFactory = Mixture) -> Any:
    target, interferers = place_sources(ctx)
    return mixture_factory(target, interferers, ctx.tir, ctx.hrtf, fs)


def generate_mixtures(
    targets: Any,
    interferers: Any,
    options: OptionsInput = None,
    *,
    mixture_factory: MixtureFactory = Mixture,
    strict: bool = False,
    event_logger: Optional[JsonlEventLogger] = None,
    **overrides: Any,
) -> List[Any]:
    """
    Generate one mixture per iteration of the combined independent variables.

    Parameters
    ----------
    targets
        A source or a sequence of sources.
    interferers
        Rows of interferer sources; each mixture gets one whole row.
    options
        ``GenerationOptions``, a mapping or a flat name/value sequence with any of
        ``azimuths``, ``elevations``, ``hrtfs``, ``tirs``, ``fs``, ``cache``,
        ``combine`` and ``folder``.
    mixture_factory
        Called as ``factory(target, interferers, tir, hrtf, fs)`` per iteration.
        The result must provide ``write(path)`` when caching.
    strict
        Reject unknown option names instead of ignoring them.
    event_logger
        Optional JSONL event sink.
    **overrides
        Options applied on top of ``options``.

    Returns
    -------
    mixtures
        List index-aligned with the 1-based iteration number (``mixtures[m - 1]``).

    Notes
    -----
    All validation happens before the first mixture is built. Errors raised by
    the factory or by ``write`` propagate unchanged.

    Usage example
    -------------
        mixtures = generate_mixtures(
            [speech_a, speech_b],
            [[noise_a], [noise_b], [noise_c]],
            azimuths=[[0, 30], [0, -30]],
            tirs=[0, 6],
        )
    """

    params = build_parameter_set(targets, interferers, options, strict=strict, **overrides)
    plan = plan_iterations(params)
    summary = describe_plan(plan)
    logger.info(
        "Generating %d mixture(s) (combine=%s, row_counts=%s)",
        plan.iterations,
        plan.mode.value,
        summary["row_counts"],
    )
    if event_logger is not None:
        event_logger.write(event="generation_started", iteration=None, level="INFO", context=summary)

    mixtures: List[Any] = [None] * plan.iterations
    if params.cache:
        logger.info("Writing wav files.")
    for ctx in iteration_contexts(params, plan):
        logger.debug(
            "Iteration %d rows=%s tir=%s hrtf=%s",
            ctx.iteration,
            dict(ctx.rows),
            ctx.tir,
            ctx.hrtf,
            extra={"iteration": ctx.iteration},
        )
        mixture = build_mixture(ctx, params.fs, mixture_factory)
        mixtures[ctx.iteration - 1] = mixture
        if params.cache:
            path = cache_path(params.folder, ctx.iteration)
            mixture.write(path)
            if event_logger is not None:
                event_logger.write(
                    event="mixture_written",
                    iteration=ctx.iteration,
                    level="INFO",
                    context={"path": str(path)},
                )
    if params.cache:
        logger.info("Done.")
    if event_logger is not None:
        event_logger.write(
            event="generation_done",
            iteration=None,
            level="INFO",
            context={"iterations": plan.iterations},
        )
    return mixtures
