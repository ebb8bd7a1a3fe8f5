from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

import numpy as np
import pytest

from bssmix.core.builder import (
    apply_spatial,
    cache_path,
    generate_mixtures,
    iteration_contexts,
    resolve_iteration,
)
from bssmix.core.combine import plan_iterations
from bssmix.core.params import build_parameter_set
from bssmix.core.source import Source
from bssmix.errors import ShapeError, UnequalRowsError
from bssmix.errors.logging import JsonlEventLogger


def _src(name: str) -> Source:
    return Source(signal=np.zeros(8, dtype=np.float32), fs=16000, name=name)


class _RecordingMixture:
    """Mixture stand-in that records its inputs and write() calls."""

    writes: list[Path] = []

    def __init__(self, target: Any, interferers: Any, tir: Optional[float], hrtf: Optional[str], fs: float) -> None:
        self.target = target
        self.interferers = interferers
        self.tir = tir
        self.hrtf = hrtf
        self.fs = fs

    def write(self, path: Path) -> None:
        type(self).writes.append(path)


@pytest.fixture(autouse=True)
def _reset_writes() -> None:
    _RecordingMixture.writes = []


def test_spatial_assignment_round_trip() -> None:
    target, a, b = _src("t"), _src("a"), _src("b")
    apply_spatial(target, [a, b], [10, 20, 30], [1, 2, 3])
    assert target.azimuth == 10
    assert a.azimuth == 20
    assert b.azimuth == 30
    assert (target.elevation, a.elevation, b.elevation) == (1, 2, 3)


def test_generate_assigns_spatial_rows_to_copies() -> None:
    target, a, b = _src("t"), _src("a"), _src("b")
    mixtures = generate_mixtures(
        [target],
        [[a, b]],
        azimuths=[[10, 20, 30]],
        elevations=[[0, 5, -5]],
        mixture_factory=_RecordingMixture,
    )
    assert len(mixtures) == 1
    mix = mixtures[0]
    assert mix.target.azimuth == 10.0
    assert [s.azimuth for s in mix.interferers] == [20.0, 30.0]
    assert [s.elevation for s in mix.interferers] == [5.0, -5.0]
    assert mix.target is not target
    assert target.azimuth == 0.0


def test_scalar_tir_broadcasts_in_all_mode() -> None:
    mixtures = generate_mixtures(
        [_src("t1"), _src("t2")],
        [[_src("n1")], [_src("n2")], [_src("n3")]],
        tirs=0,
        mixture_factory=_RecordingMixture,
    )
    assert len(mixtures) == 6
    assert all(m.tir == 0.0 for m in mixtures)


def test_all_mode_ordering_is_target_fastest() -> None:
    mixtures = generate_mixtures(
        [_src("t1"), _src("t2")],
        [[_src("n1")], [_src("n2")], [_src("n3")]],
        mixture_factory=_RecordingMixture,
    )
    pairs = [(m.target.name, m.interferers[0].name) for m in mixtures]
    assert pairs == [
        ("t1", "n1"),
        ("t2", "n1"),
        ("t1", "n2"),
        ("t2", "n2"),
        ("t1", "n3"),
        ("t2", "n3"),
    ]
    assert pairs[3] == ("t2", "n2")


def test_rows_mode_pairs_rows_and_broadcasts_scalars() -> None:
    mixtures = generate_mixtures(
        [_src("t1"), _src("t2"), _src("t3")],
        [[_src("n")]],
        tirs=[-5, 0, 5],
        hrtfs="kemar.sofa",
        azimuths=[[0, 90], [0, 45], [0, -45]],
        mixture_factory=_RecordingMixture,
    )
    assert [m.target.name for m in mixtures] == ["t1", "t2", "t3"]
    assert [m.tir for m in mixtures] == [-5.0, 0.0, 5.0]
    assert all(m.hrtf == "kemar.sofa" for m in mixtures)
    assert [m.interferers[0].azimuth for m in mixtures] == [90.0, 45.0, -45.0]


def test_empty_hrtfs_and_tirs_resolve_to_none() -> None:
    mixtures = generate_mixtures([_src("t")], [], tirs=[], mixture_factory=_RecordingMixture)
    assert mixtures[0].hrtf is None
    assert mixtures[0].tir is None
    assert mixtures[0].interferers == ()


def test_target_only_mixtures() -> None:
    mixtures = generate_mixtures(
        [_src("t")],
        [],
        azimuths=[[0], [30], [60]],
        mixture_factory=_RecordingMixture,
    )
    assert [m.target.azimuth for m in mixtures] == [0.0, 30.0, 60.0]
    assert all(m.interferers == () for m in mixtures)


def test_source_isolation_across_iterations() -> None:
    target = _src("t")
    mixtures = generate_mixtures(
        [target],
        [],
        azimuths=[[10], [20]],
        mixture_factory=_RecordingMixture,
    )
    first, second = mixtures
    first.target.azimuth = 999.0
    first.target.signal[0] = 1.0
    assert second.target.azimuth == 20.0
    assert second.target.signal[0] == 0.0
    assert target.azimuth == 0.0


def test_fs_is_passed_to_factory() -> None:
    mixtures = generate_mixtures([_src("t")], [], fs=44100, mixture_factory=_RecordingMixture)
    assert mixtures[0].fs == 44100


def test_cache_writes_once_per_iteration_in_order(tmp_path: Path) -> None:
    mixtures = generate_mixtures(
        [_src("t1"), _src("t2"), _src("t3")],
        [],
        cache=True,
        folder=str(tmp_path / "out"),
        mixture_factory=_RecordingMixture,
    )
    assert len(mixtures) == 3
    assert [p.name for p in _RecordingMixture.writes] == [
        "mixture-00001.wav",
        "mixture-00002.wav",
        "mixture-00003.wav",
    ]
    assert all(p.parent == tmp_path / "out" for p in _RecordingMixture.writes)


def test_no_writes_without_cache() -> None:
    generate_mixtures([_src("t1"), _src("t2")], [], mixture_factory=_RecordingMixture)
    assert _RecordingMixture.writes == []


def test_cache_path_zero_pads_to_five_digits() -> None:
    assert cache_path(Path("f"), 7) == Path("f") / "mixture-00007.wav"
    assert cache_path(Path("f"), 123456).name == "mixture-123456.wav"


def test_validation_fails_before_any_mixture_is_built() -> None:
    calls: list[int] = []

    def factory(*args: Any) -> None:
        calls.append(1)

    with pytest.raises(ShapeError):
        generate_mixtures([_src("t")], [[_src("a")]], azimuths=[[0]], mixture_factory=factory)
    with pytest.raises(UnequalRowsError):
        generate_mixtures([_src("t1"), _src("t2")], [], tirs=[0, 1, 2], combine="rows", mixture_factory=factory)
    assert calls == []


def test_factory_errors_propagate() -> None:
    def factory(*args: Any) -> None:
        raise RuntimeError("render failed")

    with pytest.raises(RuntimeError, match="render failed"):
        generate_mixtures([_src("t")], [], mixture_factory=factory)


def test_resolve_iteration_and_contexts() -> None:
    params = build_parameter_set([_src("t1"), _src("t2")], [[_src("n1")], [_src("n2")], [_src("n3")]])
    plan = plan_iterations(params)
    ctx = resolve_iteration(params, plan, 4)
    assert ctx.target.name == "t2"
    assert ctx.interferers[0].name == "n2"
    assert ctx.azimuths == (0.0, 0.0)

    contexts = list(iteration_contexts(params, plan))
    assert [c.iteration for c in contexts] == [1, 2, 3, 4, 5, 6]


def test_event_logger_records_generation(tmp_path: Path) -> None:
    ev = JsonlEventLogger(path=tmp_path / "events.jsonl", run_id="r1")
    generate_mixtures(
        [_src("t1"), _src("t2")],
        [],
        cache=True,
        folder=str(tmp_path / "out"),
        mixture_factory=_RecordingMixture,
        event_logger=ev,
    )
    events = [json.loads(line)["event"] for line in ev.path.read_text(encoding="utf-8").splitlines()]
    assert events == ["generation_started", "mixture_written", "mixture_written", "generation_done"]
