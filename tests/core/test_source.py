from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest
import soundfile as sf

from bssmix.core.source import Source, SourceLike


def test_copy_is_independent() -> None:
    src = Source(signal=np.ones(4, dtype=np.float32), fs=8000, name="a", azimuth=15.0)
    dup = src.copy()
    dup.azimuth = -30.0
    dup.elevation = 10.0
    dup.signal[0] = 0.0
    assert src.azimuth == 15.0
    assert src.elevation == 0.0
    assert src.signal[0] == 1.0
    assert dup.name == "a"
    assert dup.fs == 8000


def test_source_satisfies_capability_protocol() -> None:
    src = Source(signal=np.zeros(2), fs=8000)
    assert isinstance(src, SourceLike)
    assert not isinstance("speech.wav", SourceLike)


def test_signal_must_be_one_dimensional() -> None:
    with pytest.raises(ValueError):
        Source(signal=np.zeros((2, 2)), fs=8000)
    with pytest.raises(ValueError):
        Source(signal=np.zeros(2), fs=0)


def test_from_file_loads_mono(tmp_path: Path) -> None:
    sr = 8000
    path = tmp_path / "speech.wav"
    sf.write(path, np.stack([np.full(sr, 0.5), np.zeros(sr)], axis=1), sr, subtype="FLOAT")

    src = Source.from_file(path)
    assert src.name == "speech"
    assert src.fs == sr
    assert src.path == path
    assert src.signal.dtype == np.float32
    assert np.isclose(src.duration_s, 1.0)
    assert np.allclose(src.signal, 0.25, atol=1e-6)
