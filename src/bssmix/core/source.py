"""Audio sources with mutable spatial placement."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Protocol, runtime_checkable

import numpy as np
from numpy.typing import NDArray

from bssmix.io.audio import load_audio_mono


@runtime_checkable
class SourceLike(Protocol):
    """Capability required of targets and interferers."""

    azimuth: float
    elevation: float

    def copy(self) -> "SourceLike":
        ...


@dataclass
class Source:
    """
    A target or interferer audio stream.

    Parameters
    ----------
    signal
        Mono samples, shape (N,).
    fs
        Sampling rate of ``signal`` in Hz.
    name
        Label used in logs and cached file names.
    azimuth, elevation
        Spatial placement in degrees. Overwritten per iteration by the generator.
    path
        File the signal was loaded from, if any.

    Usage example
    -------------
        src = Source.from_file(Path("speech.wav"))
        dup = src.copy()
        dup.azimuth = 30.0   # src.azimuth is unchanged
    """

    signal: NDArray[np.floating]
    fs: int
    name: str = ""
    azimuth: float = 0.0
    elevation: float = 0.0
    path: Optional[Path] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        signal = np.asarray(self.signal, dtype=np.float32)
        if signal.ndim != 1:
            raise ValueError(f"Source '{self.name}' signal must be 1-D, got shape {signal.shape}.")
        if self.fs <= 0:
            raise ValueError(f"Source '{self.name}' fs must be positive, got {self.fs}.")
        self.signal = signal

    @classmethod
    def from_file(cls, path: Path, *, name: Optional[str] = None, channel: Optional[int] = None) -> "Source":
        """Load a mono source from an audio file."""

        samples, sr = load_audio_mono(path, channel=channel)
        return cls(signal=samples, fs=sr, name=name if name is not None else path.stem, path=path)

    @property
    def duration_s(self) -> float:
        return self.signal.shape[0] / float(self.fs)

    def copy(self) -> "Source":
        """Return an independent duplicate; the signal buffer is copied too."""

        return Source(
            signal=self.signal.copy(),
            fs=self.fs,
            name=self.name,
            azimuth=self.azimuth,
            elevation=self.elevation,
            path=self.path,
        )
