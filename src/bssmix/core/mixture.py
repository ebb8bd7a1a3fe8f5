"""Reference mixture renderer: level balancing and summation, no spatial filtering."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence, Tuple

import numpy as np

from bssmix.core.source import Source
from bssmix.errors.types import ConfigurationError
from bssmix.io.audio import write_audio


def _pad(signal: np.ndarray, length: int) -> np.ndarray:
    out = np.zeros(length, dtype=np.float32)
    out[: signal.shape[0]] = signal
    return out


def _power(signal: np.ndarray) -> float:
    return float(np.mean(np.square(signal, dtype=np.float64))) if signal.size else 0.0


class Mixture:
    """
    One target plus its interferers, balanced to a target-to-interferer ratio.

    The interferer sum is scaled so that the target/interferer power ratio
    equals ``tir`` dB. An empty ``tir`` means 0 dB. HRTF convolution is not
    done here; passing an ``hrtf`` to this renderer fails at render time.

    Usage example
    -------------
        mix = Mixture(target, [noise], 6.0, None, 16000)
        mixture, target_signal, interferer_signal = mix.render()
        mix.write(Path("mixture_temp/mixture-00001.wav"))
    """

    def __init__(
        self,
        target: Source,
        interferers: Sequence[Source],
        tir: Optional[float],
        hrtf: Optional[str],
        fs: float,
    ) -> None:
        self.target = target
        self.interferers = tuple(interferers)
        self.tir = 0.0 if tir is None else float(tir)
        self.hrtf = hrtf
        self.fs = fs

    def __repr__(self) -> str:
        return (
            f"Mixture(target={self.target.name!r}, interferers={[s.name for s in self.interferers]!r}, "
            f"tir={self.tir}, hrtf={self.hrtf!r}, fs={self.fs})"
        )

    def _check_renderable(self) -> None:
        if self.hrtf:
            raise ConfigurationError(
                f"Mixture with HRTF '{self.hrtf}' needs a spatial renderer; "
                "pass mixture_factory= to generate_mixtures."
            )
        for source in (self.target,) + self.interferers:
            if source.fs != self.fs:
                raise ConfigurationError(
                    f"Source '{source.name}' has fs={source.fs} but the mixture fs is {self.fs}; resample first."
                )

    def render(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """
        Return ``(mixture, target_signal, interferer_signal)``.

        All three are float32 arrays zero-padded to the longest source.
        """

        self._check_renderable()
        length = max(source.signal.shape[0] for source in (self.target,) + self.interferers)
        target = _pad(self.target.signal, length)
        interferer = np.zeros(length, dtype=np.float32)
        for source in self.interferers:
            interferer += _pad(source.signal, length)

        target_power = _power(target)
        interferer_power = _power(interferer)
        if target_power > 0.0 and interferer_power > 0.0:
            gain = np.sqrt(target_power / (interferer_power * 10.0 ** (self.tir / 10.0)))
            interferer = (interferer * gain).astype(np.float32)

        return target + interferer, target, interferer

    def write(self, path: Path) -> Path:
        """
        Write the mixture to ``path`` plus ``<stem>-target`` and ``<stem>-interferer`` beside it.
        """

        path = Path(path)
        mixture, target, interferer = self.render()
        write_audio(path, mixture, int(self.fs))
        write_audio(path.with_name(f"{path.stem}-target{path.suffix}"), target, int(self.fs))
        write_audio(path.with_name(f"{path.stem}-interferer{path.suffix}"), interferer, int(self.fs))
        return path
