"""Corpus description loading: YAML file -> sources and generation options."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Tuple

from bssmix.core.source import Source
from bssmix.errors.config import load_corpus_config
from bssmix.errors.types import ConfigurationError


@dataclass
class Corpus:
    """Sources and options described by a corpus file."""

    targets: List[Source]
    interferers: List[List[Source]]
    options: Dict[str, Any] = field(default_factory=dict)


def _resolve(root: Path, raw: Any, key: str) -> Path:
    if not isinstance(raw, str) or not raw.strip():
        raise ConfigurationError(f"'{key}' entries must be non-empty path strings, got {raw!r}.")
    path = Path(raw)
    return path if path.is_absolute() else root / path


def _interferer_rows(root: Path, raw: Any) -> List[List[Path]]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ConfigurationError("'interferers' must be a list of rows (lists of paths).")
    rows: List[List[Path]] = []
    for row in raw:
        entries = row if isinstance(row, list) else [row]
        rows.append([_resolve(root, entry, "interferers") for entry in entries])
    return rows


def corpus_paths(config: Dict[str, Any], root: Path) -> Tuple[List[Path], List[List[Path]]]:
    """Return resolved target paths and interferer path rows from a parsed config."""

    raw_targets = config.get("targets")
    if isinstance(raw_targets, str):
        raw_targets = [raw_targets]
    if not isinstance(raw_targets, list) or not raw_targets:
        raise ConfigurationError("Corpus config needs a non-empty 'targets' list.")
    targets = [_resolve(root, entry, "targets") for entry in raw_targets]
    return targets, _interferer_rows(root, config.get("interferers"))


def load_corpus(path: Path) -> Corpus:
    """
    Load every source listed in a corpus file.

    Each distinct path is read once; repeated paths share one Source, which is
    safe because generation copies sources per iteration.

    Usage example
    -------------
        corpus = load_corpus(Path("corpus.yaml"))
        mixtures = generate_mixtures(corpus.targets, corpus.interferers, corpus.options)
    """

    config = load_corpus_config(path)
    target_paths, interferer_paths = corpus_paths(config, path.parent)

    loaded: Dict[Path, Source] = {}

    def _load(p: Path) -> Source:
        if p not in loaded:
            if not p.exists():
                raise ConfigurationError(f"Source file not found: {p}")
            loaded[p] = Source.from_file(p)
        return loaded[p]

    options = {name: value for name, value in config.items() if name not in ("targets", "interferers")}
    return Corpus(
        targets=[_load(p) for p in target_paths],
        interferers=[[_load(p) for p in row] for row in interferer_paths],
        options=options,
    )
