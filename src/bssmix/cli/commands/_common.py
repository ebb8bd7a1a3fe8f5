"""Helpers shared by CLI commands."""

from __future__ import annotations

import argparse
from pathlib import Path

from bssmix.errors import ConfigurationError
from bssmix.errors.config import find_corpus_config


def add_config_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        required=False,
        help="Corpus YAML. Defaults to corpus.yaml or bssmix.yaml in the current directory.",
    )


def resolve_config_path(args: argparse.Namespace) -> Path:
    """Return the corpus config from --config or the working directory."""
    raw = getattr(args, "config", None)
    if raw:
        return Path(raw)
    found = find_corpus_config(Path.cwd())
    if found is None:
        raise ConfigurationError("No corpus config provided. Pass --config or create corpus.yaml.")
    return found
