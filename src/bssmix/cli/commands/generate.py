"""`bssmix generate` command implementation."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from bssmix.cli.commands._common import add_config_argument, resolve_config_path
from bssmix.core.builder import generate_mixtures
from bssmix.errors.config import LoggingConfig, resolve_folder
from bssmix.errors.logging import configure_logging
from bssmix.io.corpus import load_corpus


def add_subparser(subparsers: argparse._SubParsersAction) -> None:
    """Register the `generate` command."""
    parser = subparsers.add_parser("generate", help="Render and cache every mixture of a corpus.")
    add_config_argument(parser)
    parser.add_argument("--folder", required=False, help="Output folder for cached mixtures.")
    parser.add_argument("--combine", choices=["rows", "all"], default=None, help="Override the combine mode.")
    parser.add_argument("--log-dir", default="logs", help="Directory for run logs and JSONL events.")
    parser.add_argument("--strict", action="store_true", help="Reject unknown option names in the corpus file.")
    parser.add_argument("--verbose", action="store_true", help="Log every iteration to the console.")
    parser.set_defaults(command="generate")


def run(args: argparse.Namespace) -> int:
    """Execute the `generate` command."""
    config_path = resolve_config_path(args)
    cfg = LoggingConfig.from_env(
        default=LoggingConfig(
            log_dir=Path(args.log_dir),
            console_level=logging.DEBUG if getattr(args, "verbose", False) else logging.INFO,
            env_prefix="BSSMIX_",
        )
    )
    logger, event_logger = configure_logging(cfg=cfg)

    corpus = load_corpus(config_path)
    folder = resolve_folder(corpus.options, Path(args.folder) if getattr(args, "folder", None) else None)
    options = dict(corpus.options)
    options["folder"] = str(folder)
    options["cache"] = True
    if getattr(args, "combine", None):
        options["combine"] = args.combine

    logger.info("Loaded %d target(s) and %d interferer row(s) from %s",
                len(corpus.targets), len(corpus.interferers), config_path)
    mixtures = generate_mixtures(
        corpus.targets,
        corpus.interferers,
        options,
        strict=bool(getattr(args, "strict", False)),
        event_logger=event_logger,
    )
    print(f"{config_path.name}: mixtures={len(mixtures)} out={folder}")
    return 0
