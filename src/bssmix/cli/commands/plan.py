"""`bssmix plan` command implementation."""

from __future__ import annotations

import argparse
import json

from bssmix.cli.commands._common import add_config_argument, resolve_config_path
from bssmix.core.combine import describe_plan, plan_iterations
from bssmix.core.params import build_parameter_set
from bssmix.io.corpus import load_corpus


def add_subparser(subparsers: argparse._SubParsersAction) -> None:
    """Register the `plan` command."""
    parser = subparsers.add_parser("plan", help="Show how a corpus expands into mixtures without rendering.")
    add_config_argument(parser)
    parser.add_argument("--combine", choices=["rows", "all"], default=None, help="Override the combine mode.")
    parser.add_argument("--json", action="store_true", help="Print the plan as JSON.")
    parser.set_defaults(command="plan")


def run(args: argparse.Namespace) -> int:
    """Execute the `plan` command."""
    corpus = load_corpus(resolve_config_path(args))
    options = dict(corpus.options)
    if getattr(args, "combine", None):
        options["combine"] = args.combine
    params = build_parameter_set(corpus.targets, corpus.interferers, options)
    summary = describe_plan(plan_iterations(params))
    summary["interferer_count"] = params.interferer_count

    if getattr(args, "json", False):
        print(json.dumps(summary, indent=2, sort_keys=True))
        return 0
    print(f"combine={summary['mode']} iterations={summary['iterations']}")
    for name, count in summary["row_counts"].items():
        print(f"  {name}: {count}")
    return 0
