"""Subcommands of the bssmix command-line interface."""
