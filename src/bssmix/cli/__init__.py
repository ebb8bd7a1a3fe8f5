"""Command-line interface for bssmix."""
