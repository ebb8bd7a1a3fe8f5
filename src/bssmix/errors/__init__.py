"""
errors subpackage: exception taxonomy, configuration and logging.

Key primitives
--------------
- BssMixError and subclasses: ConfigurationError, ShapeError, UnequalRowsError
- LoggingConfig: log paths, levels, JSONL toggle, env overrides
- configure_logging(): console + file logging, optional JSONL event logger
- load_corpus_config(): YAML corpus description loader
"""

from .types import BssMixError, ConfigurationError, ShapeError, UnequalRowsError
from .config import LoggingConfig, find_corpus_config, load_corpus_config, resolve_folder
from .logging import configure_logging, JsonlEventLogger

__all__ = [
    "BssMixError",
    "ConfigurationError",
    "ShapeError",
    "UnequalRowsError",
    "LoggingConfig",
    "find_corpus_config",
    "load_corpus_config",
    "resolve_folder",
    "configure_logging",
    "JsonlEventLogger",
]
