from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional
import logging
import os
import uuid

import yaml

from .types import ConfigurationError


def load_corpus_config(path: Path) -> dict[str, Any]:
    """
    Load a corpus description from a YAML file.

    The top level must be a mapping. Relative source paths are left untouched;
    the caller resolves them against ``path.parent``.
    """

    if not path.exists():
        raise ConfigurationError(f"Corpus config not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as error:
        raise ConfigurationError(f"Could not parse corpus config {path}: {error}") from error
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Corpus config {path} must contain a mapping at the top level.")
    return data


def find_corpus_config(root: Path) -> Optional[Path]:
    """
    Locate a corpus config in ``root``.

    Search order:
    1) ``corpus.yaml``
    2) ``bssmix.yaml``
    """

    for filename in ("corpus.yaml", "bssmix.yaml"):
        config_path = root / filename
        if config_path.exists():
            return config_path
    return None


def resolve_folder(config: dict[str, Any], cli_folder: Path | None, default: str = "mixture_temp") -> Path:
    """
    Resolve the cache folder from CLI arg or config.

    CLI value has highest priority, then ``folder`` in the corpus config, then
    ``default``.
    """

    if cli_folder is not None:
        return cli_folder
    folder = config.get("folder")
    if isinstance(folder, str) and folder.strip():
        return Path(folder.strip())
    return Path(default)


@dataclass(frozen=True)
class LoggingConfig:
    """
    Configuration for logging behavior.

    Parameters
    ----------
    log_dir
        Directory where log files and JSONL event logs are written.
    run_id
        Unique identifier for the run. If "auto", a UUID4 prefix is generated.
    console_level
        Logging level for console output.
    file_level
        Logging level for file output.
    write_jsonl
        If True, writes structured JSONL events to <log_dir>/events_<run_id>.jsonl.
    env_prefix
        Prefix for environment-variable overrides, e.g. "BSSMIX_".

    Usage example
    -------------
        cfg = LoggingConfig(log_dir=Path("logs"), write_jsonl=False)
    """

    log_dir: Path = Path("logs")
    run_id: str = "auto"

    console_level: int = logging.INFO
    file_level: int = logging.DEBUG

    write_jsonl: bool = True

    env_prefix: str = field(default="", repr=False)

    def resolved_run_id(self) -> str:
        """Return a non-auto run id."""
        if self.run_id != "auto":
            return self.run_id
        return uuid.uuid4().hex[:10]

    @classmethod
    def from_env(cls, *, default: Optional["LoggingConfig"] = None) -> "LoggingConfig":
        """
        Create config from environment variables.

        Supported variables (prefix controlled by env_prefix on `default`):
        - <PFX>LOG_DIR: path
        - <PFX>WRITE_JSONL: "1"/"0"
        - <PFX>LOG_LEVEL: console level name, e.g. "DEBUG"

        Usage example
        -------------
            cfg = LoggingConfig.from_env(default=LoggingConfig(env_prefix="BSSMIX_"))
        """
        base = default if default is not None else cls()
        pfx = base.env_prefix

        log_dir = Path(os.getenv(f"{pfx}LOG_DIR", str(base.log_dir)))

        write_jsonl_raw = os.getenv(f"{pfx}WRITE_JSONL", "1" if base.write_jsonl else "0").strip()
        write_jsonl = write_jsonl_raw not in ("0", "false", "False", "")

        console_level = base.console_level
        level_raw = os.getenv(f"{pfx}LOG_LEVEL", "").strip().upper()
        if level_raw:
            level = logging.getLevelName(level_raw)
            if isinstance(level, int):
                console_level = level

        return cls(
            log_dir=log_dir,
            run_id=base.run_id,
            console_level=console_level,
            file_level=base.file_level,
            write_jsonl=write_jsonl,
            env_prefix=pfx,
        )
