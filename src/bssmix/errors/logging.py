from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping, Optional

from rich.logging import RichHandler

from .config import LoggingConfig

LOGGER_NAME = "bssmix"


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class JsonlEventLogger:
    """
    Writes structured generation events as JSON lines.

    Each line is a dict that includes at least:
    - time_utc
    - run_id
    - event
    - iteration
    - level
    - message, context (optional)
    - exc_type, exc_msg (optional)

    Usage example
    -------------
        ev = JsonlEventLogger(path=Path("logs/events_abc.jsonl"), run_id="abc")
        ev.write(event="mixture_written", iteration=3, level="INFO", context={"path": "mixture-00003.wav"})
    """
    path: Path
    run_id: str

    def write(
        self,
        *,
        event: str,
        iteration: Optional[int],
        level: str,
        context: Optional[Mapping[str, Any]] = None,
        exc: Optional[BaseException] = None,
        message: Optional[str] = None,
    ) -> None:
        payload: dict[str, Any] = {
            "time_utc": _utc_now_iso(),
            "run_id": self.run_id,
            "event": event,
            "iteration": iteration,
            "level": level,
        }
        if message:
            payload["message"] = message
        if context:
            payload["context"] = dict(context)
        if exc is not None:
            payload["exc_type"] = type(exc).__name__
            payload["exc_msg"] = str(exc)

        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(payload, ensure_ascii=False) + "\n")


class _RunContextFilter(logging.Filter):
    def __init__(self, *, run_id: str) -> None:
        super().__init__()
        self._run_id = run_id

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003
        # Ensure `run_id` exists for formatter
        if not hasattr(record, "run_id"):
            setattr(record, "run_id", self._run_id)
        if not hasattr(record, "iteration"):
            setattr(record, "iteration", "-")
        return True


def configure_logging(*, cfg: LoggingConfig) -> tuple[logging.Logger, Optional[JsonlEventLogger]]:
    """
    Configure console + file logging for the ``bssmix`` logger tree.

    Returns
    -------
    logger
        The configured package logger named "bssmix". Module loggers
        (``bssmix.core.builder`` etc.) propagate to it.
    event_logger
        JsonlEventLogger if cfg.write_jsonl else None.

    Usage example
    -------------
        logger, event_logger = configure_logging(cfg=cfg)
        logger.info("Hello")
    """
    run_id = cfg.resolved_run_id()
    log_dir = cfg.log_dir
    log_dir.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG)
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()
    logger.propagate = False

    run_filter = _RunContextFilter(run_id=run_id)

    console_handler = RichHandler(show_path=False)
    console_handler.setLevel(cfg.console_level)
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    console_handler.addFilter(run_filter)
    logger.addHandler(console_handler)

    # File handler (always plain)
    file_path = log_dir / f"run_{run_id}.log"
    file_handler = logging.FileHandler(file_path, encoding="utf-8")
    file_handler.setLevel(cfg.file_level)
    file_handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)sZ | run=%(run_id)s | iteration=%(iteration)s | %(levelname)s | %(name)s | %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
    )
    file_handler.addFilter(run_filter)
    logger.addHandler(file_handler)

    event_logger = None
    if cfg.write_jsonl:
        event_logger = JsonlEventLogger(path=log_dir / f"events_{run_id}.jsonl", run_id=run_id)

    logger.debug("Logging configured (run_id=%s, log_dir=%s)", run_id, str(log_dir))
    return logger, event_logger
