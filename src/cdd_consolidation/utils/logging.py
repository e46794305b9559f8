"""Logging for consolidation runs: one console handler, optional run log file."""

import logging
import sys
from pathlib import Path
from typing import Any

DEFAULT_FORMAT = "%(asctime)s %(levelname)-7s %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Library loggers held at WARNING whatever the run level.
QUIET_LOGGERS = ("openpyxl",)

_state = {"configured": False}
_loggers: dict[str, logging.Logger] = {}


def _resolve_level(value: Any) -> int:
    if isinstance(value, int):
        return value
    level = logging.getLevelName(str(value or "INFO").strip().upper())
    return level if isinstance(level, int) else logging.INFO


def _run_handlers(log_file: str | None) -> list[logging.Handler]:
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(path, encoding="utf-8"))
    return handlers


def setup_logging(config: dict[str, Any] | None = None) -> None:
    """Configure root logging from the config's ``logging`` section.

    Args:
        config: Keys ``level`` (name or number), ``format`` and ``file``.

    Only the first call in a process takes effect.
    """
    if _state["configured"]:
        return
    section = config or {}
    logging.basicConfig(
        level=_resolve_level(section.get("level")),
        format=section.get("format") or DEFAULT_FORMAT,
        datefmt=DATE_FORMAT,
        handlers=_run_handlers(section.get("file")),
        force=True,
    )
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    _state["configured"] = True


def get_logger(name: str) -> logging.Logger:
    """Module logger, cached by name."""
    logger = _loggers.get(name)
    if logger is None:
        logger = _loggers[name] = logging.getLogger(name)
    return logger
