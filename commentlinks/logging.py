"""Logging helpers shared by the scanner, CLI, and service."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, TextIO

_LOGGER_NAME = "commentlinks"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger nested under ``commentlinks``."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(
    *,
    verbose: bool = False,
    log_file: Path | None = None,
    stream: TextIO | None = None,
) -> logging.Logger:
    """Install a console handler (and optionally a file sink) on the package logger.

    Workflow runners capture stdout and stderr alike, so ``stream`` defaults to
    stderr the way :class:`logging.StreamHandler` does.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Handlers are replaced, not stacked, when the CLI or service configures twice.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(stream)
    console.setLevel(level)
    console.setFormatter(logging.Formatter("[commentlinks] %(levelname)s %(message)s"))
    logger.addHandler(console)

    if log_file is not None:
        sink = logging.FileHandler(log_file, encoding="utf-8")
        sink.setLevel(level)
        sink.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
        logger.addHandler(sink)

    return logger


def log_debug_payload(logger: logging.Logger, label: str, payload: Any) -> None:
    """Dump ``payload`` as indented JSON when debug output is enabled."""
    if not logger.isEnabledFor(logging.DEBUG):
        return
    logger.debug("%s:\n%s", label, json.dumps(payload, indent=2, default=_json_default))


def _json_default(value: Any) -> Any:
    if isinstance(value, Path):
        return value.as_posix()
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    return str(value)


__all__ = ["configure_logging", "get_logger", "log_debug_payload"]
