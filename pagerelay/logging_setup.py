"""Logging configuration shared by the API and the CLI."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"


def _normalise_level(level: Optional[str | int]) -> int:
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        value = level.upper()
        if value.isdigit():
            return int(value)
        resolved = logging.getLevelName(value)
        if isinstance(resolved, int):
            return resolved
    return logging.INFO


def configure_logging(level: Optional[str | int] = None) -> Optional[Path]:
    """Configure root logging to stream to the console.

    When ``PAGERELAY_LOG_FILE`` is set, records are also written to that file,
    which is truncated on every call so each run starts with a clean slate.
    The file path (or ``None``) is returned to aid diagnostics.
    """
    handlers: list[logging.Handler] = [logging.StreamHandler()]

    log_path: Optional[Path] = None
    log_file = os.environ.get("PAGERELAY_LOG_FILE")
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, mode="w", encoding="utf-8"))

    for handler in logging.root.handlers[:]:
        logging.root.removeHandler(handler)

    logging.basicConfig(level=_normalise_level(level), format=LOG_FORMAT, handlers=handlers)
    if log_path is not None:
        logging.getLogger(__name__).info("Application logs written to %s", log_path)
    return log_path
