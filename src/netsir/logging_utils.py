"""Logging helpers for simulation scripts.

Console + file logging setup shared by the scripts, so a run folder always
carries a run.log next to its CSVs.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional, Union


# Third-party loggers that are noisy at DEBUG.
QUIET_LOGGERS = ("matplotlib", "PIL")


def _resolve_level(level: str) -> int:
    """Map a string level to a logging level constant."""
    return getattr(logging, str(level).upper(), logging.INFO)


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Union[str, Path]] = None,
    console: bool = True,
    quiet: Iterable[str] = QUIET_LOGGERS,
) -> logging.Logger:
    """Configure root logging with optional file and console handlers."""
    logger = logging.getLogger()
    resolved_level = _resolve_level(level)

    # Clear existing handlers to avoid duplicate logs in repeated runs.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    logger.setLevel(resolved_level)
    formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    handlers = []
    if console:
        handlers.append(logging.StreamHandler())
    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(path, encoding="utf-8"))

    for handler in handlers:
        handler.setLevel(resolved_level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    for name in quiet:
        logging.getLogger(name).setLevel(max(resolved_level, logging.WARNING))

    return logger
