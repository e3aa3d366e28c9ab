"""Logging utilities for venatus runs."""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "venatus"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the venatus hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def resolve_level(*, verbose: bool = False, quiet: bool = False) -> int:
    """Pick the console level; verbose wins over quiet."""
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.WARNING
    return logging.INFO


def configure_logging(
    *, verbose: bool = False, quiet: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Send venatus progress messages to stderr and, optionally, a log file.

    ``quiet`` hides the "Opening code files..." style progress lines so that
    machine-readable output (``--json``) is the only thing a run prints. The
    file sink always records INFO and above, whatever the console level.
    """
    console_level = resolve_level(verbose=verbose, quiet=quiet)
    file_level = min(console_level, logging.INFO)
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(file_level if log_file is not None else console_level)
    logger.propagate = False

    # Reset handlers to avoid duplicate output when the CLI runs twice in one process.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(console_level)
    stream_handler.setFormatter(logging.Formatter("[venatus] %(levelname)s %(message)s"))
    logger.addHandler(stream_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(file_level)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(file_handler)

    return logger


__all__ = ["configure_logging", "get_logger", "resolve_level"]
