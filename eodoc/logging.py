"""Logging utilities for eodoc commands."""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "eodoc"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s [%(artifact)s]: %(message)s"


class ArtifactContextFilter(logging.Filter):
    """Give every record an ``artifact`` attribute, ``-`` when none was passed.

    Per-artifact messages pass ``extra={"artifact": relative_path}``.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "artifact"):
            record.artifact = "-"
        return True


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the eodoc hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Configure the eodoc logger with console output and an optional file sink."""
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Reset handlers so repeated CLI invocations in one process do not duplicate output.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(logging.Formatter("[eodoc] %(levelname)s %(message)s"))
    logger.addHandler(stream_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.addFilter(ArtifactContextFilter())
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.addHandler(file_handler)

    return logger


__all__ = ["ArtifactContextFilter", "configure_logging", "get_logger"]
