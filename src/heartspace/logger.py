from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logger(
    log_file: Path,
    level: str = "INFO",
    verbose: bool = False,
    max_bytes: int = 10_000_000,
    backup_count: int = 5,
) -> logging.Logger:
    """Attach a rotating file handler (and optionally stderr) to the package logger.

    Safe to call more than once; handlers from a previous call are replaced.
    """
    logger = logging.getLogger("heartspace")
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()

    logger.setLevel(logging.DEBUG if verbose else getattr(logging, level))
    logger.propagate = False
    formatter = logging.Formatter(LOG_FORMAT)

    log_file = Path(log_file)
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = RotatingFileHandler(
            log_file, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
        )
    except OSError:
        handler = logging.NullHandler()
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    if verbose:
        stream = logging.StreamHandler(sys.stderr)
        stream.setFormatter(formatter)
        logger.addHandler(stream)

    return logger
