from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional

from .constants import LOG_BACKUP_COUNT, LOG_FORMAT, LOG_MAX_BYTES

# Parent of every getLogger(__name__) logger in this package.
PACKAGE_LOGGER = __name__.rsplit(".", 2)[0]


def setup_logging(level: str = "INFO", log_file: Optional[str] = None) -> logging.Logger:
    """Configure the package logger once per process.

    Logs always go to stderr; when ``log_file`` is set they are also written to a
    rotating file (5 MB, 3 backups).
    """

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))

    if getattr(logger, "_vms_configured", False):
        return logger

    formatter = logging.Formatter(LOG_FORMAT)

    stream = logging.StreamHandler()
    stream.setFormatter(formatter)
    logger.addHandler(stream)

    if log_file:
        log_dir = os.path.dirname(os.path.abspath(log_file))
        os.makedirs(log_dir, exist_ok=True)
        handler = RotatingFileHandler(log_file, maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUP_COUNT)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.propagate = False
    logger._vms_configured = True
    return logger
