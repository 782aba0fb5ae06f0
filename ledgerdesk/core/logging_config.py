"""Centralized logging configuration for the application."""
from __future__ import annotations

import logging
import logging.handlers
import os
import time

from ledgerdesk.core.config import settings

LOG_FORMAT = "%(asctime)sZ | %(levelname)s | %(name)s | %(message)s"


def setup_logging(log_dir: str | None = None) -> None:
    """Configure application and uvicorn loggers with sane defaults."""
    log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    target_dir = log_dir or settings.LOG_DIR

    os.makedirs(target_dir, exist_ok=True)
    formatter = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S")
    logging.Formatter.converter = time.gmtime

    file_handler = logging.handlers.RotatingFileHandler(
        os.path.join(target_dir, "app.log"),
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
        encoding="utf-8",
    )
    file_handler.setFormatter(formatter)

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers = [file_handler, stream_handler]

    # Import pipeline gets its own level so parse noise can be tuned separately.
    import_logger = logging.getLogger("ledgerdesk.domain.imports")
    import_logger.setLevel(log_level)
    import_logger.propagate = True

    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(name).setLevel(log_level)


__all__ = ["setup_logging", "LOG_FORMAT"]
