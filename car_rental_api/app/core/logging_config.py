"""
Basic logging configuration for the application.

``setup_logging`` sets the level of the ``car_rental_api`` logger, the
parent of every module logger in the package, so ``LOG_LEVEL`` applies
to the service even when something else (uvicorn, pytest) already
owns the root logger.  When the root logger has no handlers yet it
also gets a console handler and, when a path is given, a file handler.
"""

import logging
from pathlib import Path
from typing import Optional

APP_LOGGER_NAME = "car_rental_api"

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> logging.Logger:
    """Configure logging and return the application logger.

    Parameters
    ----------
    level : str
        Logging level name (e.g. ``"DEBUG"``, ``"INFO"``).  Case
        insensitive; unknown names fall back to ``INFO``.
    logfile : Optional[str]
        Path to a file to log messages to.  Missing parent directories
        are created.  If omitted or empty, no file handler is added.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    app_logger = logging.getLogger(APP_LOGGER_NAME)
    app_logger.setLevel(numeric_level)

    root = logging.getLogger()
    if root.handlers:
        return app_logger
    root.setLevel(numeric_level)

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)

    if logfile:
        log_path = Path(logfile).resolve()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    return app_logger
