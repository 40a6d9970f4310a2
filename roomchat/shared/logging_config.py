"""Logging configuration for client and server events."""
import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union

LOG_DIR = Path(__file__).resolve().parent.parent


def configure_logging(name: str, log_file: str,
                      log_dir: Optional[Union[str, Path]] = None) -> logging.Logger:
    """Configure a named logger writing to a rotating file handler.

    The directory comes from ``ROOMCHAT_LOG_DIR``, then ``log_dir``, then the
    package root. The level comes from ``ROOMCHAT_LOG_LEVEL`` (INFO by
    default). The file is opened on the first record, not at import.
    """
    logger = logging.getLogger(name)
    logger.setLevel(os.environ.get("ROOMCHAT_LOG_LEVEL", "INFO").upper())
    if not logger.handlers:
        directory = Path(os.environ.get("ROOMCHAT_LOG_DIR") or log_dir or LOG_DIR)
        directory.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            directory / log_file, maxBytes=5 * 1024 * 1024, backupCount=3, delay=True
        )
        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return logger
