# costtrack/logger.py
"""
Per-module loggers for the service.

Environment (read when a logger is first requested):
    LOG_LEVEL   DEBUG / INFO / WARNING ... (default INFO)
    LOG_DIR     directory of the rotating log file; empty disables the file (default logs)
    LOG_FILE    file name inside LOG_DIR (default costtrack.log)
    LOG_FORMAT  logging format string
"""
import logging
import os
from logging.handlers import RotatingFileHandler

DEFAULT_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"
MAX_BYTES = 10 * 1024 * 1024
BACKUP_COUNT = 5


def _file_handler(formatter: logging.Formatter):
    log_dir = os.getenv("LOG_DIR", "logs")
    if not log_dir:
        return None
    os.makedirs(log_dir, exist_ok=True)
    handler = RotatingFileHandler(
        os.path.join(log_dir, os.getenv("LOG_FILE", "costtrack.log")),
        maxBytes=MAX_BYTES,
        backupCount=BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setFormatter(formatter)
    return handler


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger  # configured on first request

    logger.setLevel(os.getenv("LOG_LEVEL", "INFO").upper())
    # own handlers only; the root logger (gunicorn, pytest) must not print twice
    logger.propagate = False

    formatter = logging.Formatter(os.getenv("LOG_FORMAT", DEFAULT_FORMAT))

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    file_handler = _file_handler(formatter)
    if file_handler is not None:
        logger.addHandler(file_handler)

    return logger
