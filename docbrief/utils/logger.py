import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import List

LOGGER_NAME = "docbrief"

# Empty LOG_DIR disables the file sink (containers log to stdout only)
LOG_DIR = os.getenv("LOG_DIR", "logs")
LOG_FILE = "app.log"
LOG_MAX_BYTES = 10 * 1024 * 1024
LOG_BACKUP_COUNT = 5

CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(module)s:%(lineno)d - %(message)s"


def _console_handler() -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    return handler


def _file_handler(log_dir: str) -> logging.Handler:
    os.makedirs(log_dir, exist_ok=True)
    handler = RotatingFileHandler(
        os.path.join(log_dir, LOG_FILE),
        maxBytes=LOG_MAX_BYTES,
        backupCount=LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter(FILE_FORMAT))
    return handler


def build_handlers(log_dir: str = LOG_DIR) -> List[logging.Handler]:
    handlers = [_console_handler()]
    if log_dir:
        handlers.append(_file_handler(log_dir))
    return handlers


def setup_logger(log_dir: str = LOG_DIR) -> logging.Logger:
    """
    Build the service logger: stdout always, plus a rotating
    ``app.log`` under ``log_dir`` unless it is empty.

    Calling it again returns the already configured logger.
    """
    logger = logging.getLogger(LOGGER_NAME)
    if logger.handlers:
        return logger

    logger.setLevel(logging.INFO)
    for handler in build_handlers(log_dir):
        logger.addHandler(handler)
    return logger


def set_log_level(debug: bool) -> None:
    """Switch the logger and all of its handlers between DEBUG and INFO"""
    level = logging.DEBUG if debug else logging.INFO
    logger.setLevel(level)
    for handler in logger.handlers:
        handler.setLevel(level)
    if debug:
        logger.debug("Debug mode enabled")


logger = setup_logger()
