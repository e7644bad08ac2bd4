import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional

# Constants
LOG_FORMAT = "%(asctime)s - %(name)s - [%(levelname)s] - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_LEVEL_ENV_VAR = "PYVAULT_LOG_LEVEL"
MAX_LOG_SIZE_BYTES = 10 * 1024 * 1024  # 10MB
LOG_BACKUP_COUNT = 5

FORMATTER = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)


def _get_console_handler() -> logging.StreamHandler:
    """Creates and configures a console logging handler."""
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(FORMATTER)
    return console_handler


def _get_file_handler(log_file: str) -> RotatingFileHandler:
    """Creates and configures a rotating file logging handler."""
    file_handler = RotatingFileHandler(
        log_file, maxBytes=MAX_LOG_SIZE_BYTES, backupCount=LOG_BACKUP_COUNT
    )
    file_handler.setFormatter(FORMATTER)
    return file_handler


def level_from_env(default: int = logging.INFO) -> int:
    """Reads the log level name from PYVAULT_LOG_LEVEL, falling back to `default`."""
    name = os.environ.get(LOG_LEVEL_ENV_VAR)
    if not name:
        return default
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else default


def configure_logging(filename: Optional[str] = None, log_level: Optional[int] = None) -> None:
    """
    Configures the "pyvault" logger hierarchy.
    Meant to be called once, from a script entry point; library code only calls get_logger.

    Args:
        filename: Optional path to a log file. If provided, file logging is enabled.
        log_level: The logging level. Defaults to PYVAULT_LOG_LEVEL, then INFO.
    """
    root_logger = logging.getLogger("pyvault")
    root_logger.setLevel(log_level if log_level is not None else level_from_env())

    # Remove existing handlers to prevent duplicate logging
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    root_logger.addHandler(_get_console_handler())

    if filename:
        try:
            root_logger.addHandler(_get_file_handler(filename))
        except OSError as e:
            sys.stderr.write(f"Warning: Could not set up file logging to '{filename}': {e}\n")


def get_logger(name: str) -> logging.Logger:
    """
    Retrieves a logger instance with the specified name.
    """
    return logging.getLogger(name)
