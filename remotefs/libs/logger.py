"""
Logging for the remotefs bootstrap: every run logs to stdout and, when asked,
to a file as well.
"""
import logging
import sys
from pathlib import Path
from typing import Optional, Union
ROOT_LOGGER_NAME = "remotefs"
LOG_FORMAT = "%(asctime)s - %(name)-25s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _attach(root: logging.Logger, handler: logging.Handler, level: int, formatter: logging.Formatter):
    handler.setLevel(level)
    handler.setFormatter(formatter)
    root.addHandler(handler)


def setup_logging(level: int = logging.INFO, log_file: Optional[Union[str, Path]] = None,
                  format_string: Optional[str] = None) -> logging.Logger:
    """
    Configure the root logger
    Args:
        level: Logging level for all handlers
        log_file: Also append to this file (parent directories are created)
        format_string: Override of LOG_FORMAT
    Returns:
        The root logger
    """
    formatter = logging.Formatter(format_string or LOG_FORMAT, datefmt=DATE_FORMAT)
    root = logging.getLogger()
    root.setLevel(level)
    # re-initialising must not duplicate output
    for handler in list(root.handlers):
        root.removeHandler(handler)
    _attach(root, logging.StreamHandler(sys.stdout), level, formatter)
    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        _attach(root, logging.FileHandler(path), level, formatter)
    return root


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Module logger; modules call get_logger(__name__)."""
    return logging.getLogger(name or ROOT_LOGGER_NAME)


def init_logger(level: int = logging.INFO, log_file: Optional[Union[str, Path]] = None) -> logging.Logger:
    """Called once by the entry point before anything is logged."""
    setup_logging(level=level, log_file=log_file)
    logging.getLogger("paramiko").setLevel(max(level, logging.WARNING))
    return get_logger()
