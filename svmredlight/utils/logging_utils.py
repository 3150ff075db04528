# File: svmredlight/utils/logging_utils.py

"""
Logging helpers.

Library modules only create loggers; handlers are installed by the
command-line scripts through ``setup_logger``.
"""

import logging
import os
import sys
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def setup_logger(name: str, log_dir: Optional[str] = None, level: str = "INFO") -> logging.Logger:
    """
    Configure console (and optional file) logging for a script run.

    Args:
        name: Logger name, also used as the log file name
        log_dir: Directory for ``<name>.log``; no file logging when None
        level: Logging level name

    Returns:
        The package logger with handlers attached
    """
    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f'Invalid log level: {level}')

    handlers = [logging.StreamHandler(sys.stderr)]
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        handlers.append(logging.FileHandler(os.path.join(log_dir, f"{name}.log")))

    package_logger = logging.getLogger('svmredlight')
    package_logger.setLevel(numeric_level)
    package_logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.setLevel(numeric_level)
        package_logger.addHandler(handler)

    return package_logger
