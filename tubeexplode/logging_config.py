"""
Opt-in logging setup for applications embedding tubeexplode.

The library itself only attaches a NullHandler; call configure_logging()
from the application to get console (and optionally file) output.
"""

import logging
import os
import sys
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def configure_logging(level: Optional[str] = None, log_file: Optional[str] = None) -> logging.Logger:
    """
    Attach console and optional file handlers to the ``tubeexplode`` logger.

    Args:
        level: Level name; defaults to TUBEEXPLODE_LOG_LEVEL or INFO
        log_file: File path; defaults to TUBEEXPLODE_LOG_FILE when LOG_TO_FILE is truthy

    Returns:
        The configured package logger
    """
    level_name = (level or os.getenv('TUBEEXPLODE_LOG_LEVEL', 'INFO')).upper()
    if log_file is None and os.getenv('LOG_TO_FILE', 'false').lower() in ('1', 'true', 'yes', 'on'):
        log_file = os.getenv('TUBEEXPLODE_LOG_FILE', 'logs/tubeexplode.log')

    formatter = logging.Formatter(LOG_FORMAT)
    handlers = []

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    handlers.append(console_handler)

    if log_file:
        try:
            directory = os.path.dirname(log_file)
            if directory:
                os.makedirs(directory, exist_ok=True)
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
            file_handler.setFormatter(formatter)
            handlers.append(file_handler)
        except OSError as e:
            # Console-only if the file cannot be opened (e.g., permission denied)
            logging.getLogger(__name__).warning(f"Could not open log file {log_file}: {e}")

    package_logger = logging.getLogger('tubeexplode')
    for handler in list(package_logger.handlers):
        if not isinstance(handler, logging.NullHandler):
            package_logger.removeHandler(handler)
            handler.close()
    for handler in handlers:
        package_logger.addHandler(handler)
    package_logger.setLevel(getattr(logging, level_name, logging.INFO))
    return package_logger
