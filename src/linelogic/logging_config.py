"""
Logging Configuration
Sets up the package logger for the editor.
"""
import logging
import os
import sys
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_LEVEL_ENV = "LINELOGIC_LOG_LEVEL"


def resolve_level(level: Optional[int] = None) -> int:
    """
    Pick the logging level: explicit argument first, then the
    LINELOGIC_LOG_LEVEL environment variable (e.g. "DEBUG"), then INFO.
    """
    if level is not None:
        return level
    name = os.environ.get(LOG_LEVEL_ENV, "").strip().upper()
    resolved = logging.getLevelName(name) if name else logging.INFO
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logging(level: Optional[int] = None, log_file: Optional[str] = None) -> logging.Logger:
    """
    Configures the logger for the 'linelogic' namespace.

    Args:
        level: Logging level (e.g. logging.DEBUG). Falls back to the environment.
        log_file: Optional path to also write logs to.

    Returns:
        The configured package logger.
    """
    level = resolve_level(level)
    logger = logging.getLogger("linelogic")
    logger.setLevel(level)

    # Reconfiguring (e.g. a second main() in the same process) must not duplicate output
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT, datefmt='%H:%M:%S')

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.info(f"Logging initialized at {logging.getLevelName(level)}.")
    return logger
