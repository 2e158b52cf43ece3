"""
Logging for yaml_magic.

Library modules log under ``yaml_magic.<module>`` and never configure
handlers themselves. The CLI calls ``setup_logging`` once per invocation so
that load, merge and save diagnostics reach the terminal.
"""

import logging
import sys
from typing import Optional, Union

from yaml_magic.errors import ConfigurationError

LOGGER_NAME = "yaml_magic"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _level(level: Union[str, int]) -> int:
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.upper())
    if not isinstance(value, int):
        raise ConfigurationError(f"Unknown log level: {level}")
    return value


def setup_logging(level: Union[str, int] = "INFO") -> logging.Logger:
    """
    Send yaml_magic log records to stderr.

    Stdout stays free for rendered YAML. Handlers installed by an earlier
    call are replaced.

    Args:
        level: Level name (DEBUG, INFO, WARNING, ERROR) or number. DEBUG shows
            extraction and merge statistics and dropped annotations, INFO
            shows saved files.

    Returns:
        The package logger

    Raises:
        ConfigurationError: If ``level`` is not a known level name
    """
    numeric_level = _level(level)
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(numeric_level)

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(numeric_level)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(handler)

    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger for a yaml_magic module, e.g. ``get_logger("core.merger")``."""
    return logging.getLogger(f"{LOGGER_NAME}.{name}" if name else LOGGER_NAME)
