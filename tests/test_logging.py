"""
Tests for logging utilities.
"""

import logging
import sys

import pytest

from yaml_magic.errors import ConfigurationError
from yaml_magic.utils.logging import LOGGER_NAME, get_logger, setup_logging


class TestLogging:
    """Test logging utilities and configuration."""

    def test_setup_logging_default_level(self):
        """Test logging setup with default INFO level."""
        logger = setup_logging()

        assert logger.name == "yaml_magic"
        assert logger.level == logging.INFO
        assert len(logger.handlers) == 1

    def test_setup_logging_levels(self):
        """Test level names in any case and numeric levels."""
        for level, expected in [
            ("DEBUG", logging.DEBUG),
            ("warning", logging.WARNING),
            (logging.ERROR, logging.ERROR),
        ]:
            logger = setup_logging(level)

            assert logger.level == expected
            assert logger.handlers[0].level == expected

    def test_setup_logging_unknown_level(self):
        """Test that an unknown level name is rejected."""
        with pytest.raises(ConfigurationError, match="LOUD"):
            setup_logging("LOUD")

    def test_logs_go_to_stderr(self):
        """Test that stdout stays free for rendered YAML."""
        logger = setup_logging()

        assert logger.handlers[0].stream is sys.stderr

    def test_setup_logging_replaces_handlers(self):
        """Test that repeated setup leaves a single handler."""
        logger = logging.getLogger(LOGGER_NAME)
        logger.addHandler(logging.StreamHandler())

        assert setup_logging("DEBUG") is setup_logging("INFO")
        assert len(logger.handlers) == 1
        assert logger.level == logging.INFO

    def test_logger_formatter(self):
        """Test that records show the module logger name."""
        logger = setup_logging("INFO")
        record = logging.LogRecord(
            "yaml_magic.core.merger", logging.INFO, __file__, 1, "placed", None, None
        )

        assert " - yaml_magic.core.merger - INFO - placed" in logger.handlers[0].format(record)

    def test_get_logger(self):
        """Test package and module loggers."""
        setup_logging("DEBUG")

        assert get_logger().name == "yaml_magic"
        assert get_logger("core.merger").name == "yaml_magic.core.merger"
        assert get_logger("core.merger").getEffectiveLevel() == logging.DEBUG
