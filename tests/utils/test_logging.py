"""Tests for logging utilities.

Test coverage includes:
    - Logger instance creation and naming
    - Log level configuration
    - Log message emission
    - Level resolution from the environment
"""

import logging
import os
from unittest.mock import patch

from searchcomponents.utils.logging import LoggerFactory


class TestLoggerFactory:
    """Test suite for LoggerFactory."""

    def test_logger_factory_creates_logger(self) -> None:
        """Test that LoggerFactory creates a logger instance."""
        logger = LoggerFactory(logger_name=__name__).get_logger()
        assert isinstance(logger, logging.Logger)

    def test_logger_factory_logger_name(self) -> None:
        """Test that logger uses correct name."""
        logger = LoggerFactory(logger_name="searchcomponents.test.name").get_logger()
        assert logger.name == "searchcomponents.test.name"

    def test_logger_factory_sets_level(self) -> None:
        """Test that the requested level is applied to the named logger."""
        logger = LoggerFactory(logger_name="test_debug", log_level=logging.DEBUG).get_logger()
        assert logger.level == logging.DEBUG

    def test_logger_factory_logs_warning(self, caplog) -> None:
        """Test that logger can emit warning messages."""
        with caplog.at_level(logging.WARNING):
            logger = LoggerFactory(logger_name="test_warning").get_logger()
            logger.warning("Backend returned a warning")

        assert "Backend returned a warning" in caplog.text

    def test_logger_factory_multiple_calls_same_name(self) -> None:
        """Test that multiple factories with one name share the logger."""
        logger1 = LoggerFactory(logger_name="test_same").get_logger()
        logger2 = LoggerFactory(logger_name="test_same").get_logger()
        assert logger1 is logger2


class TestConfigureFromEnv:
    """Test suite for LoggerFactory.configure_from_env."""

    def test_level_from_env(self) -> None:
        """Test that LOG_LEVEL selects the level."""
        with patch.dict(os.environ, {"LOG_LEVEL": "debug"}):
            factory = LoggerFactory.configure_from_env("test_env_debug")
        assert factory.get_logger().level == logging.DEBUG

    def test_custom_env_var(self) -> None:
        """Test reading the level from another variable."""
        with patch.dict(os.environ, {"SEARCH_LOG_LEVEL": "ERROR"}):
            factory = LoggerFactory.configure_from_env("test_env_custom", "SEARCH_LOG_LEVEL")
        assert factory.log_level == logging.ERROR

    def test_unknown_level_falls_back_to_info(self) -> None:
        """Test that an unknown level name falls back to INFO."""
        with patch.dict(os.environ, {"LOG_LEVEL": "chatty"}):
            factory = LoggerFactory.configure_from_env("test_env_unknown")
        assert factory.log_level == logging.INFO

    def test_unset_defaults_to_info(self) -> None:
        """Test the default level when the variable is unset."""
        with patch.dict(os.environ, {}, clear=True):
            factory = LoggerFactory.configure_from_env("test_env_unset")
        assert factory.log_level == logging.INFO
