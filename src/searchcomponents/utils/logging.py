"""Logging utilities for the searchcomponents package.

Every module obtains its logger through ``LoggerFactory`` so that the root
handler is configured exactly once per process, however many normalizers and
services get constructed.

Log Levels Used:
    - DEBUG: Field-level recoveries (dropped values, unknown promotion codes,
      ambiguous namespace names)
    - INFO: Per-response summaries (documents normalized, buckets built)
    - WARNING: Warnings reported by a backend in its response

Usage:
    >>> from searchcomponents.utils.logging import LoggerFactory
    >>> logger = LoggerFactory(__name__).get_logger()
    >>> logger.info("Normalized %d documents", 10)

    # Or take the level from LOG_LEVEL
    >>> logger = LoggerFactory.configure_from_env(__name__).get_logger()
"""

import logging
import os


DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class LoggerFactory:
    """Factory that hands out named loggers behind a one-time basicConfig.

    Attributes:
        logger_name (str): The name of the logger to create.
        log_level (int): The logging level applied to the named logger.
        log_format (str): The format used when configuring the root handler.
        logger (logging.Logger): The configured logger instance.
    """

    _is_logger_initialized: bool = False

    def __init__(
        self,
        logger_name: str,
        log_level: int = logging.INFO,
        log_format: str = DEFAULT_LOG_FORMAT,
    ) -> None:
        """Initialize the factory and its logger.

        Args:
            logger_name (str): The name of the logger to create.
            log_level (int, optional): The logging level (default is logging.INFO).
            log_format (str, optional): The format for log messages.
        """
        self.logger_name = logger_name
        self.log_level = log_level
        self.log_format = log_format
        self.logger = self._initialize_logger()

    def _initialize_logger(self) -> logging.Logger:
        """Configure the root handler once and return the named logger.

        Returns:
            logging.Logger: A configured logger instance.
        """
        if not LoggerFactory._is_logger_initialized:
            logging.basicConfig(level=self.log_level, format=self.log_format)
            LoggerFactory._is_logger_initialized = True

        logger = logging.getLogger(self.logger_name)
        logger.setLevel(self.log_level)
        return logger

    def get_logger(self) -> logging.Logger:
        """Return the configured logger instance."""
        return self.logger

    @staticmethod
    def configure_from_env(
        logger_name: str, env_var: str = "LOG_LEVEL"
    ) -> "LoggerFactory":
        """Build a factory whose level comes from an environment variable.

        Args:
            logger_name (str): The name of the logger to create.
            env_var (str, optional): The environment variable for log level.

        Returns:
            LoggerFactory: A factory with the resolved log level; unknown level
            names fall back to INFO.
        """
        log_level_str = os.getenv(env_var, "INFO").upper()
        log_level = getattr(logging, log_level_str, logging.INFO)
        if not isinstance(log_level, int):
            log_level = logging.INFO
        return LoggerFactory(logger_name, log_level=log_level)
