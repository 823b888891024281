"""Logging setup utilities for braviactl.

Configures logging for the command-line entry point based on the
logging configuration settings. Library code only creates module
loggers and never configures handlers itself.
"""

from __future__ import annotations

import logging
import sys

from braviactl.config.settings import LoggingConfig


def setup_logging(config: LoggingConfig | None = None) -> None:
    """Configure the 'braviactl' logger.

    Args:
        config: Logging configuration. If None, uses defaults
                (INFO level, stderr output).
    """
    if config is None:
        config = LoggingConfig()

    root_logger = logging.getLogger("braviactl")
    root_logger.setLevel(getattr(logging, config.level.upper(), logging.INFO))

    formatter = logging.Formatter(config.format)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if config.file:
        file_handler = logging.FileHandler(config.file)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    root_logger.debug("Logging initialized at %s level", config.level)
