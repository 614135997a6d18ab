"""Logging setup utilities for eventrelay.

Configures logging for the whole application from the logging
section of the settings.
"""

from __future__ import annotations

import logging
import sys

from eventrelay.config.settings import LoggingConfig


def setup_logging(config: LoggingConfig | None = None) -> None:
    """Configure the ``eventrelay`` logger.

    Sets the level and format, logs to stderr and, if ``config.file`` is
    set, to that file as well.

    Args:
        config: Logging configuration. If None, uses defaults
                (INFO level, stderr output).
    """
    if config is None:
        config = LoggingConfig()

    root_logger = logging.getLogger("eventrelay")
    root_logger.setLevel(getattr(logging, config.level.upper(), logging.INFO))

    # Calling twice (e.g. from tests) must not duplicate output
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(config.format)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if config.file:
        file_handler = logging.FileHandler(config.file)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    root_logger.info("Logging initialized at %s level", config.level)
