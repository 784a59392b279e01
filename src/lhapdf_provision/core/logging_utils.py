# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 lhapdf-provision developers

"""Logging setup for the command-line entry point."""

import logging
import sys
from typing import Optional, TextIO

ROOT_LOGGER_NAME = "lhapdf_provision"

LOG_FORMATS = {
    'simple': '[%(levelname)s] %(message)s',
    'detailed': '[%(asctime)s] [%(levelname)s] [%(name)s] - %(message)s',
}


def configure_logging(
    level: str = 'INFO',
    log_format: str = 'simple',
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """
    Attach a single stream handler to the package logger.

    Calling this again replaces the handler instead of stacking another one,
    so repeated CLI invocations in one process do not duplicate output.

    Args:
        level: Logging level name (DEBUG, INFO, ...)
        log_format: Key into LOG_FORMATS
        stream: Target stream, stderr by default

    Returns:
        The configured package logger.
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(logger.handlers):
        if getattr(handler, '_lhapdf_provision_handler', False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMATS.get(log_format, LOG_FORMATS['simple'])))
    handler._lhapdf_provision_handler = True
    logger.addHandler(handler)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    logger.propagate = False
    return logger
