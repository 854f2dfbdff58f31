# Copyright 2026 MAL Stubgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Logger factory and console setup for the generator."""

from __future__ import annotations

import logging
import sys

ROOT_LOGGER_NAME = "malstubgen"
LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"

# ###############
# Public Interface
# ###############


def get_logger(name: str) -> logging.Logger:
    """Return a logger placed under the package logger namespace."""
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def configure_logging(verbosity: int = 0) -> logging.Logger:
    """Install a single stderr handler on the package logger.

    Args:
        verbosity: 0 logs warnings only, 1 adds progress messages, 2 or more
            adds debug output.

    Returns:
        The configured package logger.
    """
    if verbosity <= 0:
        level = logging.WARNING
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(logger.handlers):
        if getattr(handler, "_malstubgen_console", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._malstubgen_console = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    logger.setLevel(level)
    return logger
