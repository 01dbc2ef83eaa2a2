"""Logging setup for the ``sqmatrix`` command-line calculator."""

from __future__ import annotations

import logging
import sys
from typing import TextIO


def setup_logging(level: int = logging.WARNING, stream: TextIO | None = None) -> logging.Logger:
    """Configure the ``sqmatrix`` package logger.

    Log records go to stderr by default so they never interleave with the
    calculator replies on stdout.
    """
    logger = logging.getLogger("sqmatrix")
    logger.setLevel(level)

    if logger.hasHandlers():
        logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr if stream is None else stream)
    handler.setLevel(level)
    handler.setFormatter(
        logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt="%H:%M:%S")
    )
    logger.addHandler(handler)
    logger.propagate = False

    logger.debug("Logging initialized.")
    return logger
