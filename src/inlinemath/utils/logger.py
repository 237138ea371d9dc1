"""Minimal logging utilities for inlinemath.

Provides a simple get_logger function that wraps the standard library logging.

Example:
    >>> from inlinemath.utils.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.debug("Scanning document")
"""

from __future__ import annotations

import logging


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given name.

    Returns a standard library logger with the "inlinemath." prefix.

    Args:
        name: Logger name (typically __name__)

    Returns:
        logging.Logger instance

    Example:
        >>> logger = get_logger("detectors")
        >>> logger.name
        'inlinemath.detectors'
    """
    if not (name == "inlinemath" or name.startswith("inlinemath.")):
        name = f"inlinemath.{name}"
    return logging.getLogger(name)
