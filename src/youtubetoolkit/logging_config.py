"""Logging configuration for the youtubetoolkit package.

Everything is logged to stderr: stdout is reserved for command output so that
it can be piped into another command.
"""

import logging
import sys
from typing import Optional

# Create logger
logger: logging.Logger = logging.getLogger("youtubetoolkit")
logger.setLevel(logging.INFO)

# Create console handler
console_handler = logging.StreamHandler(sys.stderr)
console_handler.setLevel(logging.INFO)

# Create formatter
formatter = logging.Formatter(
    "%(asctime)s - %(levelname)s - %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
)

console_handler.setFormatter(formatter)
logger.addHandler(console_handler)

# Prevent propagation to root logger
logger.propagate = False


def enable_debug() -> None:
    """Enable debug logging.

    Sets both the logger and console handler to DEBUG level.
    """
    logger.setLevel(logging.DEBUG)
    console_handler.setLevel(logging.DEBUG)


def disable_debug() -> None:
    """Disable debug logging.

    Sets both the logger and console handler back to INFO level.
    """
    logger.setLevel(logging.INFO)
    console_handler.setLevel(logging.INFO)


def attach_logger(name: str, level: int = logging.INFO) -> logging.Logger:
    """Route a third-party logger through the package console handler.

    Args:
        name: Name of the foreign logger, e.g. "googleapiclient.model"
        level: Level to set on the foreign logger

    Returns:
        The attached logger
    """
    foreign = logging.getLogger(name)
    foreign.setLevel(level)
    if console_handler not in foreign.handlers:
        foreign.addHandler(console_handler)
    foreign.propagate = False
    return foreign


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a logger instance.

    Args:
        name: Name of the logger, typically __name__. If None, returns the package logger.

    Returns:
        A Logger instance that writes through the package handler.
    """
    if not name:
        return logger
    if name == "youtubetoolkit" or name.startswith("youtubetoolkit."):
        return logging.getLogger(name)
    # Modules imported as src.youtubetoolkit.* still log under the package logger
    _, _, tail = name.partition("youtubetoolkit.")
    return logging.getLogger(f"youtubetoolkit.{tail or name}")
