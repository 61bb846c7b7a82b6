"""Utility helpers."""

from .logger import configure_logging, get_logger, set_logger
from .strings import escape_spaces, expand_environment, split_arguments, strip_quotes

__all__ = [
    "configure_logging",
    "get_logger",
    "set_logger",
    "escape_spaces",
    "expand_environment",
    "split_arguments",
    "strip_quotes",
]
