"""
Centralized logging configuration for cmdwrap.

Library modules only ever call get_logger(); handlers are installed by the
application through set_logger().
"""

# Standard library imports
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

# Local imports
from ..config import CmdWrapConfig, get_config

PACKAGE_LOGGER = "cmdwrap"

# ANSI color codes for console output
COLORS = {
    "DEBUG": "\033[36m",  # Cyan
    "INFO": "\033[32m",  # Green
    "WARNING": "\033[33m",  # Yellow
    "ERROR": "\033[31m",  # Red
    "CRITICAL": "\033[35m",  # Magenta
    "RESET": "\033[0m",  # Reset
}


class ColoredFormatter(logging.Formatter):
    """Custom formatter adding colors to console output."""

    def __init__(self, fmt: Optional[str] = None, datefmt: Optional[str] = None):
        super().__init__(fmt, datefmt)

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with color."""
        orig_levelname = record.levelname
        if record.levelname in COLORS:
            record.levelname = (
                f"{COLORS[record.levelname]}{record.levelname}{COLORS['RESET']}"
            )

        result = super().format(record)

        # Restore original levelname so other handlers see it uncolored
        record.levelname = orig_levelname
        return result


def set_logger(
    log_level: str = "INFO",
    log_file: Optional[Path] = None,
    max_bytes: int = 10_000_000,
    backup_count: int = 5,
    verbose: bool = False,
    debug: bool = False,
) -> logging.Logger:
    """Configure and return the package logger.

    Args:
        log_level: Level name used when neither verbose nor debug is set
        log_file: Optional rotating log file
        max_bytes: Maximum size of the log file before rotation
        backup_count: Number of rotated files to keep
        verbose: Force INFO level
        debug: Force DEBUG level

    Returns:
        The configured ``cmdwrap`` logger
    """
    logger = logging.getLogger(PACKAGE_LOGGER)

    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.getLevelName(log_level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logger.setLevel(level)

    # Calling set_logger twice must not duplicate output
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_formatter = ColoredFormatter(
        "%(levelname)s - %(name)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    file_formatter = logging.Formatter(
        (
            "%(asctime)s - %(name)s - %(levelname)s - "
            "%(filename)s:%(lineno)d - %(message)s"
        ),
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(console_formatter)
    logger.addHandler(console_handler)

    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file, maxBytes=max_bytes, backupCount=backup_count
        )
        file_handler.setFormatter(file_formatter)
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance."""
    return logging.getLogger(name)


def configure_logging(config: Optional[CmdWrapConfig] = None) -> logging.Logger:
    """Configure the package logger from CmdWrapConfig.

    Applications call this once at startup so that ``CMDWRAP_LOG_LEVEL``,
    ``CMDWRAP_LOG_FILE``, ``CMDWRAP_VERBOSE`` and ``CMDWRAP_DEBUG`` take effect.
    """
    config = config or get_config()
    return set_logger(
        log_level=config.log_level,
        log_file=config.log_file,
        verbose=config.verbose,
        debug=config.debug,
    )
