# cmdwrap/config/__init__.py
"""Configuration management."""

# Local imports
from .base import DEFAULT_MAX_ARGUMENT_LENGTH, CmdWrapConfig
from .factory import clear_config, get_config

__all__ = [
    "CmdWrapConfig",
    "DEFAULT_MAX_ARGUMENT_LENGTH",
    "get_config",
    "clear_config",
]
