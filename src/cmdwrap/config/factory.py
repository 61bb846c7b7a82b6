"""Configuration factory module."""

# Standard library imports
from pathlib import Path
from typing import Optional

# Third-party imports
from dotenv import find_dotenv, load_dotenv

# Local imports
from .base import CmdWrapConfig

_config: Optional[CmdWrapConfig] = None


def get_config(
    force_refresh: bool = False, env_file: Optional[Path] = None
) -> CmdWrapConfig:
    """Get global configuration instance.

    The first call (and every forced refresh) loads a ``.env`` file into the
    environment before reading ``CMDWRAP_*`` variables. Variables already set
    in the environment win over the file.

    Args:
        force_refresh: If True, create a new config instance even if one exists
        env_file: Explicit ``.env`` path; searched for when omitted

    Returns:
        CmdWrapConfig instance
    """
    global _config
    if force_refresh or _config is None:
        dotenv_path = env_file or find_dotenv(usecwd=True)
        if dotenv_path:
            load_dotenv(dotenv_path)
        _config = CmdWrapConfig()
    return _config


def clear_config() -> None:
    """Clear global configuration instance."""
    global _config
    _config = None
