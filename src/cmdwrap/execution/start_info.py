"""
Launch configuration for commands.

Values set on a CommandStartInfo take precedence over the defaults compiled
into a command's syntax, which in turn fall back to nothing (the spawn
primitive's own defaults). Paths are environment-expanded only when they are
finalized, so overrides supplied at call time are expanded too.
"""

# Standard library imports
from enum import Enum
from typing import Dict, Optional, Sequence

# Third-party imports
from pydantic import BaseModel, Field, SecretStr

# Local imports
from ..syntax.registry import SyntaxLevel
from ..utils.strings import expand_environment


class WindowStyle(str, Enum):
    """Window state of the child process (Windows only)."""

    NORMAL = "normal"
    HIDDEN = "hidden"
    MINIMIZED = "minimized"
    MAXIMIZED = "maximized"


class CommandStartInfo(BaseModel):
    """Per-call overrides for how a command is started."""

    path: Optional[str] = Field(default=None, min_length=1)
    working_directory: Optional[str] = Field(default=None, min_length=1)
    environment: Optional[Dict[str, str]] = None
    redirect_standard_input: bool = False

    # Window hints
    create_no_window: bool = False
    window_style: WindowStyle = WindowStyle.NORMAL

    # Credential hints
    user_name: Optional[str] = Field(default=None, min_length=1)
    domain: Optional[str] = None
    password: Optional[SecretStr] = None
    load_user_profile: bool = False

    creation_flags: int = Field(default=0, ge=0)

    model_config = {"extra": "forbid", "str_strip_whitespace": True}

    def resolve_search_path(self) -> Optional[str]:
        """Get the search path override, environment-expanded."""
        if self.path is None:
            return None
        return expand_environment(self.path)

    def resolve_working_directory(
        self, levels: Sequence[SyntaxLevel]
    ) -> Optional[str]:
        """Get the working directory to start in.

        The explicit override wins, then the default of the most derived level
        that declares one.
        """
        directory = self.working_directory
        if directory is None:
            directory = next(
                (
                    level.syntax.default_working_directory
                    for level in reversed(levels)
                    if level.syntax.default_working_directory
                ),
                None,
            )
        if directory is None:
            return None
        return expand_environment(directory)
