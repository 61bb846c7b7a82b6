"""
Syntax descriptors.

A descriptor is the immutable metadata attached to one element of a command:
either the executable itself (CommandSyntax) or one of its parameters
(ParameterSyntax). Each descriptor is attached to exactly one declared
element and never shared.
"""

# Standard library imports
import os
from dataclasses import dataclass
from typing import Optional

# Local imports
from ..utils.strings import escape_spaces, expand_environment

# Substring of a template replaced with the bound value
PLACEHOLDER = "{arg}"


@dataclass(frozen=True)
class CommandSyntax:
    """Syntax of an executable or a nested sub-command.

    Attributes:
        template: Executable name, or sub-command token for nested commands
        default_path: Directory searched for the executable unless overridden
        default_working_directory: Working directory unless overridden
    """

    template: str
    default_path: Optional[str] = None
    default_working_directory: Optional[str] = None

    def full_path(self, search_path: Optional[str] = None) -> str:
        """Get the resolved executable path.

        Args:
            search_path: Overrides ``default_path`` when given

        Returns:
            The environment-expanded path, quoted if it contains a space
        """
        directory = search_path if search_path is not None else self.default_path
        path = os.path.join(directory, self.template) if directory else self.template
        return escape_spaces(expand_environment(path))


@dataclass(frozen=True)
class ParameterSyntax:
    """Syntax of a single command parameter.

    Attributes:
        template: Text of the parameter, optionally containing ``{arg}``
        ordering: Parameters with a higher ordering are emitted earlier
        required: Whether a missing value is an error
        formatter: Identifier of a registered formatter, or None for the default
    """

    template: str
    ordering: int = 0
    required: bool = False
    formatter: Optional[str] = None

    @property
    def has_placeholder(self) -> bool:
        return PLACEHOLDER in self.template
