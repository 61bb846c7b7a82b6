"""Core exceptions and types."""

from .exceptions import (
    CmdWrapError,
    CommandSyntaxError,
    ConfigurationError,
    InvocationError,
)
from .types import CommandLine, ProcessHandle, ProcessSpawner, SpawnRequest

__all__ = [
    "CmdWrapError",
    "CommandSyntaxError",
    "ConfigurationError",
    "InvocationError",
    "CommandLine",
    "ProcessHandle",
    "ProcessSpawner",
    "SpawnRequest",
]
