"""
Command execution package.
"""

from .command import Command, CommandState
from .events import (
    CommandStartingEvent,
    EventHook,
    ExecuteCompletedEvent,
    OutputWrittenEvent,
)
from .process import SubprocessSpawner, get_default_spawner, set_default_spawner
from .start_info import CommandStartInfo, WindowStyle

__all__ = [
    "Command",
    "CommandState",
    "CommandStartInfo",
    "WindowStyle",
    "CommandStartingEvent",
    "EventHook",
    "ExecuteCompletedEvent",
    "OutputWrittenEvent",
    "SubprocessSpawner",
    "get_default_spawner",
    "set_default_spawner",
]
