"""
Command events.

Handlers are plain callables subscribed to an EventHook. They run on
whichever thread raises the event: the caller's thread for command_starting,
a reader thread for output lines, and the waiting thread for completion.
"""

# Standard library imports
import threading
from dataclasses import dataclass
from typing import Any, Callable, Generic, List, TypeVar

E = TypeVar("E")


@dataclass
class CommandStartingEvent:
    """Raised before a command is assembled and spawned.

    Set ``cancel`` to True to abort the start.
    """

    command: Any
    start_info: Any
    cancel: bool = False


@dataclass(frozen=True)
class OutputWrittenEvent:
    """One line written by the process, without its line terminator."""

    command: Any
    line: str
    stream: str = "stdout"


@dataclass(frozen=True)
class ExecuteCompletedEvent:
    """Raised once the process exited and its output was captured."""

    command: Any
    exit_code: int
    cancelled: bool = False


class EventHook(Generic[E]):
    """A list of handlers called in subscription order."""

    def __init__(self, name: str):
        self.name = name
        self._handlers: List[Callable[[E], None]] = []
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._handlers)

    def subscribe(self, handler: Callable[[E], None]) -> Callable[[E], None]:
        """Add a handler. Returns it so this can be used as a decorator."""
        with self._lock:
            self._handlers.append(handler)
        return handler

    def unsubscribe(self, handler: Callable[[E], None]) -> None:
        with self._lock:
            if handler in self._handlers:
                self._handlers.remove(handler)

    def emit(self, event: E) -> None:
        """Call every handler with the event.

        Exceptions raised by handlers propagate to the thread raising the
        event.
        """
        with self._lock:
            handlers = list(self._handlers)
        for handler in handlers:
            handler(event)
