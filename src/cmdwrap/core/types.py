"""Type definitions for cmdwrap.

This module defines the shared types used across the package:
- CommandLine: the result of assembling a command
- SpawnRequest: everything the spawn primitive needs to start a process
- Protocol definitions for the process spawn primitive and its handles
"""

# Standard library imports
from dataclasses import dataclass
from typing import IO, Dict, NamedTuple, Optional, Protocol, runtime_checkable


class CommandLine(NamedTuple):
    """An assembled command.

    The executable and the argument string are kept apart so they can be
    handed to a spawn primitive that does not go through a shell.
    """

    executable: str
    arguments: str

    def __str__(self) -> str:
        return f"{self.executable} {self.arguments}".strip()


@dataclass(frozen=True)
class SpawnRequest:
    """Everything needed to start one child process."""

    executable: str
    arguments: str
    working_directory: Optional[str] = None
    environment: Optional[Dict[str, str]] = None
    redirect_standard_input: bool = False
    encoding: str = "utf-8"
    encoding_errors: str = "replace"
    user_name: Optional[str] = None
    create_no_window: bool = False
    window_style: Optional[str] = None
    creation_flags: int = 0


@runtime_checkable
class ProcessHandle(Protocol):
    """Handle on a running child process.

    This is the subset of ``subprocess.Popen`` the lifecycle relies on. The
    ``stdout``/``stderr`` streams are text streams read line by line;
    ``stdin`` is ``None`` unless standard input was redirected.
    """

    pid: int
    returncode: Optional[int]
    stdin: Optional[IO[str]]
    stdout: Optional[IO[str]]
    stderr: Optional[IO[str]]

    def poll(self) -> Optional[int]: ...

    def wait(self, timeout: Optional[float] = None) -> int: ...

    def terminate(self) -> None: ...

    def kill(self) -> None: ...


@runtime_checkable
class ProcessSpawner(Protocol):
    """Spawn primitive used by commands to start their process."""

    def spawn(self, request: SpawnRequest) -> ProcessHandle: ...
