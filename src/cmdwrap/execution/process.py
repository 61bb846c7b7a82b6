"""
Default process spawn primitive.

Processes are never started through a shell. On Windows the assembled
command line is handed to CreateProcess unchanged. On POSIX the argument
string is split with split_arguments, which undoes the double-quote escaping
the syntax builder applies and nothing else, and the executable is unquoted.
"""

# Standard library imports
import os
import subprocess
from typing import Any, Dict, List, Optional, Union

# Local imports
from ..core.types import ProcessSpawner, SpawnRequest
from ..utils.logger import get_logger
from ..utils.strings import split_arguments, strip_quotes

logger = get_logger(__name__)

IS_WINDOWS = os.name == "nt"

# ShowWindow constants
_SHOW_WINDOW = {"normal": 1, "hidden": 0, "minimized": 2, "maximized": 3}

_default_spawner: Optional[ProcessSpawner] = None


def get_default_spawner() -> ProcessSpawner:
    """Get the spawner used by commands that were not given one."""
    global _default_spawner
    if _default_spawner is None:
        _default_spawner = SubprocessSpawner()
    return _default_spawner


def set_default_spawner(spawner: Optional[ProcessSpawner]) -> None:
    """Replace the default spawner. Pass None to restore SubprocessSpawner."""
    global _default_spawner
    _default_spawner = spawner


class SubprocessSpawner:
    """Spawns processes with subprocess.Popen."""

    def build_args(self, request: SpawnRequest) -> Union[str, List[str]]:
        """Build the args handed to Popen for a request."""
        if IS_WINDOWS:
            return f"{request.executable} {request.arguments}".strip()
        return [strip_quotes(request.executable), *split_arguments(request.arguments)]

    def spawn(self, request: SpawnRequest) -> subprocess.Popen:
        """Start a process for the request.

        Raises:
            OSError: If the process cannot be started
        """
        kwargs: Dict[str, Any] = {
            "stdin": subprocess.PIPE
            if request.redirect_standard_input
            else subprocess.DEVNULL,
            "stdout": subprocess.PIPE,
            "stderr": subprocess.PIPE,
            "cwd": request.working_directory,
            "env": self._build_environment(request.environment),
            "text": True,
            "encoding": request.encoding,
            "errors": request.encoding_errors,
            "bufsize": 1,
            "shell": False,
        }
        kwargs.update(self._platform_options(request))

        args = self.build_args(request)
        logger.debug("Spawning %s", args)
        return subprocess.Popen(args, **kwargs)

    def _build_environment(
        self, environment: Optional[Dict[str, str]]
    ) -> Optional[Dict[str, str]]:
        if not environment:
            return None
        return {**os.environ, **environment}

    def _platform_options(self, request: SpawnRequest) -> Dict[str, Any]:
        options: Dict[str, Any] = {}
        if IS_WINDOWS:
            creation_flags = request.creation_flags
            if request.create_no_window:
                creation_flags |= subprocess.CREATE_NO_WINDOW
            options["creationflags"] = creation_flags
            if request.window_style:
                startupinfo = subprocess.STARTUPINFO()
                startupinfo.dwFlags |= subprocess.STARTF_USESHOWWINDOW
                startupinfo.wShowWindow = _SHOW_WINDOW.get(request.window_style, 1)
                options["startupinfo"] = startupinfo
            if request.user_name:
                logger.warning(
                    "Running as another user is not supported on Windows; "
                    "ignoring user_name %s",
                    request.user_name,
                )
        else:
            if request.user_name:
                options["user"] = request.user_name
            if request.create_no_window or request.creation_flags:
                logger.debug("Ignoring Windows-only spawn flags")
        return options
